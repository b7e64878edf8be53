"""Custom field schema API routes.

Reading the schema requires either password. Every edit requires the admin
password and returns the full persisted field list with its new version.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.domain.services.field_schema_service import FieldSchemaService
from donorbase.infrastructure.api.dependencies import EventAccess, Publisher
from donorbase.infrastructure.api.schemas import (
    AddFieldRequest,
    FieldSchemaResponse,
    MoveFieldRequest,
    OptionRequest,
    UpdateFieldRequest,
)
from donorbase.infrastructure.persistence.database import get_db_session

router = APIRouter()

EDIT_RESPONSES = {
    400: {"description": "Validation error"},
    403: {"description": "Admin access required"},
    404: {"description": "Event not found"},
    409: {"description": "Schema version conflict"},
}


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=FieldSchemaResponse,
)
async def get_fields(
    event_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> FieldSchemaResponse:
    fields, version = await FieldSchemaService(session).get_form(event_id)
    return FieldSchemaResponse.build(event_id, fields, version)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def add_field(
    event_id: str,
    request: AddFieldRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> FieldSchemaResponse:
    """Append a field at the end of the schema."""
    fields, version = await FieldSchemaService(session, publisher).add_field(
        access,
        label=request.label,
        field_type=request.field_type,
        required=request.required,
        options=request.options,
        expected_version=request.expected_version,
    )
    return FieldSchemaResponse.build(event_id, fields, version)


@router.patch(
    "/{field_id}",
    status_code=status.HTTP_200_OK,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def update_field(
    event_id: str,
    field_id: str,
    request: UpdateFieldRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> FieldSchemaResponse:
    fields, version = await FieldSchemaService(session, publisher).update_field(
        access, field_id, request.updates, expected_version=request.expected_version
    )
    return FieldSchemaResponse.build(event_id, fields, version)


@router.delete(
    "/{field_id}",
    status_code=status.HTTP_200_OK,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def delete_field(
    event_id: str,
    field_id: str,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
    expected_version: int | None = Query(default=None, alias="expectedVersion"),
) -> FieldSchemaResponse:
    """Remove a field. Values already stored on donations are kept."""
    fields, version = await FieldSchemaService(session, publisher).delete_field(
        access, field_id, expected_version=expected_version
    )
    return FieldSchemaResponse.build(event_id, fields, version)


@router.post(
    "/{field_id}/move",
    status_code=status.HTTP_200_OK,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def move_field(
    event_id: str,
    field_id: str,
    request: MoveFieldRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> FieldSchemaResponse:
    fields, version = await FieldSchemaService(session, publisher).move_field(
        access, field_id, request.direction, expected_version=request.expected_version
    )
    return FieldSchemaResponse.build(event_id, fields, version)


@router.post(
    "/{field_id}/options",
    status_code=status.HTTP_201_CREATED,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def add_option(
    event_id: str,
    field_id: str,
    request: OptionRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> FieldSchemaResponse:
    """Append an option to a selector or radio field."""
    fields, version = await FieldSchemaService(session, publisher).add_option(
        access, field_id, request.value, expected_version=request.expected_version
    )
    return FieldSchemaResponse.build(event_id, fields, version)


@router.put(
    "/{field_id}/options/{option_index}",
    status_code=status.HTTP_200_OK,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def edit_option(
    event_id: str,
    field_id: str,
    option_index: int,
    request: OptionRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> FieldSchemaResponse:
    """Replace an option. Donations keep the value they were saved with."""
    fields, version = await FieldSchemaService(session, publisher).edit_option(
        access,
        field_id,
        option_index,
        request.value,
        expected_version=request.expected_version,
    )
    return FieldSchemaResponse.build(event_id, fields, version)


@router.delete(
    "/{field_id}/options/{option_index}",
    status_code=status.HTTP_200_OK,
    response_model=FieldSchemaResponse,
    responses=EDIT_RESPONSES,
)
async def delete_option(
    event_id: str,
    field_id: str,
    option_index: int,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
    expected_version: int | None = Query(default=None, alias="expectedVersion"),
) -> FieldSchemaResponse:
    fields, version = await FieldSchemaService(session, publisher).delete_option(
        access, field_id, option_index, expected_version=expected_version
    )
    return FieldSchemaResponse.build(event_id, fields, version)
