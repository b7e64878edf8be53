"""Donations API routes.

Listing requires either password; recording, editing and removing
donations requires the admin password.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.config import get_settings
from donorbase.domain.services.donation_service import DonationService
from donorbase.domain.services.field_schema_service import FieldSchemaService
from donorbase.infrastructure.api.dependencies import EventAccess, Publisher
from donorbase.infrastructure.api.schemas import (
    DonationListResponse,
    DonationRequest,
    DonationResponse,
)
from donorbase.infrastructure.persistence.database import get_db_session

router = APIRouter()

WRITE_RESPONSES = {
    400: {"description": "Validation error"},
    403: {"description": "Admin access required"},
    404: {"description": "Event or donation not found"},
}


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=DonationListResponse,
)
async def list_donations(
    event_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> DonationListResponse:
    """List donations newest first, projected against the current schema."""
    schema, records = await DonationService(session).list_with_schema(event_id)
    placeholder = get_settings().projection_placeholder
    return DonationListResponse(
        items=[DonationResponse.build(r, schema, placeholder) for r in records],
        total=len(records),
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=DonationResponse,
    responses=WRITE_RESPONSES,
)
async def create_donation(
    event_id: str,
    request: DonationRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> DonationResponse:
    record = await DonationService(session, publisher).create(
        access,
        donor_name=request.donor_name,
        amount=request.amount,
        custom_field_values=request.custom_field_values,
    )
    schema = await FieldSchemaService(session).get_fields(event_id)
    return DonationResponse.build(record, schema, get_settings().projection_placeholder)


@router.get(
    "/{donation_id}",
    status_code=status.HTTP_200_OK,
    response_model=DonationResponse,
    responses={404: {"description": "Event or donation not found"}},
)
async def get_donation(
    event_id: str,
    donation_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> DonationResponse:
    record = await DonationService(session).get(event_id, donation_id)
    schema = await FieldSchemaService(session).get_fields(event_id)
    return DonationResponse.build(record, schema, get_settings().projection_placeholder)


@router.put(
    "/{donation_id}",
    status_code=status.HTTP_200_OK,
    response_model=DonationResponse,
    responses=WRITE_RESPONSES,
)
async def update_donation(
    event_id: str,
    donation_id: str,
    request: DonationRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> DonationResponse:
    record = await DonationService(session, publisher).update(
        access,
        donation_id,
        donor_name=request.donor_name,
        amount=request.amount,
        custom_field_values=request.custom_field_values,
    )
    schema = await FieldSchemaService(session).get_fields(event_id)
    return DonationResponse.build(record, schema, get_settings().projection_placeholder)


@router.delete(
    "/{donation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"description": "Admin access required"},
        404: {"description": "Event or donation not found"},
    },
)
async def delete_donation(
    event_id: str,
    donation_id: str,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    await DonationService(session, publisher).delete(access, donation_id)
