"""Events API routes.

Listing, reading and creating events is public. Updating and deleting
requires the admin password in the ``X-Event-Password`` header.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.domain.exceptions import InvalidEventPasswordError
from donorbase.domain.services.event_service import EventService
from donorbase.infrastructure.api.dependencies import EventAccess, Publisher
from donorbase.infrastructure.api.schemas import (
    AccessRequest,
    AccessResponse,
    CreateEventRequest,
    DeleteEventResponse,
    EventListResponse,
    EventResponse,
    UpdateEventRequest,
)
from donorbase.infrastructure.persistence.database import get_db_session

router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=EventListResponse,
)
async def list_events(
    session: AsyncSession = Depends(get_db_session),
    search: str | None = Query(default=None, description="Filter by event name"),
) -> EventListResponse:
    """List events, newest first."""
    events = await EventService(session).list_events(search)
    return EventListResponse(
        items=[EventResponse.from_entity(e) for e in events],
        total=len(events),
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=EventResponse,
    responses={400: {"description": "Validation error"}},
)
async def create_event(
    request: CreateEventRequest,
    session: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    """Create an event with an empty donor form."""
    event = await EventService(session).create(
        name=request.name,
        admin_password=request.admin_password,
        visitor_password=request.visitor_password,
        description=request.description,
    )
    return EventResponse.from_entity(event)


@router.get(
    "/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=EventResponse,
    responses={404: {"description": "Event not found"}},
)
async def get_event(
    event_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    event = await EventService(session).get(event_id)
    return EventResponse.from_entity(event)


@router.post(
    "/{event_id}/access",
    status_code=status.HTTP_200_OK,
    response_model=AccessResponse,
    responses={
        401: {"description": "Invalid password"},
        404: {"description": "Event not found"},
    },
)
async def check_access(
    event_id: str,
    request: AccessRequest,
    session: AsyncSession = Depends(get_db_session),
) -> AccessResponse:
    """Return the role a password grants on the event."""
    try:
        access = await EventService(session).resolve_access(event_id, request.password)
    except InvalidEventPasswordError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid event password",
        )
    return AccessResponse(event_id=access.event_id, role=access.role.value)


@router.patch(
    "/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=EventResponse,
    responses={
        400: {"description": "Validation error"},
        403: {"description": "Admin access required"},
        404: {"description": "Event not found"},
    },
)
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    event = await EventService(session, publisher).update(
        access,
        name=request.name,
        description=request.description,
        admin_password=request.admin_password,
        visitor_password=request.visitor_password,
    )
    return EventResponse.from_entity(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeleteEventResponse,
    responses={
        403: {"description": "Admin access required"},
        404: {"description": "Event not found"},
    },
)
async def delete_event(
    event_id: str,
    access: EventAccess,
    publisher: Publisher,
    session: AsyncSession = Depends(get_db_session),
) -> DeleteEventResponse:
    """Delete an event together with its donations and donor form."""
    deleted = await EventService(session, publisher).delete(access)
    return DeleteEventResponse(event_id=event_id, deleted_donations=deleted)
