"""FastAPI dependencies for event access and realtime publishing.

The caller's role on an event is resolved once per request from the
``X-Event-Password`` header and passed explicitly into the services.
"""

from typing import Annotated, AsyncContextManager, Callable

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.logging import bind_event_id, get_logger
from donorbase.domain.entities import AccessContext
from donorbase.domain.exceptions import InvalidEventPasswordError
from donorbase.domain.services.event_service import EventService
from donorbase.infrastructure.persistence.database import get_db_manager, get_db_session
from donorbase.infrastructure.realtime.snapshot_hub import SnapshotHub
from donorbase.infrastructure.realtime.snapshot_publisher import SnapshotPublisher

logger = get_logger(__name__)

PASSWORD_HEADER = "X-Event-Password"


def get_snapshot_hub(request: Request) -> SnapshotHub:
    """Get the application-wide snapshot hub."""
    return request.app.state.snapshot_hub


def get_snapshot_publisher(
    hub: Annotated[SnapshotHub, Depends(get_snapshot_hub)],
) -> SnapshotPublisher:
    return SnapshotPublisher(hub)


async def get_access_context(
    event_id: str,
    x_event_password: Annotated[str | None, Header()] = None,
    session: Annotated[AsyncSession, Depends(get_db_session)] = None,
) -> AccessContext:
    """Resolve the caller's role on the event named in the path.

    Raises:
        HTTPException: 401 if the password header is missing or matches
            neither role.
        EventNotFoundError: If the event does not exist (mapped to 404).
    """
    bind_event_id(event_id)
    if not x_event_password:
        logger.info("Access denied: missing event password", event_id=event_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {PASSWORD_HEADER} header",
        )

    try:
        return await EventService(session).resolve_access(event_id, x_event_password)
    except InvalidEventPasswordError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid event password",
        )


EventAccess = Annotated[AccessContext, Depends(get_access_context)]
Publisher = Annotated[SnapshotPublisher, Depends(get_snapshot_publisher)]
Hub = Annotated[SnapshotHub, Depends(get_snapshot_hub)]


def get_session_scope() -> Callable[[], AsyncContextManager[AsyncSession]]:
    """Session factory for long-lived connections that outlive a request."""
    return get_db_manager().session


SessionScope = Annotated[
    Callable[[], AsyncContextManager[AsyncSession]], Depends(get_session_scope)
]
