"""Service for event lifecycle and access resolution."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.logging import get_logger
from donorbase.domain.entities import AccessContext, AccessRole, Event
from donorbase.domain.exceptions import (
    DomainValidationError,
    EventNotFoundError,
    InvalidEventPasswordError,
    PermissionDeniedError,
)
from donorbase.domain.services.event_validator import EventValidator
from donorbase.infrastructure.persistence.models import EventModel
from donorbase.infrastructure.persistence.repositories import (
    DonationRepository,
    DonorFormRepository,
    EventRepository,
)
from donorbase.infrastructure.persistence.transaction import commit_or_raise
from donorbase.infrastructure.realtime.snapshot_hub import TOPIC_EVENT
from donorbase.infrastructure.realtime.snapshot_publisher import SnapshotPublisher

logger = get_logger(__name__)


class EventService:
    """Creates, reads, updates and deletes events."""

    def __init__(self, session: AsyncSession, publisher: SnapshotPublisher | None = None) -> None:
        self.session = session
        self.publisher = publisher
        self.event_repo = EventRepository(session)
        self.form_repo = DonorFormRepository(session)
        self.donation_repo = DonationRepository(session)

    async def _publish(self, event_id: str, *kinds: str) -> None:
        if self.publisher:
            await self.publisher.publish(self.session, event_id, *kinds)

    async def get(self, event_id: str) -> Event:
        """Get an event.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event.to_entity()

    async def list_events(self, search: str | None = None) -> list[Event]:
        return [e.to_entity() for e in await self.event_repo.list_all(search)]

    async def create(
        self,
        name: str,
        admin_password: str,
        visitor_password: str,
        description: str | None = None,
    ) -> Event:
        """Create an event together with its empty donor form.

        Raises:
            DomainValidationError: If the name or passwords are invalid.
            PersistenceError: If the write failed.
        """
        errors = EventValidator.validate(name, admin_password, visitor_password)
        if errors:
            raise DomainValidationError(errors)

        event = EventModel(
            id=str(uuid.uuid4()),
            name=name.strip(),
            description=EventValidator.clean_description(description),
            current_amount=0.0,
            total_visitors=0,
            admin_password=admin_password,
            visitor_password=visitor_password,
        )
        await self.event_repo.create(event)
        await self.form_repo.create(event.id)
        await commit_or_raise(self.session, "create event", event_id=event.id)

        logger.info("Event created", event_id=event.id, name=event.name)
        return event.to_entity()

    async def update(
        self,
        access: AccessContext,
        name: str | None = None,
        description: str | None = None,
        admin_password: str | None = None,
        visitor_password: str | None = None,
    ) -> Event:
        """Update event details. Admin only.

        Omitted arguments keep their stored values.
        """
        if not access.is_admin:
            raise PermissionDeniedError("update event")

        event = await self.event_repo.get_by_id(access.event_id)
        if event is None:
            raise EventNotFoundError(access.event_id)

        new_name = event.name if name is None else name
        new_admin = admin_password or event.admin_password
        new_visitor = visitor_password or event.visitor_password
        errors = EventValidator.validate(new_name, new_admin, new_visitor)
        if errors:
            raise DomainValidationError(errors)

        event.name = new_name.strip()
        event.admin_password = new_admin
        event.visitor_password = new_visitor
        if description is not None:
            event.description = EventValidator.clean_description(description)
        await self.event_repo.update(event)
        await commit_or_raise(self.session, "update event", event_id=event.id)

        logger.info("Event updated", event_id=event.id)
        await self._publish(event.id, TOPIC_EVENT)
        return event.to_entity()

    async def delete(self, access: AccessContext) -> int:
        """Delete an event with its donations and donor form. Admin only.

        Returns:
            Number of donations deleted along with the event.
        """
        if not access.is_admin:
            raise PermissionDeniedError("delete event")

        event = await self.event_repo.get_by_id(access.event_id)
        if event is None:
            raise EventNotFoundError(access.event_id)

        deleted_donations = await self.donation_repo.delete_by_event(event.id)
        await self.form_repo.delete_by_event_id(event.id)
        await self.event_repo.delete(event)
        await commit_or_raise(self.session, "delete event", event_id=access.event_id)

        logger.info(
            "Event deleted",
            event_id=access.event_id,
            deleted_donations=deleted_donations,
        )
        await self._publish(access.event_id, TOPIC_EVENT)
        return deleted_donations

    async def resolve_access(self, event_id: str, password: str | None) -> AccessContext:
        """Resolve the role a password grants on an event.

        Raises:
            EventNotFoundError: If the event does not exist.
            InvalidEventPasswordError: If the password matches neither role.
        """
        event = await self.get(event_id)
        if password and password == event.admin_password:
            return AccessContext(event_id=event_id, role=AccessRole.ADMIN)
        if password and password == event.visitor_password:
            return AccessContext(event_id=event_id, role=AccessRole.VISITOR)
        logger.warning("Invalid event password", event_id=event_id)
        raise InvalidEventPasswordError(event_id)
