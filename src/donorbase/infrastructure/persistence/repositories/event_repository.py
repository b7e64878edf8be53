"""Repository for event operations.

Provides CRUD operations for the events table.
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.infrastructure.persistence.models import EventModel


class EventRepository:
    """Repository for event database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, event: EventModel) -> EventModel:
        """Create a new event."""
        self.session.add(event)
        await self.session.flush()
        return event

    async def get_by_id(self, event_id: str) -> EventModel | None:
        """Get an event by ID.

        Returns:
            The event model if found, None otherwise.
        """
        result = await self.session.execute(
            select(EventModel)
            .where(EventModel.id == event_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_all(self, search: str | None = None) -> list[EventModel]:
        """List events, newest first, optionally filtered by name."""
        query = select(EventModel)
        if search:
            query = query.where(EventModel.name.ilike(f"%{search}%"))
        result = await self.session.execute(query.order_by(EventModel.created_at.desc()))
        return list(result.scalars().all())

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(EventModel))
        return result.scalar_one()

    async def update(self, event: EventModel) -> EventModel:
        """Flush pending changes of an event."""
        await self.session.flush()
        return event

    async def adjust_totals(
        self, event_id: str, amount_delta: float, visitors_delta: int = 0
    ) -> None:
        """Atomically increment the running totals of an event.

        Args:
            event_id: The event ID.
            amount_delta: Amount to add to current_amount (may be negative).
            visitors_delta: Count to add to total_visitors (may be negative).
        """
        await self.session.execute(
            update(EventModel)
            .where(EventModel.id == event_id)
            .values(
                current_amount=EventModel.current_amount + amount_delta,
                total_visitors=EventModel.total_visitors + visitors_delta,
            )
        )

    async def delete(self, event: EventModel) -> None:
        """Delete an event."""
        await self.session.delete(event)
        await self.session.flush()
