"""Repository for donation operations.

Provides CRUD operations for the donations table.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.infrastructure.persistence.models import DonationModel


class DonationRepository:
    """Repository for donation database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, donation: DonationModel) -> DonationModel:
        """Create a new donation."""
        self.session.add(donation)
        await self.session.flush()
        return donation

    async def get_by_id(self, event_id: str, donation_id: str) -> DonationModel | None:
        """Get a donation of an event by ID.

        Returns:
            The donation model if found within the event, None otherwise.
        """
        result = await self.session.execute(
            select(DonationModel).where(
                DonationModel.id == donation_id,
                DonationModel.event_id == event_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_event(self, event_id: str) -> list[DonationModel]:
        """List all donations of an event, newest first, ties broken by ID."""
        result = await self.session.execute(
            select(DonationModel)
            .where(DonationModel.event_id == event_id)
            .order_by(DonationModel.created_at.desc(), DonationModel.id.desc())
        )
        return list(result.scalars().all())

    async def count_by_event(self, event_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(DonationModel).where(DonationModel.event_id == event_id)
        )
        return result.scalar_one()

    async def update(self, donation: DonationModel) -> DonationModel:
        """Flush pending changes of a donation."""
        await self.session.flush()
        return donation

    async def delete(self, donation: DonationModel) -> None:
        """Delete a donation."""
        await self.session.delete(donation)
        await self.session.flush()

    async def delete_by_event(self, event_id: str) -> int:
        """Delete every donation of an event.

        Returns:
            Number of deleted donations.
        """
        result = await self.session.execute(
            delete(DonationModel).where(DonationModel.event_id == event_id)
        )
        return result.rowcount or 0
