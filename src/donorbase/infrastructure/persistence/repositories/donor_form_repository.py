"""Repository for donor form (custom field schema) documents.

Stores and returns exactly the field list last written. No validation is
performed here. Every write also raises the form's field ID high-water mark
to the largest numeric ID in the written list, so IDs of deleted fields stay
accounted for.
"""

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import case, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.domain.entities import highest_numeric_id
from donorbase.infrastructure.persistence.models import DonorFormModel


def _highest_id(fields: list[dict[str, Any]]) -> int:
    return highest_numeric_id(document.get("id") for document in fields)


class DonorFormRepository:
    """Repository for donor form database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get_by_event_id(self, event_id: str) -> DonorFormModel | None:
        """Get the donor form of an event, None if it was never written."""
        result = await self.session.execute(
            select(DonorFormModel)
            .where(DonorFormModel.event_id == event_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, event_id: str, fields: list[dict[str, Any]] | None = None) -> DonorFormModel:
        """Create the donor form of an event."""
        form = DonorFormModel(
            event_id=event_id,
            fields=json.dumps(fields or []),
            version=0,
            last_field_id=_highest_id(fields or []),
        )
        self.session.add(form)
        await self.session.flush()
        return form

    async def overwrite(self, event_id: str, fields: list[dict[str, Any]]) -> DonorFormModel:
        """Replace the whole field list unconditionally (last write wins)."""
        form = await self.get_by_event_id(event_id)
        if form is None:
            form = await self.create(event_id, fields)
            form.version = 1
        else:
            form.fields = json.dumps(fields)
            form.version = form.version + 1
            form.last_field_id = max(form.last_field_id or 0, _highest_id(fields))
            form.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return form

    async def compare_and_set(
        self, event_id: str, fields: list[dict[str, Any]], expected_version: int
    ) -> bool:
        """Replace the field list only if the stored version matches.

        Returns:
            True if the write happened, False on a version mismatch.
        """
        highest = _highest_id(fields)
        result = await self.session.execute(
            update(DonorFormModel)
            .where(
                DonorFormModel.event_id == event_id,
                DonorFormModel.version == expected_version,
            )
            .values(
                fields=json.dumps(fields),
                version=DonorFormModel.version + 1,
                last_field_id=case(
                    (DonorFormModel.last_field_id > highest, DonorFormModel.last_field_id),
                    else_=highest,
                ),
                updated_at=datetime.now(timezone.utc),
            )
        )
        return result.rowcount == 1

    async def delete_by_event_id(self, event_id: str) -> None:
        await self.session.execute(
            delete(DonorFormModel).where(DonorFormModel.event_id == event_id)
        )
