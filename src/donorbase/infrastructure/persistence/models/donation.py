"""SQLAlchemy model for the donations table."""

import json
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from donorbase.domain.entities import DonationRecord
from donorbase.infrastructure.persistence.database import Base
from donorbase.infrastructure.persistence.models.event import as_utc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DonationModel(Base):
    """SQLAlchemy model for the donations table.

    Attributes:
        id: Primary key (UUID string).
        event_id: Owning event.
        donor_name: Donor display name.
        amount: Donated amount.
        custom_field_values: JSON object of values keyed by custom field id.
        created_at: Timestamp when the donation was recorded.
        updated_at: Timestamp of the last edit, null if never edited.
    """

    __tablename__ = "donations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Donation ID (UUID)",
    )
    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    donor_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    amount: Mapped[float] = mapped_column(
        Float,
        nullable=False,
    )
    custom_field_values: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="{}",
        comment="JSON object of custom values keyed by field ID",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
        index=True,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )

    def to_entity(self) -> DonationRecord:
        return DonationRecord(
            id=self.id,
            event_id=self.event_id,
            donor_name=self.donor_name,
            amount=self.amount,
            custom_field_values=json.loads(self.custom_field_values or "{}"),
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at) if self.updated_at else None,
        )

    def __repr__(self) -> str:
        return f"<Donation(id={self.id}, event_id={self.event_id})>"
