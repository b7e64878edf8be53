"""SQLAlchemy model for the donor_forms table.

Each event owns exactly one donor form document holding its custom field
schema. The whole field list is stored as one JSON text column and is always
overwritten as a unit.
"""

import json
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from donorbase.domain.entities import CustomField, fields_from_documents
from donorbase.infrastructure.persistence.database import Base
from donorbase.infrastructure.persistence.models.event import as_utc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DonorFormModel(Base):
    """SQLAlchemy model for the donor_forms table.

    Attributes:
        event_id: Owning event (primary key, one form per event).
        fields: JSON list of custom field documents.
        version: Incremented on every write; used for conditional writes.
        last_field_id: Largest numeric field ID the form has ever held.
        created_at: Timestamp when the form was created.
        updated_at: Timestamp of the last write.
    """

    __tablename__ = "donor_forms"

    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
    )
    fields: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
        comment="JSON list of custom field definitions",
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    last_field_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        comment="High-water mark of field IDs, deleted fields included",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )

    def custom_fields(self) -> list[CustomField]:
        """Parse the stored field list, sorted by stored order."""
        return fields_from_documents(json.loads(self.fields or "[]"))

    @property
    def updated_at_utc(self) -> datetime:
        return as_utc(self.updated_at)

    def __repr__(self) -> str:
        return f"<DonorForm(event_id={self.event_id}, version={self.version})>"
