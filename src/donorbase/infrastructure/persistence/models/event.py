"""SQLAlchemy model for the events table."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from donorbase.domain.entities import Event
from donorbase.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; stored values are always UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class EventModel(Base):
    """SQLAlchemy model for the events table.

    Attributes:
        id: Primary key (UUID string).
        name: Event name.
        description: Optional description.
        current_amount: Running donation total.
        total_visitors: Running donation count.
        admin_password: Plaintext 4-digit admin password.
        visitor_password: Plaintext 4-digit visitor password.
        created_at: Timestamp when the event was created.
    """

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Event ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    current_amount: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
    )
    total_visitors: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    admin_password: Mapped[str] = mapped_column(
        String(4),
        nullable=False,
        comment="4-digit admin password",
    )
    visitor_password: Mapped[str] = mapped_column(
        String(4),
        nullable=False,
        comment="4-digit visitor password",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        CheckConstraint(
            "admin_password != visitor_password",
            name="ck_events_passwords_differ",
        ),
    )

    def to_entity(self) -> Event:
        return Event(
            id=self.id,
            name=self.name,
            description=self.description,
            current_amount=self.current_amount or 0.0,
            total_visitors=self.total_visitors or 0,
            admin_password=self.admin_password,
            visitor_password=self.visitor_password,
            created_at=as_utc(self.created_at),
        )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name})>"
