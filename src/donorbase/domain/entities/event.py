"""Event entity.

An event is a donation campaign gated by two 4-digit passwords.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class Event:
    """Donation campaign.

    Attributes:
        id: Unique identifier (UUID string).
        name: Event name.
        admin_password: 4-digit password granting the admin role.
        visitor_password: 4-digit password granting the visitor role.
        description: Optional description.
        current_amount: Running total of donated amounts.
        total_visitors: Running count of donations.
        created_at: Creation timestamp.
    """

    id: str
    name: str
    admin_password: str
    visitor_password: str
    description: str | None = None
    current_amount: float = 0.0
    total_visitors: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Event ID is required")

    def to_public_document(self) -> dict[str, Any]:
        """Serialize without the passwords."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "currentAmount": self.current_amount,
            "totalVisitors": self.total_visitors,
            "createdAt": self.created_at.isoformat(),
        }
