"""Access context passed explicitly into event-scoped operations."""

from dataclasses import dataclass
from enum import Enum


class AccessRole(str, Enum):
    """Roles granted by the event passwords."""

    ADMIN = "admin"
    VISITOR = "visitor"


@dataclass(frozen=True)
class AccessContext:
    """Resolved role of the caller for one event.

    Attributes:
        event_id: The event the role applies to.
        role: Role established by the password the caller presented.
    """

    event_id: str
    role: AccessRole

    @property
    def is_admin(self) -> bool:
        return self.role == AccessRole.ADMIN
