"""Donation record entity.

Donation records reference custom fields by id only. Deleting or renaming a
field never rewrites stored records, so ``custom_field_values`` may hold keys
that are no longer part of the event schema.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class DonationRecord:
    """A single contribution to an event.

    Attributes:
        id: Unique identifier (UUID string).
        event_id: The event the donation belongs to.
        donor_name: Donor display name.
        amount: Donated amount.
        custom_field_values: Values keyed by custom field id.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last edit, None if never edited.
    """

    id: str
    event_id: str
    donor_name: str
    amount: float
    custom_field_values: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    def get_value(self, field_id: str) -> Any:
        """Return the stored value for a field id, None when absent."""
        return self.custom_field_values.get(field_id)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the document shape used by snapshots and exports."""
        return {
            "id": self.id,
            "eventId": self.event_id,
            "donorName": self.donor_name,
            "amount": self.amount,
            "customFieldValues": dict(self.custom_field_values),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
