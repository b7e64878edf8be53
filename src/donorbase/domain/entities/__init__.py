"""Domain entities for DonorBase.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from donorbase.domain.entities.access import AccessContext, AccessRole
from donorbase.domain.entities.custom_field import (
    CustomField,
    FieldType,
    fields_from_documents,
    fields_to_documents,
    highest_numeric_id,
)
from donorbase.domain.entities.donation import DonationRecord
from donorbase.domain.entities.event import Event

__all__ = [
    "AccessContext",
    "AccessRole",
    "CustomField",
    "DonationRecord",
    "Event",
    "FieldType",
    "fields_from_documents",
    "fields_to_documents",
    "highest_numeric_id",
]
