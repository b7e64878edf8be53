"""Persistence repositories for database operations."""

from donorbase.infrastructure.persistence.repositories.donation_repository import (
    DonationRepository,
)
from donorbase.infrastructure.persistence.repositories.donor_form_repository import (
    DonorFormRepository,
)
from donorbase.infrastructure.persistence.repositories.event_repository import (
    EventRepository,
)

__all__ = [
    "DonationRepository",
    "DonorFormRepository",
    "EventRepository",
]
