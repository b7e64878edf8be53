"""SQLAlchemy models for DonorBase tables.

All models inherit from the Base class defined in database.py and are
created on application startup.
"""

from donorbase.infrastructure.persistence.models.donation import DonationModel
from donorbase.infrastructure.persistence.models.donor_form import DonorFormModel
from donorbase.infrastructure.persistence.models.event import EventModel

__all__ = [
    "DonationModel",
    "DonorFormModel",
    "EventModel",
]
