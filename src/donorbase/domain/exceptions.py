"""Exceptions raised by DonorBase services.

Pure validators never raise; they return error dataclasses. The service layer
converts a non-empty error list into DomainValidationError so the API layer
can answer before anything is written.
"""

from typing import Any


class DonorBaseError(Exception):
    """Base class for service-level errors."""


class DomainValidationError(DonorBaseError):
    """Raised by services when input failed validation.

    Attributes:
        errors: Validation error dataclasses with field, message and code.
    """

    def __init__(self, errors: list[Any]) -> None:
        self.errors = errors
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Validation failed: {summary}")


class EventNotFoundError(DonorBaseError):
    """Raised when an event does not exist."""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event with ID '{event_id}' not found")


class DonationNotFoundError(DonorBaseError):
    """Raised when a donation does not exist within an event."""

    def __init__(self, donation_id: str) -> None:
        self.donation_id = donation_id
        super().__init__(f"Donation with ID '{donation_id}' not found")


class PermissionDeniedError(DonorBaseError):
    """Raised when a visitor attempts an admin-only operation."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Admin access required for '{operation}'")


class SchemaVersionConflictError(DonorBaseError):
    """Raised when a conditional schema write is based on a stale version."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Schema version conflict: expected {expected_version}, found {actual_version}"
        )


class PersistenceError(DonorBaseError):
    """Raised when a write or delete against the store fails.

    Writes are not retried; the caller reports the failure and keeps its
    local state, relying on the live snapshot stream for the stored truth.
    """


class InvalidEventPasswordError(DonorBaseError):
    """Raised when a password matches neither role of an event."""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Invalid password for event '{event_id}'")
