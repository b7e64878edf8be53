"""Event validation service.

Checks event names and the two 4-digit access passwords.
"""

import re
from dataclasses import dataclass

PASSWORD_PATTERN = re.compile(r"^\d{4}$")


@dataclass
class EventValidationError:
    """A single event validation error."""

    field: str
    message: str
    code: str


class EventValidator:
    """Validator for event create and update requests."""

    MAX_NAME_LENGTH = 200

    @classmethod
    def validate_name(cls, name: str | None) -> list[EventValidationError]:
        if not name or not name.strip():
            return [EventValidationError(field="name", message="Event name is required", code="name_required")]
        if len(name.strip()) > cls.MAX_NAME_LENGTH:
            return [
                EventValidationError(
                    field="name",
                    message=f"Event name must be at most {cls.MAX_NAME_LENGTH} characters",
                    code="name_too_long",
                )
            ]
        return []

    @classmethod
    def validate_passwords(
        cls, admin_password: str | None, visitor_password: str | None
    ) -> list[EventValidationError]:
        errors = []
        if not admin_password or not PASSWORD_PATTERN.match(admin_password):
            errors.append(
                EventValidationError(
                    field="adminPassword",
                    message="Admin Password must be exactly 4 digits",
                    code="admin_password_invalid",
                )
            )
        if not visitor_password or not PASSWORD_PATTERN.match(visitor_password):
            errors.append(
                EventValidationError(
                    field="visitorPassword",
                    message="Visitor Password must be exactly 4 digits",
                    code="visitor_password_invalid",
                )
            )
        if not errors and admin_password == visitor_password:
            errors.append(
                EventValidationError(
                    field="visitorPassword",
                    message="Admin Password and Visitor Password must be different",
                    code="passwords_identical",
                )
            )
        return errors

    @classmethod
    def validate(
        cls, name: str | None, admin_password: str | None, visitor_password: str | None
    ) -> list[EventValidationError]:
        """Validate a complete event definition.

        Returns:
            List of validation errors (empty if valid).
        """
        return cls.validate_name(name) + cls.validate_passwords(admin_password, visitor_password)

    @staticmethod
    def clean_description(description: str | None) -> str | None:
        """Trim the description; an empty one is stored as None."""
        if description is None:
            return None
        cleaned = description.strip()
        return cleaned or None
