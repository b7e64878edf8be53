"""Donation validation against an event's custom field schema.

Runs before any donation write. The checks are pure: no I/O, no side effects.
Zero and negative amounts are accepted unless ``reject_non_positive`` is set,
matching how existing donations were recorded.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable

from donorbase.domain.entities import CustomField, FieldType


@dataclass
class DonationValidationError:
    """A single donation validation error.

    For a missing required custom value, ``field`` is the custom field id.
    """

    field: str
    message: str
    code: str


def is_empty_value(value: Any) -> bool:
    """Whether a custom value counts as "not provided"."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_scalar_value(value: Any) -> bool:
    """Whether a custom value can be stored: text, a number, a flag or null."""
    return value is None or isinstance(value, (str, int, float, bool))


def parse_amount(value: Any) -> float | None:
    """Parse a donation amount, None when it is not a finite number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class DonationValidator:
    """Validator for candidate donations."""

    @classmethod
    def validate_text(cls, value: Any, field: CustomField) -> DonationValidationError | None:
        if not isinstance(value, str):
            return DonationValidationError(
                field=field.id,
                message=f"Expected text value for '{field.label}', got {type(value).__name__}",
                code="invalid_type",
            )
        return None

    @classmethod
    def validate_numeric(cls, value: Any, field: CustomField) -> DonationValidationError | None:
        # Numeric inputs arrive as strings from form widgets
        if parse_amount(value) is None:
            return DonationValidationError(
                field=field.id,
                message=f"Expected a number for '{field.label}'",
                code="invalid_number",
            )
        return None

    @classmethod
    def validate_choice(cls, value: Any, field: CustomField) -> DonationValidationError | None:
        # Values outside the current options are allowed: records keep values of
        # options that were renamed or removed after they were stored.
        if not isinstance(value, str):
            return DonationValidationError(
                field=field.id,
                message=f"Expected an option value for '{field.label}', got {type(value).__name__}",
                code="invalid_type",
            )
        return None

    @classmethod
    def value_validators(
        cls,
    ) -> dict[FieldType, Callable[[Any, CustomField], DonationValidationError | None]]:
        """Per-type value checks; covers every FieldType member."""
        return {
            FieldType.TEXT: cls.validate_text,
            FieldType.NUMERIC: cls.validate_numeric,
            FieldType.SELECTOR: cls.validate_choice,
            FieldType.RADIO: cls.validate_choice,
        }

    @classmethod
    def validate_all(
        cls,
        schema: list[CustomField],
        values: dict[str, Any],
        donor_name: Any,
        amount: Any,
        reject_non_positive: bool = False,
    ) -> list[DonationValidationError]:
        """Validate a candidate donation and collect every error.

        Args:
            schema: Current custom fields of the event.
            values: Candidate custom values keyed by field id.
            donor_name: Candidate donor name.
            amount: Candidate amount (number or numeric string).
            reject_non_positive: Also reject zero and negative amounts.

        Returns:
            List of validation errors, empty if the donation can be written.
        """
        errors: list[DonationValidationError] = []

        if not isinstance(donor_name, str) or not donor_name.strip():
            errors.append(
                DonationValidationError(
                    field="donorName", message="Donor name is required", code="donor_name_required"
                )
            )

        parsed_amount = parse_amount(amount)
        if parsed_amount is None:
            errors.append(
                DonationValidationError(
                    field="amount", message="Amount must be a number", code="amount_invalid"
                )
            )
        elif reject_non_positive and parsed_amount <= 0:
            errors.append(
                DonationValidationError(
                    field="amount", message="Amount must be greater than zero", code="amount_not_positive"
                )
            )

        for key, value in values.items():
            if not is_scalar_value(value):
                errors.append(
                    DonationValidationError(
                        field=key,
                        message="Custom values must be text or numbers",
                        code="invalid_value_type",
                    )
                )

        validators = cls.value_validators()
        for field in sorted(schema, key=lambda f: f.order):
            value = values.get(field.id)
            if not is_scalar_value(value):
                continue
            if is_empty_value(value):
                if field.required:
                    errors.append(
                        DonationValidationError(
                            field=field.id,
                            message=f"Please fill in the required field: {field.label}",
                            code="required_missing",
                        )
                    )
                continue
            error = validators[field.field_type](value, field)
            if error:
                errors.append(error)

        return errors

    @classmethod
    def validate(
        cls,
        schema: list[CustomField],
        values: dict[str, Any],
        donor_name: Any,
        amount: Any,
        reject_non_positive: bool = False,
    ) -> DonationValidationError | None:
        """Return the first validation error, or None if the donation is admissible."""
        errors = cls.validate_all(schema, values, donor_name, amount, reject_non_positive)
        return errors[0] if errors else None
