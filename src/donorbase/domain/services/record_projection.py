"""Projection of stored donation values onto the current schema.

Donation records and the schema evolve independently. Projection walks the
current schema in order and shows whatever each record stored; values keyed
by deleted fields are left out, and values of removed or renamed options are
shown as stored.
"""

from dataclasses import dataclass
from typing import Any

from donorbase.domain.entities import CustomField, DonationRecord
from donorbase.domain.services.donation_validator import is_empty_value

DEFAULT_PLACEHOLDER = "-"


@dataclass
class ProjectedValue:
    """One displayed cell of a donation row."""

    field: CustomField
    display_value: str
    raw_value: Any = None


@dataclass
class SchemaConsistencyWarning:
    """A stored value that no longer matches the current schema.

    Codes: ``orphaned_value`` (key of a deleted field) and
    ``option_not_in_schema`` (selector/radio value not among current options).
    """

    field_id: str
    value: Any
    code: str


class RecordProjection:
    """Render donation values against the current schema."""

    @staticmethod
    def display(value: Any, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
        if is_empty_value(value):
            return placeholder
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    @classmethod
    def project(
        cls,
        schema: list[CustomField],
        record: DonationRecord,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> list[ProjectedValue]:
        """Project a record over the current schema in field order."""
        projected = []
        for field in sorted(schema, key=lambda f: f.order):
            raw = record.get_value(field.id)
            projected.append(
                ProjectedValue(
                    field=field,
                    display_value=cls.display(raw, placeholder),
                    raw_value=raw,
                )
            )
        return projected

    @staticmethod
    def find_inconsistencies(
        schema: list[CustomField], record: DonationRecord
    ) -> list[SchemaConsistencyWarning]:
        """List stored values that drifted from the schema. Never raises."""
        fields_by_id = {f.id: f for f in schema}
        warnings = []
        for field_id, value in record.custom_field_values.items():
            field = fields_by_id.get(field_id)
            if field is None:
                warnings.append(
                    SchemaConsistencyWarning(field_id=field_id, value=value, code="orphaned_value")
                )
            elif (
                field.field_type.has_options
                and not is_empty_value(value)
                and str(value) not in field.option_list
            ):
                warnings.append(
                    SchemaConsistencyWarning(
                        field_id=field_id, value=value, code="option_not_in_schema"
                    )
                )
        return warnings

    @staticmethod
    def raw_values(record: DonationRecord) -> dict[str, Any]:
        """The full stored value map, orphaned keys included."""
        return dict(record.custom_field_values)
