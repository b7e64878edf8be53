"""Custom field entity for per-event donation form schemas.

A custom field is an administrator-defined attribute collected with every
donation, in addition to the fixed donor name and amount. The ordered list of
custom fields of an event is its schema.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class FieldType(str, Enum):
    """Supported custom field types."""

    TEXT = "text"
    NUMERIC = "numeric"
    SELECTOR = "selector"
    RADIO = "radio"

    @property
    def has_options(self) -> bool:
        """Whether values of this type are picked from an option list."""
        return self in (FieldType.SELECTOR, FieldType.RADIO)


@dataclass(frozen=True)
class CustomField:
    """A single field definition in an event's donation form schema.

    Instances are immutable; the schema editor produces new instances with
    ``dataclasses.replace`` rather than mutating stored ones.

    Attributes:
        id: Opaque identifier, stable for the field's lifetime and never reused.
        label: Display name.
        field_type: One of the FieldType members.
        required: Enforced when a donation is created or edited.
        options: Ordered unique option values for selector/radio fields,
            None for text/numeric fields.
        order: Position of the field within its schema (0..n-1).
    """

    id: str
    label: str
    field_type: FieldType
    required: bool = False
    options: tuple[str, ...] | None = None
    order: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Custom field ID is required")
        if not isinstance(self.field_type, FieldType):
            object.__setattr__(self, "field_type", FieldType(self.field_type))
        if self.options is not None and not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))

    @property
    def option_list(self) -> list[str]:
        """Options as a list (empty for types without options)."""
        return list(self.options or ())

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape.

        ``options`` is only written when it is non-empty.
        """
        document: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "fieldType": self.field_type.value,
            "required": self.required,
            "order": self.order,
        }
        if self.options:
            document["options"] = list(self.options)
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "CustomField":
        """Build a field from its stored document shape.

        Raises:
            ValueError: If the document has no id or an unknown field type.
        """
        field_type = FieldType(document.get("fieldType", FieldType.TEXT.value))
        raw_options = document.get("options")
        if field_type.has_options:
            options: tuple[str, ...] | None = tuple(raw_options or ())
        else:
            options = None
        return cls(
            id=str(document.get("id", "")),
            label=document.get("label", ""),
            field_type=field_type,
            required=bool(document.get("required", False)),
            options=options,
            order=int(document.get("order", 0)),
        )


def fields_to_documents(fields: list[CustomField]) -> list[dict[str, Any]]:
    """Serialize a schema to its stored list-of-documents shape."""
    return [field.to_document() for field in fields]


def fields_from_documents(documents: list[dict[str, Any]]) -> list[CustomField]:
    """Parse a stored schema, sorted by stored order."""
    fields = [CustomField.from_document(document) for document in documents]
    return sorted(fields, key=lambda field: field.order)


def highest_numeric_id(field_ids: Iterable[str]) -> int:
    """Largest field ID that is a plain decimal number, 0 if there is none."""
    numeric = [int(i) for i in field_ids if isinstance(i, str) and i.isdigit()]
    return max(numeric, default=0)
