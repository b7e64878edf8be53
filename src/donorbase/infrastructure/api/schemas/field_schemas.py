"""Pydantic schemas for custom field schema endpoints."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from donorbase.domain.entities import CustomField


class CustomFieldResponse(BaseModel):
    """A single custom field definition."""

    id: str
    label: str
    field_type: str = Field(..., alias="fieldType")
    required: bool = False
    options: list[str] | None = None
    order: int

    model_config = {"populate_by_name": True}

    @classmethod
    def from_entity(cls, field: CustomField) -> "CustomFieldResponse":
        return cls(
            id=field.id,
            label=field.label,
            field_type=field.field_type.value,
            required=field.required,
            options=field.option_list if field.field_type.has_options else None,
            order=field.order,
        )


class FieldSchemaResponse(BaseModel):
    """The full field list of an event with its version."""

    event_id: str = Field(..., alias="eventId")
    version: int
    fields: list[CustomFieldResponse]

    model_config = {"populate_by_name": True}

    @classmethod
    def build(cls, event_id: str, fields: list[CustomField], version: int) -> "FieldSchemaResponse":
        return cls(
            event_id=event_id,
            version=version,
            fields=[CustomFieldResponse.from_entity(f) for f in fields],
        )


class VersionedRequest(BaseModel):
    """Base for schema edits; ``expectedVersion`` enables a conditional write."""

    expected_version: int | None = Field(
        default=None,
        alias="expectedVersion",
        description="Reject the edit if the stored schema version differs",
    )

    model_config = {"populate_by_name": True}


class AddFieldRequest(VersionedRequest):
    """Request body for adding a custom field."""

    label: str = Field(..., description="Display label")
    field_type: str = Field(
        ..., alias="fieldType", description="Field type: text, numeric, selector, radio"
    )
    required: bool = False
    options: list[str] | None = Field(
        default=None, description="Options for selector and radio fields"
    )

    @field_validator("field_type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        """Normalize field type to lowercase."""
        return v.lower()


class MoveFieldRequest(VersionedRequest):
    """Request body for moving a field one position."""

    direction: str = Field(..., description="'up' or 'down'")


class UpdateFieldRequest(VersionedRequest):
    """Request body for a partial field update."""

    updates: dict[str, Any] = Field(
        ..., description="Attributes to change: label, required, options"
    )


class OptionRequest(VersionedRequest):
    """Request body for adding or editing an option."""

    value: str = Field(..., description="Option value")
