"""Pydantic schemas for donation endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from donorbase.domain.entities import CustomField, DonationRecord
from donorbase.domain.services import RecordProjection


class DonationRequest(BaseModel):
    """Request body for creating or updating a donation.

    Values are checked by the donation validator, so the raw types are
    accepted here.
    """

    donor_name: Any = Field(default=None, alias="donorName")
    amount: Any = None
    custom_field_values: dict[str, Any] = Field(
        default_factory=dict, alias="customFieldValues"
    )

    model_config = {"populate_by_name": True}


class ProjectedValueResponse(BaseModel):
    """A custom value rendered against the current schema."""

    field_id: str = Field(..., alias="fieldId")
    label: str
    value: str

    model_config = {"populate_by_name": True}


class DonationResponse(BaseModel):
    """A donation with its raw values and their projection."""

    id: str
    event_id: str = Field(..., alias="eventId")
    donor_name: str = Field(..., alias="donorName")
    amount: float
    custom_field_values: dict[str, Any] = Field(..., alias="customFieldValues")
    display_values: list[ProjectedValueResponse] = Field(..., alias="displayValues")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(
        cls, record: DonationRecord, schema: list[CustomField], placeholder: str
    ) -> "DonationResponse":
        return cls(
            id=record.id,
            event_id=record.event_id,
            donor_name=record.donor_name,
            amount=record.amount,
            custom_field_values=RecordProjection.raw_values(record),
            display_values=[
                ProjectedValueResponse(
                    field_id=p.field.id, label=p.field.label, value=p.display_value
                )
                for p in RecordProjection.project(schema, record, placeholder)
            ],
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class DonationListResponse(BaseModel):
    """Response for listing donations."""

    items: list[DonationResponse]
    total: int
