"""Pydantic schemas for event endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from donorbase.domain.entities import Event


class CreateEventRequest(BaseModel):
    """Request body for creating an event."""

    name: str = Field(..., max_length=200, description="Event name")
    description: str | None = Field(default=None, description="Optional description")
    admin_password: str = Field(
        ..., alias="adminPassword", description="4-digit password granting admin access"
    )
    visitor_password: str = Field(
        ..., alias="visitorPassword", description="4-digit password granting visitor access"
    )

    model_config = {"populate_by_name": True}


class UpdateEventRequest(BaseModel):
    """Request body for updating an event. Omitted fields are unchanged."""

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    admin_password: str | None = Field(default=None, alias="adminPassword")
    visitor_password: str | None = Field(default=None, alias="visitorPassword")

    model_config = {"populate_by_name": True}


class EventResponse(BaseModel):
    """Public view of an event. Passwords are never returned."""

    id: str
    name: str
    description: str | None = None
    current_amount: float = Field(..., alias="currentAmount")
    total_visitors: int = Field(..., alias="totalVisitors")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_entity(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            current_amount=event.current_amount,
            total_visitors=event.total_visitors,
            created_at=event.created_at,
        )


class EventListResponse(BaseModel):
    """Response for listing events."""

    items: list[EventResponse]
    total: int


class AccessResponse(BaseModel):
    """Role granted by a password."""

    event_id: str = Field(..., alias="eventId")
    role: str

    model_config = {"populate_by_name": True}


class AccessRequest(BaseModel):
    """Request body for checking an event password."""

    password: str = Field(..., description="Admin or visitor password")


class DeleteEventResponse(BaseModel):
    """Response for deleting an event."""

    event_id: str = Field(..., alias="eventId")
    deleted_donations: int = Field(..., alias="deletedDonations")

    model_config = {"populate_by_name": True}
