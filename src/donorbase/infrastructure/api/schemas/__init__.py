"""API Schemas for request/response validation."""

from donorbase.infrastructure.api.schemas.donation_schemas import (
    DonationListResponse,
    DonationRequest,
    DonationResponse,
    ProjectedValueResponse,
)
from donorbase.infrastructure.api.schemas.error_schemas import (
    ConflictResponse,
    ErrorResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from donorbase.infrastructure.api.schemas.event_schemas import (
    AccessRequest,
    AccessResponse,
    CreateEventRequest,
    DeleteEventResponse,
    EventListResponse,
    EventResponse,
    UpdateEventRequest,
)
from donorbase.infrastructure.api.schemas.field_schemas import (
    AddFieldRequest,
    CustomFieldResponse,
    FieldSchemaResponse,
    MoveFieldRequest,
    OptionRequest,
    UpdateFieldRequest,
    VersionedRequest,
)
from donorbase.infrastructure.api.schemas.insights_schemas import (
    FieldDistributionResponse,
    InsightBucketResponse,
    InsightsOverviewResponse,
    SummaryResponse,
)

__all__ = [
    "AccessRequest",
    "AccessResponse",
    "AddFieldRequest",
    "CreateEventRequest",
    "CustomFieldResponse",
    "DeleteEventResponse",
    "DonationListResponse",
    "DonationRequest",
    "DonationResponse",
    "ConflictResponse",
    "ErrorResponse",
    "EventListResponse",
    "EventResponse",
    "FieldDistributionResponse",
    "FieldSchemaResponse",
    "InsightBucketResponse",
    "InsightsOverviewResponse",
    "MoveFieldRequest",
    "OptionRequest",
    "ProjectedValueResponse",
    "SummaryResponse",
    "UpdateEventRequest",
    "UpdateFieldRequest",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "VersionedRequest",
]
