"""Domain services for DonorBase.

Services contain business logic that doesn't naturally fit within a single entity.
The pure services exported here have no dependencies on infrastructure; the
session-bound services (events, schema, donations) are imported from their
own modules.
"""

from donorbase.domain.services.donation_validator import (
    DonationValidationError,
    DonationValidator,
    is_empty_value,
    parse_amount,
)
from donorbase.domain.services.event_validator import (
    EventValidationError,
    EventValidator,
)
from donorbase.domain.services.export_service import ExportService
from donorbase.domain.services.field_id_generator import (
    FieldIdGenerator,
    default_field_id_generator,
)
from donorbase.domain.services.field_schema_editor import (
    MOVE_DOWN,
    MOVE_UP,
    EditResult,
    FieldSchemaEditor,
    SchemaValidationError,
)
from donorbase.domain.services.insights_service import (
    CHART_COLORS,
    DonationSummary,
    FieldDistribution,
    InsightBucket,
    InsightsError,
    InsightsOverview,
    InsightsService,
)
from donorbase.domain.services.record_projection import (
    DEFAULT_PLACEHOLDER,
    ProjectedValue,
    RecordProjection,
    SchemaConsistencyWarning,
)

__all__ = [
    "CHART_COLORS",
    "DEFAULT_PLACEHOLDER",
    "DonationSummary",
    "DonationValidationError",
    "DonationValidator",
    "EditResult",
    "EventValidationError",
    "EventValidator",
    "ExportService",
    "FieldDistribution",
    "FieldIdGenerator",
    "FieldSchemaEditor",
    "InsightBucket",
    "InsightsError",
    "InsightsOverview",
    "InsightsService",
    "MOVE_DOWN",
    "MOVE_UP",
    "ProjectedValue",
    "RecordProjection",
    "SchemaConsistencyWarning",
    "SchemaValidationError",
    "default_field_id_generator",
    "is_empty_value",
    "parse_amount",
]
