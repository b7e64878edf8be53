"""Insights service for donation distributions.

Groups donations by the value they stored for a selector or radio field and
reports per-value donor counts and amounts with their percentages.

Percentages of donor counts are taken over ALL donations passed in, including
those without a value for the field, so the buckets of a partially answered
field add up to less than 100%.
"""

from dataclasses import dataclass, field

from donorbase.domain.entities import CustomField, DonationRecord

# Fixed palette, assigned by first-seen order of bucket values
CHART_COLORS = (
    "#3b82f6",  # Blue
    "#10b981",  # Green
    "#f59e0b",  # Orange
    "#ef4444",  # Red
    "#8b5cf6",  # Purple
    "#ec4899",  # Pink
    "#14b8a6",  # Teal
    "#f97316",  # Dark Orange
)


@dataclass
class InsightBucket:
    """Aggregate for one distinct stored value."""

    label: str
    count: int
    amount: float
    percentage: str
    amount_percentage: str
    color: str


@dataclass
class InsightsError:
    """Reason a distribution could not be computed."""

    field: str
    message: str
    code: str


@dataclass
class FieldDistribution:
    """Distribution of donations over one visualizable field."""

    field: CustomField
    buckets: list[InsightBucket]


@dataclass
class DonationSummary:
    """Totals over a set of donations."""

    total_donors: int
    total_amount: float


@dataclass
class InsightsOverview:
    """Summary plus one distribution per visualizable field."""

    summary: DonationSummary
    distributions: list[FieldDistribution] = field(default_factory=list)


def _format_percentage(part: float, whole: float) -> str:
    if not whole:
        return "0.0"
    return f"{part / whole * 100:.1f}"


class InsightsService:
    """Aggregations over donation records for chart rendering."""

    @staticmethod
    def visualizable_fields(schema: list[CustomField]) -> list[CustomField]:
        """Selector and radio fields in schema order."""
        return [f for f in sorted(schema, key=lambda f: f.order) if f.field_type.has_options]

    @staticmethod
    def summary(records: list[DonationRecord]) -> DonationSummary:
        return DonationSummary(
            total_donors=len(records),
            total_amount=sum(record.amount for record in records),
        )

    @classmethod
    def bucketize(cls, field: CustomField, records: list[DonationRecord]) -> list[InsightBucket]:
        """Group records by their stored value for ``field``.

        Records with no (or an empty) value are skipped; no "unanswered"
        bucket is produced. Buckets keep the first-seen order of values.
        """
        counts: dict[str, int] = {}
        amounts: dict[str, float] = {}
        for record in records:
            value = record.get_value(field.id)
            if not value:
                continue
            key = str(value)
            counts[key] = counts.get(key, 0) + 1
            amounts[key] = amounts.get(key, 0) + record.amount

        total_records = len(records)
        total_amount = sum(record.amount for record in records)

        return [
            InsightBucket(
                label=label,
                count=count,
                amount=amounts[label],
                percentage=_format_percentage(count, total_records),
                amount_percentage=_format_percentage(amounts[label], total_amount),
                color=CHART_COLORS[index % len(CHART_COLORS)],
            )
            for index, (label, count) in enumerate(counts.items())
        ]

    @classmethod
    def distribution(
        cls, schema: list[CustomField], records: list[DonationRecord], field_id: str
    ) -> FieldDistribution | InsightsError:
        """Compute the distribution for one field of the schema.

        Returns:
            FieldDistribution, or InsightsError when the field is not in the
            schema or is not a selector/radio field.
        """
        field = next((f for f in schema if f.id == field_id), None)
        if field is None:
            return InsightsError(
                field=field_id, message=f"Field '{field_id}' not found", code="field_not_found"
            )
        if not field.field_type.has_options:
            return InsightsError(
                field=field_id,
                message=f"Field '{field.label}' is not a selector or radio field",
                code="field_not_visualizable",
            )
        return FieldDistribution(field=field, buckets=cls.bucketize(field, records))

    @classmethod
    def overview(cls, schema: list[CustomField], records: list[DonationRecord]) -> InsightsOverview:
        return InsightsOverview(
            summary=cls.summary(records),
            distributions=[
                FieldDistribution(field=f, buckets=cls.bucketize(f, records))
                for f in cls.visualizable_fields(schema)
            ],
        )
