"""Pydantic schemas for insights endpoints."""

from pydantic import BaseModel, Field

from donorbase.domain.services import DonationSummary, FieldDistribution, InsightsOverview


class InsightBucketResponse(BaseModel):
    """Aggregate of one option value."""

    label: str
    count: int
    amount: float
    percentage: str = Field(..., description="Share of all donations, one decimal")
    amount_percentage: str = Field(
        ..., alias="amountPercentage", description="Share of the total amount, one decimal"
    )
    color: str

    model_config = {"populate_by_name": True}


class FieldDistributionResponse(BaseModel):
    """Distribution of donations over a selector or radio field."""

    field_id: str = Field(..., alias="fieldId")
    label: str
    field_type: str = Field(..., alias="fieldType")
    buckets: list[InsightBucketResponse]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_distribution(cls, distribution: FieldDistribution) -> "FieldDistributionResponse":
        return cls(
            field_id=distribution.field.id,
            label=distribution.field.label,
            field_type=distribution.field.field_type.value,
            buckets=[
                InsightBucketResponse(
                    label=b.label,
                    count=b.count,
                    amount=b.amount,
                    percentage=b.percentage,
                    amount_percentage=b.amount_percentage,
                    color=b.color,
                )
                for b in distribution.buckets
            ],
        )


class SummaryResponse(BaseModel):
    """Totals recomputed from the donation records."""

    total_donors: int = Field(..., alias="totalDonors")
    total_amount: float = Field(..., alias="totalAmount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_summary(cls, summary: DonationSummary) -> "SummaryResponse":
        return cls(total_donors=summary.total_donors, total_amount=summary.total_amount)


class InsightsOverviewResponse(BaseModel):
    """Summary plus a distribution per visualizable field."""

    summary: SummaryResponse
    distributions: list[FieldDistributionResponse]

    @classmethod
    def from_overview(cls, overview: InsightsOverview) -> "InsightsOverviewResponse":
        return cls(
            summary=SummaryResponse.from_summary(overview.summary),
            distributions=[
                FieldDistributionResponse.from_distribution(d) for d in overview.distributions
            ],
        )
