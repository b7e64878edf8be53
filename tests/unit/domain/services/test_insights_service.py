import pytest

from donorbase.domain.entities import CustomField, DonationRecord, FieldType
from donorbase.domain.services import CHART_COLORS, InsightsError, InsightsService


def donation(id, amount, **values):
    return DonationRecord(
        id=id, event_id="e1", donor_name=f"Donor {id}", amount=amount, custom_field_values=values
    )


@pytest.fixture
def mode_field():
    return CustomField(
        id="m", label="Mode", field_type=FieldType.SELECTOR, options=("A", "B"), order=0
    )


class TestBucketize:

    def test_counts_amounts_and_percentages(self, mode_field):
        records = [donation("1", 100, m="A"), donation("2", 200, m="A"), donation("3", 50, m="B")]
        buckets = InsightsService.bucketize(mode_field, records)

        assert [(b.label, b.count, b.amount) for b in buckets] == [("A", 2, 300), ("B", 1, 50)]
        assert [b.percentage for b in buckets] == ["66.7", "33.3"]
        assert [b.amount_percentage for b in buckets] == ["85.7", "14.3"]

    def test_count_percentage_divides_by_all_records(self, mode_field):
        records = [donation("1", 100, m="A"), donation("2", 100)]
        [bucket] = InsightsService.bucketize(mode_field, records)
        assert bucket.count == 1
        assert bucket.percentage == "50.0"
        assert bucket.amount_percentage == "50.0"

    def test_first_seen_order(self, mode_field):
        records = [donation("1", 1, m="B"), donation("2", 1, m="A"), donation("3", 1, m="B")]
        assert [b.label for b in InsightsService.bucketize(mode_field, records)] == ["B", "A"]

    def test_values_outside_options_get_buckets(self, mode_field):
        records = [donation("1", 10, m="Retired option")]
        assert InsightsService.bucketize(mode_field, records)[0].label == "Retired option"

    def test_empty_values_skipped(self, mode_field):
        records = [donation("1", 10, m=""), donation("2", 10, m=None)]
        assert InsightsService.bucketize(mode_field, records) == []

    def test_zero_total_amount(self, mode_field):
        [bucket] = InsightsService.bucketize(mode_field, [donation("1", 0, m="A")])
        assert bucket.amount_percentage == "0.0"
        assert bucket.percentage == "100.0"

    def test_colors_cycle_through_palette(self, mode_field):
        records = [donation(str(i), 1, m=f"v{i}") for i in range(10)]
        buckets = InsightsService.bucketize(mode_field, records)
        assert len(CHART_COLORS) == 8
        assert buckets[0].color == "#3b82f6"
        assert buckets[8].color == buckets[0].color
        assert buckets[9].color == CHART_COLORS[1]


class TestDistribution:

    def test_unknown_field(self, sample_schema):
        result = InsightsService.distribution(sample_schema, [], "nope")
        assert isinstance(result, InsightsError)
        assert result.code == "field_not_found"

    def test_text_field_not_visualizable(self, sample_schema):
        result = InsightsService.distribution(sample_schema, [], "1")
        assert result.code == "field_not_visualizable"

    def test_radio_field(self, sample_schema):
        records = [donation("1", 10, **{"3": "Yes"})]
        result = InsightsService.distribution(sample_schema, records, "3")
        assert result.field.id == "3"
        assert result.buckets[0].label == "Yes"


def test_overview(sample_schema):
    records = [donation("1", 100, **{"2": "Cash"}), donation("2", 50, **{"3": "No"})]
    overview = InsightsService.overview(sample_schema, records)
    assert overview.summary.total_donors == 2
    assert overview.summary.total_amount == 150
    assert [d.field.id for d in overview.distributions] == ["2", "3"]
