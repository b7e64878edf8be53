import csv
import io
from datetime import date, datetime, timezone

from donorbase.domain.entities import DonationRecord, Event
from donorbase.domain.services import ExportService


def make_event(name="Temple Fund"):
    return Event(
        id="e1",
        name=name,
        admin_password="1234",
        visitor_password="5678",
        description="Annual",
    )


def make_records():
    return [
        DonationRecord(
            id="old",
            event_id="e1",
            donor_name="Asha",
            amount=100.0,
            custom_field_values={"1": "Pune", "gone": "orphan"},
            created_at=datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc),
        ),
        DonationRecord(
            id="new",
            event_id="e1",
            donor_name="Ravi",
            amount=49.5,
            custom_field_values={"2": "UPI"},
            created_at=datetime(2026, 2, 1, 9, 30, tzinfo=timezone.utc),
        ),
    ]


class TestCsv:

    def test_header(self, sample_schema):
        assert ExportService.csv_header(sample_schema) == [
            "Donor Name",
            "Amount (INR)",
            "City",
            "Payment Mode",
            "Member",
            "Date",
        ]

    def test_rows_newest_first_with_blank_cells(self, sample_schema):
        rows = ExportService.csv_rows(sample_schema, make_records())
        assert rows == [
            ["Ravi", "49.5", "", "UPI", "", "01/02/2026"],
            ["Asha", "100", "Pune", "", "", "05/01/2026"],
        ]

    def test_every_cell_quoted(self, sample_schema):
        content = ExportService.to_csv(sample_schema, make_records())
        first_line = content.splitlines()[0]
        assert first_line.startswith('"Donor Name","Amount (INR)"')
        parsed = list(csv.reader(io.StringIO(content)))
        assert len(parsed) == 3
        assert "orphan" not in content

    def test_currency_label(self, sample_schema):
        assert ExportService.csv_header([], currency="USD")[1] == "Amount (USD)"


class TestJson:

    def test_document_shape(self, sample_schema):
        document = ExportService.to_json(make_event(), sample_schema, make_records())

        assert document["event"] == {
            "name": "Temple Fund",
            "description": "Annual",
            "totalAmount": 149.5,
            "totalDonors": 2,
        }
        assert document["customFields"][0] == {"id": "1", "label": "City", "fieldType": "text"}
        assert [d["donorName"] for d in document["donations"]] == ["Ravi", "Asha"]

    def test_orphaned_values_included(self, sample_schema):
        document = ExportService.to_json(make_event(), sample_schema, make_records())
        assert document["donations"][1]["customFields"] == {"1": "Pune", "gone": "orphan"}
        assert document["donations"][1]["amount"] == 100
        assert document["donations"][1]["date"].startswith("2026-01-05T10:00:00")


def test_filename():
    today = date(2026, 10, 19)
    assert ExportService.filename(make_event(), "csv", today) == "Temple Fund_2026-10-19.csv"
    assert ExportService.filename(None, "json", today) == "donations_2026-10-19.json"
    assert ExportService.filename(make_event(name=""), "csv", today) == "donations_2026-10-19.csv"


def test_same_timestamp_sorted_like_listing():
    records = make_records()
    created_at = records[0].created_at
    tied = [
        DonationRecord(id=i, event_id="e1", donor_name=i, amount=1.0, created_at=created_at)
        for i in ("b", "c", "a")
    ]
    assert [r.id for r in ExportService.sort_newest_first(tied)] == ["c", "b", "a"]
