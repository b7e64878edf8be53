"""Export service for donation reports.

CSV exports follow the current schema: one column per current field label,
blank cells for absent values. JSON exports carry each donation's full stored
value map, including values of deleted fields.
"""

import csv
import io
from datetime import date, datetime
from typing import Any

from donorbase.domain.entities import CustomField, DonationRecord, Event
from donorbase.domain.services.insights_service import InsightsService
from donorbase.domain.services.record_projection import RecordProjection


def _format_amount(amount: float) -> int | float:
    return int(amount) if float(amount).is_integer() else amount


class ExportService:
    """Build CSV and JSON exports of an event's donations."""

    @staticmethod
    def sort_newest_first(records: list[DonationRecord]) -> list[DonationRecord]:
        return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)

    @staticmethod
    def filename(event: Event | None, extension: str, today: date | None = None) -> str:
        """Download filename, e.g. ``Temple Fund_2026-10-19.csv``."""
        stem = event.name if event and event.name else "donations"
        day = (today or date.today()).isoformat()
        return f"{stem}_{day}.{extension}"

    @staticmethod
    def format_date(value: datetime) -> str:
        return value.strftime("%d/%m/%Y")

    @classmethod
    def csv_header(cls, schema: list[CustomField], currency: str = "INR") -> list[str]:
        ordered = sorted(schema, key=lambda f: f.order)
        return ["Donor Name", f"Amount ({currency})", *[f.label for f in ordered], "Date"]

    @classmethod
    def csv_rows(
        cls, schema: list[CustomField], records: list[DonationRecord]
    ) -> list[list[str]]:
        rows = []
        for record in cls.sort_newest_first(records):
            cells = [
                projected.display_value
                for projected in RecordProjection.project(schema, record, placeholder="")
            ]
            rows.append(
                [
                    record.donor_name,
                    str(_format_amount(record.amount)),
                    *cells,
                    cls.format_date(record.created_at),
                ]
            )
        return rows

    @classmethod
    def to_csv(
        cls, schema: list[CustomField], records: list[DonationRecord], currency: str = "INR"
    ) -> str:
        """Render donations as CSV with every cell quoted."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(cls.csv_header(schema, currency))
        writer.writerows(cls.csv_rows(schema, records))
        return buffer.getvalue()

    @classmethod
    def to_json(
        cls, event: Event, schema: list[CustomField], records: list[DonationRecord]
    ) -> dict[str, Any]:
        """Build the JSON export document."""
        summary = InsightsService.summary(records)
        return {
            "event": {
                "name": event.name,
                "description": event.description,
                "totalAmount": _format_amount(summary.total_amount),
                "totalDonors": summary.total_donors,
            },
            "customFields": [
                {"id": f.id, "label": f.label, "fieldType": f.field_type.value}
                for f in sorted(schema, key=lambda f: f.order)
            ],
            "donations": [
                {
                    "donorName": record.donor_name,
                    "amount": _format_amount(record.amount),
                    "customFields": RecordProjection.raw_values(record),
                    "date": record.created_at.isoformat(),
                }
                for record in cls.sort_newest_first(records)
            ],
        }
