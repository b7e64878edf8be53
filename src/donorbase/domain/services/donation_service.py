"""Service for recording, editing and removing donations.

Every write keeps the event's running totals in step with its donations in
the same transaction, then publishes fresh donation and event snapshots.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.config import get_settings
from donorbase.core.logging import get_logger
from donorbase.domain.entities import AccessContext, CustomField, DonationRecord
from donorbase.domain.exceptions import (
    DomainValidationError,
    DonationNotFoundError,
    EventNotFoundError,
    PermissionDeniedError,
)
from donorbase.domain.services.donation_validator import DonationValidator, parse_amount
from donorbase.domain.services.record_projection import RecordProjection
from donorbase.infrastructure.persistence.models import DonationModel
from donorbase.infrastructure.persistence.repositories import (
    DonationRepository,
    DonorFormRepository,
    EventRepository,
)
from donorbase.infrastructure.persistence.transaction import commit_or_raise
from donorbase.infrastructure.realtime.snapshot_hub import TOPIC_DONATIONS, TOPIC_EVENT
from donorbase.infrastructure.realtime.snapshot_publisher import SnapshotPublisher

logger = get_logger(__name__)


class DonationService:
    """Creates, updates, deletes and lists the donations of an event."""

    def __init__(
        self,
        session: AsyncSession,
        publisher: SnapshotPublisher | None = None,
        reject_non_positive: bool | None = None,
    ) -> None:
        self.session = session
        self.publisher = publisher
        if reject_non_positive is None:
            reject_non_positive = get_settings().reject_non_positive_amounts
        self.reject_non_positive = reject_non_positive
        self.event_repo = EventRepository(session)
        self.form_repo = DonorFormRepository(session)
        self.donation_repo = DonationRepository(session)

    async def _schema(self, event_id: str) -> list[CustomField]:
        if await self.event_repo.get_by_id(event_id) is None:
            raise EventNotFoundError(event_id)
        form = await self.form_repo.get_by_event_id(event_id)
        return form.custom_fields() if form else []

    def _validate(
        self,
        schema: list[CustomField],
        donor_name: Any,
        amount: Any,
        values: dict[str, Any],
    ) -> float:
        errors = DonationValidator.validate_all(
            schema, values, donor_name, amount, self.reject_non_positive
        )
        if errors:
            raise DomainValidationError(errors)
        return parse_amount(amount)

    @staticmethod
    def _clean_values(values: dict[str, Any], known_ids: set[str], event_id: str) -> dict[str, Any]:
        """Trim string values and drop keys that are not known field IDs.

        Empty entries are kept as empty strings.
        """
        unknown = sorted(key for key in values if key not in known_ids)
        if unknown:
            logger.info("Unknown custom value keys dropped", event_id=event_id, keys=unknown)
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in values.items()
            if key in known_ids
        }

    def _log_inconsistencies(self, schema: list[CustomField], record: DonationRecord) -> None:
        for warning in RecordProjection.find_inconsistencies(schema, record):
            logger.debug(
                "Donation value out of step with schema",
                event_id=record.event_id,
                donation_id=record.id,
                field_id=warning.field_id,
                code=warning.code,
            )

    async def _publish(self, event_id: str) -> None:
        if self.publisher:
            await self.publisher.publish(self.session, event_id, TOPIC_DONATIONS, TOPIC_EVENT)

    async def list_donations(self, event_id: str) -> list[DonationRecord]:
        """List donations of an event, newest first.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        if await self.event_repo.get_by_id(event_id) is None:
            raise EventNotFoundError(event_id)
        return [d.to_entity() for d in await self.donation_repo.list_by_event(event_id)]

    async def list_with_schema(
        self, event_id: str
    ) -> tuple[list[CustomField], list[DonationRecord]]:
        """The current schema and every donation of an event."""
        schema = await self._schema(event_id)
        records = [d.to_entity() for d in await self.donation_repo.list_by_event(event_id)]
        return schema, records

    async def get(self, event_id: str, donation_id: str) -> DonationRecord:
        donation = await self.donation_repo.get_by_id(event_id, donation_id)
        if donation is None:
            raise DonationNotFoundError(donation_id)
        return donation.to_entity()

    async def create(
        self,
        access: AccessContext,
        donor_name: Any,
        amount: Any,
        custom_field_values: dict[str, Any] | None = None,
    ) -> DonationRecord:
        """Validate and record a donation. Admin only.

        Raises:
            PermissionDeniedError: If the caller is not an admin.
            EventNotFoundError: If the event does not exist.
            DomainValidationError: If the donation failed validation.
            PersistenceError: If the write failed.
        """
        if not access.is_admin:
            raise PermissionDeniedError("create donation")

        schema = await self._schema(access.event_id)
        values = self._clean_values(
            custom_field_values or {}, {f.id for f in schema}, access.event_id
        )
        parsed_amount = self._validate(schema, donor_name, amount, values)

        donation = DonationModel(
            id=str(uuid.uuid4()),
            event_id=access.event_id,
            donor_name=donor_name.strip(),
            amount=parsed_amount,
            custom_field_values=json.dumps(values),
        )
        await self.donation_repo.create(donation)
        await self.event_repo.adjust_totals(access.event_id, parsed_amount, visitors_delta=1)
        await commit_or_raise(self.session, "create donation", event_id=access.event_id)

        record = donation.to_entity()
        if parsed_amount <= 0:
            logger.warning(
                "Non-positive donation amount recorded",
                event_id=access.event_id,
                donation_id=record.id,
                amount=parsed_amount,
            )
        self._log_inconsistencies(schema, record)
        logger.info(
            "Donation created",
            event_id=access.event_id,
            donation_id=record.id,
            amount=parsed_amount,
        )
        await self._publish(access.event_id)
        return record

    async def update(
        self,
        access: AccessContext,
        donation_id: str,
        donor_name: Any,
        amount: Any,
        custom_field_values: dict[str, Any] | None = None,
    ) -> DonationRecord:
        """Validate and overwrite a donation. Admin only.

        The event total moves by the difference between the new and the old
        amount; the donor count is unchanged.
        """
        if not access.is_admin:
            raise PermissionDeniedError("update donation")

        schema = await self._schema(access.event_id)
        donation = await self.donation_repo.get_by_id(access.event_id, donation_id)
        if donation is None:
            raise DonationNotFoundError(donation_id)

        # Keys of deleted fields already on the record may be resubmitted
        known_ids = {f.id for f in schema} | set(json.loads(donation.custom_field_values or "{}"))
        values = self._clean_values(custom_field_values or {}, known_ids, access.event_id)
        parsed_amount = self._validate(schema, donor_name, amount, values)
        difference = parsed_amount - donation.amount

        donation.donor_name = donor_name.strip()
        donation.amount = parsed_amount
        donation.custom_field_values = json.dumps(values)
        donation.updated_at = datetime.now(timezone.utc)
        await self.donation_repo.update(donation)
        if difference != 0:
            await self.event_repo.adjust_totals(access.event_id, difference)
        await commit_or_raise(
            self.session, "update donation", event_id=access.event_id, donation_id=donation_id
        )

        record = donation.to_entity()
        self._log_inconsistencies(schema, record)
        logger.info(
            "Donation updated",
            event_id=access.event_id,
            donation_id=donation_id,
            amount_difference=difference,
        )
        await self._publish(access.event_id)
        return record

    async def delete(self, access: AccessContext, donation_id: str) -> None:
        """Remove a donation and take it out of the event totals. Admin only."""
        if not access.is_admin:
            raise PermissionDeniedError("delete donation")

        donation = await self.donation_repo.get_by_id(access.event_id, donation_id)
        if donation is None:
            raise DonationNotFoundError(donation_id)

        amount = donation.amount
        await self.donation_repo.delete(donation)
        await self.event_repo.adjust_totals(access.event_id, -amount, visitors_delta=-1)
        await commit_or_raise(
            self.session, "delete donation", event_id=access.event_id, donation_id=donation_id
        )

        logger.info("Donation deleted", event_id=access.event_id, donation_id=donation_id)
        await self._publish(access.event_id)
