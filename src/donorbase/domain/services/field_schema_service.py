"""Service that applies schema edits to an event's donor form.

Edits are computed by FieldSchemaEditor on the current field list and the
resulting list is written back as a whole. Without an expected version the
last write wins; with one the write only happens if nobody else wrote in
between.
"""

from typing import Any, Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.logging import get_logger
from donorbase.domain.entities import AccessContext, CustomField, FieldType, fields_to_documents
from donorbase.domain.exceptions import (
    DomainValidationError,
    EventNotFoundError,
    PermissionDeniedError,
    SchemaVersionConflictError,
)
from donorbase.domain.services.field_id_generator import FieldIdGenerator
from donorbase.domain.services.field_schema_editor import EditResult, FieldSchemaEditor
from donorbase.infrastructure.persistence.repositories import (
    DonorFormRepository,
    EventRepository,
)
from donorbase.infrastructure.persistence.transaction import commit_or_raise
from donorbase.infrastructure.realtime.snapshot_hub import TOPIC_SCHEMA
from donorbase.infrastructure.realtime.snapshot_publisher import SnapshotPublisher

logger = get_logger(__name__)


class FieldSchemaService:
    """Reads and edits the custom field schema of an event."""

    def __init__(
        self,
        session: AsyncSession,
        publisher: SnapshotPublisher | None = None,
        id_generator: FieldIdGenerator | None = None,
    ) -> None:
        self.session = session
        self.publisher = publisher
        self.id_generator = id_generator
        self.form_repo = DonorFormRepository(session)
        self.event_repo = EventRepository(session)

    async def get_form(self, event_id: str) -> tuple[list[CustomField], int]:
        """Get the field list of an event and its version.

        An event whose form was never written has an empty schema at version 0.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        if await self.event_repo.get_by_id(event_id) is None:
            raise EventNotFoundError(event_id)
        form = await self.form_repo.get_by_event_id(event_id)
        if form is None:
            return [], 0
        return form.custom_fields(), form.version

    async def get_fields(self, event_id: str) -> list[CustomField]:
        fields, _ = await self.get_form(event_id)
        return fields

    async def apply(
        self,
        access: AccessContext,
        operation: str,
        edit: Callable[[list[CustomField]], EditResult],
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        """Run an edit against the stored schema and persist the result.

        Args:
            access: Caller's resolved access; must be admin.
            operation: Name of the edit, used in logs and errors.
            edit: Pure function from the current field list to an EditResult.
            expected_version: Version the caller's edit is based on, or None
                for last-write-wins.

        Returns:
            The persisted field list and its new version.

        Raises:
            PermissionDeniedError: If the caller is not an admin.
            DomainValidationError: If the edit was rejected.
            SchemaVersionConflictError: If expected_version is stale.
            PersistenceError: If the write failed.
        """
        if not access.is_admin:
            raise PermissionDeniedError(operation)

        fields, version = await self.get_form(access.event_id)
        if expected_version is not None and expected_version != version:
            raise SchemaVersionConflictError(expected_version, version)

        result = edit(fields)
        if not result.ok:
            logger.info(
                "Schema edit rejected",
                event_id=access.event_id,
                operation=operation,
                code=result.error.code,
            )
            raise DomainValidationError([result.error])

        return await self.save_fields(access, result.fields, expected_version, operation)

    async def save_fields(
        self,
        access: AccessContext,
        fields: list[CustomField],
        expected_version: int | None = None,
        operation: str = "save fields",
    ) -> tuple[list[CustomField], int]:
        """Replace the whole field list of the event in one write.

        The list is stored as given; callers validate it with
        FieldSchemaEditor first. Publishes the new schema snapshot.

        Raises:
            PermissionDeniedError: If the caller is not an admin.
            EventNotFoundError: If the event does not exist.
            SchemaVersionConflictError: If expected_version is stale.
            PersistenceError: If the write failed.
        """
        if not access.is_admin:
            raise PermissionDeniedError(operation)
        if await self.event_repo.get_by_id(access.event_id) is None:
            raise EventNotFoundError(access.event_id)

        documents = fields_to_documents(fields)
        if expected_version is None:
            await self.form_repo.overwrite(access.event_id, documents)
        elif not await self.form_repo.compare_and_set(access.event_id, documents, expected_version):
            await self.session.rollback()
            _, actual_version = await self.get_form(access.event_id)
            raise SchemaVersionConflictError(expected_version, actual_version)
        await commit_or_raise(self.session, operation, event_id=access.event_id)

        new_fields, new_version = await self.get_form(access.event_id)
        logger.info(
            "Schema updated",
            event_id=access.event_id,
            operation=operation,
            version=new_version,
            field_count=len(new_fields),
        )
        if self.publisher:
            await self.publisher.publish(self.session, access.event_id, TOPIC_SCHEMA)
        return new_fields, new_version

    async def add_field(
        self,
        access: AccessContext,
        label: str,
        field_type: FieldType | str,
        required: bool = False,
        options: Iterable[str] | None = None,
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        """Append a field whose ID was never used by this event's form."""
        form = await self.form_repo.get_by_event_id(access.event_id)
        last_field_id = form.last_field_id if form else 0
        return await self.apply(
            access,
            "add field",
            lambda fields: FieldSchemaEditor.add_field(
                fields,
                label,
                field_type,
                required,
                options,
                id_generator=self.id_generator,
                last_field_id=last_field_id,
            ),
            expected_version,
        )

    async def delete_field(
        self, access: AccessContext, field_id: str, expected_version: int | None = None
    ) -> tuple[list[CustomField], int]:
        return await self.apply(
            access,
            "delete field",
            lambda fields: FieldSchemaEditor.delete_field(fields, field_id),
            expected_version,
        )

    async def move_field(
        self,
        access: AccessContext,
        field_id: str,
        direction: str,
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        return await self.apply(
            access,
            "move field",
            lambda fields: FieldSchemaEditor.move_field(fields, field_id, direction),
            expected_version,
        )

    async def update_field(
        self,
        access: AccessContext,
        field_id: str,
        updates: dict[str, Any],
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        return await self.apply(
            access,
            "update field",
            lambda fields: FieldSchemaEditor.update_field(fields, field_id, updates),
            expected_version,
        )

    async def add_option(
        self,
        access: AccessContext,
        field_id: str,
        value: str,
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        return await self.apply(
            access,
            "add option",
            lambda fields: FieldSchemaEditor.add_option(fields, field_id, value),
            expected_version,
        )

    async def edit_option(
        self,
        access: AccessContext,
        field_id: str,
        option_index: int,
        value: str,
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        return await self.apply(
            access,
            "edit option",
            lambda fields: FieldSchemaEditor.edit_option(fields, field_id, option_index, value),
            expected_version,
        )

    async def delete_option(
        self,
        access: AccessContext,
        field_id: str,
        option_index: int,
        expected_version: int | None = None,
    ) -> tuple[list[CustomField], int]:
        return await self.apply(
            access,
            "delete option",
            lambda fields: FieldSchemaEditor.delete_option(fields, field_id, option_index),
            expected_version,
        )
