from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from donorbase.domain.exceptions import (
    DomainValidationError,
    EventNotFoundError,
    PermissionDeniedError,
    PersistenceError,
    SchemaVersionConflictError,
)
from donorbase.domain.entities import AccessContext, AccessRole
from donorbase.domain.services.field_id_generator import FieldIdGenerator
from donorbase.domain.services.field_schema_service import FieldSchemaService


@pytest.mark.asyncio
async def test_add_and_read_back(db_session, admin):
    service = FieldSchemaService(db_session)

    fields, version = await service.add_field(admin, "City", "text", required=True)
    assert version == 1
    assert fields[0].label == "City"

    stored, stored_version = await service.get_form(admin.event_id)
    assert stored == fields
    assert stored_version == 1


@pytest.mark.asyncio
async def test_full_edit_sequence(db_session, admin):
    service = FieldSchemaService(db_session)
    await service.add_field(admin, "City", "text")
    fields, _ = await service.add_field(admin, "Mode", "selector", options=["Cash", "UPI"])
    mode_id = fields[1].id

    await service.move_field(admin, mode_id, "up")
    await service.add_option(admin, mode_id, "Card")
    await service.edit_option(admin, mode_id, 0, "Cash in hand")
    await service.delete_option(admin, mode_id, 1)
    fields, version = await service.update_field(admin, mode_id, {"label": "Payment"})

    assert version == 7
    assert [f.label for f in fields] == ["Payment", "City"]
    assert [f.order for f in fields] == [0, 1]
    assert fields[0].options == ("Cash in hand", "Card")


@pytest.mark.asyncio
async def test_deleted_field_id_not_reused_within_same_millisecond(db_session, admin):
    service = FieldSchemaService(db_session, id_generator=FieldIdGenerator(clock=lambda: 1.0))
    await service.add_field(admin, "City", "text")
    fields, _ = await service.add_field(admin, "Gotra", "text")
    deleted_id = fields[-1].id

    await service.delete_field(admin, deleted_id)
    fields, _ = await service.add_field(admin, "Village", "text")

    assert [f.id for f in fields] == ["1000", "1002"]
    assert deleted_id == "1001"


@pytest.mark.asyncio
async def test_rejected_edit_leaves_store_unchanged(db_session, admin):
    service = FieldSchemaService(db_session)
    await service.add_field(admin, "City", "text")

    with pytest.raises(DomainValidationError) as exc_info:
        await service.add_field(admin, "Mode", "radio", options=[])

    assert exc_info.value.errors[0].code == "empty_option_set"
    fields, version = await service.get_form(admin.event_id)
    assert len(fields) == 1
    assert version == 1


@pytest.mark.asyncio
async def test_visitor_cannot_edit(db_session, visitor):
    with pytest.raises(PermissionDeniedError):
        await FieldSchemaService(db_session).add_field(visitor, "City", "text")


@pytest.mark.asyncio
async def test_unknown_event(db_session):
    access = AccessContext(event_id="missing", role=AccessRole.ADMIN)
    with pytest.raises(EventNotFoundError):
        await FieldSchemaService(db_session).add_field(access, "City", "text")


class TestExpectedVersion:

    @pytest.mark.asyncio
    async def test_matching_version_writes(self, db_session, admin):
        service = FieldSchemaService(db_session)
        _, version = await service.add_field(admin, "City", "text", expected_version=0)
        assert version == 1

    @pytest.mark.asyncio
    async def test_stale_version_rejected(self, db_session, admin):
        service = FieldSchemaService(db_session)
        await service.add_field(admin, "City", "text")

        with pytest.raises(SchemaVersionConflictError) as exc_info:
            await service.add_field(admin, "Mode", "text", expected_version=0)

        assert exc_info.value.actual_version == 1
        fields, _ = await service.get_form(admin.event_id)
        assert [f.label for f in fields] == ["City"]

    @pytest.mark.asyncio
    async def test_last_write_wins_without_version(self, db_session, admin):
        service = FieldSchemaService(db_session)
        await service.add_field(admin, "City", "text")
        _, version = await service.add_field(admin, "Mode", "text")
        assert version == 2


@pytest.mark.asyncio
async def test_commit_failure_raises_persistence_error(db_session, admin):
    service = FieldSchemaService(db_session)
    failure = OperationalError("COMMIT", {}, Exception("disk I/O error"))

    with patch.object(db_session, "commit", AsyncMock(side_effect=failure)):
        with pytest.raises(PersistenceError):
            await service.add_field(admin, "City", "text")


class TestSaveFields:

    @pytest.mark.asyncio
    async def test_replaces_whole_list(self, db_session, admin, sample_schema, hub, publisher):
        subscription = hub.subscribe(f"events/{admin.event_id}/schema")
        service = FieldSchemaService(db_session, publisher)

        fields, version = await service.save_fields(admin, sample_schema)

        assert version == 1
        assert [f.label for f in fields] == ["City", "Payment Mode", "Member"]
        snapshot = await subscription.next(timeout=1)
        assert snapshot["data"]["version"] == 1
        assert len(snapshot["data"]["fields"]) == 3

    @pytest.mark.asyncio
    async def test_stale_version(self, db_session, admin, sample_schema):
        service = FieldSchemaService(db_session)
        await service.save_fields(admin, sample_schema)

        with pytest.raises(SchemaVersionConflictError):
            await service.save_fields(admin, sample_schema[:1], expected_version=0)

    @pytest.mark.asyncio
    async def test_visitor_rejected(self, db_session, visitor, sample_schema):
        with pytest.raises(PermissionDeniedError):
            await FieldSchemaService(db_session).save_fields(visitor, sample_schema)
