import pytest

from donorbase.domain.entities import AccessRole
from donorbase.domain.exceptions import (
    DomainValidationError,
    EventNotFoundError,
    InvalidEventPasswordError,
    PermissionDeniedError,
)
from donorbase.domain.services.donation_service import DonationService
from donorbase.domain.services.event_service import EventService
from donorbase.domain.services.field_schema_service import FieldSchemaService
from donorbase.infrastructure.persistence.repositories import (
    DonationRepository,
    DonorFormRepository,
)


@pytest.mark.asyncio
async def test_create_event_with_empty_form(db_session, event):
    assert event.current_amount == 0
    assert event.total_visitors == 0
    assert event.description == "Annual fundraiser"

    form = await DonorFormRepository(db_session).get_by_event_id(event.id)
    assert form is not None
    assert form.custom_fields() == []
    assert form.version == 0


@pytest.mark.asyncio
async def test_create_rejects_identical_passwords(db_session):
    with pytest.raises(DomainValidationError) as exc_info:
        await EventService(db_session).create("Event", "1111", "1111")
    assert exc_info.value.errors[0].code == "passwords_identical"


@pytest.mark.asyncio
async def test_create_rejects_bad_input(db_session):
    with pytest.raises(DomainValidationError) as exc_info:
        await EventService(db_session).create("", "12", "5678")
    assert [e.code for e in exc_info.value.errors] == ["name_required", "admin_password_invalid"]


@pytest.mark.asyncio
async def test_get_missing_event(db_session):
    with pytest.raises(EventNotFoundError):
        await EventService(db_session).get("missing")


@pytest.mark.asyncio
async def test_list_with_search(db_session, event):
    await EventService(db_session).create("Library Drive", "1111", "2222")

    service = EventService(db_session)
    assert len(await service.list_events()) == 2
    assert [e.name for e in await service.list_events("temple")] == ["Temple Renovation"]


class TestResolveAccess:

    @pytest.mark.asyncio
    async def test_admin_password(self, db_session, event):
        access = await EventService(db_session).resolve_access(event.id, "1234")
        assert access.role == AccessRole.ADMIN
        assert access.is_admin

    @pytest.mark.asyncio
    async def test_visitor_password(self, db_session, event):
        access = await EventService(db_session).resolve_access(event.id, "5678")
        assert access.role == AccessRole.VISITOR
        assert not access.is_admin

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["0000", "", None])
    async def test_wrong_password(self, db_session, event, password):
        with pytest.raises(InvalidEventPasswordError):
            await EventService(db_session).resolve_access(event.id, password)


class TestUpdate:

    @pytest.mark.asyncio
    async def test_admin_updates_details(self, db_session, admin):
        updated = await EventService(db_session).update(
            admin, name="New Name", description="  ", visitor_password="9999"
        )
        assert updated.name == "New Name"
        assert updated.description is None
        assert updated.visitor_password == "9999"
        assert updated.admin_password == "1234"

    @pytest.mark.asyncio
    async def test_visitor_cannot_update(self, db_session, visitor):
        with pytest.raises(PermissionDeniedError):
            await EventService(db_session).update(visitor, name="Hijacked")

    @pytest.mark.asyncio
    async def test_update_cannot_make_passwords_equal(self, db_session, admin):
        with pytest.raises(DomainValidationError):
            await EventService(db_session).update(admin, visitor_password="1234")


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_cascades(self, db_session, event, admin):
        await FieldSchemaService(db_session).add_field(admin, "City", "text")
        donations = DonationService(db_session)
        await donations.create(admin, "Asha", 10)
        await donations.create(admin, "Ravi", 20)

        deleted = await EventService(db_session).delete(admin)

        assert deleted == 2
        assert await DonationRepository(db_session).count_by_event(event.id) == 0
        assert await DonorFormRepository(db_session).get_by_event_id(event.id) is None
        with pytest.raises(EventNotFoundError):
            await EventService(db_session).get(event.id)

    @pytest.mark.asyncio
    async def test_visitor_cannot_delete(self, db_session, visitor):
        with pytest.raises(PermissionDeniedError):
            await EventService(db_session).delete(visitor)
