import pytest

from donorbase.domain.services.donation_service import DonationService
from donorbase.domain.services.field_schema_service import FieldSchemaService
from donorbase.infrastructure.realtime.snapshot_hub import topic_for


@pytest.mark.asyncio
async def test_build_event_snapshot(db_session, publisher, event):
    snapshot = await publisher.build_snapshot(db_session, event.id, "event")

    assert snapshot["type"] == "event.snapshot"
    assert snapshot["data"]["name"] == "Temple Renovation"
    assert "adminPassword" not in snapshot["data"]


@pytest.mark.asyncio
async def test_build_snapshot_of_missing_event(db_session, publisher):
    snapshot = await publisher.build_snapshot(db_session, "missing", "event")
    assert snapshot["data"] is None


@pytest.mark.asyncio
async def test_schema_edit_publishes_full_schema(db_session, hub, publisher, admin):
    subscription = hub.subscribe(topic_for(admin.event_id, "schema"))
    service = FieldSchemaService(db_session, publisher)

    await service.add_field(admin, "City", "text")
    await service.add_field(admin, "Mode", "radio", options=["Cash", "UPI"])

    snapshot = await subscription.next(timeout=1)
    assert snapshot["type"] == "schema.snapshot"
    assert snapshot["data"]["version"] == 2
    assert [f["label"] for f in snapshot["data"]["fields"]] == ["City", "Mode"]


@pytest.mark.asyncio
async def test_donation_publishes_donations_and_event(db_session, hub, publisher, admin):
    donations = hub.subscribe(topic_for(admin.event_id, "donations"))
    event_topic = hub.subscribe(topic_for(admin.event_id, "event"))

    await DonationService(db_session, publisher).create(admin, "Asha", 250)

    donations_snapshot = await donations.next(timeout=1)
    event_snapshot = await event_topic.next(timeout=1)
    assert [d["donorName"] for d in donations_snapshot["data"]] == ["Asha"]
    assert event_snapshot["data"]["currentAmount"] == 250
    assert event_snapshot["data"]["totalVisitors"] == 1


@pytest.mark.asyncio
async def test_nothing_built_without_subscribers(db_session, hub, publisher, event, monkeypatch):
    async def fail(*args, **kwargs):
        raise AssertionError("snapshot should not be built")

    monkeypatch.setattr(publisher, "build_snapshot", fail)
    await publisher.publish(db_session, event.id, "event", "schema")


@pytest.mark.asyncio
async def test_build_failure_is_logged_not_raised(db_session, hub, publisher, event, monkeypatch):
    hub.subscribe(topic_for(event.id, "event"))

    async def fail(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(publisher, "build_snapshot", fail)
    await publisher.publish(db_session, event.id, "event")
