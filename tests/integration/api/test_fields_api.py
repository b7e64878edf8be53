"""Integration tests for the custom field schema API."""

import pytest


def fields_url(event_id: str) -> str:
    return f"/api/v1/events/{event_id}/fields"


@pytest.mark.asyncio
async def test_schema_starts_empty(client, event, visitor_headers):
    response = await client.get(fields_url(event.id), headers=visitor_headers)

    assert response.status_code == 200
    assert response.json() == {"eventId": event.id, "version": 0, "fields": []}


@pytest.mark.asyncio
async def test_add_field(client, event, admin_headers):
    response = await client.post(
        fields_url(event.id),
        json={"label": "Mode", "fieldType": "Selector", "options": ["Cash", "UPI"]},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["version"] == 1
    field = body["fields"][0]
    assert field["fieldType"] == "selector"
    assert field["options"] == ["Cash", "UPI"]
    assert field["order"] == 0


@pytest.mark.asyncio
async def test_visitor_cannot_edit(client, event, visitor_headers):
    response = await client.post(
        fields_url(event.id),
        json={"label": "City", "fieldType": "text"},
        headers=visitor_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_editor_errors_are_400(client, event, admin_headers):
    response = await client.post(
        fields_url(event.id),
        json={"label": "  ", "fieldType": "text"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["code"] == "empty_label"


@pytest.mark.asyncio
async def test_move_options_and_delete(client, event, admin_headers):
    url = fields_url(event.id)
    await client.post(url, json={"label": "City", "fieldType": "text"}, headers=admin_headers)
    added = await client.post(
        url,
        json={"label": "Member", "fieldType": "radio", "options": ["Yes"]},
        headers=admin_headers,
    )
    member_id = added.json()["fields"][1]["id"]

    moved = await client.post(
        f"{url}/{member_id}/move", json={"direction": "up"}, headers=admin_headers
    )
    assert [f["label"] for f in moved.json()["fields"]] == ["Member", "City"]

    with_option = await client.post(
        f"{url}/{member_id}/options", json={"value": "No"}, headers=admin_headers
    )
    assert with_option.json()["fields"][0]["options"] == ["Yes", "No"]

    edited = await client.put(
        f"{url}/{member_id}/options/1", json={"value": "Not yet"}, headers=admin_headers
    )
    assert edited.json()["fields"][0]["options"] == ["Yes", "Not yet"]

    removed_option = await client.delete(f"{url}/{member_id}/options/0", headers=admin_headers)
    assert removed_option.json()["fields"][0]["options"] == ["Not yet"]

    updated = await client.patch(
        f"{url}/{member_id}", json={"updates": {"required": True}}, headers=admin_headers
    )
    assert updated.json()["fields"][0]["required"] is True

    deleted = await client.delete(f"{url}/{member_id}", headers=admin_headers)
    body = deleted.json()
    assert [f["label"] for f in body["fields"]] == ["City"]
    assert body["fields"][0]["order"] == 0
    assert body["version"] == 8


@pytest.mark.asyncio
async def test_stale_expected_version_is_409(client, event, admin_headers):
    url = fields_url(event.id)
    await client.post(url, json={"label": "City", "fieldType": "text"}, headers=admin_headers)

    response = await client.post(
        url,
        json={"label": "Mode", "fieldType": "text", "expectedVersion": 0},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["actualVersion"] == 1


@pytest.mark.asyncio
async def test_expected_version_on_delete_query(client, event, admin_headers):
    url = fields_url(event.id)
    added = await client.post(
        url, json={"label": "City", "fieldType": "text"}, headers=admin_headers
    )
    field_id = added.json()["fields"][0]["id"]

    response = await client.delete(
        f"{url}/{field_id}", params={"expectedVersion": 1}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["version"] == 2
