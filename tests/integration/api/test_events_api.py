"""Integration tests for the events API."""

import pytest
from httpx import AsyncClient

EVENTS_URL = "/api/v1/events"


async def create_event(client: AsyncClient, name="Temple Renovation", admin="1234", visitor="5678"):
    response = await client.post(
        EVENTS_URL,
        json={"name": name, "adminPassword": admin, "visitorPassword": visitor},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_event(client):
    created = await create_event(client)

    assert created["currentAmount"] == 0
    assert created["totalVisitors"] == 0
    assert "adminPassword" not in created

    response = await client.get(f"{EVENTS_URL}/{created['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Temple Renovation"


@pytest.mark.asyncio
async def test_create_validation_errors(client):
    response = await client.post(
        EVENTS_URL,
        json={"name": "X", "adminPassword": "1111", "visitorPassword": "1111"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert body["details"][0]["code"] == "passwords_identical"


@pytest.mark.asyncio
async def test_list_events_never_exposes_passwords(client):
    await create_event(client, name="First")
    await create_event(client, name="Second")

    response = await client.get(EVENTS_URL)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert all("visitorPassword" not in item for item in body["items"])


@pytest.mark.asyncio
async def test_get_unknown_event(client):
    response = await client.get(f"{EVENTS_URL}/missing")
    assert response.status_code == 404
    assert response.json()["error"] == "Not found"


class TestAccess:

    @pytest.mark.asyncio
    async def test_roles(self, client):
        event = await create_event(client)
        url = f"{EVENTS_URL}/{event['id']}/access"

        admin = await client.post(url, json={"password": "1234"})
        visitor = await client.post(url, json={"password": "5678"})
        wrong = await client.post(url, json={"password": "0000"})

        assert admin.json()["role"] == "admin"
        assert visitor.json()["role"] == "visitor"
        assert wrong.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_header(self, client):
        event = await create_event(client)
        response = await client.patch(f"{EVENTS_URL}/{event['id']}", json={"name": "X"})
        assert response.status_code == 401


class TestUpdateDelete:

    @pytest.mark.asyncio
    async def test_admin_update(self, client, admin_headers):
        event = await create_event(client)
        response = await client.patch(
            f"{EVENTS_URL}/{event['id']}",
            json={"description": "Updated"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["description"] == "Updated"

    @pytest.mark.asyncio
    async def test_visitor_update_forbidden(self, client, visitor_headers):
        event = await create_event(client)
        response = await client.patch(
            f"{EVENTS_URL}/{event['id']}",
            json={"name": "Hijacked"},
            headers=visitor_headers,
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_delete(self, client, admin_headers):
        event = await create_event(client)
        await client.post(
            f"{EVENTS_URL}/{event['id']}/donations",
            json={"donorName": "Asha", "amount": 10},
            headers=admin_headers,
        )

        response = await client.delete(f"{EVENTS_URL}/{event['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"eventId": event["id"], "deletedDonations": 1}
        assert (await client.get(f"{EVENTS_URL}/{event['id']}")).status_code == 404
