"""Integration tests for the SSE snapshot endpoint.

Only request validation is exercised here; streaming delivery is covered by
the snapshot hub and publisher unit tests.
"""

import pytest


def sse_url(event_id: str, topic: str) -> str:
    return f"/api/v1/realtime/events/{event_id}/{topic}"


@pytest.mark.asyncio
async def test_unknown_topic(client, event, admin_headers):
    response = await client.get(sse_url(event.id, "comments"), headers=admin_headers)

    assert response.status_code == 400
    assert "Valid topics" in response.json()["detail"]


@pytest.mark.asyncio
async def test_invalid_password(client, event):
    response = await client.get(
        sse_url(event.id, "donations"), headers={"X-Event-Password": "0000"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_missing_password(client, event):
    response = await client.get(sse_url(event.id, "schema"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_event(client):
    response = await client.get(sse_url("missing", "event"), params={"password": "1234"})
    assert response.status_code == 404
