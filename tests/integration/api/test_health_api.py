from unittest.mock import AsyncMock, patch

import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Correlation-ID"].startswith("cid_")


@pytest.mark.asyncio
async def test_correlation_id_echoed(client):
    response = await client.get("/api/v1", headers={"X-Correlation-ID": "cid_fixed"})
    assert response.headers["X-Correlation-ID"] == "cid_fixed"


@pytest.mark.asyncio
async def test_ready_reports_database_down(client):
    with patch(
        "donorbase.infrastructure.api.app.get_db_manager",
    ) as get_manager:
        get_manager.return_value.check_connection = AsyncMock(return_value=False)
        response = await client.get("/ready")

    assert response.status_code == 503
    assert response.json()["database"] == "disconnected"
