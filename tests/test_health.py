"""
Tests for the health endpoints
"""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.mark.asyncio
async def test_health_reports_database(client):
    with patch("taskhub.api.v1.endpoints.health.check_database_health", new=AsyncMock(return_value=True)):
        response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["service"] == "taskhub-api"
    assert body["checks"]["database"] == {"status": "healthy"}


@pytest.mark.asyncio
async def test_health_unhealthy_database(client):
    with patch("taskhub.api.v1.endpoints.health.check_database_health", new=AsyncMock(return_value=False)):
        response = await client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_liveness(client):
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json()["status"] == "alive"
