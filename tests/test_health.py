"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status and version."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_without_redis_is_still_healthy(client):
    """Redis only backs rate limiting; its absence doesn't degrade health."""
    data = (await client.get("/api/health")).json()
    assert data["redis"].startswith("unavailable")
    assert data["status"] == "healthy"
