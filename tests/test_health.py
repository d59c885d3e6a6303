"""Tests for unversioned health endpoints."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /health returns 200 with service name and cache state."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "account-service"
    assert data["cache"] == "ok"


async def test_health_reports_unavailable_cache(client: AsyncClient, fake_cache) -> None:
    """Cache outage is reported, not raised."""
    fake_cache.available = False
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["cache"] == "unavailable"


async def test_ping(client: AsyncClient) -> None:
    response = await client.get("/ping")
    assert response.status_code == 200
    assert response.json() == {"message": "pong"}


async def test_unknown_route_uses_failure_envelope(client: AsyncClient) -> None:
    response = await client.get("/nope")
    assert response.status_code == 404
    assert response.json()["code"] == 404
