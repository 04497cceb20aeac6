"""Health check endpoint tests."""

import pytest
from httpx import AsyncClient

import portal.api.v1.health as health_mod
from portal.core.config import settings


@pytest.mark.asyncio
async def test_health_returns_ok(client: AsyncClient):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data == {"status": "ok", "db": "ok", "identity": "mock", "version": "0.1.0"}
    assert "X-Request-Id" in response.headers


@pytest.mark.asyncio
async def test_health_degraded_when_jwks_unreachable(client: AsyncClient, monkeypatch):
    async def _unreachable() -> dict:
        raise OSError("connection refused")

    monkeypatch.setattr(settings, "COGNITO_MOCK", False)
    monkeypatch.setattr(health_mod, "get_jwks", _unreachable)

    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["identity"] == "error"
    assert response.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_health_checks_jwks_keys(client: AsyncClient, monkeypatch):
    async def _keys() -> dict:
        return {"keys": [{"kid": "k1"}]}

    monkeypatch.setattr(settings, "COGNITO_MOCK", False)
    monkeypatch.setattr(health_mod, "get_jwks", _keys)

    response = await client.get("/api/v1/health")
    assert response.json()["identity"] == "ok"
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/v1/health", headers={"X-Request-Id": "req-123"})
    assert response.headers["X-Request-Id"] == "req-123"
