import pytest
from httpx import AsyncClient

from campus_events.core.config import settings


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["appName"] == settings.APP_NAME


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"


@pytest.mark.asyncio
async def test_request_id_and_security_headers(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc12345"})

    assert response.headers["X-Request-ID"] == "abc12345"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Response-Time" in response.headers


@pytest.mark.asyncio
async def test_unknown_route_uses_message_body(client: AsyncClient):
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


@pytest.mark.asyncio
async def test_startup_rejects_placeholder_secret(monkeypatch):
    from campus_events.main import validate_critical_config

    monkeypatch.setattr(settings, "JWT_SECRET_KEY", "CHANGE_ME")

    with pytest.raises(RuntimeError):
        await validate_critical_config()
