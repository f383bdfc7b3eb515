"""
Tests de la aplicación: raíz, health, CORS, configuración y errores inesperados
"""
import pytest
from httpx import AsyncClient, ASGITransport

from petmatch.config import ConfigurationError, Settings
from petmatch.db import connect, get_db
from petmatch.main import app


@pytest.mark.asyncio
async def test_root_is_plain_text(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.startswith("PetMatch Backend is running")


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_cors_allows_any_origin(client):
    r = await client.get("/tags", headers={"Origin": "https://shelter.example"})
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_unexpected_error_is_500():
    class BrokenDatastore:
        def table(self, name):
            raise RuntimeError("boom")

    app.dependency_overrides[get_db] = lambda: BrokenDatastore()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            r = await ac.get("/tags")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


def test_missing_credentials_abort_startup():
    settings = Settings(mongodb_uri="", mongodb_service_key="")
    with pytest.raises(ConfigurationError) as exc:
        connect(settings)
    assert "MONGODB_URI" in str(exc.value)
    assert "MONGODB_SERVICE_KEY" in str(exc.value)


def test_missing_service_key_only():
    settings = Settings(mongodb_uri="mongodb://localhost:27017", mongodb_service_key="")
    with pytest.raises(ConfigurationError, match="MONGODB_SERVICE_KEY"):
        settings.require_datastore()


@pytest.mark.asyncio
async def test_requests_are_logged(client, caplog):
    with caplog.at_level("INFO", logger="petmatch.access"):
        await client.get("/tags")
    assert any("GET /tags -> 200" in m for m in caplog.messages)
