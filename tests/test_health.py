"""Health endpoint and error-envelope tests."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quillboard.db.engine import build_engine, get_db
from quillboard.main import app


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status, version and database check."""
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_hides_database_error_text(client):
    """A failing database shows up as degraded without the driver message."""
    broken = build_engine("sqlite+aiosqlite:////nonexistent-quillboard-dir/health.db")
    session_factory = async_sessionmaker(broken, class_=AsyncSession)

    async def broken_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = broken_get_db
    try:
        resp = await client.get("/api/v1/health")
    finally:
        await broken.dispose()

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "degraded"
    assert data["database"] == "unreachable"
    assert "unable to open" not in resp.text
    assert "nonexistent-quillboard-dir" not in resp.text


@pytest.mark.asyncio
async def test_unknown_route_is_enveloped(client):
    resp = await client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Not found"}


@pytest.mark.asyncio
async def test_wrong_method_is_enveloped(client):
    resp = await client.patch("/api/v1/posts/1", json={})
    assert resp.status_code == 405
    assert resp.json() == {"success": False, "error": "Method not allowed"}
