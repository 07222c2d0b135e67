"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI + aiosqlite:

1. Each test gets its own engine on "sqlite+aiosqlite://" with StaticPool,
   so every session in the test shares the one in-memory connection.
2. Tables are created from the ORM metadata; nothing survives the test.
3. get_db is overridden to hand each request its own session from that
   engine, the same one-session-per-request shape as production.
4. Auth is NOT overridden: tests register real users and send real
   tokens through the real gate.
"""

import os

# Settings are read at import time; pin test values before importing the app.
os.environ.setdefault("QUILLBOARD_JWT_SECRET", "test-secret-key-not-for-production")
os.environ.setdefault("QUILLBOARD_BCRYPT_ROUNDS", "4")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from quillboard.db.engine import build_engine, get_db, init_models
from quillboard.main import app

TEST_DB_URL = "sqlite+aiosqlite://"
DEFAULT_PASSWORD = "password123"


@pytest_asyncio.fixture()
async def engine():
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(engine):
    """Session for tests that drive services directly."""
    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture()
async def client(engine):
    """HTTP client with get_db bound to the test engine."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def make_user(client):
    """Factory: register a user and return {id, email, token, headers}.

    The auth cookie set by /register is dropped so later requests are
    anonymous unless they pass the returned headers.
    """

    async def _make(email: str, name: str = None, password: str = DEFAULT_PASSWORD) -> dict:
        r = await client.post(
            "/api/v1/auth/register",
            json={"email": email, "name": name, "password": password},
        )
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        client.cookies.clear()
        token = data["accessToken"]
        return {
            "id": data["user"]["id"],
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest_asyncio.fixture()
async def alice(make_user):
    return await make_user("alice@example.com", "Alice Johnson")


@pytest_asyncio.fixture()
async def bob(make_user):
    return await make_user("bob@example.com", "Bob Smith")
