"""Async SQLAlchemy engine and session factory.

SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via
FastAPI. Handlers never reach for a global session: they receive one from
get_db(), which tests override with an in-memory SQLite engine.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from quillboard.config import settings


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an engine, applying per-dialect pool and pragma settings."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_async_engine(url, echo=settings.debug, **kwargs)

        # SQLite ignores foreign keys unless asked per connection.
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    # Connection pool: 5 steady, up to 20 under load.
    kwargs.setdefault("pool_size", 5)
    kwargs.setdefault("max_overflow", 15)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=settings.debug, **kwargs)


engine = build_engine(settings.database_url)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create all tables from the ORM metadata (no migrations)."""
    from quillboard.db.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_models(bind: AsyncEngine = engine) -> None:
    from quillboard.db.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
