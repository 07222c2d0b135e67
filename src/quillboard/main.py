"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (schema creation, engine
disposal). Middleware, CORS, exception handlers and routers all
registered here; each concern lives in its own module.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quillboard import __version__
from quillboard.api import api_router
from quillboard.api.envelope import register_exception_handlers
from quillboard.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown.
    """
    from quillboard.db.engine import engine, init_models

    logger.info(
        "quillboard.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.auto_create_schema:
        await init_models(engine)
        logger.info("quillboard.schema_created")

    yield

    logger.info("quillboard.shutdown")
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Quillboard",
        description="Blog, comments and task manager API with JWT auth",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → Security → RequestId → handler

    from quillboard.middleware.request_id import RequestIdMiddleware
    from quillboard.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    # Mount API routes
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: quillboard.main:app)
app = create_app()
