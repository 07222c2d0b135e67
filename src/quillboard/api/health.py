"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running
and the database answers. It runs through the same session dependency
as every other route, so it checks the store the app actually uses.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard import __version__
from quillboard.db.engine import get_db

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        logger.warning("health.database_unreachable", error=str(e))
        checks["database"] = "unreachable"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"success": True, "data": {"status": status, **checks}}
