"""Checks shared by the ownership-checked services."""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.auth.jwt import Identity
from quillboard.errors import AuthorizationError, ConstraintViolationError

logger = structlog.get_logger()


def ensure_owner(owner_id: int, identity: Identity, resource: str) -> None:
    """Reject the caller unless they own the record. Runs before any change."""
    if owner_id != identity.id:
        logger.info(
            "ownership.denied",
            resource=resource,
            owner_id=owner_id,
            user_id=identity.id,
        )
        raise AuthorizationError("Forbidden")


async def commit_or_reject(db: AsyncSession) -> None:
    """Commit, turning constraint failures into a typed 400.

    The store's message is logged, never returned: it names tables and
    columns.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("db.constraint_violation", error=str(e.orig))
        raise ConstraintViolationError() from e
