"""FastAPI auth dependencies — the request gate.

Used as Depends() in mutating route handlers. The gate has two outcomes
per request: it either yields an Identity or rejects before the handler
(and therefore before any write) runs.

Token lookup order:
1. Authorization: Bearer <token>
2. the authToken cookie (name configurable)
"""

from typing import Optional

import structlog
from fastapi import Request

from quillboard.auth.jwt import Identity, verify_token
from quillboard.config import settings
from quillboard.errors import AuthenticationError, InternalError

logger = structlog.get_logger()


def extract_token(request: Request) -> Optional[str]:
    """Return the bearer token from the header, else from the auth cookie."""
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()
        if token:
            return token
    return request.cookies.get(settings.auth_cookie_name) or None


def _resolve(token: str) -> Optional[Identity]:
    try:
        return verify_token(token)
    except Exception as e:
        # Misconfiguration or a library fault: a server problem, not a bad token.
        logger.exception("auth.gate_failed", error_type=type(e).__name__)
        raise InternalError("Authentication failed") from e


async def get_current_user_optional(request: Request) -> Optional[Identity]:
    """Soft gate: the caller's identity, or None when no valid token is sent."""
    token = extract_token(request)
    if not token:
        return None
    return _resolve(token)


async def get_current_user(request: Request) -> Identity:
    """Hard gate: 401 unless the request carries a valid token."""
    token = extract_token(request)
    if not token:
        logger.info("auth.rejected", reason="missing_token", path=request.url.path)
        raise AuthenticationError("Authentication required")

    identity = _resolve(token)
    if identity is None:
        logger.info("auth.rejected", reason="invalid_token", path=request.url.path)
        raise AuthenticationError("Invalid or expired token")

    request.state.identity = identity
    return identity
