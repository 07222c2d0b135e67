"""JWT token creation and verification.

Tokens are stateless and carry the caller's identity: {id, email}, plus
the standard sub/iat/exp claims. One TokenPolicy decides lifetime, secret
and algorithm for the whole process, built from settings.

verify_token() answers "who is this?" and returns None for anything that
is not a valid, unexpired token we signed. Only a missing secret raises,
because that is a server fault rather than a bad credential.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog

from quillboard.config import settings
from quillboard.errors import ConfigurationError

logger = structlog.get_logger()


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, projected from a verified token."""

    id: int
    email: str


@dataclass(frozen=True)
class TokenPolicy:
    ttl: timedelta
    secret: str
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls) -> "TokenPolicy":
        # Read at call time so tests and runtime overrides take effect.
        return cls(
            ttl=timedelta(minutes=settings.access_token_expire_minutes),
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

    def require_secret(self) -> str:
        if not self.secret:
            raise ConfigurationError("JWT secret is not configured")
        return self.secret


def sign(identity: Identity, policy: Optional[TokenPolicy] = None) -> str:
    """Create a signed access token for an identity."""
    policy = policy or TokenPolicy.from_settings()
    secret = policy.require_secret()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(identity.id),
        "id": identity.id,
        "email": identity.email,
        "iat": now,
        "exp": now + policy.ttl,
    }
    return jwt.encode(payload, secret, algorithm=policy.algorithm)


def verify_token(token: str, policy: Optional[TokenPolicy] = None) -> Optional[Identity]:
    """Verify a token and return the identity it carries, or None."""
    policy = policy or TokenPolicy.from_settings()
    secret = policy.require_secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[policy.algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("auth.token_expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("auth.token_invalid", error=str(e))
        return None

    user_id = payload.get("id")
    email = payload.get("email")
    # bool is an int subclass; a token claiming id=true is not ours
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if not isinstance(email, str) or not email:
        return None
    return Identity(id=user_id, email=email)
