"""Password hashing utilities.

Uses bcrypt for secure password hashing. bcrypt automatically handles
salting and is resistant to rainbow table attacks. The work factor comes
from QUILLBOARD_BCRYPT_ROUNDS (12 by default, ~100ms per hash on modern
hardware); the test suite lowers it to keep registrations fast.
"""

from typing import Optional

import bcrypt

from quillboard.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt.

    bcrypt produces hashes starting with "$2b$". Passwords are truncated
    to 72 bytes (bcrypt's limit).
    """
    if not password:
        raise ValueError("Password is empty")
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash. Never raises."""
    if not password or not password_hash:
        return False
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
