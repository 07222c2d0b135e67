"""Pydantic schemas for users and auth payloads.

Learn: No read schema here has a password field, so a User row can be
passed to any of them without leaking the hash. Input schemas accept the
password; output schemas cannot carry it.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from quillboard.schemas.common import CamelModel
from quillboard.schemas.taxonomy import CategoryRead, TagRead

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


# ─── Input ───────────────────────────────────────────────


class RegisterRequest(CamelModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class LoginRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Partial update; only the fields present in the body are applied."""
    email: Optional[str] = Field(None, max_length=255)
    name: Optional[str] = Field(None, max_length=100)
    password: Optional[str] = Field(None, min_length=8)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_email(value)


# ─── Output ──────────────────────────────────────────────


class UserSummary(CamelModel):
    """Embedded wherever a record shows its owner."""
    id: int
    email: str
    name: Optional[str]


class UserRead(UserSummary):
    created_at: datetime


class UserPostRead(CamelModel):
    id: int
    title: str
    published: bool
    category: Optional[CategoryRead]
    tags: list[TagRead]
    created_at: datetime


class UserCommentRead(CamelModel):
    id: int
    content: str
    post_id: int
    created_at: datetime


class UserDetail(UserRead):
    posts: list[UserPostRead]
    comments: list[UserCommentRead]


class AuthData(CamelModel):
    user: UserRead
    access_token: str


class LogoutData(CamelModel):
    user_id: int
    user_email: str
    logout_time: datetime
