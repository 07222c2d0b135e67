"""User service — accounts, credentials and self-service profile edits.

Registration hashes the password before anything touches the database;
the hash never leaves this layer. Login answers the same "Invalid
credentials" for an unknown email and a wrong password so the endpoint
does not reveal which accounts exist.

Users may only edit or delete themselves.
"""

from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quillboard.auth.jwt import Identity
from quillboard.auth.password import hash_password, verify_password
from quillboard.db.models import Comment, Post, User
from quillboard.errors import AuthenticationError, ConflictError, NotFoundError
from quillboard.services.guards import ensure_owner
from quillboard.services.query import ListQuery, Page, ResourceQuerySpec, paginate

logger = structlog.get_logger()

USER_QUERY_SPEC = ResourceQuerySpec(
    model=User,
    sort_columns={
        "id": User.id,
        "name": User.name,
        "email": User.email,
        "createdAt": User.created_at,
    },
    default_sort="id",
    search_columns=(User.name, User.email),
)

# A user's page shows their posts and comments
USER_LOAD_OPTIONS = (
    selectinload(User.posts).selectinload(Post.category),
    selectinload(User.posts).selectinload(Post.tags),
    selectinload(User.comments).selectinload(Comment.post),
)


class UserService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    # ─── Credentials ─────────────────────────────────────

    async def register(self, email: str, password: str, name: Optional[str] = None) -> User:
        if await self.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(email=email, name=name, password_hash=hash_password(password))
        self.db.add(user)
        await self._commit_unique_email()
        await self.db.refresh(user)
        logger.info("user.registered", user_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("auth.login_failed")
            raise AuthenticationError("Invalid credentials")
        logger.info("auth.login", user_id=user.id)
        return user

    # ─── Read ────────────────────────────────────────────

    async def list_users(self, query: ListQuery) -> Page:
        return await paginate(self.db, USER_QUERY_SPEC, query)

    async def get_user(self, user_id: int, refresh: bool = False) -> Optional[User]:
        q = select(User).where(User.id == user_id).options(*USER_LOAD_OPTIONS)
        if refresh:
            q = q.execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def get_user_or_404(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    # ─── Self-service ────────────────────────────────────

    async def update_user(self, user_id: int, identity: Identity, changes: dict[str, Any]) -> User:
        """Update name, email and/or password. A new password is re-hashed."""
        user = await self.get_user_or_404(user_id)
        ensure_owner(user.id, identity, "user")

        email = changes.get("email")
        if email is not None and email != user.email:
            if await self.get_by_email(email):
                raise ConflictError("User with this email already exists")
            user.email = email
        if "name" in changes:
            user.name = changes["name"]
        if changes.get("password") is not None:
            user.password_hash = hash_password(changes["password"])

        await self._commit_unique_email()
        logger.info("user.updated", user_id=user_id, fields=sorted(changes))
        return await self.get_user(user_id, refresh=True)

    async def delete_user(self, user_id: int, identity: Identity) -> None:
        """Delete the account and everything it owns."""
        user = await self.get_user_or_404(user_id)
        ensure_owner(user.id, identity, "user")

        await self.db.delete(user)
        await self.db.commit()
        logger.info("user.deleted", user_id=user_id)

    async def _commit_unique_email(self) -> None:
        # Two registrations racing past the lookup still hit the unique index;
        # email is the only constraint a user write can break.
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("db.constraint_violation", error=str(e.orig))
            raise ConflictError("User with this email already exists") from e
