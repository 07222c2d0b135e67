"""User API routes — public profiles, self-service edits."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.api.params import ListParams
from quillboard.auth.dependencies import get_current_user
from quillboard.auth.jwt import Identity
from quillboard.config import settings
from quillboard.db.engine import get_db
from quillboard.schemas.common import Envelope, ok
from quillboard.schemas.user import UserDetail, UserRead, UserUpdate
from quillboard.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=Envelope[list[UserRead]], response_model_exclude_unset=True)
async def list_users(params: ListParams = Depends(), svc: UserService = Depends(_svc)):
    """List users; search matches name or email."""
    page = await svc.list_users(params.to_query())
    return ok([UserRead.model_validate(u) for u in page.items], pagination=page.pagination)


@router.get("/{user_id}", response_model=Envelope[UserDetail], response_model_exclude_unset=True)
async def get_user(user_id: int, svc: UserService = Depends(_svc)):
    """A user with their posts and comments."""
    user = await svc.get_user_or_404(user_id)
    return ok(UserDetail.model_validate(user))


@router.put("/{user_id}", response_model=Envelope[UserDetail], response_model_exclude_unset=True)
async def update_user(
    user_id: int,
    body: UserUpdate,
    identity: Identity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Update your own name, email or password."""
    user = await svc.update_user(user_id, identity, body.model_dump(exclude_unset=True))
    return ok(UserDetail.model_validate(user), message="User updated")


@router.delete("/{user_id}", response_model=Envelope, response_model_exclude_unset=True)
async def delete_user(
    user_id: int,
    response: Response,
    identity: Identity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Delete your own account along with everything you own."""
    await svc.delete_user(user_id, identity)
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return ok(message="User deleted")
