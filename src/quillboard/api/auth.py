"""Auth API — registration, login, logout and the current user.

Learn: Routes for the credential lifecycle:
- POST /auth/register → create an account, answer with a token
- POST /auth/login → email/password → token
- POST /auth/logout → clear the auth cookie (tokens stay valid until expiry)
- GET /auth/me → current user info

Register and login return the token in the body and also set it as an
HttpOnly cookie, so browser clients can skip the Authorization header.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.auth.dependencies import get_current_user
from quillboard.auth.jwt import Identity, TokenPolicy, sign
from quillboard.config import settings
from quillboard.db.engine import get_db
from quillboard.db.models import User
from quillboard.schemas.common import Envelope, ok
from quillboard.schemas.user import AuthData, LoginRequest, LogoutData, RegisterRequest, UserRead
from quillboard.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def _issue_token(user: User, response: Response) -> str:
    """Sign a token for the user and drop it into the auth cookie."""
    policy = TokenPolicy.from_settings()
    token = sign(Identity(id=user.id, email=user.email), policy)
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        max_age=int(policy.ttl.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.environment != "development",
        path="/",
    )
    return token


# ─── Register ────────────────────────────────────────────


@router.post(
    "/register", response_model=Envelope[AuthData], response_model_exclude_unset=True, status_code=201
)
async def register(body: RegisterRequest, response: Response, svc: UserService = Depends(_svc)):
    """Create a new user account."""
    user = await svc.register(email=body.email, password=body.password, name=body.name)
    token = _issue_token(user, response)
    return ok(
        AuthData(user=UserRead.model_validate(user), access_token=token),
        message="User registered successfully",
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=Envelope[AuthData], response_model_exclude_unset=True)
async def login(body: LoginRequest, response: Response, svc: UserService = Depends(_svc)):
    """Login with email and password → JWT."""
    user = await svc.authenticate(body.email, body.password)
    token = _issue_token(user, response)
    return ok(
        AuthData(user=UserRead.model_validate(user), access_token=token),
        message="Login successful",
    )


# ─── Logout ──────────────────────────────────────────────


@router.post("/logout", response_model=Envelope[LogoutData], response_model_exclude_unset=True)
async def logout(response: Response, identity: Identity = Depends(get_current_user)):
    """Clear the auth cookie. Stateless tokens are not revoked."""
    response.delete_cookie(settings.auth_cookie_name, path="/")
    logger.info("auth.logout", user_id=identity.id)
    return ok(
        LogoutData(
            user_id=identity.id,
            user_email=identity.email,
            logout_time=datetime.now(timezone.utc),
        ),
        message="Logout successful",
    )


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=Envelope[UserRead], response_model_exclude_unset=True)
async def get_me(
    identity: Identity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Get the current authenticated user's info."""
    user = await svc.get_user_or_404(identity.id)
    return ok(UserRead.model_validate(user))
