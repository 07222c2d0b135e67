"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Reads are public and writes are not, inside the same router, so
auth is applied per route (Depends(get_current_user) on each mutating
handler) rather than at the include_router level.
"""

from fastapi import APIRouter

from quillboard.api.auth import router as auth_router
from quillboard.api.comments import router as comments_router
from quillboard.api.health import router as health_router
from quillboard.api.posts import router as posts_router
from quillboard.api.tasks import router as tasks_router
from quillboard.api.taxonomy import categories_router, tags_router
from quillboard.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(posts_router, tags=["posts"])
api_router.include_router(comments_router, tags=["comments"])
api_router.include_router(tasks_router, tags=["tasks"])
api_router.include_router(categories_router, tags=["categories"])
api_router.include_router(tags_router, tags=["tags"])
