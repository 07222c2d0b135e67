"""Post API routes.

Learn: Routes only translate HTTP to service calls. Reads are public;
create/update/delete take the caller's Identity from the auth gate
dependency, and the service decides whether that caller may touch the row.
Errors are raised, never returned; the app's handlers build the envelope.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.api.params import ListParams, split_tags
from quillboard.auth.dependencies import get_current_user
from quillboard.auth.jwt import Identity
from quillboard.db.engine import get_db
from quillboard.schemas.common import Envelope, ok
from quillboard.schemas.post import PostCreate, PostRead, PostUpdate
from quillboard.services.post_service import PostService
from quillboard.services.query import CategoryIs, FieldEquals, FlagIs, HasAnyTag

router = APIRouter(prefix="/posts")


def _svc(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


@router.get("", response_model=Envelope[list[PostRead]], response_model_exclude_unset=True)
async def list_posts(
    params: ListParams = Depends(),
    category: Optional[str] = Query(None, description="Category name"),
    tags: Optional[list[str]] = Query(None, description="Comma-separated or repeated"),
    published: Optional[bool] = Query(None),
    author_id: Optional[int] = Query(None, alias="authorId"),
    svc: PostService = Depends(_svc),
):
    """List posts with search, filters, sorting and pagination."""
    filters = []
    if category:
        filters.append(CategoryIs(category))
    tag_names = split_tags(tags)
    if tag_names:
        filters.append(HasAnyTag(tag_names))
    if published is not None:
        filters.append(FlagIs("published", published))
    if author_id is not None:
        filters.append(FieldEquals("authorId", author_id))

    page = await svc.list_posts(params.to_query(filters))
    return ok([PostRead.model_validate(p) for p in page.items], pagination=page.pagination)


@router.get("/{post_id}", response_model=Envelope[PostRead], response_model_exclude_unset=True)
async def get_post(post_id: int, svc: PostService = Depends(_svc)):
    post = await svc.get_post_or_404(post_id)
    return ok(PostRead.model_validate(post))


@router.post(
    "", response_model=Envelope[PostRead], response_model_exclude_unset=True, status_code=201
)
async def create_post(
    body: PostCreate,
    identity: Identity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    """Create a post authored by the caller."""
    post = await svc.create_post(
        identity,
        title=body.title,
        content=body.content,
        published=body.published,
        category=body.category,
        tags=body.tags,
    )
    return ok(PostRead.model_validate(post), message="Post created")


@router.put("/{post_id}", response_model=Envelope[PostRead], response_model_exclude_unset=True)
async def update_post(
    post_id: int,
    body: PostUpdate,
    identity: Identity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    """Partially update a post. Author only."""
    post = await svc.update_post(post_id, identity, body.model_dump(exclude_unset=True))
    return ok(PostRead.model_validate(post), message="Post updated")


@router.delete("/{post_id}", response_model=Envelope, response_model_exclude_unset=True)
async def delete_post(
    post_id: int,
    identity: Identity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    """Delete a post and its comments. Author only."""
    await svc.delete_post(post_id, identity)
    return ok(message="Post deleted")
