"""Comment API routes — public reads, author-only edits."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.api.params import ListParams
from quillboard.auth.dependencies import get_current_user
from quillboard.auth.jwt import Identity
from quillboard.db.engine import get_db
from quillboard.schemas.common import Envelope, ok
from quillboard.schemas.post import CommentCreate, CommentRead, CommentUpdate
from quillboard.services.comment_service import CommentService
from quillboard.services.query import FieldEquals

router = APIRouter(prefix="/comments")


def _svc(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.get("", response_model=Envelope[list[CommentRead]], response_model_exclude_unset=True)
async def list_comments(
    params: ListParams = Depends(),
    post_id: Optional[int] = Query(None, alias="postId"),
    author_id: Optional[int] = Query(None, alias="authorId"),
    svc: CommentService = Depends(_svc),
):
    filters = []
    if post_id is not None:
        filters.append(FieldEquals("postId", post_id))
    if author_id is not None:
        filters.append(FieldEquals("authorId", author_id))

    page = await svc.list_comments(params.to_query(filters))
    return ok([CommentRead.model_validate(c) for c in page.items], pagination=page.pagination)


@router.get("/{comment_id}", response_model=Envelope[CommentRead], response_model_exclude_unset=True)
async def get_comment(comment_id: int, svc: CommentService = Depends(_svc)):
    comment = await svc.get_comment_or_404(comment_id)
    return ok(CommentRead.model_validate(comment))


@router.post(
    "", response_model=Envelope[CommentRead], response_model_exclude_unset=True, status_code=201
)
async def create_comment(
    body: CommentCreate,
    identity: Identity = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    """Comment on an existing post as the caller."""
    comment = await svc.create_comment(identity, post_id=body.post_id, content=body.content)
    return ok(CommentRead.model_validate(comment), message="Comment created")


@router.put("/{comment_id}", response_model=Envelope[CommentRead], response_model_exclude_unset=True)
async def update_comment(
    comment_id: int,
    body: CommentUpdate,
    identity: Identity = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    comment = await svc.update_comment(comment_id, identity, content=body.content)
    return ok(CommentRead.model_validate(comment), message="Comment updated")


@router.delete("/{comment_id}", response_model=Envelope, response_model_exclude_unset=True)
async def delete_comment(
    comment_id: int,
    identity: Identity = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    await svc.delete_comment(comment_id, identity)
    return ok(message="Comment deleted")
