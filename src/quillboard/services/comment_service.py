"""Comment service — comments on posts.

A comment belongs to one post and one author. Creating one requires the
post to exist; editing or deleting one requires being its author.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quillboard.auth.jwt import Identity
from quillboard.db.models import Comment, Post
from quillboard.errors import NotFoundError
from quillboard.services.guards import commit_or_reject, ensure_owner
from quillboard.services.query import ListQuery, Page, ResourceQuerySpec, paginate

logger = structlog.get_logger()

COMMENT_QUERY_SPEC = ResourceQuerySpec(
    model=Comment,
    sort_columns={
        "id": Comment.id,
        "createdAt": Comment.created_at,
        "content": Comment.content,
    },
    default_sort="createdAt",
    search_columns=(Comment.content,),
    equality_columns={"postId": Comment.post_id, "authorId": Comment.author_id},
)

COMMENT_LOAD_OPTIONS = (
    selectinload(Comment.author),
    selectinload(Comment.post),
)


class CommentService:
    """Business logic for comment CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_comments(self, query: ListQuery) -> Page:
        return await paginate(self.db, COMMENT_QUERY_SPEC, query, COMMENT_LOAD_OPTIONS)

    async def get_comment(self, comment_id: int, refresh: bool = False) -> Optional[Comment]:
        q = select(Comment).where(Comment.id == comment_id).options(*COMMENT_LOAD_OPTIONS)
        if refresh:
            q = q.execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def get_comment_or_404(self, comment_id: int) -> Comment:
        comment = await self.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        return comment

    async def create_comment(self, identity: Identity, post_id: int, content: str) -> Comment:
        post = await self.db.get(Post, post_id)
        if not post:
            raise NotFoundError("Post not found")

        comment = Comment(content=content, post_id=post_id, author_id=identity.id)
        self.db.add(comment)
        await commit_or_reject(self.db)
        logger.info("comment.created", comment_id=comment.id, post_id=post_id, author_id=identity.id)
        return await self.get_comment(comment.id, refresh=True)

    async def update_comment(self, comment_id: int, identity: Identity, content: str) -> Comment:
        comment = await self.get_comment_or_404(comment_id)
        ensure_owner(comment.author_id, identity, "comment")

        comment.content = content
        await commit_or_reject(self.db)
        logger.info("comment.updated", comment_id=comment_id)
        return await self.get_comment(comment_id, refresh=True)

    async def delete_comment(self, comment_id: int, identity: Identity) -> None:
        comment = await self.get_comment_or_404(comment_id)
        ensure_owner(comment.author_id, identity, "comment")

        await self.db.delete(comment)
        await self.db.commit()
        logger.info("comment.deleted", comment_id=comment_id, author_id=identity.id)
