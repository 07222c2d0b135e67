"""Post service — blog posts with categories, tags and comments.

Reads are public. Every mutation takes the caller's Identity:
- create: the author is always the caller, whatever the payload says
- update/delete: load, 404 if missing, 403 unless the caller is the
  author, and only then touch the row

Categories and tags are referenced by name and upserted on write. A
supplied tag list replaces the post's tags wholesale.
"""

from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quillboard.auth.jwt import Identity
from quillboard.db.models import Comment, Post
from quillboard.errors import NotFoundError
from quillboard.services.guards import commit_or_reject, ensure_owner
from quillboard.services.query import ListQuery, Page, ResourceQuerySpec, paginate
from quillboard.services.taxonomy_service import upsert_category, upsert_tags

logger = structlog.get_logger()

POST_QUERY_SPEC = ResourceQuerySpec(
    model=Post,
    sort_columns={
        "id": Post.id,
        "title": Post.title,
        "authorId": Post.author_id,
        "createdAt": Post.created_at,
    },
    default_sort="id",
    search_columns=(Post.title, Post.content),
    flag_columns={"published": Post.published},
    equality_columns={"authorId": Post.author_id},
    category_relation=Post.category,
    tags_relation=Post.tags,
)

# Everything a post response carries
POST_LOAD_OPTIONS = (
    selectinload(Post.author),
    selectinload(Post.category),
    selectinload(Post.tags),
    selectinload(Post.comments).selectinload(Comment.author),
)

# Plain columns a partial update may set directly; none of them is nullable
_POST_FIELDS = ("title", "content", "published")


class PostService:
    """Business logic for post CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Read ────────────────────────────────────────────

    async def list_posts(self, query: ListQuery) -> Page:
        return await paginate(self.db, POST_QUERY_SPEC, query, POST_LOAD_OPTIONS)

    async def get_post(self, post_id: int, refresh: bool = False) -> Optional[Post]:
        q = select(Post).where(Post.id == post_id).options(*POST_LOAD_OPTIONS)
        if refresh:
            q = q.execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def get_post_or_404(self, post_id: int) -> Post:
        post = await self.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")
        return post

    # ─── Create ──────────────────────────────────────────

    async def create_post(
        self,
        identity: Identity,
        title: str,
        content: str,
        published: bool = False,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Post:
        post = Post(
            title=title,
            content=content,
            published=published,
            author_id=identity.id,
        )
        if category:
            post.category = await upsert_category(self.db, category)
        post.tags = await upsert_tags(self.db, tags or [])

        self.db.add(post)
        await commit_or_reject(self.db)
        logger.info("post.created", post_id=post.id, author_id=identity.id)
        return await self.get_post(post.id, refresh=True)

    # ─── Update ──────────────────────────────────────────

    async def update_post(
        self,
        post_id: int,
        identity: Identity,
        changes: dict[str, Any],
    ) -> Post:
        """Apply the supplied fields only.

        `changes` holds exactly the fields the client sent (snake_case).
        A null title, content or published is ignored; a null category
        unlinks it.
        """
        post = await self.get_post_or_404(post_id)
        ensure_owner(post.author_id, identity, "post")

        for field in _POST_FIELDS:
            if changes.get(field) is not None:
                setattr(post, field, changes[field])
        if "category" in changes:
            if changes["category"] is None:
                post.category = None
            else:
                post.category = await upsert_category(self.db, changes["category"])
        if changes.get("tags") is not None:
            post.tags = await upsert_tags(self.db, changes["tags"])

        await commit_or_reject(self.db)
        logger.info("post.updated", post_id=post_id, fields=sorted(changes))
        return await self.get_post(post_id, refresh=True)

    # ─── Delete ──────────────────────────────────────────

    async def delete_post(self, post_id: int, identity: Identity) -> None:
        post = await self.get_post_or_404(post_id)
        ensure_owner(post.author_id, identity, "post")

        await self.db.delete(post)
        await self.db.commit()
        logger.info("post.deleted", post_id=post_id, author_id=identity.id)
