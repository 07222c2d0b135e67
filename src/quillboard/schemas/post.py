"""Pydantic schemas for posts and comments.

Learn: Separate schemas for create/update/read keep the API clean.
- PostCreate: what you POST. There is no author field; the author is
  the caller. Unknown keys (authorId included) are ignored.
- PostUpdate: what you PUT. Every field optional, only supplied ones apply.
- PostRead: what the API returns, relations included.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from quillboard.schemas.common import CamelModel
from quillboard.schemas.taxonomy import CategoryRead, TagName, TagRead
from quillboard.schemas.user import UserSummary


# ─── Posts ───────────────────────────────────────────────


class PostCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    published: bool = False
    category: Optional[str] = Field(None, max_length=100)
    tags: list[TagName] = Field(default_factory=list)


class PostUpdate(CamelModel):
    """Partial update — fields left out of the body are not touched.

    An explicit null category unlinks it; a null title, content or
    published is ignored.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    published: Optional[bool] = None
    category: Optional[str] = Field(None, max_length=100)
    tags: Optional[list[TagName]] = None


class PostCommentRead(CamelModel):
    id: int
    content: str
    author_id: int
    author: UserSummary
    created_at: datetime


class PostRead(CamelModel):
    id: int
    title: str
    content: str
    published: bool
    author_id: int
    author: UserSummary
    category: Optional[CategoryRead]
    tags: list[TagRead]
    comments: list[PostCommentRead]
    created_at: datetime
    updated_at: datetime


# ─── Comments ────────────────────────────────────────────


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1)
    post_id: int


class CommentUpdate(CamelModel):
    content: str = Field(..., min_length=1)


class PostRef(CamelModel):
    id: int
    title: str


class CommentRead(CamelModel):
    id: int
    content: str
    author_id: int
    post_id: int
    author: UserSummary
    post: PostRef
    created_at: datetime
