"""Pydantic schemas for tasks.

Learn: Separate schemas for create/update/read keeps the API clean.
- TaskCreate: what you POST to create a task (owner comes from the token)
- TaskUpdate: what you PUT to modify a task (all optional)
- TaskRead: what the API returns (owner, category and tags included)
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from quillboard.schemas.common import CamelModel
from quillboard.schemas.taxonomy import CategoryRead, TagName, TagRead
from quillboard.schemas.user import UserSummary


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(None, min_length=1)
    completed: bool = False
    due_date: Optional[datetime] = None
    priority: int = Field(default=1, ge=0)
    category: Optional[str] = Field(None, max_length=100)
    tags: list[TagName] = Field(default_factory=list)


class TaskUpdate(CamelModel):
    """Partial update — fields left out of the body are not touched.

    The route passes model_dump(exclude_unset=True), so an explicit null
    for description, dueDate or category clears it while an omitted key
    leaves it.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    priority: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=100)
    tags: Optional[list[TagName]] = None


class TaskRead(CamelModel):
    id: int
    title: str
    description: Optional[str]
    completed: bool
    due_date: Optional[datetime]
    priority: int
    user_id: int
    user: UserSummary
    category: Optional[CategoryRead]
    tags: list[TagRead]
    created_at: datetime
    updated_at: datetime
