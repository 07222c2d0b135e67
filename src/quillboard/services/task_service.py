"""Task service — personal to-do items with categories and tags.

Same contract as posts: public reads, owner-only writes, owner taken from
the verified identity. Tasks add a completion flag, an optional due date
and an integer priority.

Query filters are applied conditionally — only when the caller provides
them — through the typed ListQuery filters.
"""

from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quillboard.auth.jwt import Identity
from quillboard.db.models import Task
from quillboard.errors import NotFoundError
from quillboard.services.guards import commit_or_reject, ensure_owner
from quillboard.services.query import ListQuery, Page, ResourceQuerySpec, paginate
from quillboard.services.taxonomy_service import upsert_category, upsert_tags

logger = structlog.get_logger()

TASK_QUERY_SPEC = ResourceQuerySpec(
    model=Task,
    sort_columns={
        "id": Task.id,
        "title": Task.title,
        "priority": Task.priority,
        "dueDate": Task.due_date,
        "createdAt": Task.created_at,
    },
    default_sort="id",
    search_columns=(Task.title, Task.description),
    flag_columns={"completed": Task.completed},
    equality_columns={"userId": Task.user_id},
    category_relation=Task.category,
    tags_relation=Task.tags,
)

TASK_LOAD_OPTIONS = (
    selectinload(Task.user),
    selectinload(Task.category),
    selectinload(Task.tags),
)

# Plain columns a partial update may set directly; only the nullable ones
# accept an explicit null
_TASK_FIELDS = ("title", "description", "completed", "due_date", "priority")
_NULLABLE_FIELDS = ("description", "due_date")


class TaskService:
    """Business logic for task CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(self, query: ListQuery) -> Page:
        return await paginate(self.db, TASK_QUERY_SPEC, query, TASK_LOAD_OPTIONS)

    async def get_task(self, task_id: int, refresh: bool = False) -> Optional[Task]:
        q = select(Task).where(Task.id == task_id).options(*TASK_LOAD_OPTIONS)
        if refresh:
            q = q.execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def get_task_or_404(self, task_id: int) -> Task:
        task = await self.get_task(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        identity: Identity,
        title: str,
        description: Optional[str] = None,
        completed: bool = False,
        due_date: Optional[datetime] = None,
        priority: int = 1,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            completed=completed,
            due_date=due_date,
            priority=priority,
            user_id=identity.id,
        )
        if category:
            task.category = await upsert_category(self.db, category)
        task.tags = await upsert_tags(self.db, tags or [])

        self.db.add(task)
        await commit_or_reject(self.db)
        logger.info("task.created", task_id=task.id, user_id=identity.id)
        return await self.get_task(task.id, refresh=True)

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        task_id: int,
        identity: Identity,
        changes: dict[str, Any],
    ) -> Task:
        """Apply the supplied fields only.

        `changes` holds exactly the fields the client sent (snake_case);
        an explicit null for description, due_date or category clears it.
        """
        task = await self.get_task_or_404(task_id)
        ensure_owner(task.user_id, identity, "task")

        for field in _TASK_FIELDS:
            if field not in changes:
                continue
            if changes[field] is not None or field in _NULLABLE_FIELDS:
                setattr(task, field, changes[field])
        if "category" in changes:
            if changes["category"] is None:
                task.category = None
            else:
                task.category = await upsert_category(self.db, changes["category"])
        if changes.get("tags") is not None:
            task.tags = await upsert_tags(self.db, changes["tags"])

        await commit_or_reject(self.db)
        logger.info("task.updated", task_id=task_id, fields=sorted(changes))
        return await self.get_task(task_id, refresh=True)

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, task_id: int, identity: Identity) -> None:
        task = await self.get_task_or_404(task_id)
        ensure_owner(task.user_id, identity, "task")

        await self.db.delete(task)
        await self.db.commit()
        logger.info("task.deleted", task_id=task_id, user_id=identity.id)
