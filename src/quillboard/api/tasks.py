"""Task API routes.

Learn: These routes are the HTTP interface to the task manager.
The service layer handles ownership and tag/category upserts.
Routes just translate HTTP to service calls.

Key patterns:
- POST for creation (owner is the caller, never the body)
- PUT for partial updates: only keys present in the body are applied
- Query params for filtering (completed, userId, category, tags)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.api.params import ListParams, split_tags
from quillboard.auth.dependencies import get_current_user
from quillboard.auth.jwt import Identity
from quillboard.db.engine import get_db
from quillboard.schemas.common import Envelope, ok
from quillboard.schemas.task import TaskCreate, TaskRead, TaskUpdate
from quillboard.services.query import CategoryIs, FieldEquals, FlagIs, HasAnyTag
from quillboard.services.task_service import TaskService

router = APIRouter(prefix="/tasks")


def _svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("", response_model=Envelope[list[TaskRead]], response_model_exclude_unset=True)
async def list_tasks(
    params: ListParams = Depends(),
    category: Optional[str] = Query(None, description="Category name"),
    tags: Optional[list[str]] = Query(None, description="Comma-separated or repeated"),
    completed: Optional[bool] = Query(None, description="Filter by completion"),
    user_id: Optional[int] = Query(None, alias="userId", description="Filter by owner"),
    svc: TaskService = Depends(_svc),
):
    """List tasks with optional filters."""
    filters = []
    if category:
        filters.append(CategoryIs(category))
    tag_names = split_tags(tags)
    if tag_names:
        filters.append(HasAnyTag(tag_names))
    if completed is not None:
        filters.append(FlagIs("completed", completed))
    if user_id is not None:
        filters.append(FieldEquals("userId", user_id))

    page = await svc.list_tasks(params.to_query(filters))
    return ok([TaskRead.model_validate(t) for t in page.items], pagination=page.pagination)


@router.get("/{task_id}", response_model=Envelope[TaskRead], response_model_exclude_unset=True)
async def get_task(task_id: int, svc: TaskService = Depends(_svc)):
    """Get a single task by ID."""
    task = await svc.get_task_or_404(task_id)
    return ok(TaskRead.model_validate(task))


@router.post(
    "", response_model=Envelope[TaskRead], response_model_exclude_unset=True, status_code=201
)
async def create_task(
    body: TaskCreate,
    identity: Identity = Depends(get_current_user),
    svc: TaskService = Depends(_svc),
):
    """Create a task owned by the caller."""
    task = await svc.create_task(
        identity,
        title=body.title,
        description=body.description,
        completed=body.completed,
        due_date=body.due_date,
        priority=body.priority,
        category=body.category,
        tags=body.tags,
    )
    return ok(TaskRead.model_validate(task), message="Task created")


@router.put("/{task_id}", response_model=Envelope[TaskRead], response_model_exclude_unset=True)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    identity: Identity = Depends(get_current_user),
    svc: TaskService = Depends(_svc),
):
    """Partially update a task. Owner only."""
    task = await svc.update_task(task_id, identity, body.model_dump(exclude_unset=True))
    return ok(TaskRead.model_validate(task), message="Task updated")


@router.delete("/{task_id}", response_model=Envelope, response_model_exclude_unset=True)
async def delete_task(
    task_id: int,
    identity: Identity = Depends(get_current_user),
    svc: TaskService = Depends(_svc),
):
    """Delete a task. Owner only."""
    await svc.delete_task(task_id, identity)
    return ok(message="Task deleted")
