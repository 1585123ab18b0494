"""Task API routes.

Routes translate HTTP to TaskRepository calls and nothing more. The
repository comes from get_task_repository, which is already bound to the
authenticated user, so no handler can reach another user's rows.

- GET    /tasks              list (status filter, page, limit)
- POST   /tasks              create
- PATCH  /tasks/bulk-status  set one status on many tasks
- GET    /tasks/{id}         fetch one
- PUT    /tasks/{id}         partial update
- DELETE /tasks/{id}         delete
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tasktrack.auth.dependencies import get_app_settings, get_task_repository
from tasktrack.config import Settings
from tasktrack.db.models import TaskStatus
from tasktrack.messages import translate
from tasktrack.schemas.task import (
    BulkStatusChange,
    CountResponse,
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskUpdate,
)
from tasktrack.services.task_service import TaskRepository

router = APIRouter(prefix="/tasks")


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    status: Optional[TaskStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    repo: TaskRepository = Depends(get_task_repository),
):
    """List the current user's tasks, one page at a time."""
    result = await repo.list_tasks(status=status, page=page, limit=limit)
    return {
        "tasks": result.tasks,
        "pagination": {
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "total_pages": result.total_pages,
        },
    }


@router.post("", response_model=TaskEnvelope, status_code=201)
async def create_task(
    body: TaskCreate,
    repo: TaskRepository = Depends(get_task_repository),
):
    task = await repo.create_task(
        title=body.title,
        content=body.content,
        status=body.status,
        due_date=body.due_date,
    )
    return {"task": task}


@router.patch("/bulk-status", response_model=CountResponse)
async def bulk_update_status(
    body: BulkStatusChange,
    repo: TaskRepository = Depends(get_task_repository),
    settings: Settings = Depends(get_app_settings),
):
    """Change the status of several tasks at once.

    Ids the caller does not own (or that do not exist) are skipped; the
    response count is the number of tasks actually updated.
    """
    count = await repo.bulk_update_status(body.task_ids, body.status)
    return {
        "message": translate("tasks.bulk_updated", settings.locale, count=count),
        "count": count,
    }


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(
    task_id: str,
    repo: TaskRepository = Depends(get_task_repository),
):
    return {"task": await repo.get_task(task_id)}


@router.put("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    repo: TaskRepository = Depends(get_task_repository),
):
    """Partially update a task. Send dueDate: null to clear the due date."""
    task = await repo.update_task(task_id, body.model_dump(exclude_unset=True))
    return {"task": task}


@router.delete("/{task_id}", response_model=CountResponse)
async def delete_task(
    task_id: str,
    repo: TaskRepository = Depends(get_task_repository),
    settings: Settings = Depends(get_app_settings),
):
    count = await repo.delete_task(task_id)
    return {"message": translate("tasks.deleted", settings.locale), "count": count}
