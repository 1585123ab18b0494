"""Pydantic schemas for tasks.

Separate schemas for create/update/read keep the API clean:
- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (every field optional)
- TaskRead: what the API returns
- BulkStatusChange: one status applied to many tasks
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, Field, field_validator

from tasktrack.db.models import TaskStatus
from tasktrack.schemas.base import CamelModel

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 500


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(None, max_length=CONTENT_MAX_LENGTH)
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[AwareDatetime] = None


class TaskUpdate(CamelModel):
    """Partial update — only fields present in the request body are applied.

    dueDate may be sent as null to clear it; title, content and status may
    be omitted but not nulled.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(None, max_length=CONTENT_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    due_date: Optional[AwareDatetime] = None

    @field_validator("title", "content", "status", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("not_null")
        return value


class TaskRead(CamelModel):
    id: uuid.UUID
    title: str
    content: Optional[str]
    status: TaskStatus
    due_date: Optional[datetime]
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class TaskEnvelope(CamelModel):
    task: TaskRead


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TaskListResponse(CamelModel):
    tasks: list[TaskRead]
    pagination: Pagination


class BulkStatusChange(CamelModel):
    task_ids: list[str] = Field(..., max_length=1000)
    status: TaskStatus


class CountResponse(CamelModel):
    message: str
    count: int
