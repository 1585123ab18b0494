"""Task repository — owner-scoped CRUD for tasks.

A TaskRepository is bound to one owner at construction time. Every query
it issues is built from the same ownership filter, so a task belonging to
another user is indistinguishable from a task that does not exist: both
raise TaskNotFoundError (404), never a 403 that would confirm existence.

Listing order:
  1. status in workflow order (TODO, IN_PROGRESS, DONE)
  2. due date ascending, tasks without a due date last
  3. newest first
"""

import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.db.models import Task, TaskStatus
from tasktrack.errors import TaskNotFoundError

logger = structlog.get_logger()

# Fields a client may change on an existing task.
UPDATABLE_FIELDS = frozenset({"title", "content", "status", "due_date"})

_STATUS_ORDER = case(
    (Task.status == TaskStatus.TODO, 0),
    (Task.status == TaskStatus.IN_PROGRESS, 1),
    else_=2,
)


def parse_task_id(value: Any) -> Optional[uuid.UUID]:
    """Parse a client-supplied id; malformed ids become None (not found)."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


@dataclass
class TaskPage:
    tasks: list[Task]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


class TaskRepository:
    """All task reads and writes for a single owner."""

    def __init__(self, db: AsyncSession, owner_id: uuid.UUID):
        self.db = db
        self.owner_id = owner_id

    def _ownership(self):
        """The filter every statement in this repository carries."""
        return Task.user_id == self.owner_id

    def _owned(self, *criteria):
        """Base query: the owner's tasks, narrowed by extra criteria."""
        return select(Task).where(self._ownership(), *criteria)

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(
        self,
        status: Optional[TaskStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> TaskPage:
        """One page of the owner's tasks plus the total matching count."""
        criteria = [Task.status == status] if status else []

        count_query = select(func.count()).select_from(
            self._owned(*criteria).subquery()
        )
        total = (await self.db.execute(count_query)).scalar_one()

        offset = (page - 1) * limit
        if offset >= total:
            # Past the last page; never bind an offset the driver cannot hold.
            return TaskPage(tasks=[], page=page, limit=limit, total=total)

        query = (
            self._owned(*criteria)
            .order_by(
                _STATUS_ORDER.asc(),
                Task.due_date.asc().nulls_last(),
                Task.created_at.desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        tasks = list((await self.db.execute(query)).scalars().all())
        return TaskPage(tasks=tasks, page=page, limit=limit, total=total)

    async def get_task(self, task_id: Any) -> Task:
        """Fetch one owned task or raise TaskNotFoundError."""
        parsed = parse_task_id(task_id)
        if parsed is None:
            raise TaskNotFoundError()
        result = await self.db.execute(self._owned(Task.id == parsed))
        task = result.scalars().first()
        if not task:
            raise TaskNotFoundError()
        return task

    # ─── Write ───────────────────────────────────────────

    async def create_task(
        self,
        title: str,
        content: Optional[str] = None,
        status: TaskStatus = TaskStatus.TODO,
        due_date: Optional[datetime] = None,
    ) -> Task:
        task = Task(
            user_id=self.owner_id,
            title=title,
            content=content,
            status=status,
            due_date=due_date,
        )
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)
        logger.info("tasks.created", task_id=str(task.id), user_id=str(self.owner_id))
        return task

    async def update_task(self, task_id: Any, changes: dict[str, Any]) -> Task:
        """Apply a partial update. Only keys present in `changes` are touched.

        A None due_date clears it; the ownership check runs before any write.
        """
        task = await self.get_task(task_id)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        for field, value in changes.items():
            setattr(task, field, value)

        await self.db.commit()
        await self.db.refresh(task)
        logger.info(
            "tasks.updated",
            task_id=str(task.id),
            user_id=str(self.owner_id),
            fields=sorted(changes),
        )
        return task

    async def delete_task(self, task_id: Any) -> int:
        """Delete one owned task. Returns the number of rows removed (1)."""
        task = await self.get_task(task_id)
        await self.db.delete(task)
        await self.db.commit()
        logger.info("tasks.deleted", task_id=str(task.id), user_id=str(self.owner_id))
        return 1

    async def bulk_update_status(self, task_ids: list[Any], status: TaskStatus) -> int:
        """Set the status of every listed task the owner actually has.

        Ids that are malformed, unknown, or owned by someone else are skipped
        silently. Returns the number of rows modified.
        """
        ids = {parsed for parsed in map(parse_task_id, task_ids) if parsed}
        if not ids:
            return 0

        stmt = (
            update(Task)
            .where(self._ownership(), Task.id.in_(list(ids)))
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        logger.info(
            "tasks.bulk_status",
            user_id=str(self.owner_id),
            status=status.value,
            requested=len(task_ids),
            updated=result.rowcount,
        )
        return result.rowcount
