"""Task persistence with dense per-lane ordering.

Each mutating operation runs its sibling renumbering and the task's own write
in one session transaction and commits once, so readers never see a
half-renumbered lane.
"""

import logging
from functools import wraps
from typing import Any, Mapping, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from taskboard import ordering
from taskboard.errors import InternalError, NotFound
from taskboard.models import (
    TASK_DESCRIPTION_MAX,
    TASK_TITLE_MAX,
    LaneTasks,
    Project,
    Task,
    TaskRead,
    TaskStatus,
    utcnow,
)
from taskboard.validation import check_patch, clean_text, coerce_status

logger = logging.getLogger(__name__)

TASK_PATCH_FIELDS = ("title", "description", "status")


def persistence_errors(fn):
    """Roll back and re-raise database failures as ``InternalError``."""
    @wraps(fn)
    async def wrapper(self, *args, **kwargs):
        try:
            return await fn(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("%s failed", fn.__name__)
            raise InternalError("Internal server error") from exc
    return wrapper


class TaskStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _require_project(self, project_id: str, message: str = "Project not found") -> Project:
        project = await self.session.get(Project, project_id)
        if not project:
            raise NotFound(message)
        return project

    async def _require_task(self, task_id: str) -> Task:
        task = await self.session.get(Task, task_id)
        if not task:
            raise NotFound("Task not found")
        return task

    async def _bucket_count(self, project_id: str, status: TaskStatus) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Task)
            .where(Task.project_id == project_id, Task.status == status)
        )
        return result.scalar_one()

    async def _shift(
        self,
        project_id: str,
        status: TaskStatus,
        shift: Optional[ordering.Shift],
        exclude_id: str,
    ) -> None:
        if shift is None:
            return
        stmt = update(Task).where(
            col(Task.project_id) == project_id,
            col(Task.status) == status,
            col(Task.id) != exclude_id,
            col(Task.position) >= shift.low,
        )
        if shift.high is not None:
            stmt = stmt.where(col(Task.position) <= shift.high)
        await self.session.execute(
            stmt.values(position=col(Task.position) + shift.delta)
            .execution_options(synchronize_session="fetch")
        )

    @persistence_errors
    async def get_task(self, task_id: str) -> Task:
        return await self._require_task(task_id)

    @persistence_errors
    async def create_task(
        self,
        project_id: str,
        title: str,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.todo,
    ) -> Task:
        title = clean_text(title, "Task title", TASK_TITLE_MAX, required=True)
        description = clean_text(description, "Description", TASK_DESCRIPTION_MAX)
        status = coerce_status(status)
        await self._require_project(project_id)

        position = ordering.append(await self._bucket_count(project_id, status))
        task = Task(
            title=title,
            description=description,
            status=status,
            project_id=project_id,
            position=position,
        )
        self.session.add(task)
        await self.session.commit()
        await self.session.refresh(task)
        logger.debug("Created task %s in %s/%s at %d", task.id, project_id, status.value, position)
        return task

    @persistence_errors
    async def update_task(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        """Partial update of title/description/status.

        A status change re-buckets the task: the gap in the old lane is
        closed and the task is appended to the new lane.
        """
        check_patch(patch, TASK_PATCH_FIELDS)
        # Validate the whole patch before touching the row; a rejected patch
        # must leave nothing dirty in the session.
        changes = {}
        if "title" in patch:
            changes["title"] = clean_text(patch["title"], "Task title", TASK_TITLE_MAX, required=True)
        if "description" in patch:
            changes["description"] = clean_text(patch["description"], "Description", TASK_DESCRIPTION_MAX)
        status = coerce_status(patch["status"]) if patch.get("status") is not None else None
        task = await self._require_task(task_id)

        for field, value in changes.items():
            setattr(task, field, value)
        if status is not None and status != task.status:
            await self._shift(task.project_id, task.status, ordering.remove_from(task.position), task.id)
            task.position = ordering.append(await self._bucket_count(task.project_id, status))
            task.status = status

        task.updated_at = utcnow()
        await self.session.commit()
        await self.session.refresh(task)
        return task

    @persistence_errors
    async def move_task(
        self,
        task_id: str,
        status: TaskStatus,
        position: int,
        project_id: Optional[str] = None,
    ) -> Task:
        ordering.validate_index(position)
        status = coerce_status(status)
        task = await self._require_task(task_id)

        target_project_id = project_id or task.project_id
        if target_project_id != task.project_id:
            await self._require_project(target_project_id, "Target project not found")

        same_bucket = target_project_id == task.project_id and status == task.status
        target_count = await self._bucket_count(target_project_id, status)
        placement = ordering.plan_move(task.position, same_bucket, target_count, position)

        if same_bucket and placement.position == task.position:
            return task

        logger.debug(
            "Moving task %s: %s/%s@%d -> %s/%s@%d",
            task.id, task.project_id, task.status.value, task.position,
            target_project_id, status.value, placement.position,
        )
        await self._shift(task.project_id, task.status, placement.source_shift, task.id)
        await self._shift(target_project_id, status, placement.target_shift, task.id)

        task.project_id = target_project_id
        task.status = status
        task.position = placement.position
        task.updated_at = utcnow()
        await self.session.commit()
        await self.session.refresh(task)
        return task

    @persistence_errors
    async def delete_task(self, task_id: str) -> None:
        task = await self._require_task(task_id)
        project_id, status, position = task.project_id, task.status, task.position

        await self.session.delete(task)
        await self._shift(project_id, status, ordering.remove_from(position), task_id)
        await self.session.commit()
        logger.debug("Deleted task %s from %s/%s@%d", task_id, project_id, status.value, position)

    @persistence_errors
    async def list_by_project(self, project_id: str) -> LaneTasks:
        await self._require_project(project_id)
        result = await self.session.execute(
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(col(Task.position), col(Task.created_at))
        )
        lanes = LaneTasks()
        for task in result.scalars().all():
            lanes.lane(task.status).append(TaskRead.model_validate(task))
        return lanes
