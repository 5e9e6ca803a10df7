"""Client-side mirror of the selected project, with optimistic moves.

A move or delete is applied to the local aggregate immediately using the
same ordering rules the server uses, then sent to the API. Success reloads
the project from the server. A failed request restores the snapshot taken
before the mutation, wholesale; a failed reload keeps the optimistic board.

Moves are not serialized: if a second move starts while the first is in
flight and the first later fails, its rollback overwrites the second move's
optimistic state until the next reload.
"""

import logging
from typing import Any, Optional

from taskboard import ordering
from taskboard.client.api import BoardAPI
from taskboard.errors import BoardError, ValidationError
from taskboard.models import ProjectRead, ProjectWithTasks, TaskRead, TaskStatus, utcnow

logger = logging.getLogger(__name__)


def project_move(
    board: ProjectWithTasks,
    task_id: str,
    status: TaskStatus,
    position: int,
    project_id: Optional[str] = None,
) -> ProjectWithTasks:
    """Return a copy of ``board`` with the move applied. ``board`` is untouched."""
    board = board.model_copy(deep=True)
    status = TaskStatus(status)
    task = board.tasks.find(task_id)
    if task is None:
        return board

    old_status = task.status
    source = [t for t in board.tasks.lane(old_status) if t.id != task_id]
    leaves_board = project_id is not None and project_id != board.id
    if leaves_board:
        board.tasks.set_lane(old_status, ordering.apply_shift(source, ordering.remove_from(task.position)))
        return board

    same_bucket = status == old_status
    target = source if same_bucket else list(board.tasks.lane(status))
    placement = ordering.plan_move(
        task.position, same_bucket, len(target) + (1 if same_bucket else 0), position
    )

    if not same_bucket:
        board.tasks.set_lane(old_status, ordering.apply_shift(source, placement.source_shift))
    target = ordering.apply_shift(target, placement.target_shift)

    task.status = status
    task.position = placement.position
    task.updated_at = utcnow()
    board.tasks.set_lane(status, sorted([*target, task], key=lambda t: t.position))
    return board


def project_delete(board: ProjectWithTasks, task_id: str) -> ProjectWithTasks:
    """Return a copy of ``board`` without the task, its lane closed up."""
    board = board.model_copy(deep=True)
    task = board.tasks.find(task_id)
    if task is None:
        return board
    remaining = [t for t in board.tasks.lane(task.status) if t.id != task_id]
    board.tasks.set_lane(task.status, ordering.apply_shift(remaining, ordering.remove_from(task.position)))
    return board


class BoardState:
    """The client aggregate: project list plus the one selected project.

    Owned by the top-level application and passed to whoever needs it.
    ``load_projects`` is the only initialisation step.
    """

    def __init__(self, api: BoardAPI):
        self.api = api
        self.projects: list[ProjectRead] = []
        self.selected_project: Optional[ProjectWithTasks] = None
        self.search_term = ""
        self.loading = False
        self.is_moving_task = False

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    async def load_projects(self) -> list[ProjectRead]:
        self.loading = True
        try:
            self.projects = await self.api.list_projects(self.search_term or None)
        except Exception:
            logger.exception("Failed to load projects")
            raise
        finally:
            self.loading = False
        return self.projects

    async def load_project_with_tasks(self, project_id: str) -> ProjectWithTasks:
        self.loading = True
        try:
            board = await self.api.get_project_with_tasks(project_id)
        except Exception:
            logger.exception("Failed to load project %s", project_id)
            raise
        finally:
            self.loading = False
        for status in TaskStatus:
            if not ordering.check_dense(t.position for t in board.tasks.lane(status)):
                logger.warning("Project %s lane %s is not densely ordered", project_id, status.value)
        self.selected_project = board
        return board

    async def _reload_after_mutation(self, project_id: str) -> None:
        # The server already committed; a failed reload keeps the optimistic board.
        try:
            await self.load_project_with_tasks(project_id)
        except BoardError:
            logger.warning("Reload of project %s failed, keeping optimistic board", project_id)

    async def create_project(self, name: str, description: Optional[str] = None) -> ProjectRead:
        project = await self.api.create_project(name, description)
        self.projects = [*self.projects, project]
        return project

    async def create_task(
        self,
        project_id: str,
        title: str,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> TaskRead:
        task = await self.api.create_task(project_id, title, description, status)
        if self.selected_project is not None and self.selected_project.id == project_id:
            await self.load_project_with_tasks(project_id)
        return task

    async def update_task(self, task_id: str, **updates: Any) -> TaskRead:
        task = await self.api.update_task(task_id, **updates)
        if self.selected_project is not None:
            await self.load_project_with_tasks(self.selected_project.id)
        return task

    async def move_task(
        self,
        task_id: str,
        status: TaskStatus,
        position: int,
        project_id: Optional[str] = None,
    ) -> TaskRead:
        if self.selected_project is None:
            raise ValidationError("No project selected")

        snapshot = self.selected_project.model_copy(deep=True)
        self.is_moving_task = True
        try:
            self.selected_project = project_move(snapshot, task_id, status, position, project_id)
            try:
                moved = await self.api.move_task(task_id, status, position, project_id)
            except Exception:
                logger.warning("Failed to move task %s, restoring board", task_id, exc_info=True)
                self.selected_project = snapshot
                raise
            await self._reload_after_mutation(snapshot.id)
            return moved
        finally:
            self.is_moving_task = False

    async def delete_task(self, task_id: str) -> None:
        if self.selected_project is None:
            await self.api.delete_task(task_id)
            return

        snapshot = self.selected_project.model_copy(deep=True)
        self.is_moving_task = True
        try:
            self.selected_project = project_delete(snapshot, task_id)
            try:
                await self.api.delete_task(task_id)
            except Exception:
                logger.warning("Failed to delete task %s, restoring board", task_id, exc_info=True)
                self.selected_project = snapshot
                raise
            await self._reload_after_mutation(snapshot.id)
        finally:
            self.is_moving_task = False

    async def delete_project(self, project_id: str) -> None:
        await self.api.delete_project(project_id)
        await self.load_projects()
        if self.selected_project is not None and self.selected_project.id == project_id:
            self.selected_project = None
