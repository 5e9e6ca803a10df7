import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from taskboard.errors import NotFound
from taskboard.models import (
    PROJECT_DESCRIPTION_MAX,
    PROJECT_NAME_MAX,
    Project,
    ProjectRead,
    ProjectWithTasks,
    Task,
    utcnow,
)
from taskboard.task_store import TaskStore, persistence_errors
from taskboard.validation import check_patch, clean_text

logger = logging.getLogger(__name__)

PROJECT_PATCH_FIELDS = ("name", "description")


class ProjectStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _require_project(self, project_id: str) -> Project:
        project = await self.session.get(Project, project_id)
        if not project:
            raise NotFound("Project not found")
        return project

    @persistence_errors
    async def create_project(self, name: str, description: Optional[str] = None) -> Project:
        project = Project(
            name=clean_text(name, "Project name", PROJECT_NAME_MAX, required=True),
            description=clean_text(description, "Description", PROJECT_DESCRIPTION_MAX),
        )
        self.session.add(project)
        await self.session.commit()
        await self.session.refresh(project)
        logger.debug("Created project %s (%s)", project.id, project.name)
        return project

    @persistence_errors
    async def get_project(self, project_id: str) -> Project:
        return await self._require_project(project_id)

    @persistence_errors
    async def list_projects(self, search: Optional[str] = None) -> List[Project]:
        """Newest first; ``search`` matches name or description, case-insensitively."""
        stmt = select(Project)
        if search and search.strip():
            term = search.strip()
            stmt = stmt.where(
                or_(
                    col(Project.name).icontains(term, autoescape=True),
                    col(Project.description).icontains(term, autoescape=True),
                )
            )
        result = await self.session.execute(stmt.order_by(col(Project.created_at).desc()))
        return list(result.scalars().all())

    @persistence_errors
    async def update_project(self, project_id: str, patch: Mapping[str, Any]) -> Project:
        check_patch(patch, PROJECT_PATCH_FIELDS)
        changes = {}
        if "name" in patch:
            changes["name"] = clean_text(patch["name"], "Project name", PROJECT_NAME_MAX, required=True)
        if "description" in patch:
            changes["description"] = clean_text(
                patch["description"], "Description", PROJECT_DESCRIPTION_MAX
            )
        project = await self._require_project(project_id)
        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = utcnow()
        await self.session.commit()
        await self.session.refresh(project)
        return project

    @persistence_errors
    async def delete_project(self, project_id: str) -> int:
        """Delete the project and every task it owns; returns the task count removed."""
        project = await self._require_project(project_id)
        result = await self.session.execute(delete(Task).where(col(Task.project_id) == project_id))
        await self.session.delete(project)
        await self.session.commit()
        logger.info("Deleted project %s and %d task(s)", project_id, result.rowcount)
        return result.rowcount

    @persistence_errors
    async def get_project_with_tasks(self, project_id: str) -> ProjectWithTasks:
        project = await self._require_project(project_id)
        lanes = await TaskStore(self.session).list_by_project(project_id)
        return ProjectWithTasks(
            **ProjectRead.model_validate(project).model_dump(),
            tasks=lanes,
        )
