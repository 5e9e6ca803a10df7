from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.database import get_session
from taskboard.models import ProjectCreate, ProjectRead, ProjectUpdate, ProjectWithTasks
from taskboard.project_store import ProjectStore

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectRead])
async def list_projects(search: Optional[str] = None, session: AsyncSession = Depends(get_session)):
    return await ProjectStore(session).list_projects(search)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(project: ProjectCreate, session: AsyncSession = Depends(get_session)):
    return await ProjectStore(session).create_project(project.name, project.description)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(project_id: str, session: AsyncSession = Depends(get_session)):
    return await ProjectStore(session).get_project(project_id)


@router.get("/{project_id}/with-tasks", response_model=ProjectWithTasks)
async def get_project_with_tasks(project_id: str, session: AsyncSession = Depends(get_session)):
    return await ProjectStore(session).get_project_with_tasks(project_id)


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(project_id: str, project: ProjectUpdate, session: AsyncSession = Depends(get_session)):
    return await ProjectStore(session).update_project(project_id, project.model_dump(exclude_unset=True))


@router.delete("/{project_id}")
async def delete_project(project_id: str, session: AsyncSession = Depends(get_session)):
    await ProjectStore(session).delete_project(project_id)
    return {"message": "Project and all related tasks deleted successfully"}
