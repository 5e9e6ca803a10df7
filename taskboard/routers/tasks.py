from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.database import get_session
from taskboard.models import LaneTasks, TaskCreate, TaskMove, TaskRead, TaskUpdate
from taskboard.task_store import TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/project/{project_id}", response_model=LaneTasks)
async def list_project_tasks(project_id: str, session: AsyncSession = Depends(get_session)):
    return await TaskStore(session).list_by_project(project_id)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(task: TaskCreate, session: AsyncSession = Depends(get_session)):
    return await TaskStore(session).create_task(
        task.project_id, task.title, task.description, task.status
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: str, session: AsyncSession = Depends(get_session)):
    return await TaskStore(session).get_task(task_id)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(task_id: str, task: TaskUpdate, session: AsyncSession = Depends(get_session)):
    return await TaskStore(session).update_task(task_id, task.model_dump(exclude_unset=True))


@router.put("/{task_id}/move", response_model=TaskRead)
async def move_task(task_id: str, move: TaskMove, session: AsyncSession = Depends(get_session)):
    return await TaskStore(session).move_task(task_id, move.status, move.position, move.project_id)


@router.delete("/{task_id}")
async def delete_task(task_id: str, session: AsyncSession = Depends(get_session)):
    await TaskStore(session).delete_task(task_id)
    return {"message": "Task deleted successfully"}
