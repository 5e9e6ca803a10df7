import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Index
from sqlmodel import SQLModel, Field

PROJECT_NAME_MAX = 100
PROJECT_DESCRIPTION_MAX = 500
TASK_TITLE_MAX = 200
TASK_DESCRIPTION_MAX = 1000

# Wire models speak camelCase JSON; python code keeps snake_case names.
CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "inProgress"
    done = "done"


class ProjectBase(SQLModel):
    name: str
    description: Optional[str] = None


class Project(ProjectBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(SQLModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ProjectRead(ProjectBase):
    model_config = CAMEL

    id: str = Field(alias="_id")
    created_at: datetime
    updated_at: datetime


class TaskBase(SQLModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.todo


class Task(TaskBase, table=True):
    __table_args__ = (Index("ix_task_bucket", "project_id", "status", "position"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: str = Field(foreign_key="project.id", index=True)
    position: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TaskCreate(TaskBase):
    model_config = CAMEL

    project_id: str


class TaskUpdate(SQLModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None


class TaskMove(SQLModel):
    model_config = CAMEL

    status: TaskStatus
    position: int
    project_id: Optional[str] = None


class TaskRead(TaskBase):
    model_config = CAMEL

    id: str = Field(alias="_id")
    project_id: str
    position: int
    created_at: datetime
    updated_at: datetime


class LaneTasks(SQLModel):
    model_config = CAMEL

    todo: list[TaskRead] = Field(default_factory=list)
    in_progress: list[TaskRead] = Field(default_factory=list)
    done: list[TaskRead] = Field(default_factory=list)

    def lane(self, status: TaskStatus) -> list[TaskRead]:
        return getattr(self, status.name)

    def set_lane(self, status: TaskStatus, tasks: list[TaskRead]) -> None:
        setattr(self, status.name, tasks)

    def all_tasks(self) -> list[TaskRead]:
        return [*self.todo, *self.in_progress, *self.done]

    def find(self, task_id: str) -> Optional[TaskRead]:
        for task in self.all_tasks():
            if task.id == task_id:
                return task
        return None


class ProjectWithTasks(ProjectRead):
    tasks: LaneTasks = Field(default_factory=LaneTasks)
