"""Shared fixtures: a fresh SQLite database per test."""

import httpx
import pytest_asyncio

from taskboard.database import configure_engine, dispose_engine, init_db, make_sessionmaker
from taskboard.main import app
from taskboard.models import Project
from taskboard.project_store import ProjectStore
from taskboard.task_store import TaskStore


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = configure_engine(f"sqlite+aiosqlite:///{tmp_path / 'board.db'}")
    await init_db(engine)
    yield engine
    await dispose_engine()


@pytest_asyncio.fixture
async def session(engine):
    async with make_sessionmaker(engine)() as session:
        yield session


@pytest_asyncio.fixture
async def tasks(session):
    return TaskStore(session)


@pytest_asyncio.fixture
async def projects(session):
    return ProjectStore(session)


@pytest_asyncio.fixture
async def project(projects) -> Project:
    return await projects.create_project("Board", "Main board")


@pytest_asyncio.fixture
async def client(engine):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
