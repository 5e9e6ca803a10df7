from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from taskboard import models  # noqa: F401  (registers the tables on SQLModel.metadata)
from taskboard.config import get_settings

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


def make_engine(url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(url, echo=echo)


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Objects stay readable after commit; routes serialize them post-commit.
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def configure_engine(url: str, echo: bool = False) -> AsyncEngine:
    global _engine, _sessionmaker
    _engine = make_engine(url, echo=echo)
    _sessionmaker = make_sessionmaker(_engine)
    return _engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        settings = get_settings()
        return configure_engine(settings.database_url, echo=settings.sql_echo)
    return _engine


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def ping(engine: Optional[AsyncEngine] = None) -> bool:
    engine = engine or get_engine()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


async def get_session() -> AsyncIterator[AsyncSession]:
    get_engine()
    async with _sessionmaker() as session:
        yield session
