"""Shared fixtures for Folio tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import Session, SQLModel, create_engine

from folio import models  # noqa: F401  (registers tables on SQLModel.metadata)
from folio import FolioAsync, HierarchyService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

    from sqlalchemy import Engine
    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
def engine() -> Engine:
    """In-memory SQLite engine with all tables created."""
    eng = create_engine("sqlite://", echo=False)
    SQLModel.metadata.create_all(eng)
    return eng


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """SQLModel session bound to the in-memory engine, rolled back after each test."""
    with Session(engine) as s:
        s.begin()
        yield s
        s.rollback()


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> Callable[..., AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(
    session_factory: Callable[..., AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Async SQLModel session, rolled back after each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def service() -> HierarchyService:
    return HierarchyService()


@pytest.fixture
async def users(service: HierarchyService, async_session: AsyncSession) -> list[str]:
    """Create alice, bob, and carol."""
    for uid in ("alice", "bob", "carol"):
        await service.create_user(async_session, uid)
    return ["alice", "bob", "carol"]


@pytest.fixture
async def folio(async_engine: AsyncEngine) -> AsyncIterator[FolioAsync]:
    """FolioAsync on the shared in-memory engine, with alice, bob, and carol."""
    f = FolioAsync(engine=async_engine)
    await f.open()
    for uid in ("alice", "bob", "carol"):
        await f.create_user(uid)
    yield f
    await f.close()
