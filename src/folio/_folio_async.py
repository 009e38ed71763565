"""FolioAsync: primary async class, one session per operation."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from folio.exceptions import StorageError
from folio.hierarchy import HierarchyService
from folio.store import EntityStore
from folio.types import FileInfo, FolderInfo, NodeKind, UserInfo

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

    from folio.models import FileBase, FolderBase, UserBase
    from folio.types import MoveResult, ShareResult

logger = logging.getLogger(__name__)

_DEFAULT_URL = "sqlite+aiosqlite://"


class FolioAsync:
    """Async facade over the hierarchy operations.

    Each call runs its whole authorize-then-mutate sequence inside one
    session and commits once, so a move or a subtree share is applied
    all-or-nothing.  Every call, reads included, holds a per-instance lock:
    an in-memory engine shares one connection between sessions.

    Usage::

        async with FolioAsync("sqlite+aiosqlite:///folio.db") as folio:
            await folio.create_user("alice")
            folder = await folio.create_folder("alice", name="docs")
            await folio.create_file("alice", name="a.md", parent_folder=folder.id)
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        engine: AsyncEngine | None = None,
        session_factory: Callable[..., AsyncSession] | None = None,
        user_model: type[UserBase] | None = None,
        folder_model: type[FolderBase] | None = None,
        file_model: type[FileBase] | None = None,
        create_tables: bool = True,
    ) -> None:
        if sum(x is not None for x in (url, engine, session_factory)) > 1:
            raise ValueError("Provide at most one of url, engine, or session_factory")

        self._owns_engine = False
        if session_factory is None:
            if engine is None:
                engine = create_async_engine(url or _DEFAULT_URL, echo=False)
                self._owns_engine = True
            session_factory = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )
        self._engine = engine
        self._session_factory = session_factory
        self._create_tables = create_tables
        self._lock = asyncio.Lock()
        self._opened = False
        self._closed = False

        self._service = HierarchyService(
            EntityStore(
                user_model=user_model,
                folder_model=folder_model,
                file_model=file_model,
            )
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Create the backing tables if configured. Safe to call twice."""
        if self._opened:
            return
        self._opened = True
        if not self._create_tables or self._engine is None:
            return
        store = self._service.store
        async with self._engine.begin() as conn:
            for model in (store.user_model, store.folder_model, store.file_model):
                await conn.run_sync(
                    lambda c, m=model: m.__table__.create(c, checkfirst=True)  # type: ignore[attr-defined]
                )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_engine and self._engine is not None:
            await self._engine.dispose()

    async def __aenter__(self) -> FolioAsync:
        await self.open()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Session Management (per-operation only)
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session; commit on success, roll back on any error."""
        if self._closed:
            raise StorageError("FolioAsync is closed")
        await self.open()
        async with self._lock:
            session = self._session_factory()
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.warning("Store failure, transaction rolled back", exc_info=True)
                raise StorageError(f"Database error: {e}") from e
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, user_id: str | None = None) -> UserInfo:
        async with self._session() as sess:
            user = await self._service.create_user(sess, user_id)
            return UserInfo.from_record(user)

    async def get_user(self, user_id: str) -> UserInfo:
        async with self._session() as sess:
            user = await self._service.get_user(sess, user_id)
            return UserInfo.from_record(user)

    async def can_access(self, user_id: str, node_id: str, kind: NodeKind | str) -> bool:
        """Check whether *user_id* can reach a file or folder."""
        async with self._session() as sess:
            return await self._service.can_access(sess, user_id, node_id, NodeKind(kind))

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def create_file(
        self,
        as_user: str,
        name: str | None = None,
        contents: str | None = None,
        parent_folder: str | None = None,
    ) -> FileInfo:
        async with self._session() as sess:
            file = await self._service.create_file(
                sess, as_user, name=name, contents=contents, parent_folder=parent_folder
            )
            return FileInfo.from_record(file)

    async def get_file(self, as_user: str, file_id: str) -> FileInfo:
        async with self._session() as sess:
            file = await self._service.get_file(sess, as_user, file_id)
            return FileInfo.from_record(file)

    async def move_file(self, as_user: str, file_id: str, to_folder_id: str | None) -> MoveResult:
        async with self._session() as sess:
            return await self._service.move_file(sess, as_user, file_id, to_folder_id)

    async def share_file(self, as_user: str, file_id: str, to_user_id: str) -> ShareResult:
        async with self._session() as sess:
            return await self._service.share_file(sess, as_user, file_id, to_user_id)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def create_folder(
        self,
        as_user: str,
        name: str | None = None,
        parent_folder: str | None = None,
    ) -> FolderInfo:
        async with self._session() as sess:
            folder = await self._service.create_folder(
                sess, as_user, name=name, parent_folder=parent_folder
            )
            return FolderInfo.from_record(folder)

    async def get_folder(self, as_user: str, folder_id: str) -> FolderInfo:
        async with self._session() as sess:
            folder = await self._service.get_folder(sess, as_user, folder_id)
            return FolderInfo.from_record(folder)

    async def move_folder(
        self,
        as_user: str,
        folder_id: str,
        to_folder_id: str | None,
    ) -> MoveResult:
        async with self._session() as sess:
            return await self._service.move_folder(sess, as_user, folder_id, to_folder_id)

    async def share_folder(self, as_user: str, folder_id: str, to_user_id: str) -> ShareResult:
        async with self._session() as sess:
            return await self._service.share_folder(sess, as_user, folder_id, to_user_id)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def service(self) -> HierarchyService:
        return self._service
