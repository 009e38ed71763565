"""HierarchyService: the create / get / move / share use cases.

Every operation authorizes the acting user first (via the guards below)
and only then touches the store, so a rejected call never leaves a
partial write behind.  Sessions are provided per call; the caller owns
commit and rollback.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any

from .access import AccessResolver, requires_access
from .cycles import CycleGuard
from .exceptions import UserNotFoundError
from .grants import GrantMutator
from .store import EntityStore
from .types import MoveResult, NodeKind, ShareResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from folio.models import FileBase, FolderBase, UserBase

logger = logging.getLogger(__name__)


def requires_user(
    *arg_names: str,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Raise ``UserNotFoundError`` unless each named user argument exists."""

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            bound = sig.bind(self, *args, **kwargs)
            for name in arg_names:
                await self.get_user(bound.arguments["session"], bound.arguments[name])
            return await func(self, *args, **kwargs)

        return wrapper

    return decorator


class HierarchyService:
    """Composes the store, resolver, cycle guard, and grant mutator."""

    def __init__(
        self,
        store: EntityStore | None = None,
        *,
        resolver: AccessResolver | None = None,
        guard: CycleGuard | None = None,
        grants: GrantMutator | None = None,
    ) -> None:
        self.store = store or EntityStore()
        self.resolver = resolver or AccessResolver(self.store)
        self.guard = guard or CycleGuard(self.store)
        self.grants = grants or GrantMutator(self.store)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, session: AsyncSession, user_id: str | None = None) -> UserBase:
        user = await self.store.create_user(session, user_id)
        logger.debug("Created user %s", user.id)
        return user

    async def get_user(self, session: AsyncSession, user_id: str) -> UserBase:
        user = await self.store.get_user(session, user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    async def can_access(
        self,
        session: AsyncSession,
        user_id: str,
        node_id: str,
        kind: NodeKind,
    ) -> bool:
        return await self.resolver.can_access(session, user_id, node_id, kind)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    @requires_user("as_user")
    @requires_access(NodeKind.FOLDER, "parent_folder", optional=True)
    async def create_file(
        self,
        session: AsyncSession,
        as_user: str,
        name: str | None = None,
        contents: str | None = None,
        parent_folder: str | None = None,
    ) -> FileBase:
        """Create a file, optionally inside *parent_folder*, owned by *as_user*."""
        file = await self.store.create_file(session, name=name, contents=contents)
        if parent_folder is not None:
            await self.grants.reparent(session, NodeKind.FILE, file.id, parent_folder)
        await self.grants.grant_direct_access(session, NodeKind.FILE, file.id, as_user)
        logger.debug("%s created file %s in %s", as_user, file.id, parent_folder)
        return file

    @requires_user("as_user")
    @requires_access(NodeKind.FILE, "file_id")
    async def get_file(self, session: AsyncSession, as_user: str, file_id: str) -> FileBase:
        file = await self.store.get_file(session, file_id)
        assert file is not None
        return file

    @requires_user("as_user")
    @requires_access(NodeKind.FILE, "file_id")
    @requires_access(NodeKind.FOLDER, "to_folder_id", optional=True)
    async def move_file(
        self,
        session: AsyncSession,
        as_user: str,
        file_id: str,
        to_folder_id: str | None,
    ) -> MoveResult:
        """Move a file into *to_folder_id*, or to the root when it is ``None``."""
        old_parent = await self.grants.reparent(session, NodeKind.FILE, file_id, to_folder_id)
        return MoveResult(
            success=True,
            message=f"Moved file {file_id}",
            node_id=file_id,
            old_parent=old_parent,
            new_parent=to_folder_id,
        )

    @requires_user("as_user", "to_user_id")
    @requires_access(NodeKind.FILE, "file_id")
    async def share_file(
        self,
        session: AsyncSession,
        as_user: str,
        file_id: str,
        to_user_id: str,
    ) -> ShareResult:
        added = await self.grants.grant_direct_access(session, NodeKind.FILE, file_id, to_user_id)
        return ShareResult(
            success=True,
            message=f"Shared file {file_id} with {to_user_id}"
            if added
            else f"File {file_id} already shared with {to_user_id}",
            node_id=file_id,
            grantee_id=to_user_id,
            granted=int(added),
        )

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    @requires_user("as_user")
    @requires_access(NodeKind.FOLDER, "parent_folder", optional=True)
    async def create_folder(
        self,
        session: AsyncSession,
        as_user: str,
        name: str | None = None,
        parent_folder: str | None = None,
    ) -> FolderBase:
        folder = await self.store.create_folder(session, name=name)
        if parent_folder is not None:
            await self.grants.reparent(session, NodeKind.FOLDER, folder.id, parent_folder)
        await self.grants.grant_direct_access(session, NodeKind.FOLDER, folder.id, as_user)
        logger.debug("%s created folder %s in %s", as_user, folder.id, parent_folder)
        return folder

    @requires_user("as_user")
    @requires_access(NodeKind.FOLDER, "folder_id")
    async def get_folder(
        self,
        session: AsyncSession,
        as_user: str,
        folder_id: str,
    ) -> FolderBase:
        folder = await self.store.get_folder(session, folder_id)
        assert folder is not None
        return folder

    @requires_user("as_user")
    @requires_access(NodeKind.FOLDER, "folder_id")
    @requires_access(NodeKind.FOLDER, "to_folder_id", optional=True)
    async def move_folder(
        self,
        session: AsyncSession,
        as_user: str,
        folder_id: str,
        to_folder_id: str | None,
    ) -> MoveResult:
        """Move a folder and its whole subtree.

        Grants inside the subtree are left untouched; only access derived
        through the old ancestors is lost.
        """
        await self.guard.check_move(session, folder_id, to_folder_id)
        old_parent = await self.grants.reparent(
            session, NodeKind.FOLDER, folder_id, to_folder_id
        )
        return MoveResult(
            success=True,
            message=f"Moved folder {folder_id}",
            node_id=folder_id,
            old_parent=old_parent,
            new_parent=to_folder_id,
        )

    @requires_user("as_user", "to_user_id")
    @requires_access(NodeKind.FOLDER, "folder_id")
    async def share_folder(
        self,
        session: AsyncSession,
        as_user: str,
        folder_id: str,
        to_user_id: str,
    ) -> ShareResult:
        """Share a folder and, as of now, everything inside it."""
        granted = await self.grants.share_subtree(session, folder_id, to_user_id)
        return ShareResult(
            success=True,
            message=f"Shared folder {folder_id} with {to_user_id} ({granted} new grant(s))",
            node_id=folder_id,
            grantee_id=to_user_id,
            granted=granted,
        )
