"""EntityStore: field-level reads and writes for users, folders, and files.

Stateless adapter that receives the record models at construction
and a session at call time.  Set-valued columns are JSON lists; every
write assigns a fresh list so the ORM sees the change.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import InvalidOperationError, StorageError
from .types import NodeKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from folio.models import FileBase, FolderBase, UserBase

logger = logging.getLogger(__name__)


class EntityStore:
    """Point reads and writes of individual record fields by id.

    Constructor receives the concrete models so callers can use custom
    SQLModel subclasses with different table names.  Writes flush but
    never commit; the caller owns the transaction.
    """

    def __init__(
        self,
        user_model: type[UserBase] | None = None,
        folder_model: type[FolderBase] | None = None,
        file_model: type[FileBase] | None = None,
    ) -> None:
        from folio.models import File, Folder, User

        self._user_model: type[UserBase] = user_model or User
        self._folder_model: type[FolderBase] = folder_model or Folder
        self._file_model: type[FileBase] = file_model or File

    @property
    def user_model(self) -> type[UserBase]:
        return self._user_model

    @property
    def folder_model(self) -> type[FolderBase]:
        return self._folder_model

    @property
    def file_model(self) -> type[FileBase]:
        return self._file_model

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_user(self, session: AsyncSession, user_id: str) -> UserBase | None:
        return await session.get(self._user_model, user_id)

    async def get_folder(self, session: AsyncSession, folder_id: str) -> FolderBase | None:
        return await session.get(self._folder_model, folder_id)

    async def get_file(self, session: AsyncSession, file_id: str) -> FileBase | None:
        return await session.get(self._file_model, file_id)

    async def get_node(
        self,
        session: AsyncSession,
        kind: NodeKind,
        node_id: str,
    ) -> FileBase | FolderBase | None:
        """Get a file or folder record by id."""
        if kind is NodeKind.FOLDER:
            return await self.get_folder(session, node_id)
        return await self.get_file(session, node_id)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_user(self, session: AsyncSession, user_id: str | None = None) -> UserBase:
        """Insert a user. Raises if *user_id* is already taken."""
        if user_id is not None:
            if await self.get_user(session, user_id) is not None:
                raise InvalidOperationError(f"User already exists: {user_id}")
            user = self._user_model(id=user_id)
        else:
            user = self._user_model()
        session.add(user)
        await session.flush()
        return user

    async def create_folder(self, session: AsyncSession, name: str | None = None) -> FolderBase:
        folder = self._folder_model(name=name)
        session.add(folder)
        await session.flush()
        return folder

    async def create_file(
        self,
        session: AsyncSession,
        name: str | None = None,
        contents: str | None = None,
    ) -> FileBase:
        file = self._file_model(name=name, contents=contents)
        session.add(file)
        await session.flush()
        return file

    # ------------------------------------------------------------------
    # Field writes
    # ------------------------------------------------------------------

    async def _require_node(
        self,
        session: AsyncSession,
        kind: NodeKind,
        node_id: str,
    ) -> FileBase | FolderBase:
        node = await self.get_node(session, kind, node_id)
        if node is None:
            raise StorageError(f"Cannot update missing {kind.value}: {node_id}")
        return node

    async def _require_folder(self, session: AsyncSession, folder_id: str) -> FolderBase:
        folder = await self.get_folder(session, folder_id)
        if folder is None:
            raise StorageError(f"Cannot update missing folder: {folder_id}")
        return folder

    async def set_parent_folder(
        self,
        session: AsyncSession,
        kind: NodeKind,
        node_id: str,
        parent_id: str | None,
    ) -> None:
        """Point *node_id* at *parent_id* (``None`` detaches it to the root)."""
        node = await self._require_node(session, kind, node_id)
        node.parent_folder = parent_id
        await session.flush()

    async def add_grant(
        self,
        session: AsyncSession,
        kind: NodeKind,
        node_id: str,
        user_id: str,
    ) -> bool:
        """Add *user_id* to the node's direct grants. Returns True if newly added."""
        node = await self._require_node(session, kind, node_id)
        if user_id in node.direct_grants:
            return False
        node.direct_grants = [*node.direct_grants, user_id]
        await session.flush()
        return True

    async def add_child(
        self,
        session: AsyncSession,
        kind: NodeKind,
        folder_id: str,
        child_id: str,
    ) -> None:
        """Add *child_id* to the folder's child set for *kind*."""
        folder = await self._require_folder(session, folder_id)
        if kind is NodeKind.FOLDER:
            if child_id not in folder.child_folders:
                folder.child_folders = [*folder.child_folders, child_id]
        elif child_id not in folder.child_files:
            folder.child_files = [*folder.child_files, child_id]
        await session.flush()

    async def remove_child(
        self,
        session: AsyncSession,
        kind: NodeKind,
        folder_id: str,
        child_id: str,
    ) -> None:
        """Remove *child_id* from the folder's child set for *kind*."""
        folder = await self._require_folder(session, folder_id)
        if kind is NodeKind.FOLDER:
            folder.child_folders = [i for i in folder.child_folders if i != child_id]
        else:
            folder.child_files = [i for i in folder.child_files if i != child_id]
        await session.flush()

    async def add_to_user_nodes(
        self,
        session: AsyncSession,
        kind: NodeKind,
        user_id: str,
        node_id: str,
    ) -> None:
        """Record *node_id* in the user's bookkeeping list.

        Silently skips unknown users; the list is informational only.
        """
        user = await self.get_user(session, user_id)
        if user is None:
            logger.debug("Skipping node bookkeeping for unknown user %s", user_id)
            return
        if kind is NodeKind.FOLDER:
            if node_id not in user.folders:
                user.folders = [*user.folders, node_id]
        elif node_id not in user.files:
            user.files = [*user.files, node_id]
        await session.flush()
