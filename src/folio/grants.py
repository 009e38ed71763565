"""GrantMutator: direct grants, reparenting, and subtree shares."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ConsistencyError, NodeNotFoundError
from .types import NodeKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from .store import EntityStore

logger = logging.getLogger(__name__)


class GrantMutator:
    """Applies grant and containment changes through the ``EntityStore``.

    Never removes a grant.  Moves touch only containment fields, so
    access that was derived through the old ancestry disappears with it
    while direct grants anywhere in the moved subtree stay put.
    """

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def grant_direct_access(
        self,
        session: AsyncSession,
        kind: NodeKind,
        node_id: str,
        user_id: str,
    ) -> bool:
        """Add a direct grant. Re-granting is a no-op that returns False."""
        added = await self._store.add_grant(session, kind, node_id, user_id)
        if added:
            await self._store.add_to_user_nodes(session, kind, user_id, node_id)
            logger.info("Granted %s direct access to %s %s", user_id, kind.value, node_id)
        return added

    async def reparent(
        self,
        session: AsyncSession,
        kind: NodeKind,
        node_id: str,
        new_parent_id: str | None,
    ) -> str | None:
        """Move *node_id* under *new_parent_id* and return the old parent id.

        Steps run in a fixed order: detach from the old parent's child
        set, update ``parent_folder``, attach to the new parent's child set.
        """
        node = await self._store.get_node(session, kind, node_id)
        if node is None:
            raise NodeNotFoundError(f"{kind.value.capitalize()} not found: {node_id}")

        old_parent_id = node.parent_folder
        if old_parent_id == new_parent_id:
            return old_parent_id

        if old_parent_id is not None:
            await self._store.remove_child(session, kind, old_parent_id, node_id)
        await self._store.set_parent_folder(session, kind, node_id, new_parent_id)
        if new_parent_id is not None:
            await self._store.add_child(session, kind, new_parent_id, node_id)

        logger.info(
            "Moved %s %s from %s to %s", kind.value, node_id, old_parent_id, new_parent_id
        )
        return old_parent_id

    async def share_subtree(
        self,
        session: AsyncSession,
        folder_id: str,
        user_id: str,
    ) -> int:
        """Grant *user_id* direct access to *folder_id* and everything under it.

        Walks the subtree with an explicit stack.  Returns the number of
        nodes that newly received a grant.
        """
        granted = 0
        stack = [folder_id]
        seen: set[str] = set()
        while stack:
            current_id = stack.pop()
            if current_id in seen:
                raise ConsistencyError(f"Folder {current_id} reached twice under {folder_id}")
            seen.add(current_id)

            folder = await self._store.get_folder(session, current_id)
            if folder is None:
                raise ConsistencyError(f"Missing child folder {current_id} under {folder_id}")

            if await self.grant_direct_access(session, NodeKind.FOLDER, current_id, user_id):
                granted += 1
            for file_id in list(folder.child_files):
                if await self.grant_direct_access(session, NodeKind.FILE, file_id, user_id):
                    granted += 1
            stack.extend(folder.child_folders)

        logger.debug("Shared subtree %s with %s (%d new grants)", folder_id, user_id, granted)
        return granted
