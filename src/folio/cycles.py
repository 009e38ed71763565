"""CycleGuard: structural validation of folder moves."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import ConsistencyError, InvalidOperationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from .store import EntityStore


class CycleGuard:
    """Rejects folder moves that would break the forest shape."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def would_create_cycle(
        self,
        session: AsyncSession,
        folder_id: str,
        proposed_parent_id: str | None,
    ) -> bool:
        """True if *folder_id* appears on the ancestor path of *proposed_parent_id*.

        Moving to ``None`` (the root) never creates a cycle.  A self-move is
        not a cycle question; ``check_move`` rejects it separately.
        """
        if proposed_parent_id is None:
            return False

        seen: set[str] = set()
        current: str | None = proposed_parent_id
        while current is not None:
            if current == folder_id:
                return True
            if current in seen:
                raise ConsistencyError(f"Folder cycle detected above {proposed_parent_id}")
            seen.add(current)
            folder = await self._store.get_folder(session, current)
            if folder is None:
                raise ConsistencyError(f"Dangling parent folder {current}")
            current = folder.parent_folder
        return False

    async def check_move(
        self,
        session: AsyncSession,
        folder_id: str,
        proposed_parent_id: str | None,
    ) -> None:
        """Raise ``InvalidOperationError`` on a self-move or a cycle-creating move."""
        if folder_id == proposed_parent_id:
            raise InvalidOperationError(f"Cannot move folder into itself: {folder_id}")
        if await self.would_create_cycle(session, folder_id, proposed_parent_id):
            raise InvalidOperationError(
                f"Cannot move folder {folder_id} into its own descendant {proposed_parent_id}"
            )
