"""Folio: sync wrapper around ``FolioAsync``."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any

from folio._folio_async import FolioAsync

if TYPE_CHECKING:
    from folio.types import FileInfo, FolderInfo, MoveResult, NodeKind, ShareResult, UserInfo


class Folio:
    """Synchronous facade backed by a private event loop in a background thread.

    Lets callers use Folio from plain sync code, notebooks, or inside an
    existing async context.  Accepts the same arguments as ``FolioAsync``.

    Usage::

        with Folio("sqlite+aiosqlite:///folio.db") as folio:
            folio.create_user("alice")
            f = folio.create_file("alice", name="notes.md")
            folio.get_file("alice", f.id)
    """

    def __init__(self, url: str | None = None, **kwargs: Any) -> None:
        self._closed = False

        # Private event loop in a daemon thread
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()

        try:
            self._async = self._run(self._async_init(url, kwargs))
        except BaseException:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)
            raise

    @staticmethod
    async def _async_init(url: str | None, kwargs: dict[str, Any]) -> FolioAsync:
        # Engine creation must happen on the private loop
        folio = FolioAsync(url, **kwargs)
        await folio.open()
        return folio

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the async facade, stop the event loop and join the thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._run(self._async.close())
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)

    def __enter__(self) -> Folio:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Operations (sync)
    # ------------------------------------------------------------------

    def create_user(self, user_id: str | None = None) -> UserInfo:
        return self._run(self._async.create_user(user_id))

    def get_user(self, user_id: str) -> UserInfo:
        return self._run(self._async.get_user(user_id))

    def can_access(self, user_id: str, node_id: str, kind: NodeKind | str) -> bool:
        return self._run(self._async.can_access(user_id, node_id, kind))

    def create_file(
        self,
        as_user: str,
        name: str | None = None,
        contents: str | None = None,
        parent_folder: str | None = None,
    ) -> FileInfo:
        return self._run(
            self._async.create_file(
                as_user, name=name, contents=contents, parent_folder=parent_folder
            )
        )

    def get_file(self, as_user: str, file_id: str) -> FileInfo:
        return self._run(self._async.get_file(as_user, file_id))

    def move_file(self, as_user: str, file_id: str, to_folder_id: str | None) -> MoveResult:
        return self._run(self._async.move_file(as_user, file_id, to_folder_id))

    def share_file(self, as_user: str, file_id: str, to_user_id: str) -> ShareResult:
        return self._run(self._async.share_file(as_user, file_id, to_user_id))

    def create_folder(
        self,
        as_user: str,
        name: str | None = None,
        parent_folder: str | None = None,
    ) -> FolderInfo:
        return self._run(
            self._async.create_folder(as_user, name=name, parent_folder=parent_folder)
        )

    def get_folder(self, as_user: str, folder_id: str) -> FolderInfo:
        return self._run(self._async.get_folder(as_user, folder_id))

    def move_folder(self, as_user: str, folder_id: str, to_folder_id: str | None) -> MoveResult:
        return self._run(self._async.move_folder(as_user, folder_id, to_folder_id))

    def share_folder(self, as_user: str, folder_id: str, to_user_id: str) -> ShareResult:
        return self._run(self._async.share_folder(as_user, folder_id, to_user_id))
