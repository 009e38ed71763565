"""AccessResolver: live access resolution over the folder hierarchy.

A user can reach a node when they hold a direct grant on it or on any
folder on its current ancestor chain.  Nothing is cached: every check
walks ``parent_folder`` links from the node toward the root.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any

from .exceptions import AccessDeniedError, ConsistencyError, NodeNotFoundError
from .types import NodeKind

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from .store import EntityStore

logger = logging.getLogger(__name__)


class AccessResolver:
    """Read-only permission checks.

    Stateless: receives the ``EntityStore`` at construction and a
    session at call time.
    """

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def can_access(
        self,
        session: AsyncSession,
        user_id: str,
        node_id: str,
        kind: NodeKind,
    ) -> bool:
        """Return True if *user_id* can reach *node_id*.

        Raises ``NodeNotFoundError`` when the node itself does not exist
        and ``ConsistencyError`` when the ancestor chain is dangling or
        loops back on itself.
        """
        node = await self._store.get_node(session, kind, node_id)
        if node is None:
            raise NodeNotFoundError(f"{kind.value.capitalize()} not found: {node_id}")

        seen: set[str] = {node_id} if kind is NodeKind.FOLDER else set()
        depth = 0
        current = node
        while True:
            if user_id in current.direct_grants:
                logger.debug(
                    "%s reaches %s %s at depth %d", user_id, kind.value, node_id, depth
                )
                return True

            parent_id = current.parent_folder
            if parent_id is None:
                return False
            if parent_id in seen:
                raise ConsistencyError(f"Folder cycle detected above {kind.value} {node_id}")
            seen.add(parent_id)

            parent = await self._store.get_folder(session, parent_id)
            if parent is None:
                raise ConsistencyError(f"Dangling parent folder {parent_id} above {node_id}")
            current = parent
            depth += 1

    async def require_access(
        self,
        session: AsyncSession,
        user_id: str,
        node_id: str,
        kind: NodeKind,
    ) -> None:
        """Raise ``AccessDeniedError`` unless *user_id* can reach *node_id*.

        The message is the same whichever link of the chain was missing.
        """
        if not await self.can_access(session, user_id, node_id, kind):
            logger.debug("Denied %s on %s %s", user_id, kind.value, node_id)
            raise AccessDeniedError(f"Access denied: {kind.value} {node_id}")


def requires_access(
    kind: NodeKind,
    id_arg: str,
    *,
    optional: bool = False,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Guard an async operation method with an access check.

    The wrapped method must take ``session`` and ``as_user`` arguments and
    its instance must expose an ``AccessResolver`` as ``resolver``.  The
    node id is read from the argument named *id_arg*; with *optional*, a
    ``None`` id skips the check.  Guards stack and run outermost first.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            bound = sig.bind(self, *args, **kwargs)
            bound.apply_defaults()
            node_id = bound.arguments[id_arg]
            if node_id is None:
                if not optional:
                    raise NodeNotFoundError(f"No {kind.value} id given for {id_arg}")
            else:
                await self.resolver.require_access(
                    bound.arguments["session"],
                    bound.arguments["as_user"],
                    node_id,
                    kind,
                )
            return await func(self, *args, **kwargs)

        return wrapper

    return decorator
