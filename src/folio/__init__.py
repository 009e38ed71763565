"""Folio: access resolution and sharing for a hierarchical file store.

Decides whether a user may read, move, or share a file or folder, and
keeps the direct grants behind that decision as the tree changes.
"""

__version__ = "0.1.0"

from folio._folio import Folio
from folio._folio_async import FolioAsync
from folio.access import AccessResolver, requires_access
from folio.cycles import CycleGuard
from folio.exceptions import (
    AccessDeniedError,
    ConsistencyError,
    FolioError,
    InvalidOperationError,
    NodeNotFoundError,
    NotFoundError,
    StorageError,
    UserNotFoundError,
)
from folio.grants import GrantMutator
from folio.hierarchy import HierarchyService
from folio.store import EntityStore
from folio.types import (
    FileInfo,
    FolderInfo,
    MoveResult,
    NodeKind,
    ShareResult,
    UserInfo,
)

__all__ = [
    "AccessDeniedError",
    "AccessResolver",
    "ConsistencyError",
    "CycleGuard",
    "EntityStore",
    "FileInfo",
    "FolderInfo",
    "Folio",
    "FolioAsync",
    "FolioError",
    "GrantMutator",
    "HierarchyService",
    "InvalidOperationError",
    "MoveResult",
    "NodeKind",
    "NodeNotFoundError",
    "NotFoundError",
    "ShareResult",
    "StorageError",
    "UserInfo",
    "UserNotFoundError",
    "__version__",
    "requires_access",
]
