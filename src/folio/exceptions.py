"""Custom exception hierarchy for Folio."""


class FolioError(Exception):
    """Base exception for all Folio errors."""


class NotFoundError(FolioError):
    """Raised when a referenced id does not exist in the store."""


class NodeNotFoundError(NotFoundError):
    """Raised when a file or folder id does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not exist."""


class AccessDeniedError(FolioError, PermissionError):
    """Raised when the acting user cannot reach the target node."""


class InvalidOperationError(FolioError, ValueError):
    """Raised on structurally invalid requests (self-move, cycles, duplicate ids)."""


class StorageError(FolioError):
    """Raised on storage backend failures (DB connection, missing rows on write, etc.)."""


class ConsistencyError(FolioError):
    """Raised when the stored hierarchy is corrupt (dangling parent, cycle)."""
