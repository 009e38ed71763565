"""Result types: FileInfo, FolderInfo, MoveResult, ShareResult, etc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from folio.models import FileBase, FolderBase, UserBase


class NodeKind(str, Enum):
    """Kind of node in the hierarchy."""

    FILE = "file"
    FOLDER = "folder"


@dataclass
class UserInfo:
    """User metadata."""

    id: str
    files: list[str] = field(default_factory=list)
    folders: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, user: UserBase) -> UserInfo:
        return cls(
            id=user.id,
            files=list(user.files),
            folders=list(user.folders),
            created_at=user.created_at,
        )


@dataclass
class FileInfo:
    """File record as returned to callers."""

    id: str
    name: str | None = None
    contents: str | None = None
    parent_folder: str | None = None
    direct_grants: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, f: FileBase) -> FileInfo:
        return cls(
            id=f.id,
            name=f.name,
            contents=f.contents,
            parent_folder=f.parent_folder,
            direct_grants=list(f.direct_grants),
            created_at=f.created_at,
        )


@dataclass
class FolderInfo:
    """Folder record as returned to callers."""

    id: str
    name: str | None = None
    parent_folder: str | None = None
    direct_grants: list[str] = field(default_factory=list)
    child_files: list[str] = field(default_factory=list)
    child_folders: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, f: FolderBase) -> FolderInfo:
        return cls(
            id=f.id,
            name=f.name,
            parent_folder=f.parent_folder,
            direct_grants=list(f.direct_grants),
            child_files=list(f.child_files),
            child_folders=list(f.child_folders),
            created_at=f.created_at,
        )


@dataclass
class MoveResult:
    """Result of a move operation."""

    success: bool
    message: str
    node_id: str | None = None
    old_parent: str | None = None
    new_parent: str | None = None


@dataclass
class ShareResult:
    """Result of a share operation.

    ``granted`` counts the nodes that newly received a direct grant; it is
    0 when the share was already in place.
    """

    success: bool
    message: str
    node_id: str | None = None
    grantee_id: str | None = None
    granted: int = 0
