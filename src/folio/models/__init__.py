"""SQLModel database models for Folio."""

from folio.models.files import File, FileBase
from folio.models.folders import Folder, FolderBase
from folio.models.users import User, UserBase

__all__ = [
    "File",
    "FileBase",
    "Folder",
    "FolderBase",
    "User",
    "UserBase",
]
