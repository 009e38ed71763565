"""Folder model.

Provides ``FolderBase`` (non-table) and ``Folder`` (concrete table).
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel


class FolderBase(SQLModel):
    """Base fields for a folder record. Subclass with ``table=True`` for a concrete table.

    ``child_files`` / ``child_folders`` mirror the ``parent_folder`` pointers
    of the children; ``direct_grants`` holds user ids shared on this folder.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str | None = Field(default=None)
    parent_folder: str | None = Field(default=None, index=True)
    direct_grants: list[str] = Field(default_factory=list, sa_type=JSON)
    child_files: list[str] = Field(default_factory=list, sa_type=JSON)
    child_folders: list[str] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class Folder(FolderBase, table=True):
    """Default folder table: ``folio_folders``."""

    __tablename__ = "folio_folders"
