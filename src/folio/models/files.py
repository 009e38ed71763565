"""File model.

Provides ``FileBase`` (non-table) and ``File`` (concrete table).
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel


class FileBase(SQLModel):
    """Base fields for a file record. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str | None = Field(default=None)
    contents: str | None = Field(default=None)
    parent_folder: str | None = Field(default=None, index=True)
    direct_grants: list[str] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class File(FileBase, table=True):
    """Default file table: ``folio_files``."""

    __tablename__ = "folio_files"
