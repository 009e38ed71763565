"""User model: opaque identity plus non-authoritative node bookkeeping.

Provides ``UserBase`` (non-table) and ``User`` (concrete table).
Subclass ``UserBase`` with ``table=True`` and a custom ``__tablename__``
to use a different table name.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    """Base fields for a user record. Subclass with ``table=True`` for a concrete table.

    ``files`` and ``folders`` list the nodes the user holds a direct grant
    on.  They are never consulted when resolving access.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    files: list[str] = Field(default_factory=list, sa_type=JSON)
    folders: list[str] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class User(UserBase, table=True):
    """Default user table: ``folio_users``."""

    __tablename__ = "folio_users"
