"""Tests for the sync Folio facade."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest

from folio import Folio
from folio.exceptions import AccessDeniedError, InvalidOperationError
from folio.types import NodeKind

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def folio(tmp_path: Path) -> Iterator[Folio]:
    f = Folio(f"sqlite+aiosqlite:///{tmp_path / 'folio.db'}")
    f.create_user("alice")
    f.create_user("bob")
    yield f
    f.close()


class TestFolioSync:
    def test_create_get_share(self, folio: Folio):
        folder = folio.create_folder("alice", name="docs")
        file = folio.create_file("alice", name="a.md", contents="hi", parent_folder=folder.id)

        with pytest.raises(AccessDeniedError):
            folio.get_file("bob", file.id)

        result = folio.share_folder("alice", folder.id, "bob")
        assert result.granted == 2
        assert folio.get_file("bob", file.id).contents == "hi"
        assert folio.get_user("bob").folders == [folder.id]

    def test_move(self, folio: Folio):
        a = folio.create_folder("alice")
        b = folio.create_folder("alice")
        file = folio.create_file("alice")

        assert folio.move_file("alice", file.id, a.id).new_parent == a.id
        assert folio.move_folder("alice", a.id, b.id).success
        assert folio.get_folder("alice", b.id).child_folders == [a.id]
        with pytest.raises(InvalidOperationError):
            folio.move_folder("alice", b.id, a.id)

    def test_share_file(self, folio: Folio):
        file = folio.create_file("alice")
        folio.share_file("alice", file.id, "bob")
        assert folio.can_access("bob", file.id, NodeKind.FILE)

    def test_persists_across_instances(self, tmp_path: Path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'persist.db'}"
        with Folio(url) as first:
            first.create_user("alice")
            file_id = first.create_file("alice", name="keep.md").id
        with Folio(url) as second:
            assert second.get_file("alice", file_id).name == "keep.md"

    def test_close_idempotent(self, tmp_path: Path):
        f = Folio(f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
        f.close()
        f.close()

    def test_failed_init_stops_loop_thread(self, tmp_path: Path):
        before = set(threading.enumerate())
        with pytest.raises(ValueError, match="at most one"):
            Folio(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}", session_factory=object())
        leftover = [t for t in threading.enumerate() if t not in before and t.is_alive()]
        assert leftover == []
