"""Tests for database models."""

from __future__ import annotations

from sqlmodel import Session, select

from folio.models import File, Folder, User

# ---------------------------------------------------------------------------
# Table creation
# ---------------------------------------------------------------------------


class TestTableCreation:
    def test_tables_exist(self, engine):
        with engine.connect() as conn:
            names = engine.dialect.get_table_names(conn)
        assert {"folio_users", "folio_folders", "folio_files"} <= set(names)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaultFactories:
    def test_user_defaults(self, session: Session):
        u = User()
        session.add(u)
        session.commit()
        session.refresh(u)

        assert u.id  # UUID string
        assert u.files == []
        assert u.folders == []
        assert u.created_at is not None

    def test_folder_defaults(self, session: Session):
        f = Folder(name="docs")
        session.add(f)
        session.commit()
        session.refresh(f)

        assert f.id
        assert f.name == "docs"
        assert f.parent_folder is None
        assert f.direct_grants == []
        assert f.child_files == []
        assert f.child_folders == []

    def test_file_defaults(self, session: Session):
        f = File()
        session.add(f)
        session.commit()
        session.refresh(f)

        assert f.name is None
        assert f.contents is None
        assert f.parent_folder is None
        assert f.direct_grants == []

    def test_ids_are_unique(self):
        assert File().id != File().id


class TestJsonColumns:
    def test_reassigned_list_is_persisted(self, session: Session):
        f = File(name="a.md")
        session.add(f)
        session.commit()

        f.direct_grants = [*f.direct_grants, "alice"]
        session.commit()
        session.expire_all()

        loaded = session.exec(select(File).where(File.name == "a.md")).one()
        assert loaded.direct_grants == ["alice"]

    def test_parent_folder_roundtrip(self, session: Session):
        parent = Folder(name="p")
        child = Folder(name="c", parent_folder=parent.id)
        session.add(parent)
        session.add(child)
        session.commit()

        rows = session.exec(select(Folder).where(Folder.parent_folder == parent.id)).all()
        assert [r.name for r in rows] == ["c"]
