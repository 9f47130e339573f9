"""Tests for the user, host, and share table models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import IntegrityError

from hostshare.access.permissions import AccessLevel
from hostshare.models import FolderShare, Host, HostShare, User

if TYPE_CHECKING:
    from sqlmodel import Session


class TestTableNames:
    def test_table_names(self) -> None:
        assert User.__tablename__ == "hostshare_users"
        assert Host.__tablename__ == "hostshare_hosts"
        assert HostShare.__tablename__ == "hostshare_host_shares"
        assert FolderShare.__tablename__ == "hostshare_folder_shares"

    def test_share_foreign_keys_cascade(self) -> None:
        fks = {
            (fk.parent.name, fk.column.table.name, fk.ondelete)
            for fk in HostShare.__table__.foreign_keys  # type: ignore[attr-defined]
        }
        assert ("host_id", "hostshare_hosts", "CASCADE") in fks
        assert ("shared_with_user_id", "hostshare_users", "CASCADE") in fks
        assert ("owner_id", "hostshare_users", "CASCADE") in fks


class TestDefaults:
    def test_host_defaults(self, session: Session) -> None:
        session.add(User(id="u1", username="alice"))
        host = Host(name="web", owner_id="u1")
        session.add(host)
        session.flush()
        assert host.id is not None
        assert host.folder == ""
        assert host.created_at is not None

    def test_host_share_defaults(self) -> None:
        share = HostShare(host_id=1, owner_id="u1", shared_with_user_id="u2")
        assert share.id
        assert share.access_level == AccessLevel.VIEWER.value == "viewer"
        assert share.created_by == ""

    def test_folder_share_defaults(self) -> None:
        share = FolderShare(owner_id="u1", shared_with_user_id="u2")
        assert share.folder_name == ""
        assert share.access_level == "viewer"


class TestUniqueConstraints:
    def _users(self, session: Session) -> None:
        session.add(User(id="u1", username="alice"))
        session.add(User(id="u2", username="bob"))

    def test_duplicate_host_share_rejected(self, session: Session) -> None:
        self._users(session)
        host = Host(name="web", owner_id="u1")
        session.add(host)
        session.flush()
        session.add(HostShare(host_id=host.id, owner_id="u1", shared_with_user_id="u2"))
        session.flush()
        session.add(HostShare(host_id=host.id, owner_id="u1", shared_with_user_id="u2"))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_duplicate_folder_share_rejected(self, session: Session) -> None:
        self._users(session)
        session.add(FolderShare(folder_name="prod", owner_id="u1", shared_with_user_id="u2"))
        session.flush()
        session.add(FolderShare(folder_name="prod", owner_id="u1", shared_with_user_id="u2"))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_same_folder_name_different_owner_allowed(self, session: Session) -> None:
        self._users(session)
        session.add(User(id="u3", username="carol"))
        session.add(FolderShare(folder_name="prod", owner_id="u1", shared_with_user_id="u3"))
        session.add(FolderShare(folder_name="prod", owner_id="u2", shared_with_user_id="u3"))
        session.flush()
