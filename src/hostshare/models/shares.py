"""Share models — direct host shares and folder shares.

Provides ``HostShareBase`` / ``FolderShareBase`` (non-table) and the
concrete ``HostShare`` / ``FolderShare`` tables.  Subclass a base with
``table=True`` and a custom ``__tablename__`` to use different table
names; the subclass must declare its own unique constraint.

Share rows are append/delete only.  Revocation deletes the row.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel

from hostshare.access.permissions import AccessLevel


class HostShareBase(SQLModel):
    """Base fields for a direct host share."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    host_id: int = Field(index=True)
    # Copied from the host at creation time and kept for audit
    owner_id: str = Field(index=True)
    shared_with_user_id: str = Field(index=True)
    access_level: str = Field(default=AccessLevel.VIEWER.value)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )
    created_by: str = Field(default="")


class HostShare(HostShareBase, table=True):
    """Default host share table — ``hostshare_host_shares``."""

    __tablename__ = "hostshare_host_shares"
    __table_args__ = (
        UniqueConstraint("host_id", "shared_with_user_id", name="uq_host_share"),
        ForeignKeyConstraint(["host_id"], ["hostshare_hosts.id"], ondelete="CASCADE"),
        ForeignKeyConstraint(["owner_id"], ["hostshare_users.id"], ondelete="CASCADE"),
        ForeignKeyConstraint(
            ["shared_with_user_id"], ["hostshare_users.id"], ondelete="CASCADE"
        ),
    )


class FolderShareBase(SQLModel):
    """Base fields for a folder share.

    Covers every host whose ``(folder, owner_id)`` equals
    ``(folder_name, owner_id)`` at resolution time.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    folder_name: str = Field(default="", index=True)
    owner_id: str = Field(index=True)
    shared_with_user_id: str = Field(index=True)
    access_level: str = Field(default=AccessLevel.VIEWER.value)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )
    created_by: str = Field(default="")


class FolderShare(FolderShareBase, table=True):
    """Default folder share table — ``hostshare_folder_shares``."""

    __tablename__ = "hostshare_folder_shares"
    __table_args__ = (
        UniqueConstraint(
            "folder_name", "owner_id", "shared_with_user_id", name="uq_folder_share"
        ),
        ForeignKeyConstraint(["owner_id"], ["hostshare_users.id"], ondelete="CASCADE"),
        ForeignKeyConstraint(
            ["shared_with_user_id"], ["hostshare_users.id"], ondelete="CASCADE"
        ),
    )
