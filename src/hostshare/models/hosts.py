"""Host model — the owned, shareable resource.

A folder is not an entity: it is the set of hosts sharing the same
``owner_id`` and ``folder`` string.  An empty string is the "no folder"
group and matches like any other value.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel


class HostBase(SQLModel):
    """Base fields for a host record. Subclass with ``table=True`` for a concrete table."""

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(default="")
    owner_id: str = Field(index=True)
    folder: str = Field(default="")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class Host(HostBase, table=True):
    """Default host table — ``hostshare_hosts``."""

    __tablename__ = "hostshare_hosts"
    __table_args__ = (
        ForeignKeyConstraint(["owner_id"], ["hostshare_users.id"], ondelete="CASCADE"),
        Index("ix_hostshare_hosts_owner_folder", "owner_id", "folder"),
    )
