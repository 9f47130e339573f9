"""User model — the identity directory consumed by access checks.

Only ``id`` and ``is_admin`` drive policy; ``username`` is carried for
share listings.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    """Base fields for a user record. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(primary_key=True)
    username: str = Field(default="", index=True)
    is_admin: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class User(UserBase, table=True):
    """Default user table — ``hostshare_users``."""

    __tablename__ = "hostshare_users"
