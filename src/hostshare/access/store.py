"""ShareStore — durable share records, no policy.

Stateless service that receives the share models at construction
and a session at call time.  Flushes, never commits.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, or_
from sqlmodel import select

from .dialect import insert_if_absent
from .exceptions import ConflictError
from .permissions import AccessLevel

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hostshare.models.shares import FolderShareBase, HostShareBase


class ShareStore:
    """Persists host shares and folder shares.

    Constructor receives the concrete share models so callers can use
    custom SQLModel subclasses with different table names.
    """

    def __init__(
        self,
        host_share_model: type[HostShareBase],
        folder_share_model: type[FolderShareBase],
        *,
        dialect: str = "sqlite",
    ) -> None:
        self.host_share_model = host_share_model
        self.folder_share_model = folder_share_model
        self._dialect = dialect

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_host_share(
        self,
        session: AsyncSession,
        host_id: int,
        owner_id: str,
        shared_with_user_id: str,
        created_by: str,
        *,
        access_level: AccessLevel = AccessLevel.VIEWER,
    ) -> HostShareBase:
        """Insert a host share.  Raises ``ConflictError`` if one exists for the pair."""
        model = self.host_share_model
        share_id = str(uuid.uuid4())
        inserted = await insert_if_absent(
            session,
            self._dialect,
            model,
            {
                "id": share_id,
                "host_id": host_id,
                "owner_id": owner_id,
                "shared_with_user_id": shared_with_user_id,
                "access_level": access_level.value,
                "created_at": datetime.now(UTC),
                "created_by": created_by,
            },
            conflict_keys=["host_id", "shared_with_user_id"],
        )
        if not inserted:
            raise ConflictError(
                f"Host {host_id} is already shared with {shared_with_user_id!r}"
            )
        share = await self.get_host_share(session, share_id)
        assert share is not None
        return share

    async def create_folder_share(
        self,
        session: AsyncSession,
        folder_name: str,
        owner_id: str,
        shared_with_user_id: str,
        created_by: str,
        *,
        access_level: AccessLevel = AccessLevel.VIEWER,
    ) -> FolderShareBase:
        """Insert a folder share.  Raises ``ConflictError`` if one exists for the triple."""
        model = self.folder_share_model
        share_id = str(uuid.uuid4())
        inserted = await insert_if_absent(
            session,
            self._dialect,
            model,
            {
                "id": share_id,
                "folder_name": folder_name,
                "owner_id": owner_id,
                "shared_with_user_id": shared_with_user_id,
                "access_level": access_level.value,
                "created_at": datetime.now(UTC),
                "created_by": created_by,
            },
            conflict_keys=["folder_name", "owner_id", "shared_with_user_id"],
        )
        if not inserted:
            raise ConflictError(
                f"Folder {folder_name!r} of {owner_id!r} is already shared "
                f"with {shared_with_user_id!r}"
            )
        share = await self.get_folder_share(session, share_id)
        assert share is not None
        return share

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def get_host_share(
        self, session: AsyncSession, share_id: str
    ) -> HostShareBase | None:
        model = self.host_share_model
        result = await session.execute(select(model).where(model.id == share_id))
        return result.scalar_one_or_none()

    async def get_folder_share(
        self, session: AsyncSession, share_id: str
    ) -> FolderShareBase | None:
        model = self.folder_share_model
        result = await session.execute(select(model).where(model.id == share_id))
        return result.scalar_one_or_none()

    async def list_host_shares_for_host(
        self, session: AsyncSession, host_id: int
    ) -> list[HostShareBase]:
        """List all shares for a host, oldest first."""
        model = self.host_share_model
        result = await session.execute(
            select(model)
            .where(model.host_id == host_id)
            .order_by(model.created_at, model.id)
        )
        return list(result.scalars().all())

    async def list_folder_shares_for_folder(
        self, session: AsyncSession, owner_id: str, folder_name: str
    ) -> list[FolderShareBase]:
        """List all shares on the ``(owner_id, folder_name)`` folder, oldest first."""
        model = self.folder_share_model
        result = await session.execute(
            select(model)
            .where(model.owner_id == owner_id, model.folder_name == folder_name)
            .order_by(model.created_at, model.id)
        )
        return list(result.scalars().all())

    async def list_host_shares_for_user(
        self, session: AsyncSession, shared_with_user_id: str
    ) -> list[HostShareBase]:
        """List host shares naming *shared_with_user_id* as recipient."""
        model = self.host_share_model
        result = await session.execute(
            select(model)
            .where(model.shared_with_user_id == shared_with_user_id)
            .order_by(model.created_at, model.id)
        )
        return list(result.scalars().all())

    async def list_folder_shares_for_user(
        self, session: AsyncSession, shared_with_user_id: str
    ) -> list[FolderShareBase]:
        """List folder shares naming *shared_with_user_id* as recipient."""
        model = self.folder_share_model
        result = await session.execute(
            select(model)
            .where(model.shared_with_user_id == shared_with_user_id)
            .order_by(model.created_at, model.id)
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_host_share(self, session: AsyncSession, share_id: str) -> bool:
        """Delete one host share. Returns True if found."""
        share = await self.get_host_share(session, share_id)
        if share is None:
            return False
        await session.delete(share)
        await session.flush()
        return True

    async def delete_folder_share(self, session: AsyncSession, share_id: str) -> bool:
        """Delete one folder share. Returns True if found."""
        share = await self.get_folder_share(session, share_id)
        if share is None:
            return False
        await session.delete(share)
        await session.flush()
        return True

    async def delete_host_shares_for_host(
        self, session: AsyncSession, host_id: int
    ) -> int:
        """Delete every host share referencing *host_id*. Returns the count."""
        model = self.host_share_model
        result = await session.execute(delete(model).where(model.host_id == host_id))
        return result.rowcount or 0  # type: ignore[union-attr]

    async def delete_shares_for_user(
        self, session: AsyncSession, user_id: str
    ) -> tuple[int, int]:
        """Delete shares naming *user_id* as recipient or owner.

        Returns ``(host_shares_deleted, folder_shares_deleted)``.
        """
        hs = self.host_share_model
        fs = self.folder_share_model
        host_result = await session.execute(
            delete(hs).where(
                or_(hs.shared_with_user_id == user_id, hs.owner_id == user_id)
            )
        )
        folder_result = await session.execute(
            delete(fs).where(
                or_(fs.shared_with_user_id == user_id, fs.owner_id == user_id)
            )
        )
        return (
            host_result.rowcount or 0,  # type: ignore[union-attr]
            folder_result.rowcount or 0,  # type: ignore[union-attr]
        )
