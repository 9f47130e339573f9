"""DirectoryService — SQL-backed lookup of users and hosts.

Users and hosts are owned by the surrounding application; this service
only reads them for access checks and provides the few writes the
embedding layer needs (registration, folder reassignment, row deletion).
Host ownership is never changed here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import select

from .exceptions import ConflictError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hostshare.models.hosts import HostBase
    from hostshare.models.users import UserBase


class DirectoryService:
    """Reads and registers users and hosts."""

    def __init__(
        self,
        host_model: type[HostBase],
        user_model: type[UserBase],
    ) -> None:
        self.host_model = host_model
        self.user_model = user_model

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, session: AsyncSession, user_id: str) -> UserBase | None:
        model = self.user_model
        result = await session.execute(select(model).where(model.id == user_id))
        return result.scalar_one_or_none()

    async def require_user(
        self, session: AsyncSession, user_id: str, *, role: str = "User"
    ) -> UserBase:
        """Return the user or raise ``NotFoundError`` naming *role*."""
        user = await self.get_user(session, user_id)
        if user is None:
            raise NotFoundError(f"{role} not found: {user_id!r}")
        return user

    async def get_users(
        self, session: AsyncSession, user_ids: set[str]
    ) -> dict[str, UserBase]:
        """Batch lookup keyed by user id. Missing ids are absent from the result."""
        if not user_ids:
            return {}
        model = self.user_model
        result = await session.execute(
            select(model).where(model.id.in_(sorted(user_ids)))  # type: ignore[union-attr]
        )
        return {u.id: u for u in result.scalars().all()}

    async def list_users(self, session: AsyncSession) -> list[UserBase]:
        model = self.user_model
        result = await session.execute(select(model).order_by(model.username, model.id))
        return list(result.scalars().all())

    async def add_user(
        self,
        session: AsyncSession,
        user_id: str,
        username: str,
        *,
        is_admin: bool = False,
    ) -> UserBase:
        if await self.get_user(session, user_id) is not None:
            raise ConflictError(f"User already exists: {user_id!r}")
        user = self.user_model(id=user_id, username=username, is_admin=is_admin)
        session.add(user)
        await session.flush()
        return user

    async def delete_user_row(self, session: AsyncSession, user_id: str) -> bool:
        user = await self.get_user(session, user_id)
        if user is None:
            return False
        await session.delete(user)
        await session.flush()
        return True

    # ------------------------------------------------------------------
    # Hosts
    # ------------------------------------------------------------------

    async def get_host(self, session: AsyncSession, host_id: int) -> HostBase | None:
        model = self.host_model
        result = await session.execute(select(model).where(model.id == host_id))
        return result.scalar_one_or_none()

    async def list_hosts_for_owner(self, session: AsyncSession, owner_id: str) -> list[HostBase]:
        model = self.host_model
        result = await session.execute(
            select(model).where(model.owner_id == owner_id).order_by(model.id)
        )
        return list(result.scalars().all())

    async def require_host(self, session: AsyncSession, host_id: int) -> HostBase:
        host = await self.get_host(session, host_id)
        if host is None:
            raise NotFoundError(f"Host not found: {host_id}")
        return host

    async def add_host(
        self,
        session: AsyncSession,
        name: str,
        owner_id: str,
        *,
        folder: str = "",
    ) -> HostBase:
        """Register a host owned by *owner_id*. The owner must exist."""
        await self.require_user(session, owner_id, role="Owner")
        host = self.host_model(name=name, owner_id=owner_id, folder=folder)
        session.add(host)
        await session.flush()
        return host

    async def set_host_folder(
        self, session: AsyncSession, host_id: int, folder: str
    ) -> HostBase:
        """Move a host to another folder of the same owner.

        Folder shares keyed to the old name stop covering the host.
        """
        host = await self.require_host(session, host_id)
        host.folder = folder
        session.add(host)
        await session.flush()
        return host

    async def delete_host_row(self, session: AsyncSession, host_id: int) -> bool:
        host = await self.get_host(session, host_id)
        if host is None:
            return False
        await session.delete(host)
        await session.flush()
        return True
