"""AccessEngineAsync — async facade over the access services."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hostshare.access.cascade import CascadeService
from hostshare.access.dialect import enable_sqlite_foreign_keys, get_dialect
from hostshare.access.directory import DirectoryService
from hostshare.access.guard import PermissionGuard
from hostshare.access.permissions import AccessLevel
from hostshare.access.resolver import AccessResolver, host_info
from hostshare.access.sharing import SharingService
from hostshare.access.store import ShareStore
from hostshare.access.types import UserInfo
from hostshare.access.utils import normalize_folder_name, require_user_id
from hostshare.events import AccessEvent, EventBus, EventType
from hostshare.models.hosts import Host
from hostshare.models.shares import FolderShare, HostShare
from hostshare.models.users import User

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

    from hostshare.access.permissions import Decision
    from hostshare.access.types import (
        AccessibleHost,
        CascadeResult,
        FolderShareInfo,
        HostInfo,
        HostShareInfo,
        SharesForUser,
    )
    from hostshare.models.hosts import HostBase
    from hostshare.models.shares import FolderShareBase, HostShareBase
    from hostshare.models.users import UserBase

logger = logging.getLogger(__name__)


class AccessEngineAsync:
    """Async facade wiring the share store, directory, resolver, guard, and cascades.

    Every operation runs in its own session and commits once; any error
    rolls the whole operation back.  Engine-based setup::

        engine = create_async_engine("postgresql+asyncpg://...")
        access = AccessEngineAsync(engine=engine)
        await access.create_tables()
        hosts = await access.list_accessible_hosts("u2")

    Or from a URL, owning the engine::

        async with AccessEngineAsync.from_url("sqlite+aiosqlite://") as access:
            ...
    """

    def __init__(
        self,
        *,
        engine: AsyncEngine | None = None,
        session_factory: Callable[..., AsyncSession] | None = None,
        dialect: str | None = None,
        host_model: type[HostBase] | None = None,
        user_model: type[UserBase] | None = None,
        host_share_model: type[HostShareBase] | None = None,
        folder_share_model: type[FolderShareBase] | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        if engine is None and session_factory is None:
            raise ValueError("Provide engine or session_factory")

        self._engine = engine
        self._owns_engine = False
        self._closed = False
        if session_factory is None:
            session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        self._session_factory = session_factory
        if dialect is None:
            dialect = get_dialect(engine) if engine is not None else "sqlite"
        self._dialect = dialect
        if engine is not None and get_dialect(engine) == "sqlite":
            enable_sqlite_foreign_keys(engine)

        self._host_model = host_model or Host
        self._user_model = user_model or User
        self._host_share_model = host_share_model or HostShare
        self._folder_share_model = folder_share_model or FolderShare

        self.store = ShareStore(
            self._host_share_model,
            self._folder_share_model,
            dialect=dialect,
        )
        self.directory = DirectoryService(self._host_model, self._user_model)
        self.resolver = AccessResolver(self.store, self.directory)
        self.guard = PermissionGuard(self.directory, self.resolver)
        self.sharing = SharingService(self.store, self.directory, self.guard)
        self.cascade = CascadeService(self.store, self.directory)
        self.events = event_bus or EventBus()

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False, **kwargs: Any) -> AccessEngineAsync:
        """Create an engine for *url*; the facade disposes it on ``close()``."""
        engine = create_async_engine(url, echo=echo)
        access = cls(engine=engine, **kwargs)
        access._owns_engine = True
        return access

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create_tables(self) -> None:
        """Create the user, host, and share tables if missing."""
        if self._engine is None:
            raise ValueError("create_tables() requires an engine")
        models = (
            self._user_model,
            self._host_model,
            self._host_share_model,
            self._folder_share_model,
        )
        async with self._engine.begin() as conn:
            for model in models:
                await conn.run_sync(
                    lambda c, m=model: m.__table__.create(c, checkfirst=True)  # type: ignore[attr-defined]
                )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.events.clear()
        if self._owns_engine and self._engine is not None:
            await self._engine.dispose()

    async def __aenter__(self) -> AccessEngineAsync:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @asynccontextmanager
    async def _session(
        self, session: AsyncSession | None = None
    ) -> AsyncGenerator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error.

        A caller-provided *session* is used as-is; its owner commits.
        """
        if session is not None:
            yield session
            return

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    async def add_user(self, user_id: str, username: str, *, is_admin: bool = False) -> UserInfo:
        user_id = require_user_id(user_id)
        async with self._session() as sess:
            user = await self.directory.add_user(sess, user_id, username, is_admin=is_admin)
            return UserInfo(id=user.id, username=user.username, is_admin=user.is_admin)

    async def list_users(self) -> list[UserInfo]:
        async with self._session() as sess:
            users = await self.directory.list_users(sess)
        return [UserInfo(id=u.id, username=u.username, is_admin=u.is_admin) for u in users]

    async def add_host(self, name: str, owner_id: str, *, folder: str | None = "") -> HostInfo:
        owner_id = require_user_id(owner_id, "owner_id")
        async with self._session() as sess:
            host = await self.directory.add_host(
                sess, name, owner_id, folder=normalize_folder_name(folder)
            )
            return host_info(host)

    async def set_host_folder(
        self, requester_id: str, host_id: int, folder: str | None
    ) -> HostInfo:
        """Move a host to another folder.  Owner only."""
        async with self._session() as sess:
            await self.guard.require_mutation(sess, requester_id, host_id)
            host = await self.directory.set_host_folder(
                sess, host_id, normalize_folder_name(folder)
            )
            return host_info(host)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    async def list_accessible_hosts(self, user_id: str) -> list[AccessibleHost]:
        async with self._session() as sess:
            return await self.resolver.resolve_accessible_hosts(sess, user_id)

    async def get_host(self, user_id: str, host_id: int) -> AccessibleHost:
        """Return the host if *user_id* may read it, else raise ``AccessDeniedError``."""
        async with self._session() as sess:
            return await self.resolver.resolve_host_access(sess, user_id, host_id)

    async def authorize_mutation(self, requester_id: str, host_id: int) -> Decision:
        async with self._session() as sess:
            return await self.guard.authorize_mutation(sess, requester_id, host_id)

    # ------------------------------------------------------------------
    # Shares
    # ------------------------------------------------------------------

    async def share_host(
        self,
        requester_id: str,
        host_id: int,
        shared_with_user_id: str,
        *,
        access_level: AccessLevel | str = AccessLevel.VIEWER,
    ) -> HostShareInfo:
        async with self._session() as sess:
            share = await self.sharing.create_host_share(
                sess,
                requester_id,
                host_id,
                shared_with_user_id,
                access_level=access_level,
            )
        await self.events.emit(
            AccessEvent(
                event_type=EventType.SHARE_CREATED,
                actor_id=requester_id,
                share_id=share.id,
                share_kind="host",
                host_id=share.host_id,
                user_id=share.shared_with_user_id,
            )
        )
        return share

    async def share_folder(
        self,
        requester_id: str,
        folder_name: str | None,
        owner_id: str,
        shared_with_user_id: str,
        *,
        access_level: AccessLevel | str = AccessLevel.VIEWER,
    ) -> FolderShareInfo:
        async with self._session() as sess:
            share = await self.sharing.create_folder_share(
                sess,
                requester_id,
                folder_name,
                owner_id,
                shared_with_user_id,
                access_level=access_level,
            )
        await self.events.emit(
            AccessEvent(
                event_type=EventType.SHARE_CREATED,
                actor_id=requester_id,
                share_id=share.id,
                share_kind="folder",
                user_id=share.shared_with_user_id,
            )
        )
        return share

    async def revoke_host_share(self, requester_id: str, share_id: str) -> HostShareInfo:
        async with self._session() as sess:
            share = await self.sharing.revoke_host_share(sess, requester_id, share_id)
        await self.events.emit(
            AccessEvent(
                event_type=EventType.SHARE_REVOKED,
                actor_id=requester_id,
                share_id=share.id,
                share_kind="host",
                host_id=share.host_id,
                user_id=share.shared_with_user_id,
            )
        )
        return share

    async def revoke_folder_share(self, requester_id: str, share_id: str) -> FolderShareInfo:
        async with self._session() as sess:
            share = await self.sharing.revoke_folder_share(sess, requester_id, share_id)
        await self.events.emit(
            AccessEvent(
                event_type=EventType.SHARE_REVOKED,
                actor_id=requester_id,
                share_id=share.id,
                share_kind="folder",
                user_id=share.shared_with_user_id,
            )
        )
        return share

    async def list_host_shares(self, requester_id: str, host_id: int) -> list[HostShareInfo]:
        async with self._session() as sess:
            return await self.sharing.list_host_shares(sess, requester_id, host_id)

    async def list_folder_shares(
        self, requester_id: str, owner_id: str, folder_name: str | None
    ) -> list[FolderShareInfo]:
        async with self._session() as sess:
            return await self.sharing.list_folder_shares(sess, requester_id, owner_id, folder_name)

    async def list_my_shares(self, user_id: str) -> SharesForUser:
        async with self._session() as sess:
            return await self.sharing.list_shares_for_user(sess, user_id)

    async def list_shareable_users(self, requester_id: str, host_id: int) -> list[UserInfo]:
        async with self._session() as sess:
            return await self.sharing.list_shareable_users(sess, requester_id, host_id)

    # ------------------------------------------------------------------
    # Deletion and cascades
    # ------------------------------------------------------------------

    async def delete_host(self, requester_id: str, host_id: int) -> CascadeResult:
        """Delete a host and its host shares in one transaction.  Owner only."""
        async with self._session() as sess:
            await self.guard.require_mutation(sess, requester_id, host_id)
            result = await self.cascade.delete_host(sess, host_id)
        await self.events.emit(
            AccessEvent(
                event_type=EventType.HOST_DELETED,
                actor_id=requester_id,
                host_id=host_id,
                shares_removed=result.total,
            )
        )
        return result

    async def delete_user(self, requester_id: str, user_id: str) -> CascadeResult:
        """Delete a user, their hosts, and every share naming them.  Administrator only."""
        async with self._session() as sess:
            await self.guard.require_admin(sess, requester_id)
            result = await self.cascade.delete_user(sess, user_id)
        await self.events.emit(
            AccessEvent(
                event_type=EventType.USER_DELETED,
                actor_id=requester_id,
                user_id=user_id,
                shares_removed=result.total,
            )
        )
        return result

    async def on_host_deleted(
        self, host_id: int, *, session: AsyncSession | None = None
    ) -> CascadeResult:
        """Cascade hook for hosts deleted by the surrounding application.

        Pass the *session* that deletes the host so both commit together.
        """
        async with self._session(session) as sess:
            return await self.cascade.on_host_deleted(sess, host_id)

    async def on_user_deleted(
        self, user_id: str, *, session: AsyncSession | None = None
    ) -> CascadeResult:
        """Cascade hook for users deleted by the surrounding application."""
        async with self._session(session) as sess:
            return await self.cascade.on_user_deleted(sess, user_id)
