"""AccessEngine — synchronous wrapper around AccessEngineAsync."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any

from hostshare._engine_async import AccessEngineAsync
from hostshare.access.permissions import AccessLevel

if TYPE_CHECKING:
    from hostshare.access.permissions import Decision
    from hostshare.access.types import (
        AccessibleHost,
        CascadeResult,
        FolderShareInfo,
        HostInfo,
        HostShareInfo,
        SharesForUser,
        UserInfo,
    )


class AccessEngine:
    """Synchronous access engine backed by a private event loop.

    The async engine, its connections, and every operation live on a
    loop running in a daemon thread, so callers can use this from plain
    sync code or from inside another running loop.

    Usage::

        with AccessEngine("sqlite+aiosqlite:///access.db") as access:
            access.add_user("u1", "alice")
            hosts = access.list_accessible_hosts("u1")
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        create_tables: bool = True,
        **kwargs: Any,
    ) -> None:
        self._closed = False

        # Private event loop in a daemon thread
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()

        try:
            self._async: AccessEngineAsync = self._run(
                self._async_init(url, echo, create_tables, kwargs)
            )
        except Exception:
            self._stop_loop()
            raise

    async def _async_init(
        self,
        url: str,
        echo: bool,
        create_tables: bool,
        kwargs: dict[str, Any],
    ) -> AccessEngineAsync:
        access = AccessEngineAsync.from_url(url, echo=echo, **kwargs)
        if create_tables:
            await access.create_tables()
        return access

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    def _stop_loop(self) -> None:
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)

    @property
    def async_engine(self) -> AccessEngineAsync:
        """The wrapped async facade (its coroutines must run on this engine's loop)."""
        return self._async

    def close(self) -> None:
        """Dispose the database engine, stop the event loop and join the thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._run(self._async.close())
        finally:
            self._stop_loop()

    def __enter__(self) -> AccessEngine:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    def add_user(self, user_id: str, username: str, *, is_admin: bool = False) -> UserInfo:
        return self._run(self._async.add_user(user_id, username, is_admin=is_admin))

    def list_users(self) -> list[UserInfo]:
        return self._run(self._async.list_users())

    def add_host(self, name: str, owner_id: str, *, folder: str | None = "") -> HostInfo:
        return self._run(self._async.add_host(name, owner_id, folder=folder))

    def set_host_folder(self, requester_id: str, host_id: int, folder: str | None) -> HostInfo:
        return self._run(self._async.set_host_folder(requester_id, host_id, folder))

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def list_accessible_hosts(self, user_id: str) -> list[AccessibleHost]:
        return self._run(self._async.list_accessible_hosts(user_id))

    def get_host(self, user_id: str, host_id: int) -> AccessibleHost:
        return self._run(self._async.get_host(user_id, host_id))

    def authorize_mutation(self, requester_id: str, host_id: int) -> Decision:
        return self._run(self._async.authorize_mutation(requester_id, host_id))

    # ------------------------------------------------------------------
    # Shares
    # ------------------------------------------------------------------

    def share_host(
        self,
        requester_id: str,
        host_id: int,
        shared_with_user_id: str,
        *,
        access_level: AccessLevel | str = AccessLevel.VIEWER,
    ) -> HostShareInfo:
        return self._run(
            self._async.share_host(
                requester_id, host_id, shared_with_user_id, access_level=access_level
            )
        )

    def share_folder(
        self,
        requester_id: str,
        folder_name: str | None,
        owner_id: str,
        shared_with_user_id: str,
        *,
        access_level: AccessLevel | str = AccessLevel.VIEWER,
    ) -> FolderShareInfo:
        return self._run(
            self._async.share_folder(
                requester_id,
                folder_name,
                owner_id,
                shared_with_user_id,
                access_level=access_level,
            )
        )

    def revoke_host_share(self, requester_id: str, share_id: str) -> HostShareInfo:
        return self._run(self._async.revoke_host_share(requester_id, share_id))

    def revoke_folder_share(self, requester_id: str, share_id: str) -> FolderShareInfo:
        return self._run(self._async.revoke_folder_share(requester_id, share_id))

    def list_host_shares(self, requester_id: str, host_id: int) -> list[HostShareInfo]:
        return self._run(self._async.list_host_shares(requester_id, host_id))

    def list_folder_shares(
        self, requester_id: str, owner_id: str, folder_name: str | None
    ) -> list[FolderShareInfo]:
        return self._run(self._async.list_folder_shares(requester_id, owner_id, folder_name))

    def list_my_shares(self, user_id: str) -> SharesForUser:
        return self._run(self._async.list_my_shares(user_id))

    def list_shareable_users(self, requester_id: str, host_id: int) -> list[UserInfo]:
        return self._run(self._async.list_shareable_users(requester_id, host_id))

    # ------------------------------------------------------------------
    # Deletion and cascades
    # ------------------------------------------------------------------

    def delete_host(self, requester_id: str, host_id: int) -> CascadeResult:
        return self._run(self._async.delete_host(requester_id, host_id))

    def delete_user(self, requester_id: str, user_id: str) -> CascadeResult:
        return self._run(self._async.delete_user(requester_id, user_id))

    def on_host_deleted(self, host_id: int) -> CascadeResult:
        return self._run(self._async.on_host_deleted(host_id))

    def on_user_deleted(self, user_id: str) -> CascadeResult:
        return self._run(self._async.on_user_deleted(user_id))
