"""SharingService — administrator-only share creation, revocation, and listing.

Stateless service, following the ShareStore pattern: collaborators at
construction, a session at call time.  Flushes but does not commit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import InvalidArgumentError, NotFoundError
from .permissions import AccessLevel
from .types import FolderShareInfo, HostShareInfo, SharesForUser, UserInfo
from .utils import (
    normalize_folder_name,
    parse_access_level,
    require_host_id,
    require_share_id,
    require_user_id,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from hostshare.models.shares import FolderShareBase, HostShareBase

    from .directory import DirectoryService
    from .guard import PermissionGuard
    from .store import ShareStore

logger = logging.getLogger(__name__)


class SharingService:
    """Creates, revokes, and lists host and folder shares."""

    def __init__(
        self,
        store: ShareStore,
        directory: DirectoryService,
        guard: PermissionGuard,
    ) -> None:
        self._store = store
        self._directory = directory
        self._guard = guard

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_host_share(
        self,
        session: AsyncSession,
        requester_id: str,
        host_id: int,
        shared_with_user_id: str,
        *,
        access_level: AccessLevel | str = AccessLevel.VIEWER,
    ) -> HostShareInfo:
        """Share one host with a user.

        Raises ``ForbiddenError`` unless the requester is an administrator,
        ``NotFoundError`` for an unknown recipient, host, or host owner,
        ``InvalidArgumentError`` when the recipient owns the host, and
        ``ConflictError`` when the pair is already shared.
        """
        await self._guard.require_admin(session, requester_id)
        host_id = require_host_id(host_id)
        shared_with_user_id = require_user_id(shared_with_user_id, "shared_with_user_id")
        level = parse_access_level(access_level)

        recipient = await self._directory.require_user(
            session, shared_with_user_id, role="Recipient"
        )
        host = await self._directory.require_host(session, host_id)
        await self._directory.require_user(session, host.owner_id, role="Owner")
        if host.owner_id == shared_with_user_id:
            raise InvalidArgumentError(f"Cannot share host {host_id} with its owner")

        share = await self._store.create_host_share(
            session,
            host_id,
            host.owner_id,
            shared_with_user_id,
            requester_id,
            access_level=level,
        )
        logger.info(
            "Host %s shared with %s by %s (share %s)",
            host_id,
            shared_with_user_id,
            requester_id,
            share.id,
        )
        return _host_share_info(share, recipient.username)

    async def create_folder_share(
        self,
        session: AsyncSession,
        requester_id: str,
        folder_name: str | None,
        owner_id: str,
        shared_with_user_id: str,
        *,
        access_level: AccessLevel | str = AccessLevel.VIEWER,
    ) -> FolderShareInfo:
        """Share every current and future host in ``(owner_id, folder_name)``.

        The folder may be empty.  ``None`` and ``""`` both name the
        "no folder" group.
        """
        await self._guard.require_admin(session, requester_id)
        folder_name = normalize_folder_name(folder_name)
        owner_id = require_user_id(owner_id, "owner_id")
        shared_with_user_id = require_user_id(shared_with_user_id, "shared_with_user_id")
        level = parse_access_level(access_level)

        await self._directory.require_user(session, owner_id, role="Owner")
        recipient = await self._directory.require_user(
            session, shared_with_user_id, role="Recipient"
        )
        if owner_id == shared_with_user_id:
            raise InvalidArgumentError("Cannot share a folder with its owner")

        share = await self._store.create_folder_share(
            session,
            folder_name,
            owner_id,
            shared_with_user_id,
            requester_id,
            access_level=level,
        )
        logger.info(
            "Folder %r of %s shared with %s by %s (share %s)",
            folder_name,
            owner_id,
            shared_with_user_id,
            requester_id,
            share.id,
        )
        return _folder_share_info(share, recipient.username)

    # ------------------------------------------------------------------
    # Revoke
    # ------------------------------------------------------------------

    async def revoke_host_share(
        self, session: AsyncSession, requester_id: str, share_id: str
    ) -> HostShareInfo:
        """Delete a host share and return what was removed."""
        await self._guard.require_admin(session, requester_id)
        share_id = require_share_id(share_id)
        share = await self._store.get_host_share(session, share_id)
        if share is None:
            raise NotFoundError(f"Host share not found: {share_id!r}")
        info = _host_share_info(share, await self._username(session, share.shared_with_user_id))
        await self._store.delete_host_share(session, share_id)
        logger.info("Host share %s revoked by %s", share_id, requester_id)
        return info

    async def revoke_folder_share(
        self, session: AsyncSession, requester_id: str, share_id: str
    ) -> FolderShareInfo:
        """Delete a folder share and return what was removed."""
        await self._guard.require_admin(session, requester_id)
        share_id = require_share_id(share_id)
        share = await self._store.get_folder_share(session, share_id)
        if share is None:
            raise NotFoundError(f"Folder share not found: {share_id!r}")
        info = _folder_share_info(share, await self._username(session, share.shared_with_user_id))
        await self._store.delete_folder_share(session, share_id)
        logger.info("Folder share %s revoked by %s", share_id, requester_id)
        return info

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    async def list_host_shares(
        self, session: AsyncSession, requester_id: str, host_id: int
    ) -> list[HostShareInfo]:
        await self._guard.require_admin(session, requester_id)
        host_id = require_host_id(host_id)
        await self._directory.require_host(session, host_id)
        shares = await self._store.list_host_shares_for_host(session, host_id)
        names = await self._usernames(session, shares)
        return [_host_share_info(s, names.get(s.shared_with_user_id)) for s in shares]

    async def list_folder_shares(
        self,
        session: AsyncSession,
        requester_id: str,
        owner_id: str,
        folder_name: str | None,
    ) -> list[FolderShareInfo]:
        await self._guard.require_admin(session, requester_id)
        owner_id = require_user_id(owner_id, "owner_id")
        folder_name = normalize_folder_name(folder_name)
        await self._directory.require_user(session, owner_id, role="Owner")
        shares = await self._store.list_folder_shares_for_folder(session, owner_id, folder_name)
        names = await self._usernames(session, shares)
        return [_folder_share_info(s, names.get(s.shared_with_user_id)) for s in shares]

    async def list_shares_for_user(
        self, session: AsyncSession, user_id: str
    ) -> SharesForUser:
        """Host and folder shares naming *user_id* as recipient."""
        user_id = require_user_id(user_id)
        host_shares = await self._store.list_host_shares_for_user(session, user_id)
        folder_shares = await self._store.list_folder_shares_for_user(session, user_id)
        username = await self._username(session, user_id)
        return SharesForUser(
            host_shares=[_host_share_info(s, username) for s in host_shares],
            folder_shares=[_folder_share_info(s, username) for s in folder_shares],
        )

    async def list_shareable_users(
        self, session: AsyncSession, requester_id: str, host_id: int
    ) -> list[UserInfo]:
        """Users who could still receive a host share for *host_id*.

        Excludes the owner and users already holding a host share for it.
        """
        await self._guard.require_admin(session, requester_id)
        host_id = require_host_id(host_id)
        host = await self._directory.require_host(session, host_id)
        shares = await self._store.list_host_shares_for_host(session, host_id)
        taken = {s.shared_with_user_id for s in shares}
        taken.add(host.owner_id)
        users = await self._directory.list_users(session)
        return [
            UserInfo(id=u.id, username=u.username, is_admin=u.is_admin)
            for u in users
            if u.id not in taken
        ]

    async def _username(self, session: AsyncSession, user_id: str) -> str | None:
        user = await self._directory.get_user(session, user_id)
        return user.username if user is not None else None

    async def _usernames(
        self,
        session: AsyncSession,
        shares: Iterable[HostShareBase | FolderShareBase],
    ) -> dict[str, str]:
        ids = {s.shared_with_user_id for s in shares}
        users = await self._directory.get_users(session, ids)
        return {uid: u.username for uid, u in users.items()}


def _host_share_info(share: HostShareBase, username: str | None = None) -> HostShareInfo:
    return HostShareInfo(
        id=share.id,
        host_id=share.host_id,
        owner_id=share.owner_id,
        shared_with_user_id=share.shared_with_user_id,
        access_level=share.access_level,
        created_by=share.created_by,
        created_at=share.created_at,
        shared_with_username=username,
    )


def _folder_share_info(share: FolderShareBase, username: str | None = None) -> FolderShareInfo:
    return FolderShareInfo(
        id=share.id,
        folder_name=share.folder_name,
        owner_id=share.owner_id,
        shared_with_user_id=share.shared_with_user_id,
        access_level=share.access_level,
        created_by=share.created_by,
        created_at=share.created_at,
        shared_with_username=username,
    )
