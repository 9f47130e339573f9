"""CascadeService — keeps share rows consistent with host and user lifecycle.

Callers run the hook in the same transaction as the row deletion it
accompanies, so readers never observe one without the other.
``delete_host`` and ``delete_user`` do both in one call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import NotFoundError
from .types import CascadeResult
from .utils import require_host_id, require_user_id

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from .directory import DirectoryService
    from .store import ShareStore

logger = logging.getLogger(__name__)


class CascadeService:
    """Removes dependent share rows when a host or user goes away."""

    def __init__(self, store: ShareStore, directory: DirectoryService) -> None:
        self._store = store
        self._directory = directory

    async def on_host_deleted(self, session: AsyncSession, host_id: int) -> CascadeResult:
        """Delete every host share referencing *host_id*.

        Folder shares are untouched; they stop covering the host because
        resolution only matches hosts that exist.
        """
        host_id = require_host_id(host_id)
        count = await self._store.delete_host_shares_for_host(session, host_id)
        if count:
            logger.info("Removed %d host share(s) of deleted host %s", count, host_id)
        return CascadeResult(host_shares_deleted=count)

    async def on_user_deleted(self, session: AsyncSession, user_id: str) -> CascadeResult:
        """Delete every share naming *user_id* as recipient or owner."""
        user_id = require_user_id(user_id)
        host_count, folder_count = await self._store.delete_shares_for_user(session, user_id)
        if host_count or folder_count:
            logger.info(
                "Removed %d host share(s) and %d folder share(s) of deleted user %s",
                host_count,
                folder_count,
                user_id,
            )
        return CascadeResult(
            host_shares_deleted=host_count,
            folder_shares_deleted=folder_count,
        )

    async def delete_host(self, session: AsyncSession, host_id: int) -> CascadeResult:
        """Delete the host row and its host shares."""
        host_id = require_host_id(host_id)
        await self._directory.require_host(session, host_id)
        result = await self.on_host_deleted(session, host_id)
        await self._directory.delete_host_row(session, host_id)
        return result

    async def delete_user(self, session: AsyncSession, user_id: str) -> CascadeResult:
        """Delete the user row, the user's hosts, and every share naming the user.

        Owned hosts go through the same path as ``delete_host`` so a later
        user registered under the same id inherits nothing, whether or not
        the database enforces its foreign keys.
        """
        user_id = require_user_id(user_id)
        if await self._directory.get_user(session, user_id) is None:
            raise NotFoundError(f"User not found: {user_id!r}")

        hosts = await self._directory.list_hosts_for_owner(session, user_id)
        host_shares = 0
        for host in hosts:
            host_shares += (await self.on_host_deleted(session, host.id)).host_shares_deleted
            await self._directory.delete_host_row(session, host.id)
        if hosts:
            logger.info("Removed %d host(s) of deleted user %s", len(hosts), user_id)

        result = await self.on_user_deleted(session, user_id)
        await self._directory.delete_user_row(session, user_id)
        return CascadeResult(
            host_shares_deleted=host_shares + result.host_shares_deleted,
            folder_shares_deleted=result.folder_shares_deleted,
            hosts_deleted=len(hosts),
        )
