"""AccessResolver — which hosts a user may read, and why.

Three grants make a host visible to a user:

1. the user owns it,
2. a host share names the user as recipient,
3. a folder share of the host's owner and folder names the user.

Folder membership is a query predicate evaluated on every call, never a
stored list: hosts added to a shared folder are covered immediately and
hosts moved out of it lose coverage immediately.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import and_, func
from sqlmodel import select

from .exceptions import AccessDeniedError
from .types import AccessibleHost, HostInfo, Provenance
from .utils import require_host_id, require_user_id

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hostshare.models.hosts import HostBase

    from .directory import DirectoryService
    from .store import ShareStore

logger = logging.getLogger(__name__)


def host_info(host: HostBase) -> HostInfo:
    """Convert a host row to its public view."""
    assert host.id is not None
    return HostInfo(
        id=host.id,
        name=host.name,
        owner_id=host.owner_id,
        folder=host.folder or "",
        created_at=host.created_at,
    )


class AccessResolver:
    """Computes read access from ownership, host shares, and folder shares."""

    def __init__(self, store: ShareStore, directory: DirectoryService) -> None:
        self._store = store
        self._directory = directory

    async def resolve_accessible_hosts(
        self,
        session: AsyncSession,
        user_id: str,
    ) -> list[AccessibleHost]:
        """Return every host *user_id* may read, once each, ordered by host id.

        A host reachable through several grants is reported with the
        strongest provenance: owner, then host share, then folder share.
        """
        user_id = require_user_id(user_id)
        host = self._directory.host_model
        hs = self._store.host_share_model
        fs = self._store.folder_share_model

        best: dict[int, AccessibleHost] = {}

        owned = await session.execute(select(host).where(host.owner_id == user_id))
        for h in owned.scalars().all():
            self._offer(best, h, Provenance.owner())

        direct = await session.execute(
            select(host, hs.id)
            .join(hs, hs.host_id == host.id)
            .where(hs.shared_with_user_id == user_id)
            .order_by(host.id, hs.created_at, hs.id)
        )
        for h, share_id in direct.all():
            self._offer(best, h, Provenance.host_share(share_id, h.owner_id))

        via_folder = await session.execute(
            select(host, fs.id)
            .join(
                fs,
                and_(
                    fs.owner_id == host.owner_id,
                    fs.folder_name == func.coalesce(host.folder, ""),
                ),
            )
            .where(fs.shared_with_user_id == user_id)
            .order_by(host.id, fs.created_at, fs.id)
        )
        for h, share_id in via_folder.all():
            self._offer(best, h, Provenance.folder_share(share_id, h.owner_id))

        logger.debug("Resolved %d accessible host(s) for %s", len(best), user_id)
        return [best[host_id] for host_id in sorted(best)]

    async def resolve_host_access(
        self,
        session: AsyncSession,
        user_id: str,
        host_id: int,
    ) -> AccessibleHost:
        """Authorize a read of one host.

        Raises ``AccessDeniedError`` unless the host exists and appears in
        ``resolve_accessible_hosts(user_id)``; the provenance returned is the
        one the listing would report.
        """
        user_id = require_user_id(user_id)
        host_id = require_host_id(host_id)
        h = await self._directory.get_host(session, host_id)
        if h is None:
            logger.debug("Read denied for %s: host %s does not exist", user_id, host_id)
            raise AccessDeniedError(f"Access denied: host {host_id} is not accessible")

        if h.owner_id == user_id:
            return AccessibleHost(host=host_info(h), provenance=Provenance.owner())

        hs = self._store.host_share_model
        result = await session.execute(
            select(hs.id)
            .where(hs.host_id == host_id, hs.shared_with_user_id == user_id)
            .order_by(hs.created_at, hs.id)
            .limit(1)
        )
        share_id = result.scalar_one_or_none()
        if share_id is not None:
            return AccessibleHost(
                host=host_info(h),
                provenance=Provenance.host_share(share_id, h.owner_id),
            )

        fs = self._store.folder_share_model
        result = await session.execute(
            select(fs.id)
            .where(
                fs.owner_id == h.owner_id,
                fs.folder_name == (h.folder or ""),
                fs.shared_with_user_id == user_id,
            )
            .order_by(fs.created_at, fs.id)
            .limit(1)
        )
        share_id = result.scalar_one_or_none()
        if share_id is not None:
            return AccessibleHost(
                host=host_info(h),
                provenance=Provenance.folder_share(share_id, h.owner_id),
            )

        logger.debug("Read denied for %s on host %s", user_id, host_id)
        raise AccessDeniedError(f"Access denied: host {host_id} is not accessible")

    @staticmethod
    def _offer(best: dict[int, AccessibleHost], host: HostBase, provenance: Provenance) -> None:
        """Keep *provenance* for *host* unless a stronger one is already recorded."""
        assert host.id is not None
        current = best.get(host.id)
        if current is None or provenance.kind.value < current.provenance.kind.value:
            best[host.id] = AccessibleHost(host=host_info(host), provenance=provenance)
