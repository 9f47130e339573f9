"""PermissionGuard — owner-only mutation and administrator gates.

Shares grant read access only.  Nothing here consults a share or its
access level when deciding a mutation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ForbiddenError
from .permissions import Decision
from .resolver import host_info
from .utils import require_host_id, require_user_id

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hostshare.models.users import UserBase

    from .directory import DirectoryService
    from .resolver import AccessResolver
    from .types import AccessibleHost, HostInfo

logger = logging.getLogger(__name__)


class PermissionGuard:
    """Decides read, mutation, and share-management authorization."""

    def __init__(self, directory: DirectoryService, resolver: AccessResolver) -> None:
        self._directory = directory
        self._resolver = resolver

    async def authorize_mutation(
        self,
        session: AsyncSession,
        requester_id: str,
        host_id: int,
    ) -> Decision:
        """ALLOWED iff *requester_id* owns the host.

        Raises ``NotFoundError`` if the host does not exist.
        """
        requester_id = require_user_id(requester_id, "requester_id")
        host_id = require_host_id(host_id)
        host = await self._directory.require_host(session, host_id)
        if host.owner_id == requester_id:
            return Decision.ALLOWED
        logger.debug("Mutation of host %s forbidden for %s", host_id, requester_id)
        return Decision.FORBIDDEN

    async def require_mutation(
        self,
        session: AsyncSession,
        requester_id: str,
        host_id: int,
    ) -> HostInfo:
        """Return the host if *requester_id* may mutate it, else raise ``ForbiddenError``."""
        decision = await self.authorize_mutation(session, requester_id, host_id)
        if not decision.allowed:
            raise ForbiddenError(
                f"Only the owner may modify host {host_id}; shared access is read-only"
            )
        host = await self._directory.require_host(session, host_id)
        return host_info(host)

    async def authorize_read(
        self,
        session: AsyncSession,
        user_id: str,
        host_id: int,
    ) -> AccessibleHost:
        """Delegate to the resolver's single-host check."""
        return await self._resolver.resolve_host_access(session, user_id, host_id)

    async def require_admin(self, session: AsyncSession, requester_id: str) -> UserBase:
        """Return the requester if it is an existing administrator."""
        requester_id = require_user_id(requester_id, "requester_id")
        user = await self._directory.get_user(session, requester_id)
        if user is None or not user.is_admin:
            logger.debug("Administrator check failed for %s", requester_id)
            raise ForbiddenError("Administrator access required")
        return user
