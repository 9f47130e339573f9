"""Result types: Provenance, AccessibleHost, share and user views."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class ProvenanceKind(Enum):
    """Why a host is visible to a user, in precedence order."""

    OWNER = 0
    HOST_SHARE = 1
    FOLDER_SHARE = 2


@dataclass(frozen=True)
class Provenance:
    """Ownership or share origin of a visible host.

    ``share_id`` and ``actual_owner_id`` are set only for shared access;
    ``share_id`` is a host share id or a folder share id depending on ``kind``.
    """

    kind: ProvenanceKind
    share_id: str | None = None
    actual_owner_id: str | None = None

    @property
    def is_owner(self) -> bool:
        return self.kind is ProvenanceKind.OWNER

    @property
    def is_shared(self) -> bool:
        return self.kind is not ProvenanceKind.OWNER

    @classmethod
    def owner(cls) -> Provenance:
        return cls(kind=ProvenanceKind.OWNER)

    @classmethod
    def host_share(cls, share_id: str, owner_id: str) -> Provenance:
        return cls(kind=ProvenanceKind.HOST_SHARE, share_id=share_id, actual_owner_id=owner_id)

    @classmethod
    def folder_share(cls, share_id: str, owner_id: str) -> Provenance:
        return cls(kind=ProvenanceKind.FOLDER_SHARE, share_id=share_id, actual_owner_id=owner_id)


@dataclass
class HostInfo:
    """Host metadata as seen by the resource-serving layer."""

    id: int
    name: str
    owner_id: str
    folder: str
    created_at: datetime | None = None


@dataclass
class AccessibleHost:
    """A host visible to a user, with the reason it is visible."""

    host: HostInfo
    provenance: Provenance

    @property
    def is_owner(self) -> bool:
        return self.provenance.is_owner

    @property
    def is_shared(self) -> bool:
        return self.provenance.is_shared


@dataclass
class UserInfo:
    """User directory entry."""

    id: str
    username: str
    is_admin: bool = False


@dataclass
class HostShareInfo:
    """Direct host share metadata."""

    id: str
    host_id: int
    owner_id: str
    shared_with_user_id: str
    access_level: str
    created_by: str
    created_at: datetime | None = None
    shared_with_username: str | None = None


@dataclass
class FolderShareInfo:
    """Folder share metadata."""

    id: str
    folder_name: str
    owner_id: str
    shared_with_user_id: str
    access_level: str
    created_by: str
    created_at: datetime | None = None
    shared_with_username: str | None = None


@dataclass
class SharesForUser:
    """Host and folder shares naming one user as recipient."""

    host_shares: list[HostShareInfo] = field(default_factory=list)
    folder_shares: list[FolderShareInfo] = field(default_factory=list)


@dataclass
class CascadeResult:
    """Counts of rows removed by a cascade.

    ``total`` counts share rows only; ``hosts_deleted`` is the number of
    hosts removed along with their deleted owner.
    """

    host_shares_deleted: int = 0
    folder_shares_deleted: int = 0
    hosts_deleted: int = 0

    @property
    def total(self) -> int:
        return self.host_shares_deleted + self.folder_shares_deleted
