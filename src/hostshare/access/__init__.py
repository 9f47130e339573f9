"""Access resolution, permission guards, sharing, and cascades."""

from hostshare.access.exceptions import (
    AccessDeniedError,
    ConflictError,
    ForbiddenError,
    HostShareError,
    InvalidArgumentError,
    NotFoundError,
)
from hostshare.access.permissions import AccessLevel, Decision
from hostshare.access.types import (
    AccessibleHost,
    CascadeResult,
    FolderShareInfo,
    HostInfo,
    HostShareInfo,
    Provenance,
    ProvenanceKind,
    SharesForUser,
    UserInfo,
)

__all__ = [
    "AccessDeniedError",
    "AccessLevel",
    "AccessibleHost",
    "CascadeResult",
    "ConflictError",
    "Decision",
    "FolderShareInfo",
    "ForbiddenError",
    "HostInfo",
    "HostShareError",
    "HostShareInfo",
    "InvalidArgumentError",
    "NotFoundError",
    "Provenance",
    "ProvenanceKind",
    "SharesForUser",
    "UserInfo",
]
