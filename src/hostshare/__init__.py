"""hostshare: read-only host sharing.

Resolves which hosts a user may read (owned, shared directly, or shared
through a folder), restricts every mutation to the host's owner, and
keeps share records consistent as hosts and users are deleted.
"""

__version__ = "0.1.0"

from hostshare._engine import AccessEngine
from hostshare._engine_async import AccessEngineAsync
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
from hostshare.events import AccessEvent, EventBus, EventType

__all__ = [
    "AccessDeniedError",
    "AccessEngine",
    "AccessEngineAsync",
    "AccessEvent",
    "AccessLevel",
    "AccessibleHost",
    "CascadeResult",
    "ConflictError",
    "Decision",
    "EventBus",
    "EventType",
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
    "__version__",
]
