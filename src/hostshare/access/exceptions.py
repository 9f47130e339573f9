"""Custom exception hierarchy for host sharing and access checks."""


class HostShareError(Exception):
    """Base exception for all hostshare errors."""


class NotFoundError(HostShareError, LookupError):
    """Raised when a referenced user, host, or share does not exist."""


class ConflictError(HostShareError):
    """Raised when an active share already exists for the same key."""


class ForbiddenError(HostShareError, PermissionError):
    """Raised on a non-owner mutation or a non-administrator share operation."""


class AccessDeniedError(ForbiddenError):
    """Raised when a user may not read a host."""


class InvalidArgumentError(HostShareError, ValueError):
    """Raised on self-shares and malformed identifiers."""
