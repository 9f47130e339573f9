"""Identifier validation and folder name normalization."""

from __future__ import annotations

from .exceptions import InvalidArgumentError
from .permissions import AccessLevel


def require_user_id(user_id: object, field: str = "user_id") -> str:
    """Return *user_id* if it is a non-empty string without control characters."""
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidArgumentError(f"{field} must be a non-empty string")
    if any(ord(ch) < 32 for ch in user_id):
        raise InvalidArgumentError(f"{field} contains invalid characters")
    return user_id


def require_host_id(host_id: object) -> int:
    """Return *host_id* if it is a positive integer (bools rejected)."""
    if isinstance(host_id, bool) or not isinstance(host_id, int) or host_id <= 0:
        raise InvalidArgumentError(f"host_id must be a positive integer, got {host_id!r}")
    return host_id


def require_share_id(share_id: object) -> str:
    if not isinstance(share_id, str) or not share_id:
        raise InvalidArgumentError("share_id must be a non-empty string")
    return share_id


def normalize_folder_name(folder_name: str | None) -> str:
    """Map ``None`` to the empty "no folder" group.

    Any other string is kept as-is: folder names are compared exactly,
    so ``"prod"`` and ``" prod"`` are different folders.
    """
    if folder_name is None:
        return ""
    if not isinstance(folder_name, str):
        raise InvalidArgumentError(f"folder_name must be a string, got {folder_name!r}")
    return folder_name


def parse_access_level(value: AccessLevel | str) -> AccessLevel:
    try:
        return AccessLevel(value)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid access level: {value!r}. Must be one of "
            f"{', '.join(repr(level.value) for level in AccessLevel)}."
        ) from None
