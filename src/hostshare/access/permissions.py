"""Access levels and authorization decisions."""

from __future__ import annotations

from enum import Enum


class AccessLevel(str, Enum):
    """Level stored on a share record.

    Closed enumeration with one member.  No behavior branches on it: a share
    grants read access and never write access, whatever the stored value.
    """

    VIEWER = "viewer"


class Decision(str, Enum):
    """Outcome of a mutation authorization check."""

    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOWED
