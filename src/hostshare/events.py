"""EventBus and event types for share lifecycle notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Committed changes that observers may react to."""

    SHARE_CREATED = "share_created"
    SHARE_REVOKED = "share_revoked"
    HOST_DELETED = "host_deleted"
    USER_DELETED = "user_deleted"


@dataclass(frozen=True, slots=True)
class AccessEvent:
    """Immutable record of a committed change.

    Attributes:
        event_type: The kind of change.
        actor_id: User who requested the change, if known.
        share_id: Share created or revoked (share events only).
        share_kind: ``"host"`` or ``"folder"`` (share events only).
        host_id: Host shared or deleted, when applicable.
        user_id: Recipient of a share, or the deleted user.
        shares_removed: Share rows removed by a cascade.
    """

    event_type: EventType
    actor_id: str | None = None
    share_id: str | None = None
    share_kind: str | None = None
    host_id: int | None = None
    user_id: str | None = None
    shares_removed: int = 0


class EventBus:
    """Dispatches access events to registered handlers.

    Handlers are called sequentially in registration order, after the
    change has committed.  Exceptions are logged but never propagated:
    a failing observer cannot undo a committed change.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Callable[..., Any]]] = {et: [] for et in EventType}

    def register(self, event_type: EventType, handler: Callable[..., Any]) -> None:
        """Append *handler* to the list for *event_type*."""
        self._handlers[event_type].append(handler)

    def unregister(self, event_type: EventType, handler: Callable[..., Any]) -> bool:
        """Remove first occurrence of *handler*. Return True if found."""
        handlers = self._handlers[event_type]
        try:
            handlers.remove(handler)
            return True
        except ValueError:
            return False

    async def emit(self, event: AccessEvent) -> None:
        """Dispatch *event* to all registered handlers for its type."""
        for handler in self._handlers[event.event_type]:
            try:
                await handler(event)
            except Exception:
                logger.warning(
                    "Handler %r failed for %s",
                    handler,
                    event.event_type.value,
                    exc_info=True,
                )

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())

    def clear(self) -> None:
        """Remove all registered handlers."""
        for handlers in self._handlers.values():
            handlers.clear()
