"""
In-process notification bus.

Every notification goes to all subscribers of its type, synchronously and
in subscription order. A cancelable notification is a request: a
collaborator that can answer it claims it and attaches an awaitable
result. Non-cancelable notifications are broadcasts of changes the store
has already committed.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Subscriber = Callable[["Notification"], Any]


class NotificationType:
    """All notification types exchanged with the record store."""

    # ── Outbound requests ────────────────────────────────────
    READ_PROJECT          = "read-project"
    LIST_PROJECT_REQUESTS = "list-project-requests"
    REQUEST_CHANGED       = "request-changed"
    EXPORT_REQUESTED      = "export-requested"
    NAVIGATE              = "navigate"

    # ── Both ways: persist request out, committed broadcast in ──
    PROJECT_CHANGED       = "project-changed"

    # ── Inbound broadcasts ───────────────────────────────────
    RECORD_DELETED        = "record-deleted"
    RECORD_CHANGED        = "record-changed"

    _ALL = None

    @classmethod
    def all_types(cls) -> set:
        if cls._ALL is None:
            cls._ALL = {
                v for k, v in vars(cls).items()
                if isinstance(v, str) and not k.startswith("_")
            }
        return cls._ALL

    @classmethod
    def is_valid(cls, notification_type: str) -> bool:
        return notification_type in cls.all_types()


@dataclass
class Notification:
    """One message on the bus."""
    type: str
    detail: Dict[str, Any] = field(default_factory=dict)
    cancelable: bool = True
    # Object that dispatched the notification (used to spot our own writes)
    source: Any = None
    handled: bool = False
    result: Optional[Awaitable] = None

    def claim(self, result: Optional[Awaitable] = None) -> bool:
        """
        Mark a request as handled and attach its deferred result.

        Broadcasts cannot be claimed; returns False for them.
        """
        if not self.cancelable:
            return False
        self.handled = True
        self.result = result
        return True

    def mark_handled(self) -> None:
        """Acknowledge a notification so later subscribers leave it alone."""
        self.handled = True


class NotificationBus:
    """Routes notifications to subscribers by type."""

    def __init__(self):
        self.subscribers: Dict[str, List[Subscriber]] = {}

    def subscribe(self, notification_type: str, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a disposer that removes it again."""
        if not NotificationType.is_valid(notification_type):
            raise ValueError(f"Invalid notification type: {notification_type}")
        self.subscribers.setdefault(notification_type, []).append(callback)

        def dispose() -> None:
            callbacks = self.subscribers.get(notification_type, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return dispose

    def dispatch(self, notification: Notification) -> Notification:
        """Deliver a notification to every subscriber and return it."""
        for callback in list(self.subscribers.get(notification.type, [])):
            try:
                callback(notification)
            except Exception:
                logger.exception(f"Error in {notification.type} subscriber {callback!r}")
        return notification

    def subscriber_count(self, notification_type: str) -> int:
        return len(self.subscribers.get(notification_type, []))
