"""
Boundary adapter: outbound notifications to the record store.

A request is sent as a cancelable notification. If nobody claims it the
call fails with NotHandledError, which is how a missing store shows up.
Otherwise the claimant's deferred result is awaited and whatever it
raises reaches the caller unchanged.
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, List, Optional

from .bus import Notification, NotificationBus, NotificationType
from .errors import NotHandledError
from .schema import Project, Request, RequestKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a dispatched request: not handled, or handled with a deferred result."""
    handled: bool
    result: Optional[Awaitable] = None

    @classmethod
    def from_notification(cls, notification: Notification) -> "DispatchResult":
        if not notification.handled:
            return cls(handled=False)
        return cls(handled=True, result=notification.result)


class BoundaryAdapter:
    """Sends notifications on behalf of one list (the ``source``)."""

    def __init__(self, bus: NotificationBus, source: Any = None):
        self.bus = bus
        self.source = source

    def send(
        self,
        notification_type: str,
        detail: Optional[Dict[str, Any]] = None,
        cancelable: bool = True,
    ) -> Notification:
        """Dispatch a notification and return it (fire-and-forget callers)."""
        notification = Notification(
            type=notification_type,
            detail=detail or {},
            cancelable=cancelable,
            source=self.source,
        )
        return self.bus.dispatch(notification)

    def request(self, notification_type: str, detail: Dict[str, Any]) -> DispatchResult:
        return DispatchResult.from_notification(self.send(notification_type, detail))

    async def call(
        self,
        notification_type: str,
        detail: Dict[str, Any],
        error_message: str = "",
    ) -> Any:
        """Send a request and await its result. Raises NotHandledError when unclaimed."""
        outcome = self.request(notification_type, detail)
        if not outcome.handled:
            logger.warning(f"{notification_type} notification not handled")
            raise NotHandledError(notification_type, error_message)
        if outcome.result is None:
            return None
        return await outcome.result

    # ── Typed requests ───────────────────────────────────────

    async def read_project(self, project_id: str) -> Project:
        return await self.call(
            NotificationType.READ_PROJECT,
            {"id": project_id},
            f"{NotificationType.READ_PROJECT} notification not handled",
        )

    async def list_project_requests(self, project_id: str) -> List[Request]:
        return await self.call(
            NotificationType.LIST_PROJECT_REQUESTS,
            {"id": project_id},
            f"{NotificationType.LIST_PROJECT_REQUESTS} notification not handled",
        )

    async def request_changed(self, kind: RequestKind, request: Request) -> Any:
        return await self.call(
            NotificationType.REQUEST_CHANGED,
            {"kind": kind.value, "request": request},
            "Request model not found",
        )

    async def project_changed(self, project: Project) -> Any:
        return await self.call(
            NotificationType.PROJECT_CHANGED,
            {"project": project},
            "Projects model not found",
        )

    # ── Fire-and-forget ──────────────────────────────────────

    def export_requested(
        self,
        data: Dict[str, Any],
        options: Optional[Dict[str, Any]] = None,
        provider_options: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        return self.send(NotificationType.EXPORT_REQUESTED, {
            "options": options or {},
            "provider_options": provider_options or {},
            "data": data,
        })

    def navigate(self, target: Dict[str, Any]) -> Notification:
        return self.send(NotificationType.NAVIGATE, target)
