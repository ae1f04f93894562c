"""
Requests list controller.

Wires one list context to a notification bus: inbound store notifications
go to the reconciler and the order synchronizer, list actions (bulk
updates, reordering, export, navigation) go out through the boundary
adapter.

Usage:
    bus = NotificationBus()
    controller = RequestsListController(bus, ListContext(ListMode.SAVED))
    detach = controller.attach()
    controller.load(requests)
    ...
    detach()
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from .boundary import BoundaryAdapter
from .bus import Notification, NotificationBus, NotificationType
from .config import Config
from .order_sync import OrderSynchronizer
from .ordering import legacy_sort
from .reconciler import ChangeReconciler, HistoryHandler
from .schema import ListContext, ListMode, Project, Request, RequestKind
from .state import ListState

logger = logging.getLogger(__name__)


class RequestsListController:
    """One history, saved or project list kept in sync with the record store."""

    def __init__(
        self,
        bus: NotificationBus,
        context: ListContext,
        config: Optional[Config] = None,
        history_handler: Optional[HistoryHandler] = None,
    ):
        self.bus = bus
        self.config = config or Config()
        self.state = ListState(context, saved_kinds=self.config.saved_kinds)
        self.adapter = BoundaryAdapter(bus, source=self)
        self.reconciler = ChangeReconciler(self.state, history_handler)
        self.order_sync = OrderSynchronizer(self.state, self.adapter, origin=self)
        self._disposers: List[Callable[[], None]] = []

    # ──────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────

    def attach(self) -> Callable[[], None]:
        """Subscribe to store notifications. Returns the matching detach callable."""
        if not self._disposers:
            self._disposers = [
                self.bus.subscribe(NotificationType.RECORD_DELETED, self.reconciler.handle_deleted),
                self.bus.subscribe(NotificationType.RECORD_CHANGED, self.reconciler.handle_changed),
                self.bus.subscribe(NotificationType.PROJECT_CHANGED, self.order_sync.handle_project_changed),
            ]
        return self.detach

    def detach(self) -> None:
        for dispose in self._disposers:
            dispose()
        self._disposers = []

    @property
    def attached(self) -> bool:
        return bool(self._disposers)

    # ──────────────────────────────────────────
    # State access
    # ──────────────────────────────────────────

    @property
    def mode(self) -> ListMode:
        return self.state.mode

    @property
    def requests(self) -> Optional[List[Request]]:
        return self.state.requests

    @property
    def project(self) -> Optional[Project]:
        return self.state.project

    @property
    def has_requests(self) -> bool:
        return self.state.has_requests

    def load(self, requests: Iterable[Request], project: Optional[Project] = None) -> None:
        """Bulk load the list (and, in project mode, the project)."""
        if project is not None:
            self.state.set_project(project)
        self.state.load(requests)

    # ──────────────────────────────────────────
    # Store reads
    # ──────────────────────────────────────────

    async def read_project_requests(self, project_id: str) -> List[Request]:
        """
        Read the requests of a project.

        The tracked project is reused when it has the same id, otherwise it
        is read from the store and, if no project is tracked yet, adopted.
        Projects without an explicit order get their requests in legacy order.
        """
        current = self.state.project
        if current is not None and current.id == project_id:
            project = current
        else:
            project = await self.adapter.read_project(project_id)
            if current is None:
                self.state.set_project(project)

        requests = await self.adapter.list_project_requests(project.id)
        requests = list(requests or [])
        if project.ordered_request_ids is None:
            requests = legacy_sort(requests)
        return requests

    # ──────────────────────────────────────────
    # Store writes
    # ──────────────────────────────────────────

    def _request_kind(self) -> RequestKind:
        if self.state.mode == ListMode.HISTORY:
            return RequestKind.HISTORY
        return RequestKind.SAVED

    async def update_request(self, request: Request) -> Any:
        """Send one request to the store as a request-changed notification."""
        return await self.adapter.request_changed(self._request_kind(), request)

    async def update_bulk(self, requests: Iterable[Request]) -> List[Any]:
        """Update many requests at once. Fails if any single update fails."""
        return await asyncio.gather(*(self.update_request(r) for r in requests))

    async def persist_order(self) -> bool:
        return await self.order_sync.persist_order()

    async def reorder(self, from_index: int, to_index: int) -> bool:
        """
        Move a request within the list.

        In project mode the new order is persisted right away; returns
        whether a project update was sent.
        """
        self.state.move(from_index, to_index)
        if self.state.mode != ListMode.PROJECT:
            return False
        return await self.order_sync.persist_order()

    # ──────────────────────────────────────────
    # Fire-and-forget
    # ──────────────────────────────────────────

    def export_data(
        self,
        requests: Iterable[Request],
        options: Optional[Dict[str, Any]] = None,
        provider_options: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        """Ask the export provider to export the given requests."""
        records = [r.to_dict() for r in requests]
        data: Dict[str, Any] = {}
        if self.state.mode == ListMode.HISTORY:
            data["history"] = records
        elif self.state.mode == ListMode.SAVED:
            data["saved"] = records
        else:
            data["saved"] = records
            data["projects"] = [self.state.project.to_dict()] if self.state.project else []
        return self.adapter.export_requested(data, options, provider_options)

    def open_request(self, request_id: str) -> Notification:
        """Navigate to a request. Project lists open their requests as saved ones."""
        return self.adapter.navigate({
            "base": "request",
            "type": self._request_kind().value,
            "id": request_id,
        })
