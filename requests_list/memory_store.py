"""
In-memory record store.

Answers the list's outbound requests the way a real store would: it claims
the notification, does the work when the deferred result is awaited and
then broadcasts the committed change. Used by the replay CLI and tests.
"""
import dataclasses
import logging
from typing import Any, Callable, Dict, List, Optional

from .bus import Notification, NotificationBus, NotificationType
from .errors import RecordNotFoundError
from .membership import is_member
from .schema import Project, Request

logger = logging.getLogger(__name__)


def _copy_project(project: Project) -> Project:
    order = project.ordered_request_ids
    return dataclasses.replace(project, ordered_request_ids=list(order) if order is not None else None)


class InMemoryRecordStore:
    """Dict-backed store for requests and projects."""

    def __init__(self, bus: NotificationBus):
        self.bus = bus
        self.requests: Dict[str, Request] = {}
        self.projects: Dict[str, Project] = {}
        self._disposers: List[Callable[[], None]] = []

    def attach(self) -> Callable[[], None]:
        """Start answering requests on the bus. Returns the detach callable."""
        if not self._disposers:
            handlers = {
                NotificationType.READ_PROJECT: self._on_read_project,
                NotificationType.LIST_PROJECT_REQUESTS: self._on_list_project_requests,
                NotificationType.REQUEST_CHANGED: self._on_request_changed,
                NotificationType.PROJECT_CHANGED: self._on_project_changed,
            }
            self._disposers = [
                self.bus.subscribe(notification_type, handler)
                for notification_type, handler in handlers.items()
            ]
        return self.detach

    def detach(self) -> None:
        for dispose in self._disposers:
            dispose()
        self._disposers = []

    # ── Seeding ──────────────────────────────────────────────

    def put_request(self, request: Request) -> None:
        self.requests[request.id] = request

    def put_project(self, project: Project) -> None:
        self.projects[project.id] = _copy_project(project)

    # ── Direct writes ────────────────────────────────────────

    def save_request(self, request: Request, kind: Optional[str] = None, source: Any = None) -> Request:
        """Store a request and broadcast record-changed."""
        self.requests[request.id] = request
        self._broadcast(NotificationType.RECORD_CHANGED, {"kind": kind, "request": request}, source)
        return request

    def save_project(self, project: Project, source: Any = None) -> Project:
        """Store a project and broadcast project-changed."""
        self.projects[project.id] = _copy_project(project)
        self._broadcast(NotificationType.PROJECT_CHANGED, {"project": _copy_project(project)}, source)
        return project

    def delete_request(self, request_id: str, source: Any = None) -> bool:
        """Delete a request and broadcast record-deleted. False if it did not exist."""
        if self.requests.pop(request_id, None) is None:
            return False
        for project_id, project in list(self.projects.items()):
            if project.ordered_request_ids and request_id in project.ordered_request_ids:
                self.projects[project_id] = dataclasses.replace(project, ordered_request_ids=[
                    rid for rid in project.ordered_request_ids if rid != request_id
                ])
        self._broadcast(NotificationType.RECORD_DELETED, {"id": request_id}, source)
        return True

    # ── Queries ──────────────────────────────────────────────

    def get_project(self, project_id: str) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise RecordNotFoundError(f"Project {project_id} not found")
        return project

    def project_requests(self, project_id: str) -> List[Request]:
        """Members of a project, in explicit order when the project has one."""
        project = self.get_project(project_id)
        members = [r for r in self.requests.values() if is_member(r, project_id)]
        if project.ordered_request_ids is None:
            return members
        position = {rid: i for i, rid in enumerate(project.ordered_request_ids)}
        return sorted(members, key=lambda r: position.get(r.id, len(position)))

    # ── Request handlers ─────────────────────────────────────

    def _on_read_project(self, notification: Notification) -> None:
        if notification.cancelable:
            notification.claim(self._read_project(notification.detail["id"]))

    def _on_list_project_requests(self, notification: Notification) -> None:
        if notification.cancelable:
            notification.claim(self._list_project_requests(notification.detail["id"]))

    def _on_request_changed(self, notification: Notification) -> None:
        if notification.cancelable:
            notification.claim(self._save_request(
                notification.detail.get("kind"),
                notification.detail["request"],
                notification.source,
            ))

    def _on_project_changed(self, notification: Notification) -> None:
        if notification.cancelable:
            notification.claim(self._save_project(
                notification.detail["project"],
                notification.source,
            ))

    # ── Deferred results ─────────────────────────────────────

    async def _read_project(self, project_id: str) -> Project:
        return _copy_project(self.get_project(project_id))

    async def _list_project_requests(self, project_id: str) -> List[Request]:
        return self.project_requests(project_id)

    async def _save_request(self, kind: Optional[str], request: Request, source: Any) -> Request:
        return self.save_request(request, kind=kind, source=source)

    async def _save_project(self, project: Project, source: Any) -> Project:
        if project.id not in self.projects:
            raise RecordNotFoundError(f"Project {project.id} not found")
        return self.save_project(project, source=source)

    def _broadcast(self, notification_type: str, detail: Dict[str, Any], source: Any) -> None:
        logger.debug(f"Broadcasting {notification_type}")
        self.bus.dispatch(Notification(
            type=notification_type,
            detail=detail,
            cancelable=False,
            source=source,
        ))
