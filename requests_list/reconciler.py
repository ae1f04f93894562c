"""
Change reconciler: applies store change notifications to the list.

Only committed broadcasts are acted on. A cancelable notification is still
a request addressed to the store, and one already marked handled was dealt
with by someone else; both are ignored so the same change is never
applied twice.
"""
import dataclasses
import logging
from typing import Callable, Optional

from .bus import Notification
from .membership import is_member
from .schema import ListMode, Request
from .state import ListState

logger = logging.getLogger(__name__)

HistoryHandler = Callable[[Request], None]


def _is_actionable(notification: Notification) -> bool:
    return not notification.cancelable and not notification.handled


class ChangeReconciler:
    """Routes record-deleted / record-changed notifications to per-mode rules."""

    def __init__(self, state: ListState, history_handler: Optional[HistoryHandler] = None):
        self.state = state
        self.history_handler = history_handler
        self._delete_handlers = {
            ListMode.HISTORY: self._history_deleted,
            ListMode.SAVED: self._item_deleted,
            ListMode.PROJECT: self._item_deleted,
        }
        self._change_handlers = {
            ListMode.HISTORY: self._history_changed,
            ListMode.SAVED: self._saved_changed,
            ListMode.PROJECT: self._project_changed,
        }

    # ── Bus entry points ─────────────────────────────────────

    def handle_deleted(self, notification: Notification) -> None:
        if not _is_actionable(notification):
            return
        request_id = notification.detail.get("id")
        if request_id:
            self.delete(request_id)

    def handle_changed(self, notification: Notification) -> None:
        if not _is_actionable(notification):
            return
        request = notification.detail.get("request")
        if request is not None:
            self.upsert(request)

    # ── Operations ───────────────────────────────────────────

    def delete(self, request_id: str) -> None:
        """Remove a request from the list. Unknown ids are ignored."""
        if not self.state.has_requests:
            return
        self._delete_handlers[self.state.mode](request_id)

    def upsert(self, request: Request) -> None:
        """Add, update or drop a changed request depending on the list mode."""
        self._change_handlers[self.state.mode](request)

    # ── Deletion rules ───────────────────────────────────────

    def _item_deleted(self, request_id: str) -> None:
        index = self.state.find(request_id)
        if index is None:
            return
        self.state.remove_at(index)
        logger.debug(f"Removed {request_id} at {index}")

    def _history_deleted(self, request_id: str) -> None:
        index = self.state.find(request_id)
        if index is None:
            return
        old = self.state.requests[index]
        next_index = index + 1
        if old.has_header and next_index < len(self.state):
            following = self.state.requests[next_index]
            if not following.has_header:
                # The time bucket keeps its header
                self.state.replace_at(next_index, dataclasses.replace(
                    following, has_header=old.has_header, header=old.header,
                ))
        self.state.remove_at(index)
        logger.debug(f"Removed history item {request_id} at {index}")

    # ── Change rules ─────────────────────────────────────────

    def _history_changed(self, request: Request) -> None:
        if self.history_handler:
            self.history_handler(request)

    def _saved_changed(self, request: Request) -> None:
        if self.state.mode != ListMode.SAVED:
            return
        if request.kind not in self.state.saved_kinds:
            return
        if not self.state.is_loaded:
            self.state.load([request])
            return
        index = self.state.find(request.id)
        if index is not None:
            self.state.replace_at(index, request)
            logger.debug(f"Updated saved request {request.id} at {index}")
            return
        self.state.prepend(request)
        logger.debug(f"Added saved request {request.id}")

    def _project_changed(self, request: Request) -> None:
        project_id = self.state.project_id
        if not project_id:
            return
        member = is_member(request, project_id)
        if not self.state.is_loaded:
            if member:
                self.state.load([request])
            return

        index = self.state.find(request.id)
        if index is not None:
            if member:
                self.state.replace_at(index, request)
                logger.debug(f"Updated project request {request.id} at {index}")
            else:
                self.state.remove_at(index)
                logger.debug(f"Request {request.id} left project {project_id}")
            return

        if member:
            position = self._project_position(request.id)
            self.state.insert_at(position, request)
            logger.debug(f"Added project request {request.id} at {position}")

    def _project_position(self, request_id: str) -> int:
        """Insert position from the project's explicit order, else the end."""
        project = self.state.project
        size = len(self.state)
        if project is None or not project.ordered_request_ids:
            return size
        if request_id not in project.ordered_request_ids:
            return size
        return min(project.ordered_request_ids.index(request_id), size)
