"""
Order synchronizer: keeps the explicit project order and the local list
in step.

Outbound, the current list order is written to the project, skipping the
write when nothing changed. Inbound, a project order reported by the
store is applied to the local list only when both sides hold exactly the
same ids; anything else is left for the pending add/delete notifications
to settle.
"""
import dataclasses
import logging
from typing import Any

from .boundary import BoundaryAdapter
from .bus import Notification
from .errors import NoActiveProjectError
from .ordering import ids_equal
from .schema import ListMode, Project
from .state import ListState

logger = logging.getLogger(__name__)


class OrderSynchronizer:
    """Persists and remaps project order for one list."""

    def __init__(self, state: ListState, adapter: BoundaryAdapter, origin: Any = None):
        self.state = state
        self.adapter = adapter
        # Notifications dispatched by this object are our own writes
        self.origin = origin if origin is not None else adapter.source

    async def persist_order(self) -> bool:
        """
        Store the current list order as the project's explicit order.

        Returns False when the stored order already matches (no notification
        is sent), True after the store accepted the new order.
        """
        project = self.state.project
        if project is None:
            raise NoActiveProjectError('"project" is not set')

        new_order = self.state.ids()
        if ids_equal(project.ordered_request_ids, new_order):
            return False

        updated = dataclasses.replace(project, ordered_request_ids=new_order)
        outgoing = dataclasses.replace(updated, opened=False)
        await self.adapter.project_changed(outgoing)
        self.state.set_project(updated)
        logger.info(f"Persisted order of {len(new_order)} requests for project {project.id}")
        return True

    def handle_project_changed(self, notification: Notification) -> bool:
        """Adopt a project reported by the store and remap the list. True when the order changed."""
        if notification.cancelable or notification.source is self.origin:
            return False
        if self.state.mode != ListMode.PROJECT or self.state.project is None:
            return False
        project = notification.detail.get("project")
        if project is None or project.id != self.state.project.id:
            return False
        self.state.set_project(project)
        return self.remap(project)

    def remap(self, project: Project) -> bool:
        """
        Reorder the list to the project's explicit order.

        All or nothing: returns False without touching the list when either
        side is missing, the lengths differ or an id is unknown locally.
        """
        requests = self.state.requests
        order = project.ordered_request_ids
        if not requests or order is None:
            return False
        if len(requests) != len(order):
            # An add or remove is still in flight
            logger.debug(
                f"Skipping remap of {project.id}: {len(requests)} local, {len(order)} stored"
            )
            return False

        permuted = []
        used = set()
        changed = False
        for i, request_id in enumerate(order):
            position = self.state.find(request_id)
            if position is None or position in used:
                logger.debug(f"Skipping remap of {project.id}: {request_id} is not loaded")
                return False
            used.add(position)
            permuted.append(requests[position])
            if position != i:
                changed = True

        if changed:
            self.state.load(permuted)
            logger.debug(f"Remapped {len(permuted)} requests to project {project.id} order")
        return changed
