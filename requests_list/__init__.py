# Requests list: keeps history, saved and project request lists in sync
# with an external record store through store notifications.
#
# Components:
#   schema.py       - Data model (ListMode, Request, Project, ListContext)
#   ordering.py     - Legacy (projectOrder, name) ordering and id comparison
#   membership.py   - Project membership check
#   state.py        - Ordered collection for one list context
#   bus.py          - In-process notification bus
#   boundary.py     - Outbound store requests (NotHandled | deferred result)
#   reconciler.py   - Applies record-deleted / record-changed broadcasts
#   order_sync.py   - Persists and remaps explicit project order
#   controller.py   - Wires one list to a bus
#   memory_store.py - In-memory record store answering list requests
#   config.py       - YAML configuration and logging setup

from .bus import Notification, NotificationBus, NotificationType
from .controller import RequestsListController
from .errors import (
    ConfigError,
    DuplicateRequestError,
    NoActiveProjectError,
    NotHandledError,
    RecordNotFoundError,
    RequestsListError,
)
from .schema import ListContext, ListMode, Project, Request, RequestKind

__all__ = [
    "ConfigError",
    "DuplicateRequestError",
    "ListContext",
    "ListMode",
    "NoActiveProjectError",
    "NotHandledError",
    "Notification",
    "NotificationBus",
    "NotificationType",
    "Project",
    "RecordNotFoundError",
    "Request",
    "RequestKind",
    "RequestsListController",
    "RequestsListError",
]
