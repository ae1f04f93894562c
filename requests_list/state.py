"""
List state: the ordered collection of requests for one list context.

The collection stays ``None`` until the first bulk load (or the first
upsert that seeds it). Every method performs one list mutation, so a
notification never leaves a half-applied change behind.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from .errors import DuplicateRequestError
from .schema import ListContext, ListMode, Project, Request, SAVED_KINDS

logger = logging.getLogger(__name__)


class ListState:
    """Owns the requests, the list context and, in project mode, the project."""

    def __init__(self, context: ListContext, saved_kinds: Sequence[str] = SAVED_KINDS):
        self.context = context.validated()
        self.saved_kinds = tuple(saved_kinds)
        self.requests: Optional[List[Request]] = None
        self.project: Optional[Project] = None

    @property
    def mode(self) -> ListMode:
        return self.context.mode

    @property
    def project_id(self) -> Optional[str]:
        return self.context.project_id

    @property
    def is_loaded(self) -> bool:
        return self.requests is not None

    @property
    def has_requests(self) -> bool:
        return bool(self.requests)

    def __len__(self) -> int:
        return len(self.requests) if self.requests else 0

    def ids(self) -> List[str]:
        """Ids of the current collection, in list order."""
        return [r.id for r in self.requests or []]

    def find(self, request_id: str) -> Optional[int]:
        """Index of the request with the given id, or None."""
        for i, request in enumerate(self.requests or []):
            if request.id == request_id:
                return i
        return None

    # ── Mutations ────────────────────────────────────────────

    def load(self, requests: Iterable[Request]) -> None:
        """Replace the whole collection. Duplicates are rejected before anything changes."""
        items = list(requests)
        seen = set()
        for request in items:
            if request.id in seen:
                raise DuplicateRequestError(request.id)
            seen.add(request.id)
        self.requests = items
        logger.debug(f"Loaded {len(items)} requests ({self.mode.value})")

    def insert_at(self, index: int, request: Request) -> None:
        if self.find(request.id) is not None:
            raise DuplicateRequestError(request.id)
        if self.requests is None:
            self.requests = []
        self.requests.insert(index, request)

    def append(self, request: Request) -> None:
        self.insert_at(len(self), request)

    def prepend(self, request: Request) -> None:
        self.insert_at(0, request)

    def replace_at(self, index: int, request: Request) -> None:
        existing = self.find(request.id)
        if existing is not None and existing != index:
            raise DuplicateRequestError(request.id)
        self.requests[index] = request

    def remove_at(self, index: int) -> Request:
        return self.requests.pop(index)

    def move(self, from_index: int, to_index: int) -> None:
        """Move one request to another position (local drag-reorder)."""
        items = list(self.requests or [])
        request = items.pop(from_index)
        items.insert(to_index, request)
        self.requests = items

    def set_project(self, project: Optional[Project]) -> None:
        self.project = project
