"""
Request list schema: modes, request records, projects.

Wire format follows the record store: ids live under ``_id``, the request
kind under ``type``, project links under ``projects`` / ``legacyProject``
and the explicit project order under the project's ``requests`` key.
Fields this core never reads are kept in ``extra`` so nothing is lost on
a round trip.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, FrozenSet

from .errors import ConfigError


class ListMode(Enum):
    """Viewing context of a requests list."""
    HISTORY = "history"
    SAVED = "saved"
    PROJECT = "project"

    @classmethod
    def from_str(cls, value: Any) -> "ListMode":
        """Parse a mode name. Missing or unknown names raise ConfigError."""
        if isinstance(value, cls):
            return value
        if not value:
            raise ConfigError('The list "mode" is not set.')
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigError(
                f"Unknown list mode {value!r}. "
                f"Available: {[m.value for m in cls]}"
            ) from None


class RequestKind(Enum):
    """Kind of a stored request record."""
    HISTORY = "history"
    SAVED = "saved"


# Store type names accepted as saved requests
SAVED_KINDS = ("saved", "saved-requests")


@dataclass
class Request:
    """A single request record as seen by the list."""

    id: str
    kind: str = RequestKind.SAVED.value
    name: str = ""

    # Project linkage (current + legacy scheme)
    project_refs: List[str] = field(default_factory=list)
    legacy_project_ref: Optional[str] = None

    # History time-bucket separator
    has_header: bool = False
    header: Optional[str] = None

    # Legacy ordering, used when a project has no explicit order
    project_order: int = 0

    # Everything else the store sent (url, method, payload, ...)
    extra: Dict[str, Any] = field(default_factory=dict)

    # Known wire keys the record arrived with
    wire_keys: FrozenSet[str] = field(default_factory=frozenset, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize back to the store's wire format.

        Known keys the record arrived with are always written back; absent
        ones are only added when they carry a non-default value.
        """
        data = dict(self.extra)
        data["_id"] = self.id
        if "id" in self.wire_keys:
            data["id"] = self.id
        data["type"] = self.kind
        optional = {
            "name": (self.name, bool(self.name)),
            "projects": (list(self.project_refs), bool(self.project_refs)),
            "legacyProject": (self.legacy_project_ref, self.legacy_project_ref is not None),
            "projectOrder": (self.project_order, self.project_order != 0),
            "hasHeader": (self.has_header, self.has_header),
            "header": (self.header, self.has_header or self.header is not None),
        }
        for key, (value, is_set) in optional.items():
            if is_set or key in self.wire_keys:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Request":
        """Deserialize from the store's wire format."""
        known = {
            "_id", "id", "type", "name", "projects", "legacyProject",
            "hasHeader", "header", "projectOrder",
        }
        request_id = data.get("_id", data.get("id"))
        if not request_id:
            raise ValueError("Request record has no _id")
        return cls(
            id=str(request_id),
            kind=data.get("type") or RequestKind.SAVED.value,
            name=data.get("name") or "",
            project_refs=list(data.get("projects") or []),
            legacy_project_ref=data.get("legacyProject") or None,
            has_header=bool(data.get("hasHeader", False)),
            header=data.get("header"),
            project_order=int(data.get("projectOrder") or 0),
            extra={k: v for k, v in data.items() if k not in known},
            wire_keys=frozenset(k for k in data if k in known),
        )


@dataclass
class Project:
    """Project aggregate owning the explicit order of its requests."""

    id: str
    name: str = ""
    # None for legacy projects that predate explicit ordering
    ordered_request_ids: Optional[List[str]] = None
    # UI-only marker, never serialized
    opened: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the store. The transient ``opened`` marker is dropped."""
        data = dict(self.extra)
        data["_id"] = self.id
        data["name"] = self.name
        if self.ordered_request_ids is not None:
            data["requests"] = list(self.ordered_request_ids)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        known = {"_id", "id", "name", "requests", "opened"}
        project_id = data.get("_id", data.get("id"))
        if not project_id:
            raise ValueError("Project record has no _id")
        order = data.get("requests")
        return cls(
            id=str(project_id),
            name=data.get("name") or "",
            ordered_request_ids=list(order) if order is not None else None,
            opened=bool(data.get("opened", False)),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class ListContext:
    """Which list is shown: a mode plus, for project mode, the project id."""
    mode: Any
    project_id: Optional[str] = None

    def validated(self) -> "ListContext":
        """Return a copy with a parsed mode. Raises ConfigError when incomplete."""
        mode = ListMode.from_str(self.mode)
        if mode == ListMode.PROJECT and not self.project_id:
            raise ConfigError('Project lists require a "project_id".')
        return ListContext(mode=mode, project_id=self.project_id or None)
