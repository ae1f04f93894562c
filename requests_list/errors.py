"""
Exceptions raised by the requests list core.

Consistency aborts during an order remap are not errors; they come back
as a False return from the synchronizer.
"""


class RequestsListError(Exception):
    """Base class for every error raised by this package."""
    pass


class ConfigError(RequestsListError):
    """Raised when the list context or configuration is invalid or incomplete."""
    pass


class NotHandledError(RequestsListError):
    """Raised when no collaborator claimed an outbound notification."""

    def __init__(self, notification_type: str, message: str = ""):
        self.notification_type = notification_type
        super().__init__(
            message or f"{notification_type} notification not handled"
        )


class NoActiveProjectError(RequestsListError):
    """Raised when project order is persisted without a tracked project."""
    pass


class DuplicateRequestError(RequestsListError):
    """Raised when an id would appear twice in the list."""

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Request {request_id!r} is already in the list")


class RecordNotFoundError(RequestsListError, LookupError):
    """Raised when a requested record does not exist in the store."""
    pass
