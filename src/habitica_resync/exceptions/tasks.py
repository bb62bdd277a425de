from typing import Optional

from .base import APIError


class TasksError(APIError):
    """Base exception for Habitica tasks API errors."""
    pass


class HabiticaHTTPError(TasksError):
    """Raised when the API answers with a non-success HTTP status."""

    def __init__(self, message: str, status: Optional[int] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.reason = reason


class HabiticaResponseError(TasksError):
    """Raised when the decoded body reports success=false."""

    def __init__(self, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.payload = payload


class TasksNotFoundError(HabiticaHTTPError):
    """Raised when a task is not found."""
    pass


class TasksPermissionError(HabiticaHTTPError):
    """Raised when the credentials are rejected for a tasks operation."""
    pass
