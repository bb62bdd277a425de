from .base import HabiticaClientError, APIError, ValidationError, ConfigurationError
from .tasks import (
    TasksError, HabiticaHTTPError, HabiticaResponseError,
    TasksNotFoundError, TasksPermissionError
)
from .storage import StorageError, StorageConflictError

__all__ = [
    "HabiticaClientError",
    "APIError",
    "ValidationError",
    "ConfigurationError",
    "TasksError",
    "HabiticaHTTPError",
    "HabiticaResponseError",
    "TasksNotFoundError",
    "TasksPermissionError",
    "StorageError",
    "StorageConflictError",
]
