from .base import HabiticaClientError


class StorageError(HabiticaClientError):
    """Base exception for note storage errors."""
    pass


class StorageConflictError(StorageError):
    """Raised when the configured notes folder path exists but is not a folder."""
    pass
