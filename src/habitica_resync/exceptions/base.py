class HabiticaClientError(Exception):
    """Base exception for all Habitica resync errors."""
    pass


class APIError(HabiticaClientError):
    """Raised when API calls fail."""
    pass


class ValidationError(HabiticaClientError):
    """Raised when input validation fails."""
    pass


class ConfigurationError(HabiticaClientError):
    """Raised when settings cannot be loaded or saved."""
    pass
