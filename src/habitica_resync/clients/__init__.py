"""Habitica API clients."""

from .rate_limit import ApiResponse, RateLimitState, RateLimitedGate
from .tasks import HabiticaClient

__all__ = [
    "ApiResponse",
    "RateLimitState",
    "RateLimitedGate",
    "HabiticaClient",
]
