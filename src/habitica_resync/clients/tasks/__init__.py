"""Habitica tasks API client."""

from .async_client import HabiticaClient, build_api_url, habitica_session

__all__ = [
    "HabiticaClient",
    "build_api_url",
    "habitica_session",
]
