"""
Client-side enforcement of the Habitica request quota.

Habitica reports the remaining budget of the current quota window and the
instant the window resets in response headers. The gate lets requests through
while budget remains and otherwise holds them until the reset instant plus a
safety buffer.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional
import logging

from ..exceptions import (
    HabiticaHTTPError, HabiticaResponseError, TasksNotFoundError, TasksPermissionError
)
from ..services.tasks.constants import (
    DEFAULT_REMAINING_REQUESTS, RATE_LIMIT_REMAINING_HEADER, RATE_LIMIT_RESET_HEADER
)
from ..utils.datetime import parse_api_datetime

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    """
    A fully read HTTP response.
    Args:
        status: HTTP status code.
        reason: HTTP reason phrase.
        headers: Response headers with lower-cased names.
        payload: Decoded JSON body, or None if the body was not JSON.
    """
    status: int
    reason: str = ''
    headers: Dict[str, str] = field(default_factory=dict)
    payload: Any = None

    def __post_init__(self):
        self.headers = {str(k).lower(): str(v) for k, v in dict(self.headers).items()}

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


RequestFactory = Callable[[], Awaitable[ApiResponse]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RateLimitState:
    """Quota as last reported by the API. The most recent response wins."""
    remaining_requests: int = DEFAULT_REMAINING_REQUESTS
    next_reset: Optional[datetime] = None
    # Set whenever a response reports quota left; deferred callers wake on it
    refreshed: asyncio.Event = field(default_factory=asyncio.Event, repr=False, compare=False)

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """
        Interpret the rate-limit headers of a response.
        An absent or unparseable header keeps the previous value.
        """
        raw_remaining = headers.get(RATE_LIMIT_REMAINING_HEADER)
        if raw_remaining is not None:
            try:
                self.remaining_requests = int(str(raw_remaining).strip())
            except ValueError:
                logger.warning("Ignoring unparseable %s header: %r", RATE_LIMIT_REMAINING_HEADER, raw_remaining)
            else:
                if self.remaining_requests > 0:
                    self.refreshed.set()

        raw_reset = headers.get(RATE_LIMIT_RESET_HEADER)
        if raw_reset is not None:
            try:
                reset = parse_api_datetime(raw_reset)
            except (ValueError, OverflowError):
                logger.warning("Ignoring unparseable %s header: %r", RATE_LIMIT_RESET_HEADER, raw_reset)
            else:
                if reset is not None:
                    self.next_reset = reset


class RateLimitedGate:
    """
    Serializes outgoing requests against the quota window.

    Requests run immediately while quota remains. Once it is exhausted,
    callers wait on a FIFO admission lock until the reset instant plus the
    configured buffer, or until a response reports quota left, then re-check
    the live state.
    """

    def __init__(
            self,
            buffer_seconds: float = 10.0,
            state: Optional[RateLimitState] = None,
            clock: Callable[[], datetime] = _utcnow,
            sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Initialize the gate.

        Args:
            buffer_seconds: Extra wait added after the reported reset instant
            state: Shared quota state (a fresh one by default)
            clock: Returns the current aware datetime
            sleep: Coroutine function used to wait
        """
        self.buffer = timedelta(seconds=buffer_seconds)
        self.state = state or RateLimitState()
        self._clock = clock
        self._sleep = sleep
        self._admission = asyncio.Lock()

    def delay_before_next_request(self) -> Optional[float]:
        """
        Seconds to wait before the next request may start, or None to go now.
        """
        if self.state.remaining_requests > 0:
            return None
        now = self._clock()
        if self.state.next_reset is not None and self.state.next_reset > now:
            return (self.state.next_reset - now + self.buffer).total_seconds()
        logger.warning("No remaining requests and no upcoming reset time known, making request immediately")
        return None

    async def wait_for_quota(self) -> None:
        """Return once a request may be started."""
        if self.state.remaining_requests > 0:
            return

        async with self._admission:
            while True:
                delay = self.delay_before_next_request()
                if delay is None:
                    return
                logger.info(
                    "No remaining requests, waiting %.1fs until reset at %s",
                    delay, self.state.next_reset.isoformat()
                )
                await self._wait_for_reset_or_refresh(delay)

    async def _wait_for_reset_or_refresh(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, or less if a response reports quota left."""
        self.state.refreshed.clear()
        sleeper = asyncio.ensure_future(self._sleep(delay))
        waker = asyncio.ensure_future(self.state.refreshed.wait())
        try:
            await asyncio.wait({sleeper, waker}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            sleeper.cancel()
            waker.cancel()
        if waker.done() and not waker.cancelled():
            logger.info("Quota refreshed while waiting, re-checking")

    async def execute(self, request_factory: RequestFactory) -> ApiResponse:
        """
        Run the request as soon as the rate limit allows it.

        Args:
            request_factory: Zero-argument coroutine function performing the request

        Returns:
            The successful response

        Raises:
            HabiticaHTTPError: If the response status is not a success
            HabiticaResponseError: If the body reports success=false
        """
        await self.wait_for_quota()
        response = await request_factory()
        return self.handle_response(response)

    def handle_response(self, response: ApiResponse) -> ApiResponse:
        """
        Record the rate-limit headers, then check the response for failure.
        Failures are terminal for the call; the gate never retries.
        """
        self.state.update_from_headers(response.headers)
        logger.info(
            "Rate limit - remaining: %s, next reset: %s",
            self.state.remaining_requests,
            self.state.next_reset.isoformat() if self.state.next_reset else None
        )

        if not response.ok:
            message = (
                f"HTTP error (Is Habitica API down?); status: {response.status}, "
                f"statusText: {response.reason}"
            )
            if response.status in (401, 403):
                raise TasksPermissionError(message, status=response.status, reason=response.reason)
            elif response.status == 404:
                raise TasksNotFoundError(message, status=response.status, reason=response.reason)
            else:
                raise HabiticaHTTPError(message, status=response.status, reason=response.reason)

        payload = response.payload
        if not isinstance(payload, dict) or not payload.get('success'):
            raise HabiticaResponseError(
                f"Habitica API error (Was there a Habitica API update?); response: {str(payload)[:500]}",
                payload=payload if isinstance(payload, dict) else None
            )
        return response
