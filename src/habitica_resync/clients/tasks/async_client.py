import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Awaitable, Dict, List, Optional, TypeVar
from urllib.parse import quote, urlencode
import logging

import aiohttp

from ...config import HabiticaSettings
from ...events import EventHub, EventKind, SubscriberGroup
from ...events.hub import Listener
from ...exceptions import HabiticaHTTPError, HabiticaResponseError, ValidationError
from ...services.tasks import utils
from ...services.tasks.classifier import classify
from ...services.tasks.constants import (
    HABITICA_API_URL, DEFAULT_API_VERSION, HABITICA_SIDE_PLUGIN_ID, DEVELOPER_USER_ID
)
from ...services.tasks.types import Task, TaskCategory, TaskCollection
from ...utils.datetime import convert_datetime_to_iso
from ...utils.log_sanitizer import sanitize_for_logging
from ..rate_limit import ApiResponse, RateLimitedGate

logger = logging.getLogger(__name__)

T = TypeVar('T')


@asynccontextmanager
async def habitica_session(headers: Dict[str, str], timeout_ms: int):
    """Async context manager for an HTTP session with transport error handling."""
    timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
    try:
        async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
            yield session
    except asyncio.TimeoutError as e:
        raise HabiticaHTTPError(f"Request to Habitica timed out after {timeout_ms}ms") from e
    except aiohttp.ClientError as e:
        raise HabiticaHTTPError(f"Transport error talking to Habitica: {e}") from e


def build_api_url(endpoint: str, version: int = DEFAULT_API_VERSION, query_params: Optional[Dict[str, str]] = None) -> str:
    """
    Serves as a local router for building Habitica API URLs.

    Args:
        endpoint: The API endpoint to access.
        version: The API version to use.
        query_params: The query parameters to include in the URL.

    Returns:
        The constructed API URL.
    """
    query_string = urlencode(query_params or {})
    return f"{HABITICA_API_URL}/v{version}/{endpoint}?{query_string}"


class HabiticaClient:
    """
    Interfaces with the Habitica API while respecting rate limits.

    Every fetch goes through the rate-limited gate, and fetched tasks are
    fanned out to subscribers by category.

    Usage Examples:
        client = HabiticaClient(settings)
        client.subscribe(EventKind.TODO_UPDATED, SubscriberGroup.PANE_SYNC, on_todos)
        collection = await client.retrieve_all_tasks()
    """

    def __init__(
            self,
            settings: HabiticaSettings,
            gate: Optional[RateLimitedGate] = None,
            hub: Optional[EventHub] = None
    ):
        self.settings = settings
        self.gate = gate or RateLimitedGate(buffer_seconds=settings.rate_limit_buffer_ms / 1000)
        self.hub = hub or EventHub()

    # Events
    def subscribe(self, event: EventKind, group: SubscriberGroup, listener: Listener) -> None:
        self.hub.subscribe(event, group, listener)

    def unsubscribe(self, event: EventKind, group: SubscriberGroup, listener: Listener) -> None:
        self.hub.unsubscribe(event, group, listener)

    def emit(self, event: EventKind, tasks: List[Task]) -> None:
        self.hub.emit(event, tasks)

    async def run_suspended(self, event: EventKind, group: SubscriberGroup, awaitable: Awaitable[T]) -> T:
        return await self.hub.run_suspended(event, group, awaitable)

    async def run_all_suspended(self, group: SubscriberGroup, awaitable: Awaitable[T]) -> T:
        return await self.hub.run_all_suspended(group, awaitable)

    # Requests
    def _default_headers(self) -> Dict[str, str]:
        return {
            'x-client': f"{DEVELOPER_USER_ID}-{HABITICA_SIDE_PLUGIN_ID}",
            'x-api-user': self.settings.user_id,
            'x-api-key': self.settings.api_key,
        }

    def _default_json_headers(self) -> Dict[str, str]:
        return {
            **self._default_headers(),
            'Content-Type': 'application/json'
        }

    def _get(self, url: str):
        """Returns a request factory for a GET; nothing is sent until it is awaited."""
        headers = self._default_json_headers()

        async def request() -> ApiResponse:
            async with habitica_session(headers, self.settings.timeout_ms) as session:
                async with session.get(url) as response:
                    try:
                        payload = await response.json(content_type=None)
                    except ValueError:
                        logger.warning("Response body from %s is not valid JSON", url)
                        payload = None
                    return ApiResponse(
                        status=response.status,
                        reason=response.reason or '',
                        headers=dict(response.headers),
                        payload=payload
                    )

        return request

    async def retrieve_tasks(
            self,
            category: Optional[TaskCategory] = None,
            due_date: Optional[datetime] = None
    ) -> List[Task]:
        """
        Retrieves tasks from the Habitica API, then emits them by category.

        Args:
            category: Only fetch tasks of this category.
            due_date: Date used by the API to compute which dailies are due.

        Returns:
            A list of Task objects.
        """
        query_params = {}
        if category is not None:
            query_params['type'] = TaskCategory(category).value
        if due_date is not None:
            query_params['dueDate'] = convert_datetime_to_iso(due_date)
        url = build_api_url('tasks/user', DEFAULT_API_VERSION, query_params)

        sanitized = sanitize_for_logging(user_id=self.settings.user_id, headers=self._default_headers())
        logger.info("Fetching tasks from Habitica: %s (user=%s)", url, sanitized['user_id'])
        logger.debug("Request headers: %s", sanitized['headers'])

        response = await self.gate.execute(self._get(url))
        tasks = utils.parse_tasks_payload(response.payload.get('data'))
        logger.info("Retrieved %d tasks", len(tasks))

        self.hub.emit_by_category(tasks)
        return tasks

    async def retrieve_task(self, task_id: str) -> Task:
        """
        Retrieves a single task and emits it as a taskUpdated event.

        Args:
            task_id: Task identifier or alias.

        Returns:
            The Task.
        """
        if not task_id or not task_id.strip():
            raise ValidationError("task_id cannot be empty")

        url = build_api_url(f"tasks/{quote(task_id.strip(), safe='')}")
        logger.info("Retrieving task %s", sanitize_for_logging(task_id=task_id)['task_id'])

        response = await self.gate.execute(self._get(url))
        tasks = utils.parse_tasks_payload(response.payload.get('data'))
        if not tasks:
            raise HabiticaResponseError(f"Task payload for {task_id} could not be parsed")

        self.hub.emit(EventKind.TASK_UPDATED, tasks[:1])
        return tasks[0]

    async def retrieve_all_tasks(self) -> TaskCollection:
        """
        Utility method to retrieve all tasks organized by category.

        Returns:
            A TaskCollection of every category.
        """
        tasks = await self.retrieve_tasks()
        return classify(tasks)
