import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from habitica_resync.config import HabiticaSettings


class FakeClock:
    """Deterministic clock whose sleep advances time instead of waiting."""

    def __init__(self, now: datetime):
        self.now = now
        self.sleeps = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def fake_clock():
    """Clock starting at a fixed UTC instant."""
    return FakeClock(datetime(2026, 1, 5, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    """Complete settings for testing."""
    return HabiticaSettings(
        user_id="user-123",
        api_key="key-abcdef123456",
        global_task_tag="#habitica",
        indent_string="  ",
    )


@pytest.fixture
def sample_habitica_task():
    """Sample Habitica API todo response."""
    return {
        "_id": "todo-1",
        "id": "todo-1",
        "type": "todo",
        "text": "Write report",
        "notes": "Quarterly numbers",
        "completed": False,
        "priority": 1.5,
        "date": "2026-01-06T12:00:00.000Z",
        "checklist": [
            {"id": "c1", "text": "Collect data", "completed": True},
            {"id": "c2", "text": "Draft", "completed": False},
        ],
        "tags": ["tag-1"],
    }


@pytest.fixture
def sample_tasks_payload(sample_habitica_task):
    """Sample body of GET tasks/user with mixed task types."""
    return {
        "success": True,
        "data": [
            {"id": "daily-1", "type": "daily", "text": "Stretch", "completed": True, "priority": 1, "isDue": True},
            {"id": "daily-2", "type": "daily", "text": "Read", "completed": False, "priority": 2},
            sample_habitica_task,
            {"id": "reward-1", "type": "reward", "text": "Coffee", "priority": 1},
            {"id": "done-1", "type": "completedTodo", "text": "Old thing", "completed": True, "priority": 1},
        ],
    }


def make_http_response(payload=None, status=200, reason="OK", headers=None):
    """Build a mock aiohttp response."""
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.headers = headers or {}
    response.json = AsyncMock(return_value=payload)
    return response


@pytest.fixture
def mock_habitica_session():
    """
    Mock the habitica_session context manager.

    Yields (context manager mock, session mock); configure responses with
    session.get.return_value.__aenter__.return_value.
    """
    mock_session = MagicMock()
    mock_session.get.return_value.__aexit__.return_value = False
    with patch('habitica_resync.clients.tasks.async_client.habitica_session') as mock_context:
        mock_context.return_value.__aenter__.return_value = mock_session
        mock_context.return_value.__aexit__.return_value = False
        yield mock_context, mock_session


@pytest.fixture
def respond_with(mock_habitica_session):
    """Configure the mocked session to answer every GET with the given response."""
    _, mock_session = mock_habitica_session

    def _respond(payload=None, status=200, reason="OK", headers=None):
        response = make_http_response(payload, status, reason, headers)
        mock_session.get.return_value.__aenter__.return_value = response
        return response

    return _respond
