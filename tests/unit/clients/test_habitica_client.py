import pytest
from datetime import datetime, timezone
from unittest.mock import Mock

from habitica_resync.clients.rate_limit import RateLimitedGate
from habitica_resync.clients.tasks.async_client import HabiticaClient, build_api_url
from habitica_resync.events import EventKind, SubscriberGroup
from habitica_resync.exceptions import HabiticaHTTPError, HabiticaResponseError, ValidationError
from habitica_resync.services.tasks.types import TaskCategory


@pytest.mark.unit
@pytest.mark.tasks
class TestBuildApiUrl:
    """Test cases for URL construction."""

    def test_without_query(self):
        assert build_api_url('tasks/user') == 'https://habitica.com/api/v3/tasks/user?'

    def test_with_version_and_query(self):
        url = build_api_url('tasks/user', 4, {'type': 'todo'})
        assert url == 'https://habitica.com/api/v4/tasks/user?type=todo'


@pytest.mark.unit
@pytest.mark.tasks
class TestHabiticaClient:
    """Test cases for the Habitica client."""

    def test_gate_buffer_from_settings(self, settings):
        client = HabiticaClient(settings)
        assert client.gate.buffer.total_seconds() == 10.0

    def test_default_headers(self, settings):
        client = HabiticaClient(settings)
        headers = client._default_json_headers()

        assert headers['x-api-user'] == 'user-123'
        assert headers['x-api-key'] == 'key-abcdef123456'
        assert headers['x-client'].endswith('-habitica-x-obsidian-task-integration')
        assert headers['Content-Type'] == 'application/json'

    @pytest.mark.asyncio
    async def test_retrieve_tasks(self, settings, mock_habitica_session, respond_with, sample_tasks_payload):
        mock_context, mock_session = mock_habitica_session
        respond_with(sample_tasks_payload, headers={'x-ratelimit-remaining': '29'})
        client = HabiticaClient(settings)

        tasks = await client.retrieve_tasks()

        assert [task.id for task in tasks] == ['daily-1', 'daily-2', 'todo-1', 'reward-1', 'done-1']
        mock_session.get.assert_called_once_with('https://habitica.com/api/v3/tasks/user?')
        headers, timeout_ms = mock_context.call_args.args
        assert headers['x-api-key'] == 'key-abcdef123456'
        assert timeout_ms == 30000
        assert client.gate.state.remaining_requests == 29

    @pytest.mark.asyncio
    async def test_retrieve_tasks_query_params(self, settings, mock_habitica_session, respond_with):
        _, mock_session = mock_habitica_session
        respond_with({'success': True, 'data': []})
        client = HabiticaClient(settings)

        await client.retrieve_tasks(
            category=TaskCategory.DAILY,
            due_date=datetime(2026, 1, 5, tzinfo=timezone.utc)
        )

        url = mock_session.get.call_args.args[0]
        assert url == 'https://habitica.com/api/v3/tasks/user?type=daily&dueDate=2026-01-05T00%3A00%3A00.000Z'

    @pytest.mark.asyncio
    async def test_retrieve_tasks_emits_by_category(self, settings, respond_with, sample_tasks_payload):
        respond_with(sample_tasks_payload)
        client = HabiticaClient(settings)
        on_daily = Mock()
        on_todo = Mock()
        on_habit = Mock()
        client.subscribe(EventKind.DAILY_UPDATED, SubscriberGroup.PANE_SYNC, on_daily)
        client.subscribe(EventKind.TODO_UPDATED, SubscriberGroup.NOTE_SYNC, on_todo)
        client.subscribe(EventKind.HABIT_UPDATED, SubscriberGroup.PANE_SYNC, on_habit)

        await client.retrieve_tasks()

        on_daily.assert_called_once()
        assert [task.id for task in on_daily.call_args.args[0]] == ['daily-1', 'daily-2']
        on_todo.assert_called_once()
        assert [task.id for task in on_todo.call_args.args[0]] == ['todo-1']
        on_habit.assert_not_called()

    @pytest.mark.asyncio
    async def test_retrieve_tasks_accepts_single_object(self, settings, respond_with, sample_habitica_task):
        respond_with({'success': True, 'data': sample_habitica_task})
        client = HabiticaClient(settings)

        tasks = await client.retrieve_tasks()

        assert len(tasks) == 1
        assert tasks[0].category is TaskCategory.TODO

    @pytest.mark.asyncio
    async def test_retrieve_all_tasks(self, settings, respond_with, sample_tasks_payload):
        respond_with(sample_tasks_payload)
        client = HabiticaClient(settings)

        collection = await client.retrieve_all_tasks()

        assert len(collection[TaskCategory.DAILY]) == 2
        assert len(collection[TaskCategory.TODO]) == 1
        assert len(collection[TaskCategory.REWARD]) == 1
        assert len(collection[TaskCategory.COMPLETED_TODO]) == 1
        assert collection[TaskCategory.HABIT] == []

    @pytest.mark.asyncio
    async def test_retrieve_task_emits_task_updated(self, settings, mock_habitica_session, respond_with,
                                                    sample_habitica_task):
        _, mock_session = mock_habitica_session
        respond_with({'success': True, 'data': sample_habitica_task})
        client = HabiticaClient(settings)
        on_task = Mock()
        client.subscribe(EventKind.TASK_UPDATED, SubscriberGroup.PANE_SYNC, on_task)

        task = await client.retrieve_task('todo-1')

        assert task.id == 'todo-1'
        assert mock_session.get.call_args.args[0] == 'https://habitica.com/api/v3/tasks/todo-1?'
        on_task.assert_called_once_with([task])

    @pytest.mark.asyncio
    async def test_retrieve_task_quotes_id(self, settings, mock_habitica_session, respond_with,
                                           sample_habitica_task):
        _, mock_session = mock_habitica_session
        respond_with({'success': True, 'data': sample_habitica_task})
        client = HabiticaClient(settings)

        await client.retrieve_task('../user?type=todo')

        assert mock_session.get.call_args.args[0] == (
            'https://habitica.com/api/v3/tasks/..%2Fuser%3Ftype%3Dtodo?'
        )

    @pytest.mark.asyncio
    async def test_retrieve_task_rejects_empty_id(self, settings):
        client = HabiticaClient(settings)
        with pytest.raises(ValidationError):
            await client.retrieve_task('  ')

    @pytest.mark.asyncio
    async def test_retrieve_task_unparseable_payload(self, settings, respond_with):
        respond_with({'success': True, 'data': None})
        client = HabiticaClient(settings)
        with pytest.raises(HabiticaResponseError):
            await client.retrieve_task('todo-1')

    @pytest.mark.asyncio
    async def test_http_error_propagates_without_emitting(self, settings, respond_with):
        respond_with({'success': False}, status=502, reason='Bad Gateway')
        client = HabiticaClient(settings)
        listener = Mock()
        client.subscribe(EventKind.DAILY_UPDATED, SubscriberGroup.PANE_SYNC, listener)

        with pytest.raises(HabiticaHTTPError) as exc_info:
            await client.retrieve_tasks()

        assert exc_info.value.status == 502
        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_application_error_propagates(self, settings, respond_with):
        respond_with({'success': False, 'message': 'Invalid credentials'})
        client = HabiticaClient(settings)

        with pytest.raises(HabiticaResponseError, match="Invalid credentials"):
            await client.retrieve_all_tasks()

    @pytest.mark.asyncio
    async def test_uses_injected_gate(self, settings, respond_with, fake_clock):
        respond_with({'success': True, 'data': []}, headers={'x-ratelimit-remaining': '4'})
        gate = RateLimitedGate(clock=fake_clock, sleep=fake_clock.sleep)
        client = HabiticaClient(settings, gate=gate)

        await client.retrieve_tasks()

        assert gate.state.remaining_requests == 4
