"""
Publish/subscribe registry for task updates.

Listeners are grouped by subscriber group so that one consumer class (the
live pane, the note sync) can be silenced as a unit while a bulk operation
runs, without affecting the other.
"""

from collections import defaultdict
from contextlib import asynccontextmanager, AsyncExitStack
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Set, Tuple, TypeVar
import logging

from ..services.tasks.types import Task, TaskCategory

logger = logging.getLogger(__name__)

T = TypeVar('T')
Listener = Callable[[List[Task]], None]


class EventKind(str, Enum):
    TODO_UPDATED = 'todoUpdated'
    DAILY_UPDATED = 'dailyUpdated'
    HABIT_UPDATED = 'habitUpdated'
    TASK_UPDATED = 'taskUpdated'


class SubscriberGroup(str, Enum):
    PANE_SYNC = 'paneSync'
    NOTE_SYNC = 'noteSync'


def event_for_category(category: TaskCategory) -> Optional[EventKind]:
    """Category-scoped event kind; rewards and completed todos have none."""
    if category is TaskCategory.HABIT:
        return EventKind.HABIT_UPDATED
    if category is TaskCategory.DAILY:
        return EventKind.DAILY_UPDATED
    if category is TaskCategory.TODO:
        return EventKind.TODO_UPDATED
    return None


class EventHub:
    """
    Registry of listeners keyed by (event kind, subscriber group).

    Emission is synchronous. An exception raised by a listener propagates to
    the caller of emit() and the remaining listeners are not called.
    """

    def __init__(self):
        self._listeners: Dict[Tuple[EventKind, SubscriberGroup], Set[Listener]] = defaultdict(set)

    def subscribe(self, event: EventKind, group: SubscriberGroup, listener: Listener) -> None:
        self._listeners[(EventKind(event), SubscriberGroup(group))].add(listener)

    def unsubscribe(self, event: EventKind, group: SubscriberGroup, listener: Listener) -> None:
        self._listeners[(EventKind(event), SubscriberGroup(group))].discard(listener)

    def listeners(self, event: EventKind, group: SubscriberGroup) -> Set[Listener]:
        """Returns a copy of the listeners registered for (event, group)."""
        return set(self._listeners[(EventKind(event), SubscriberGroup(group))])

    def emit(self, event: EventKind, tasks: List[Task]) -> None:
        """Call every listener registered for ``event`` in every group."""
        event = EventKind(event)
        for group in SubscriberGroup:
            for listener in list(self._listeners[(event, group)]):
                listener(tasks)

    def emit_by_category(self, tasks: Iterable[Task]) -> None:
        """
        Emit one category-scoped event per distinct category in ``tasks``.

        Args:
            tasks: Tasks of mixed categories
        """
        by_category: Dict[TaskCategory, List[Task]] = {}
        for task in tasks:
            if task.category is not None:
                by_category.setdefault(task.category, []).append(task)

        for category, category_tasks in by_category.items():
            event = event_for_category(category)
            if event is not None:
                logger.debug("Emitting %s for %d tasks", event.value, len(category_tasks))
                self.emit(event, category_tasks)

    @asynccontextmanager
    async def suspended(self, event: EventKind, group: SubscriberGroup):
        """
        Detach the group's current listeners for ``event`` for the duration
        of the block, then re-attach exactly that snapshot.
        """
        snapshot = self.listeners(event, group)
        for listener in snapshot:
            self.unsubscribe(event, group, listener)
        try:
            yield
        finally:
            for listener in snapshot:
                self.subscribe(event, group, listener)

    @asynccontextmanager
    async def all_suspended(self, group: SubscriberGroup):
        """Suspend the group's listeners for every event kind at once."""
        async with AsyncExitStack() as stack:
            for event in EventKind:
                await stack.enter_async_context(self.suspended(event, group))
            yield

    async def run_suspended(self, event: EventKind, group: SubscriberGroup, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` while the group's listeners for ``event`` are detached.

        Args:
            event: The event to suspend
            group: The subscriber group to suspend
            awaitable: The operation to run, e.g. a bulk fetch

        Returns:
            The result of the awaitable
        """
        async with self.suspended(event, group):
            return await awaitable

    async def run_all_suspended(self, group: SubscriberGroup, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` with the group silenced across all event kinds.
        Useful for bulk syncs that would otherwise re-trigger their own listeners.
        """
        async with self.all_suspended(group):
            return await awaitable
