"""Text-mode live views over pane-group task events."""

from typing import List

from .clients.tasks import HabiticaClient
from .events import SubscriberGroup, event_for_category
from .exceptions import ValidationError
from .services.tasks.rendering import checkbox
from .services.tasks.types import Task, TaskCategory

PANE_TITLES = {
    TaskCategory.HABIT: 'Habits View',
    TaskCategory.DAILY: 'Dailys View',
    TaskCategory.TODO: 'Todos View',
}


class TaskPane:
    """
    Keeps the latest tasks of one category, as delivered to the pane group.
    """

    def __init__(self, client: HabiticaClient, category: TaskCategory):
        self.event = event_for_category(category)
        if self.event is None:
            raise ValidationError(f"No live view exists for {category.value} tasks")
        self.client = client
        self.category = category
        self.tasks: List[Task] = []
        self.client.subscribe(self.event, SubscriberGroup.PANE_SYNC, self.update)

    def update(self, tasks: List[Task]) -> None:
        self.tasks = list(tasks)

    def render(self) -> str:
        lines = [PANE_TITLES[self.category]]
        lines.extend(f"{checkbox(task.completed)} {task.text}" for task in self.tasks)
        return '\n'.join(lines)

    def close(self) -> None:
        self.client.unsubscribe(self.event, SubscriberGroup.PANE_SYNC, self.update)
