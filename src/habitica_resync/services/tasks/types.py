from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class TaskCategory(str, Enum):
    """The five task kinds known to Habitica."""
    HABIT = 'habit'
    DAILY = 'daily'
    TODO = 'todo'
    REWARD = 'reward'
    COMPLETED_TODO = 'completedTodo'

    @classmethod
    def from_value(cls, value: Optional[str]) -> Optional["TaskCategory"]:
        """Returns the matching category, or None for an unknown type."""
        try:
            return cls(value)
        except ValueError:
            return None


# Fetched but never written to notes
EXCLUDED_CATEGORIES = frozenset({TaskCategory.REWARD, TaskCategory.COMPLETED_TODO})


@dataclass(frozen=True)
class ChecklistItem:
    """
    A single checklist entry of a task.
    Args:
        id: Unique identifier of the entry.
        text: Text of the entry.
        completed: Whether the entry is checked off.
    """
    id: Optional[str]
    text: str = ''
    completed: bool = False


@dataclass(frozen=True)
class Task:
    """
    One remote Habitica work item.
    Args:
        id: Unique identifier of the task within the account.
        category: Task category, or None when the API sent an unknown type.
        type_name: The raw type string sent by the API.
        text: Title of the task.
        notes: Extra notes attached to the task.
        completed: Completion flag.
        priority: Difficulty, expected in [0, 3].
        date: Due instant, if any.
        next_due: Ordered upcoming due instants.
        checklist: Ordered checklist entries.
        tags: Tag identifiers.
        is_due: Whether the server considers the task due today.
    """
    id: Optional[str]
    category: Optional[TaskCategory]
    type_name: str = ''
    text: str = ''
    notes: str = ''
    completed: bool = False
    priority: float = 1.0
    date: Optional[datetime] = None
    next_due: Tuple[datetime, ...] = ()
    checklist: Tuple[ChecklistItem, ...] = ()
    tags: Tuple[str, ...] = ()
    is_due: bool = False

    def __repr__(self):
        return f"Task(id={self.id!r}, category={self.type_name!r}, text={self.text!r})"


@dataclass(frozen=True)
class RenderSettings:
    """
    Per-sync rendering configuration.
    Args:
        indent_string: Prefix for checklist lines.
        global_task_tag: Optional tag written on every task line.
    """
    indent_string: str = '    '
    global_task_tag: Optional[str] = None


@dataclass
class TaskCollection:
    """Tasks grouped by category, one list per known category."""
    tasks: Dict[TaskCategory, List[Task]] = field(
        default_factory=lambda: {category: [] for category in TaskCategory}
    )
    dropped: int = 0

    def __getitem__(self, category: TaskCategory) -> List[Task]:
        return self.tasks[category]

    def __iter__(self) -> Iterator[TaskCategory]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return sum(len(tasks) for tasks in self.tasks.values())

    def items(self):
        return self.tasks.items()

    def persisted_items(self) -> Iterator[Tuple[TaskCategory, List[Task]]]:
        """Yields (category, tasks) for every category that is written to notes."""
        for category, tasks in self.tasks.items():
            if category not in EXCLUDED_CATEGORIES:
                yield category, tasks
