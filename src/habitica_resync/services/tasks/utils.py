import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging

from .types import Task, ChecklistItem, TaskCategory
from ...utils.datetime import parse_api_datetime

logger = logging.getLogger(__name__)


def parse_datetime_field(field_value: Any) -> Optional[datetime]:
    """
    Parse a datetime field from a Habitica API response.

    Args:
        field_value: ISO datetime string from API

    Returns:
        Parsed datetime object or None if parsing fails
    """
    if not field_value:
        return None

    try:
        return parse_api_datetime(field_value)
    except (ValueError, TypeError, OverflowError) as e:
        logger.warning("Failed to parse datetime: %s", e)
        return None


def parse_priority(value: Any) -> float:
    """Coerce the priority field to a float; missing or garbage values become NaN."""
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def parse_checklist(raw_checklist: Any) -> Tuple[ChecklistItem, ...]:
    """
    Parse the checklist array of a task.

    Args:
        raw_checklist: The 'checklist' value from the API

    Returns:
        Tuple of ChecklistItem, empty if the value is not a list
    """
    if not isinstance(raw_checklist, list):
        return ()

    items = []
    for entry in raw_checklist:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed checklist entry: %s", str(entry)[:100])
            continue
        items.append(ChecklistItem(
            id=entry.get('id'),
            text=str(entry.get('text') or ''),
            completed=bool(entry.get('completed', False))
        ))
    return tuple(items)


def parse_next_due(raw_next_due: Any) -> Tuple[datetime, ...]:
    """Parse the 'nextDue' list, keeping order and dropping unparseable entries."""
    if not isinstance(raw_next_due, list):
        return ()
    parsed = (parse_datetime_field(value) for value in raw_next_due)
    return tuple(dt for dt in parsed if dt is not None)


def from_habitica_task(habitica_task: Dict[str, Any]) -> Task:
    """
    Create a Task instance from a Habitica API response.

    Unknown task types are kept with category=None so that classification
    can report and drop them.

    Args:
        habitica_task: Dictionary containing task data from the Habitica API

    Returns:
        Task instance populated with the data from the dictionary
    """
    if not isinstance(habitica_task, dict):
        raise ValueError(f"Invalid task data: expected an object, got {type(habitica_task).__name__}")

    type_name = str(habitica_task.get('type') or '')
    tags = habitica_task.get('tags')

    return Task(
        id=habitica_task.get('id') or habitica_task.get('_id'),
        category=TaskCategory.from_value(type_name),
        type_name=type_name,
        text=str(habitica_task.get('text') or ''),
        notes=str(habitica_task.get('notes') or ''),
        completed=bool(habitica_task.get('completed', False)),
        priority=parse_priority(habitica_task.get('priority', 1)),
        date=parse_datetime_field(habitica_task.get('date')),
        next_due=parse_next_due(habitica_task.get('nextDue')),
        checklist=parse_checklist(habitica_task.get('checklist')),
        tags=tuple(str(tag) for tag in tags) if isinstance(tags, list) else (),
        is_due=bool(habitica_task.get('isDue', False))
    )


def parse_tasks_payload(data: Any) -> List[Task]:
    """
    Parse the 'data' member of a response, which holds one task or a list of them.

    Args:
        data: Decoded 'data' value

    Returns:
        List of parsed tasks; malformed entries are logged and skipped
    """
    if data is None:
        return []
    raw_tasks = data if isinstance(data, list) else [data]

    tasks = []
    for raw_task in raw_tasks:
        try:
            tasks.append(from_habitica_task(raw_task))
        except ValueError as e:
            logger.warning("Failed to parse task: %s", e)
    return tasks
