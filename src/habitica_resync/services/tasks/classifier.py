"""
Task classification: grouping by category and deriving presentation values.
"""

import math
from datetime import date
from typing import Iterable, Optional
import logging

from .types import Task, TaskCategory, TaskCollection
from .constants import PRIORITY_GLYPHS
from ...utils.datetime import today_local, to_local_date

logger = logging.getLogger(__name__)


def classify(tasks: Iterable[Task]) -> TaskCollection:
    """
    Partition a flat task list into per-category buckets.

    Order within each category follows the input. Tasks of an unknown
    category are logged and dropped; they never raise.

    Args:
        tasks: Tasks as returned by the API

    Returns:
        TaskCollection with one list per known category
    """
    collection = TaskCollection()
    for task in tasks:
        category = task.category
        if category is None:
            logger.warning("Unknown task type encountered: %s", task.type_name)
            collection.dropped += 1
            continue
        collection[category].append(task)

    logger.debug(
        "Classified %d tasks (%d dropped)", len(collection), collection.dropped
    )
    return collection


def compute_due_display(task: Task, today: Optional[date] = None) -> Optional[date]:
    """
    Resolve the due date shown for a task.

    Args:
        task: The task
        today: Override for the current local date

    Returns:
        Today for dailies, the task's date or earliest upcoming due date for
        todos, None otherwise
    """
    if task.category is TaskCategory.DAILY:
        return today or today_local()
    if task.category is TaskCategory.TODO:
        if task.next_due:
            return to_local_date(min(task.next_due))
        if task.date is not None:
            return to_local_date(task.date)
    return None


def priority_glyph(priority) -> str:
    """
    Map a priority to one of four glyphs, lowest first.

    The value is clamped to [0, 3] and rounded half up. NaN and
    non-numeric values map to the lowest glyph.
    """
    try:
        value = float(priority)
    except (TypeError, ValueError):
        return PRIORITY_GLYPHS[0]
    if math.isnan(value):
        return PRIORITY_GLYPHS[0]

    clamped = max(0.0, min(3.0, value))
    return PRIORITY_GLYPHS[int(math.floor(clamped + 0.5))]
