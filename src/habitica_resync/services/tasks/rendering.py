"""
Projection of tasks onto Markdown task lines.

Lines follow the Obsidian Tasks plugin conventions so that the notes stay
queryable there: a checkbox, the optional global filter tag, the text, then a
priority emoji and a due-date emoji with an ISO date.
"""

from datetime import date
from typing import Iterable, List, Optional

from .types import Task, ChecklistItem, RenderSettings
from .classifier import compute_due_display, priority_glyph
from .constants import CHECKBOX_DONE, CHECKBOX_OPEN, DUE_DATE_GLYPH, NOTE_SEPARATOR


def checkbox(completed: bool) -> str:
    return CHECKBOX_DONE if completed else CHECKBOX_OPEN


def glyph_cluster(task: Task, today: Optional[date] = None) -> str:
    """Priority glyph followed by the due-date glyph and date, if any."""
    due = compute_due_display(task, today=today)
    due_part = f"{DUE_DATE_GLYPH} {due.isoformat()}" if due else ''
    return f"{priority_glyph(task.priority)} {due_part}".strip()


def primary_line(task: Task, settings: RenderSettings, today: Optional[date] = None) -> str:
    """
    Generates the primary Markdown line for a task.

    Args:
        task: The task to convert.
        settings: Settings for formatting the task line.
        today: Override for the current local date.

    Returns:
        The checkbox, optional tag, text and glyph cluster joined by spaces.
    """
    parts = [checkbox(task.completed), settings.global_task_tag, task.text, glyph_cluster(task, today)]
    return ' '.join(part for part in parts if part)


def checklist_lines(task: Task, settings: RenderSettings) -> List[str]:
    """One indented checkbox line per checklist entry."""
    return [_checklist_line(item, settings) for item in task.checklist]


def _checklist_line(item: ChecklistItem, settings: RenderSettings) -> str:
    return f"{settings.indent_string}{checkbox(item.completed)} {item.text}"


def render_task(task: Task, settings: RenderSettings, today: Optional[date] = None) -> str:
    """
    Converts a task to its Markdown block.

    Args:
        task: The task to convert.
        settings: Settings for formatting the task note.
        today: Override for the current local date.

    Returns:
        The primary line followed by any checklist lines, newline separated.
    """
    return '\n'.join([primary_line(task, settings, today), *checklist_lines(task, settings)])


def render_tasks(tasks: Iterable[Task], settings: RenderSettings, today: Optional[date] = None) -> str:
    """Render every task and join the blocks with the note separator."""
    return NOTE_SEPARATOR.join(render_task(task, settings, today) for task in tasks)
