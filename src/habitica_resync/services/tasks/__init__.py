"""Habitica task model, classification and rendering."""

from .types import Task, ChecklistItem, TaskCategory, TaskCollection, RenderSettings, EXCLUDED_CATEGORIES
from .classifier import classify, compute_due_display, priority_glyph
from .rendering import render_task, render_tasks

__all__ = [
    # Data types
    "Task",
    "ChecklistItem",
    "TaskCategory",
    "TaskCollection",
    "RenderSettings",
    "EXCLUDED_CATEGORIES",

    # Classification
    "classify",
    "compute_due_display",
    "priority_glyph",

    # Rendering
    "render_task",
    "render_tasks",
]
