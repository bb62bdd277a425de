"""Habitica services."""

from . import tasks

__all__ = [
    "tasks",
]
