"""
Habitica resync: a rate-limited Habitica client that mirrors tasks into
Markdown notes.
"""

from .app import ResyncApp
from .clients import ApiResponse, HabiticaClient, RateLimitedGate, RateLimitState
from .config import HabiticaSettings, SettingsStore
from .events import EventHub, EventKind, SubscriberGroup
from .services.tasks import Task, TaskCategory, TaskCollection, RenderSettings, classify, render_task
from .storage import NoteVault
from .sync import SyncOrchestrator

__version__ = "0.1.0"

__all__ = [
    "ResyncApp",
    "ApiResponse",
    "HabiticaClient",
    "RateLimitedGate",
    "RateLimitState",
    "HabiticaSettings",
    "SettingsStore",
    "EventHub",
    "EventKind",
    "SubscriberGroup",
    "Task",
    "TaskCategory",
    "TaskCollection",
    "RenderSettings",
    "classify",
    "render_task",
    "NoteVault",
    "SyncOrchestrator",
]
