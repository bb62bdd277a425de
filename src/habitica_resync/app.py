"""
Application facade.

Wires settings, client, vault and note sync together, and refuses to run
operations while the settings are incomplete.
"""

import functools
import time
from typing import Callable, List, Optional, TypeVar
import logging

from .clients.tasks import HabiticaClient
from .config import HabiticaSettings, SettingsStore
from .exceptions import ValidationError
from .panes import PANE_TITLES, TaskPane
from .services.tasks.types import TaskCategory
from .storage import NoteVault
from .sync import SyncOrchestrator

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable)

NOTICE_INTERVAL_SECONDS = 60


class ResyncApp:
    """
    Usage Examples:
        app = ResyncApp.from_store(SettingsStore("settings.json"), vault_root="~/notes")
        await app.retrieve_notes()
    """

    def __init__(self, settings: HabiticaSettings, vault_root, store: Optional[SettingsStore] = None):
        self.settings = settings
        self.store = store
        self.client = HabiticaClient(settings)
        self.vault = NoteVault(vault_root)
        self.orchestrator = SyncOrchestrator(self.client, self.vault, settings)
        self.panes: List[TaskPane] = []
        self.functioning = True
        self.nonfunctional_reason = ''
        self._last_notice: Optional[float] = None
        self.determine_functionality()

    @classmethod
    def from_store(cls, store: SettingsStore, vault_root) -> "ResyncApp":
        settings = store.load().with_env_overrides()
        return cls(settings, vault_root, store=store)

    def determine_functionality(self) -> bool:
        reasons = self.settings.nonfunctional_reasons()
        self.functioning = not reasons
        self.nonfunctional_reason = '; '.join(reasons)
        return self.functioning

    def save_settings(self) -> None:
        """Persist the settings, then re-check functionality and the notes folder."""
        self.settings.validate()
        if self.store is not None:
            self.store.save(self.settings)
        if self.determine_functionality() and self.settings.enable_notes:
            self.vault.ensure_folder(self.settings.folder_path)

    def run_or_notify(self, fn: F) -> F:
        """
        Wrap an async operation so it only runs while the app is functioning.
        Otherwise a warning is logged, at most once per minute, and None returned.
        """
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            if not self.functioning:
                now = time.monotonic()
                if self._last_notice is None or now - self._last_notice > NOTICE_INTERVAL_SECONDS:
                    logger.warning("Habitica resync is not functioning: %s", self.nonfunctional_reason)
                    self._last_notice = now
                else:
                    logger.debug("Habitica resync is not functioning: %s", self.nonfunctional_reason)
                return None
            return await fn(*args, **kwargs)

        return wrapper

    async def retrieve_notes(self):
        """Sync every category note, when notes are enabled."""
        if not self.settings.enable_notes:
            logger.info("Notes are disabled in settings, skipping sync")
            return []
        return await self.run_or_notify(self.orchestrator.sync_all)()

    def open_pane(self, category: TaskCategory) -> TaskPane:
        """
        Open a live view of one category.

        Raises:
            ValidationError: If the live pane is disabled in settings
        """
        if not self.settings.enable_pane:
            raise ValidationError("Live pane is disabled in settings (enable_pane)")
        pane = TaskPane(self.client, category)
        self.panes.append(pane)
        return pane

    def open_panes(self) -> List[TaskPane]:
        """Open one pane per viewable category, or none when the live pane is disabled."""
        if not self.settings.enable_pane:
            return []
        return [self.open_pane(category) for category in PANE_TITLES]

    def close(self) -> None:
        for pane in self.panes:
            pane.close()
        self.panes.clear()
