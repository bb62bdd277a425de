from datetime import date
from pathlib import Path
from typing import Dict, List, Optional
import logging

from ..clients.tasks import HabiticaClient
from ..config import HabiticaSettings
from ..events import SubscriberGroup
from ..services.tasks.constants import NOTE_EXTENSION
from ..services.tasks.rendering import render_tasks
from ..services.tasks.types import TaskCategory, EXCLUDED_CATEGORIES
from ..storage import NoteVault

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Reconciles remote task state onto one note per category.

    Notes are regenerated from scratch on every sync; edits made to them in
    the meantime are overwritten.
    """

    def __init__(self, client: HabiticaClient, vault: NoteVault, settings: HabiticaSettings):
        self.client = client
        self.vault = vault
        self.settings = settings

    def note_path(self, category: TaskCategory) -> str:
        return f"{self.settings.folder_path.strip().strip('/')}/{category.value}{NOTE_EXTENSION}"

    def note_paths(self) -> Dict[TaskCategory, Path]:
        """Filesystem path of the note for every category that is written."""
        return {
            category: self.vault.resolve(self.note_path(category))
            for category in TaskCategory
            if category not in EXCLUDED_CATEGORIES
        }

    async def sync_all(self, today: Optional[date] = None) -> List[Path]:
        """
        Fetch all tasks with note-sync listeners silenced, then overwrite
        the note of each non-excluded category that has tasks.

        Args:
            today: Override for the current local date

        Returns:
            Paths of the notes written

        Raises:
            StorageConflictError: If the notes folder path is not a folder
            TasksError: If the fetch fails; nothing is written in that case
        """
        self.vault.ensure_folder(self.settings.folder_path)

        collection = await self.client.run_all_suspended(
            SubscriberGroup.NOTE_SYNC, self.client.retrieve_all_tasks()
        )

        render_settings = self.settings.render_settings()
        written = []
        for category, tasks in collection.persisted_items():
            if not tasks:
                continue
            content = render_tasks(tasks, render_settings, today=today)
            written.append(self.vault.write(self.note_path(category), content))

        logger.info("Synced %d notes from %d tasks", len(written), len(collection))
        return written
