"""
Filesystem-backed note vault.

Paths are vault-relative and use '/' as the separator, like the folder path
in the settings. The vault never merges content: writes replace the whole
file.
"""

from pathlib import Path, PurePosixPath
from typing import Optional
import logging

from ..exceptions import StorageConflictError, StorageError, ValidationError

logger = logging.getLogger(__name__)


class NoteVault:
    """A folder of Markdown notes rooted at ``root``."""

    def __init__(self, root):
        self.root = Path(root)

    def resolve(self, relative_path: str) -> Path:
        """
        Map a vault-relative path onto the filesystem.

        Raises:
            ValidationError: If the path is absolute or escapes the vault
        """
        relative = PurePosixPath(relative_path.strip().strip('/'))
        if relative.is_absolute() or '..' in relative.parts:
            raise ValidationError(f"Path must stay inside the vault: {relative_path!r}")
        return self.root.joinpath(*relative.parts)

    def ensure_folder(self, folder_path: str) -> Path:
        """
        Get or create a folder.

        Raises:
            StorageConflictError: If the path exists but is not a folder
        """
        folder = self.resolve(folder_path)
        if folder.exists() and not folder.is_dir():
            raise StorageConflictError(
                f"Path {folder_path} exists but is not a folder. Please remove or rename "
                "the file to restore functionality of this plugin."
            )
        if not folder.exists():
            logger.info("Creating notes folder %s", folder)
            folder.mkdir(parents=True, exist_ok=True)
        return folder

    def read(self, file_path: str) -> Optional[str]:
        """Returns the note's content, or None if it does not exist."""
        path = self.resolve(file_path)
        if not path.is_file():
            return None
        return path.read_text(encoding='utf-8')

    def write(self, file_path: str, content: str) -> Path:
        """
        Create the note, or fully overwrite it if present.

        Raises:
            StorageError: If the file cannot be written
        """
        path = self.resolve(file_path)
        existed = path.exists()
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            logger.error("Failed to write note %s: %s", path, e)
            raise StorageError(f"Cannot write note {file_path}: {e}") from e
        logger.info("%s note %s (%d chars)", "Overwrote" if existed else "Created", file_path, len(content))
        return path
