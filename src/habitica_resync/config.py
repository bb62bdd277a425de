"""
Settings for the Habitica resync client.

Settings are persisted as a JSON blob. Loading merges the stored values over
the defaults, so a missing file or missing keys fall back to defaults and
unknown keys are ignored. Credentials and paths can be overridden through
environment variables.
"""

import json
import os
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .exceptions import ConfigurationError, ValidationError
from .services.tasks.types import RenderSettings

logger = logging.getLogger(__name__)

# Allow environment variable override for credentials and paths
SETTINGS_PATH = os.getenv("HABITICA_SETTINGS_PATH", os.path.join(".habitica", "settings.json"))
VAULT_PATH = os.getenv("HABITICA_VAULT_PATH", ".")

MIN_TIMEOUT_MS = 30000
MIN_RATE_LIMIT_BUFFER_MS = 1000

INT_FIELDS = ('timeout_ms', 'rate_limit_buffer_ms')
BOOL_FIELDS = ('enable_notes', 'enable_pane')
OPTIONAL_STR_FIELDS = ('global_task_tag',)


def _coerce(key: str, value: Any) -> Any:
    """
    Convert a stored settings value to the field's type.

    Numbers stored as strings are accepted, as the settings form writes them.

    Raises:
        ConfigurationError: If the value cannot be converted
    """
    if key in INT_FIELDS:
        if isinstance(value, bool):
            raise ConfigurationError(f"Setting {key} must be a number, got {value!r}")
        try:
            return int(str(value).strip()) if isinstance(value, str) else int(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise ConfigurationError(f"Setting {key} must be a number, got {value!r}") from e
    if key in BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigurationError(f"Setting {key} must be true or false, got {value!r}")
        return value
    if value is None and key in OPTIONAL_STR_FIELDS:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"Setting {key} must be a string, got {value!r}")
    return value


@dataclass
class HabiticaSettings:
    """
    Configuration consumed by the client and the note sync.
    Args:
        user_id: Habitica user ID.
        api_key: Habitica API key.
        timeout_ms: Request timeout in milliseconds.
        rate_limit_buffer_ms: Extra wait after a rate-limit reset, in milliseconds.
        folder_path: Vault folder where task notes are written.
        global_task_tag: Optional tag added to every task line.
        indent_string: Indentation used for checklist lines.
        enable_notes: Whether to sync notes.
        enable_pane: Whether to show the live task pane.
    """
    user_id: str = ''
    api_key: str = ''
    timeout_ms: int = 30000
    rate_limit_buffer_ms: int = 10000
    folder_path: str = 'HabiticaTasks'
    global_task_tag: Optional[str] = None
    indent_string: str = '    '
    enable_notes: bool = True
    enable_pane: bool = False

    def __post_init__(self):
        if self.global_task_tag is not None:
            self.global_task_tag = self.global_task_tag.strip() or None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HabiticaSettings":
        """Create settings from a stored blob, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ', '.join(sorted(unknown)))
        return cls(**{key: _coerce(key, value) for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def with_env_overrides(self) -> "HabiticaSettings":
        """Return a copy with HABITICA_USER_ID / HABITICA_API_KEY applied when set."""
        overrides = {}
        user_id = os.getenv("HABITICA_USER_ID")
        api_key = os.getenv("HABITICA_API_KEY")
        if user_id:
            overrides['user_id'] = user_id.strip()
        if api_key:
            overrides['api_key'] = api_key.strip()
        return replace(self, **overrides) if overrides else self

    def render_settings(self) -> RenderSettings:
        return RenderSettings(indent_string=self.indent_string, global_task_tag=self.global_task_tag)

    def validate(self) -> None:
        """
        Validate numeric settings.

        Raises:
            ValidationError: If a value is out of range
        """
        if not isinstance(self.timeout_ms, int) or self.timeout_ms < MIN_TIMEOUT_MS:
            raise ValidationError(f"timeout_ms must be a number greater than or equal to {MIN_TIMEOUT_MS}")
        if not isinstance(self.rate_limit_buffer_ms, int) or self.rate_limit_buffer_ms < MIN_RATE_LIMIT_BUFFER_MS:
            raise ValidationError(
                f"rate_limit_buffer_ms must be a number greater than or equal to {MIN_RATE_LIMIT_BUFFER_MS}"
            )

    def nonfunctional_reasons(self) -> List[str]:
        """Reasons the client cannot work with these settings; empty when usable."""
        reasons = []
        if not self.user_id or not self.user_id.strip():
            reasons.append('Missing Habitica User ID in settings')
        if not self.api_key or not self.api_key.strip():
            reasons.append('Missing Habitica API Key in settings')
        if self.enable_notes and (not self.folder_path or not self.folder_path.strip()):
            reasons.append('Missing Habitica Folder Path in settings, required for the notes feature')
        return reasons


class SettingsStore:
    """Loads and saves HabiticaSettings as a JSON file."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or SETTINGS_PATH)

    def load(self) -> HabiticaSettings:
        """
        Load settings merged over the defaults.

        Returns:
            HabiticaSettings; defaults if the file does not exist

        Raises:
            ConfigurationError: If the file exists but cannot be read or decoded,
                or holds a value of the wrong type
            ValidationError: If a stored value is out of range
        """
        if not self.path.exists():
            logger.info("No settings file at %s, using defaults", self.path)
            return HabiticaSettings()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to load settings from %s: %s", self.path, e)
            raise ConfigurationError(f"Cannot read settings file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {self.path} must contain a JSON object")

        settings = HabiticaSettings.from_dict(data)
        settings.validate()
        logger.info("Loaded settings from %s", self.path)
        return settings

    def save(self, settings: HabiticaSettings) -> None:
        """
        Save settings, creating the parent directory if needed.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
        except OSError as e:
            logger.error("Failed to save settings to %s: %s", self.path, e)
            raise ConfigurationError(f"Cannot write settings file {self.path}: {e}") from e
        logger.info("Settings saved to %s", self.path)
