"""User preferences for Zander.

Loads storage and logging settings from ~/.zander/preferences.yaml (or the
file named by ``$ZANDER_PREFS``).  Falls back to sensible defaults if the
file doesn't exist or is invalid.  Creates a default file on first run so
users can discover and edit it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .log import logger
from .persistence import JsonFileBackend, MemoryBackend, PersistenceBackend

ZANDER_HOME = Path.home() / ".zander"

BACKENDS = ("file", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_DEFAULT_YAML = """\
# Zander Preferences
# Delete this file to reset to defaults.

storage:
  backend: file          # "file" (JSON on disk) or "memory" (lost on exit)
  data_dir: ""           # empty = ~/.zander

logging:
  level: WARNING         # DEBUG, INFO, WARNING, ERROR or CRITICAL
"""


def default_prefs_path() -> Path:
    env = os.environ.get("ZANDER_PREFS")
    if env:
        return Path(env).expanduser()
    return ZANDER_HOME / "preferences.yaml"


@dataclass
class StoragePreferences:
    """Where the state snapshot lives."""

    backend: str = "file"
    data_dir: str = ""  # Empty means ZANDER_HOME

    @property
    def directory(self) -> Path:
        return Path(self.data_dir).expanduser() if self.data_dir else ZANDER_HOME


@dataclass
class LoggingPreferences:
    level: str = "WARNING"


@dataclass
class Preferences:
    """Top-level preferences."""

    storage: StoragePreferences = field(default_factory=StoragePreferences)
    logging: LoggingPreferences = field(default_factory=LoggingPreferences)


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or default_prefs_path()
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError):
            logger.debug("failed to read preferences from %s", path, exc_info=True)
            return prefs
        if not isinstance(data, dict):
            logger.debug("ignoring non-mapping preferences in %s", path)
            return prefs

        if isinstance(data.get("storage"), dict):
            sdata = data["storage"]
            backend = str(sdata.get("backend") or "file").lower()
            if backend in BACKENDS:
                prefs.storage.backend = backend
            else:
                logger.warning("unknown storage backend %r, using 'file'", backend)
            if "data_dir" in sdata:
                prefs.storage.data_dir = str(sdata["data_dir"] or "")
        if isinstance(data.get("logging"), dict):
            level = str(data["logging"].get("level") or "").upper()
            if level in LOG_LEVELS:
                prefs.logging.level = level
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML, encoding="utf-8")
        except OSError:
            logger.debug("could not write default preferences to %s", path)

    return prefs


def create_backend(prefs: Preferences) -> PersistenceBackend:
    """Build the persistence backend the preferences ask for."""
    if prefs.storage.backend == "memory":
        return MemoryBackend({})
    return JsonFileBackend(prefs.storage.directory)
