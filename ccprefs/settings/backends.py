"""
Persistence backends for the preferences store.

A backend reads a raw value map for PreferencesStore.from_store() and writes
the store's to_json() snapshot back out. Failures are logged and reported
through return values; nothing here raises into the host.
"""
import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from PySide6.QtCore import QSettings

from ccprefs.logging.logger import get_logger

logger = get_logger('Backends')

DEFAULT_CONFIG_NAME = "preferences-store"


class PreferencesBackend:
    """Contract between the store and durable storage."""

    def read(self) -> Optional[Mapping[str, Any]]:
        """Return the stored value map, or None when nothing is stored."""
        raise NotImplementedError

    def write(self, store) -> bool:
        """Persist ``store.to_json()``. Returns True on success."""
        raise NotImplementedError


class JsonFileBackend(PreferencesBackend):
    """Stores preferences as a UTF-8 JSON document on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @classmethod
    def in_directory(cls, folder: Union[str, Path]) -> "JsonFileBackend":
        """Backend for the standard preferences file inside *folder*."""
        return cls(Path(folder) / f"{DEFAULT_CONFIG_NAME}.json")

    def __repr__(self) -> str:
        return f"JsonFileBackend({str(self.path)!r})"

    def read(self) -> Optional[Any]:
        if not self.path.exists():
            logger.debug("Preferences file not found: %s", self.path)
            return None
        try:
            raw = self.path.read_text(encoding='utf-8')
            # Whatever decodes is handed to the store, which validates it
            return json.loads(raw)
        except Exception:
            logger.exception("Failed to read preferences from %s", self.path)
            return None

    def write(self, store) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(store.to_json(), indent=2, sort_keys=True)
            # Write a sibling temp file and swap it in so a crash never
            # leaves a truncated preferences file behind.
            tmp_path = self.path.with_name(self.path.name + '.tmp')
            try:
                tmp_path.write_text(payload, encoding='utf-8')
                os.replace(tmp_path, self.path)
            finally:
                if tmp_path.exists():
                    tmp_path.unlink()
            logger.debug("Saved preferences to %s", self.path)
            return True
        except Exception:
            logger.exception("Failed to save preferences to %s", self.path)
            return False


class QSettingsBackend(PreferencesBackend):
    """
    Stores preferences in QSettings as a single JSON string.

    Keeping the snapshot as one JSON value avoids QSettings' per-format type
    coercion (INI files return bools and None as strings).
    """

    def __init__(
        self,
        settings: Optional[QSettings] = None,
        organization: str = "CloudPreferences",
        application: str = "Preferences",
        key: str = DEFAULT_CONFIG_NAME,
    ):
        if settings is None:
            settings = QSettings(organization, application)
        self._settings = settings
        self.key = key

    def __repr__(self) -> str:
        return f"QSettingsBackend({self._settings.fileName()!r}, key={self.key!r})"

    def read(self) -> Optional[Any]:
        raw = self._settings.value(self.key)
        if raw is None:
            return None
        if not isinstance(raw, str):
            logger.warning(
                "Stored preferences under %r are not a JSON string: %s",
                self.key,
                type(raw).__name__,
            )
            return None
        try:
            return json.loads(raw)
        except Exception:
            logger.exception("Failed to decode preferences stored under %r", self.key)
            return None

    def write(self, store) -> bool:
        try:
            self._settings.setValue(self.key, json.dumps(store.to_json(), sort_keys=True))
            self._settings.sync()
        except Exception:
            logger.exception("Failed to save preferences under %r", self.key)
            return False
        if self._settings.status() != QSettings.Status.NoError:
            logger.error(
                "QSettings reported %s while saving preferences", self._settings.status()
            )
            return False
        logger.debug("Saved preferences under %r", self.key)
        return True
