"""
Preferences store for the host application.

Holds the live preference values in a process-wide singleton. Values are
adopted from a persistence backend only after schema validation, and a clean
detached snapshot is handed back when the backend needs to write to disk.
"""
import copy
from typing import Any, Callable, Dict, List, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from ccprefs.logging.logger import get_logger, is_verbose_logging
from ccprefs.settings.schema import PREFERENCES_SCHEMA, validate_preferences

logger = get_logger('PreferencesStore')


def _same_handler(a: Callable, b: Callable) -> bool:
    """Identity match; bound methods match when object and function are the same."""
    if a is b:
        return True
    a_self = getattr(a, '__self__', None)
    a_func = getattr(a, '__func__', None)
    if a_self is None or a_func is None:
        return False
    return a_self is getattr(b, '__self__', None) and a_func is getattr(b, '__func__', None)


class PreferencesStore(QObject):
    """
    Singleton holding the persisted preferences.

    Use get_instance() rather than constructing directly. Observers either
    register a plain callable with add_update_handler() or connect to the
    ``updated`` signal; both fire after every successful from_store().
    """

    # Emitted after update handlers run on a successful load from the backend
    updated = Signal()

    _instance: Optional["PreferencesStore"] = None

    # The real default is only known once the host has detected its data
    # folder, so it is configured at runtime (once, before construction).
    _default_save_path: Optional[str] = None
    _default_save_path_locked: bool = False

    def __init__(self):
        super().__init__()
        self._values: Dict[str, Any] = self.get_defaults()
        self._update_handlers: List[Callable[[], None]] = []
        self._backend = None
        logger.debug("PreferencesStore initialized")

    # ------------------------------------------------------------------
    # Singleton access and defaults
    # ------------------------------------------------------------------

    @classmethod
    def get_instance(cls) -> "PreferencesStore":
        """Get the process-wide store, creating it on first access."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Discard the singleton and the configured save path (for testing)."""
        cls._instance = None
        cls._default_save_path = None
        cls._default_save_path_locked = False

    @classmethod
    def set_default_save_path(cls, path: Optional[str]) -> bool:
        """
        Configure the default savePath supplied by the host environment.

        Must be called at most once and before the store is first constructed;
        later calls are ignored. Only a string or None is accepted, since the
        schema would reject anything else on the next load.

        Returns:
            True if the default was applied
        """
        if path is not None and not isinstance(path, str):
            logger.warning(
                "Ignoring default save path %r: expected a string, got %s",
                path,
                type(path).__name__,
            )
            return False
        if cls._instance is not None:
            logger.warning(
                "Ignoring default save path %r: store already constructed", path
            )
            return False
        if cls._default_save_path_locked:
            logger.warning(
                "Ignoring default save path %r: already set to %r",
                path,
                cls._default_save_path,
            )
            return False

        cls._default_save_path = path
        cls._default_save_path_locked = True
        logger.debug("Default save path set to %r", path)
        return True

    @classmethod
    def get_defaults(cls) -> Dict[str, Any]:
        """Return a fresh map of default values for every recognized key."""
        defaults = {key: definition.default for key, definition in PREFERENCES_SCHEMA.items()}
        defaults['savePath'] = cls._default_save_path
        return defaults

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Get the current value of a recognized key."""
        return self._values.get(key, default)

    @property
    def cloud_url(self) -> Optional[str]:
        return self._values['cloudUrl']

    @property
    def username(self) -> Optional[str]:
        return self._values['username']

    @property
    def save_path(self) -> Optional[str]:
        return self._values['savePath']

    @property
    def offline(self) -> bool:
        return self._values['offline']

    @property
    def add_to_new(self) -> bool:
        return self._values['addToNew']

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Reset all preferences to their default values.

        This is a local change, not a load event: update handlers are not
        called and ``updated`` is not emitted.
        """
        defaults = self.get_defaults()
        for key in self._values:
            self._values[key] = defaults[key]
        logger.debug("Preferences reset to defaults")

    def from_store(self, raw: Mapping[str, Any]) -> None:
        """
        Merge values read by the persistence backend.

        Invalid data is logged and dropped; the store keeps whatever values it
        already had. On success only recognized keys present in ``raw`` are
        copied, then update handlers run in registration order.

        Args:
            raw: Value map read from the backing medium
        """
        result = validate_preferences(raw)
        if not result.valid:
            logger.error(
                "PreferencesStore.from_store(): Invalid preferences found, error=%r",
                result.message,
            )
            return

        ignored = []
        for key, value in raw.items():
            if key in self._values:
                self._values[key] = value
            else:
                ignored.append(key)

        if ignored:
            logger.debug("Ignored unknown preference keys: %s", sorted(map(str, ignored)))
        if is_verbose_logging():
            logger.debug("Preferences loaded: %r", self._values)
        else:
            logger.debug("Preferences loaded")

        # Iterate over a copy: a handler may unregister itself
        for handler in list(self._update_handlers):
            try:
                handler()
            except Exception:
                logger.exception("Error in preferences update handler %r", handler)

        self.updated.emit()

    def to_json(self) -> Dict[str, Any]:
        """Return a detached snapshot containing only the recognized keys."""
        # throw-away: only used for the set of keys we persist
        defaults = self.get_defaults()
        return {key: copy.deepcopy(self._values[key]) for key in defaults}

    # ------------------------------------------------------------------
    # Update handlers
    # ------------------------------------------------------------------

    def add_update_handler(self, handler: Callable[[], None]) -> None:
        """
        Add an update handler if it hasn't already been added.

        The handler is called with no arguments whenever the store is
        updated from the backend.
        """
        if not callable(handler):
            logger.warning("Ignoring non-callable update handler: %r", handler)
            return
        if self._find_handler(handler) >= 0:
            return
        self._update_handlers.append(handler)

    def remove_update_handler(self, handler: Callable[[], None]) -> None:
        """Remove an update handler if it's currently registered."""
        idx = self._find_handler(handler)
        if idx >= 0:
            del self._update_handlers[idx]

    def _find_handler(self, handler: Callable[[], None]) -> int:
        """Index of a registered handler by identity, or -1."""
        for idx, h in enumerate(self._update_handlers):
            if _same_handler(h, handler):
                return idx
        return -1

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self, backend) -> None:
        """
        Load preferences through a persistence backend.

        The backend is remembered so later save() calls write through it.
        A backend with nothing stored leaves the current values untouched.
        """
        self._backend = backend
        raw = backend.read()
        if raw is None:
            logger.info("No stored preferences found (%s), keeping current values", backend)
            return
        self.from_store(raw)

    def save(self) -> bool:
        """Write the current snapshot through the backend given to load()."""
        if self._backend is None:
            logger.warning("Cannot save preferences: no backend attached")
            return False
        return self._backend.write(self)


def get_preferences_store() -> PreferencesStore:
    """Get the preferences store instance (creates if needed)."""
    return PreferencesStore.get_instance()
