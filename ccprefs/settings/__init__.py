"""Preferences schema, store and persistence backends."""

from .backends import JsonFileBackend, PreferencesBackend, QSettingsBackend
from .preferences_store import PreferencesStore, get_preferences_store
from .schema import (
    PREFERENCES_SCHEMA,
    SettingDefinition,
    SettingType,
    ValidationResult,
    validate_preferences,
)

__all__ = [
    'JsonFileBackend',
    'PreferencesBackend',
    'QSettingsBackend',
    'PreferencesStore',
    'get_preferences_store',
    'PREFERENCES_SCHEMA',
    'SettingDefinition',
    'SettingType',
    'ValidationResult',
    'validate_preferences',
]
