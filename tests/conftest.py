"""
Shared pytest fixtures for preferences tests.
"""
import sys

import pytest
from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope='session')
def qt_app():
    """Create QCoreApplication instance for tests that need QSettings."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def clean_store_class():
    """Make sure no singleton or save-path default leaks between tests."""
    from ccprefs.settings.preferences_store import PreferencesStore
    PreferencesStore.reset_instance()
    yield PreferencesStore
    PreferencesStore.reset_instance()


@pytest.fixture
def store(clean_store_class):
    """Fresh PreferencesStore singleton with default values."""
    return clean_store_class.get_instance()


@pytest.fixture
def prefs_file(tmp_path):
    """Path for a preferences JSON file that does not exist yet."""
    return tmp_path / "preferences-store.json"
