"""Persisted application preferences for the cloud extension host."""

__version__ = "2.2.1"
