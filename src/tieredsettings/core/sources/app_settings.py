"""
App-settings source.

Serves settings from the legacy app-settings key/value store. It sits at
the end of the default chain, below every config directory.
"""

from ..loader import AppSettingsStore
from .base import SettingsSource


class AppSettingsSource(SettingsSource):
    """Source backed by an ``AppSettingsStore``."""

    def __init__(self, store: AppSettingsStore):
        self.store = store

    @property
    def name(self) -> str:
        if self.store.path is not None:
            return f"app settings ({self.store.path})"
        return "app settings"

    def get_serialized_setting(self, key: str) -> str | None:
        return self.store.get(key)
