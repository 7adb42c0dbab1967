"""
Environment variable settings source.

The canonical key is used directly as the environment variable name, so a
setting for ``DatabaseSettings`` is read from ``$DatabaseSettings``.
"""

import logging
import os

from .base import SettingsSource

logger = logging.getLogger(__name__)


class EnvironmentSettingsSource(SettingsSource):
    """Source that reads settings from environment variables."""

    @property
    def name(self) -> str:
        return "environment variable"

    def get_serialized_setting(self, key: str) -> str | None:
        value = os.environ.get(key)
        if value is not None:
            logger.debug(f"Found setting {key} in environment")
        return value
