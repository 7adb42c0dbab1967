"""
Sources subpackage.

This subpackage contains the settings source implementations that make up
the default source chain, plus the callback-backed source for custom lookups.
"""

from .anonymous import AnonymousSettingsSource, create_source
from .app_settings import AppSettingsSource
from .base import GetSerializedSetting, SettingsSource
from .directory import (
    CERTIFICATE_SUFFIX,
    PLAIN_SUFFIX,
    SECURE_SUFFIX,
    ConfigDirectorySource,
    SettingsFile,
)
from .env import EnvironmentSettingsSource

__all__ = [
    "AnonymousSettingsSource",
    "AppSettingsSource",
    "CERTIFICATE_SUFFIX",
    "ConfigDirectorySource",
    "EnvironmentSettingsSource",
    "GetSerializedSetting",
    "PLAIN_SUFFIX",
    "SECURE_SUFFIX",
    "SettingsFile",
    "SettingsSource",
    "create_source",
]
