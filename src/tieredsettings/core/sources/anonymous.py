"""
Callback-backed settings source.

Wraps a plain function so callers can plug any lookup into the chain
without writing a ``SettingsSource`` subclass.
"""

from ..errors import InvalidSettingArgumentError
from .base import GetSerializedSetting, SettingsSource


class AnonymousSettingsSource(SettingsSource):
    """Source that delegates lookups to a caller-supplied callable."""

    def __init__(self, get_setting: GetSerializedSetting, name: str | None = None):
        if get_setting is None:
            raise InvalidSettingArgumentError("get_setting must be a callable, not None")
        self._get_setting = get_setting
        self._name = name

    @property
    def name(self) -> str:
        if self._name is not None:
            return self._name
        return getattr(self._get_setting, "__qualname__", repr(self._get_setting))

    def get_serialized_setting(self, key: str) -> str | None:
        return self._get_setting(key)


def create_source(get_setting: GetSerializedSetting, name: str | None = None) -> SettingsSource:
    """Create a settings source from a lookup callable.

    Args:
        get_setting: Function mapping a key to its raw value, or None when absent
        name: Optional diagnostic name; defaults to the callable's qualified name

    Returns:
        A SettingsSource that can be placed in a source chain
    """
    return AnonymousSettingsSource(get_setting, name)
