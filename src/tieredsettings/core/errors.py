"""Exception types raised while resolving settings.

Every error raised by tieredsettings derives from ``TieredSettingsError`` so
callers can catch the whole family with a single ``except`` clause. None of
these errors are retried internally; retry and default-value policy belongs
to the caller.
"""

import typing
from typing import Any


def qualified_type_name(target_type: Any) -> str:
    """Return ``module.QualName`` for a type, or its ``repr`` for anything else.

    Parameterized generics keep their arguments, e.g.
    ``builtins.dict[builtins.str, app.settings.Endpoint]``.
    """
    origin = typing.get_origin(target_type)
    if origin is not None:
        args = ", ".join(qualified_type_name(arg) for arg in typing.get_args(target_type))
        return f"{qualified_type_name(origin)}[{args}]"

    module = getattr(target_type, "__module__", None)
    qualname = getattr(target_type, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return repr(target_type)


class TieredSettingsError(Exception):
    """Base class for all tieredsettings errors."""


class SettingNotFoundError(TieredSettingsError, LookupError):
    """Raised when no settings source produced a value for a key.

    Attributes:
        target_type: The type that was being resolved
        key: The key that was looked up in the source chain
    """

    def __init__(self, target_type: Any, key: str):
        self.target_type = target_type
        self.key = key
        super().__init__(f"Could not find config for: {qualified_type_name(target_type)}.")


class SettingConflictError(TieredSettingsError):
    """Raised when two files in one config directory map to the same key.

    Attributes:
        path: Path of the offending file
    """

    def __init__(self, path: str, reason: str = "Found conflicting settings file"):
        self.path = path
        super().__init__(f"{reason}: {path}")


class SettingsFileError(TieredSettingsError):
    """Raised when a file in a config directory cannot be read as text.

    Attributes:
        path: Path of the unreadable file
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Could not read settings file {path}: {reason}")


class SecureSettingDecryptionError(TieredSettingsError):
    """Raised when no available certificate can decrypt a secure setting.

    Attributes:
        file_name: Name of the secure settings file, if known
    """

    def __init__(self, message: str, file_name: str | None = None):
        self.file_name = file_name
        super().__init__(message)


class SettingDeserializationError(TieredSettingsError):
    """Raised when a raw setting cannot be turned into the requested type.

    Attributes:
        target_type: The type that was being deserialized
    """

    def __init__(self, target_type: Any, message: str):
        self.target_type = target_type
        super().__init__(message)


class InvalidSettingArgumentError(TieredSettingsError, ValueError):
    """Raised for a missing override value or a blank key or name."""


class AppSettingsError(TieredSettingsError):
    """Raised when the app-settings file exists but cannot be parsed."""
