"""tieredsettings - typed settings resolved from tiered config directories.

The module-level functions operate on a shared default ``ConfigResolver``
created on first use. Applications that need isolated configuration (tests,
multi-tenant processes) should create their own ``ConfigResolver``.

Example:
    >>> import tieredsettings
    >>> tieredsettings.set_precedence("Production")
    >>> settings = tieredsettings.get(DatabaseSettings)  # doctest: +SKIP
"""

import threading
from pathlib import Path
from typing import Any, TypeVar

from .core import *  # noqa: F403
from .core import __all__ as _core_all
from .core.resolver import ConfigResolver
from .core.serialization import DeserializerFactory, SerializerRepresentation
from .version import PACKAGE_NAME, PACKAGE_VERSION

T = TypeVar("T")

_default_resolver: ConfigResolver | None = None
_default_lock = threading.Lock()


def default_resolver() -> ConfigResolver:
    """Return the shared resolver, creating it on first use."""
    global _default_resolver
    if _default_resolver is None:
        with _default_lock:
            if _default_resolver is None:
                _default_resolver = ConfigResolver()
    return _default_resolver


def get(target_type: type[T], serializer: SerializerRepresentation | None = None) -> T:
    return default_resolver().get(target_type, serializer)


def get_by_name(
    name: str, target_type: type[T], serializer: SerializerRepresentation | None = None
) -> T:
    return default_resolver().get_by_name(name, target_type, serializer)


def set(value: Any, target_type: Any = None) -> None:  # noqa: A001
    default_resolver().set(value, target_type)


def set_by_name(name: str, value: Any) -> None:
    default_resolver().set_by_name(name, value)


def set_precedence(*precedence: str) -> None:
    default_resolver().set_precedence(*precedence)


def set_serialization(
    representation: SerializerRepresentation, factory: DeserializerFactory | None = None
) -> None:
    default_resolver().set_serialization(representation, factory)


def reset(
    root_directory: str | Path | None = None, config_directory_name: str | None = None
) -> None:
    default_resolver().reset(root_directory, config_directory_name)


def app_setting(key: str) -> str | None:
    return default_resolver().app_setting(key)


__all__ = [
    *_core_all,
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "app_setting",
    "default_resolver",
    "get",
    "get_by_name",
    "reset",
    "set",
    "set_by_name",
    "set_precedence",
    "set_serialization",
]
