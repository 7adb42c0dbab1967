"""
Canonical key derivation.

The canonical key of a settings type is its simple class name. Parameterized
generics are flattened recursively, so ``dict[str, list[Endpoint]]`` becomes
``dict(str,list(Endpoint))``. Abstract types and protocols may be redirected
to a concrete key through the app-settings store.
"""

import inspect
import logging
import threading
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .errors import InvalidSettingArgumentError

logger = logging.getLogger(__name__)

# Looks up a redirect for an abstract type's canonical key
LookupRedirect = Callable[[str], str | None]


def _simple_name(target: Any) -> str:
    if target is None or target is type(None):
        return "NoneType"
    name = getattr(target, "__name__", None)
    if name is None:
        # typing special forms such as typing.Any
        name = getattr(target, "_name", None) or repr(target)
    return name


def flatten_type_name(target_type: Any) -> str:
    """Return the flattened name of a (possibly generic) type.

    Examples:
        >>> flatten_type_name(int)
        'int'
        >>> flatten_type_name(dict[str, list[int]])
        'dict(str,list(int))'
    """
    origin = typing.get_origin(target_type)
    if origin is None:
        return _simple_name(target_type)

    args = typing.get_args(target_type)
    inner = ",".join(flatten_type_name(arg) for arg in args)
    return f"{_simple_name(origin)}({inner})"


def is_abstract_type(target_type: Any) -> bool:
    """Whether a type cannot be instantiated directly.

    Covers classes with unimplemented abstract members and ``typing.Protocol``
    classes. Deriving from ``abc.ABC`` alone does not make a class abstract.
    """
    if not inspect.isclass(target_type):
        return False
    if inspect.isabstract(target_type):
        return True
    return bool(getattr(target_type, "_is_protocol", False))


def build_key(target_type: Any, lookup_redirect: LookupRedirect | None = None) -> str:
    """Build the lookup key for a target type.

    Args:
        target_type: The settings type
        lookup_redirect: Called with the canonical key of an abstract type; a
                         non-blank result replaces the key

    Returns:
        The key used to query the source chain
    """
    default_key = flatten_type_name(target_type)

    if lookup_redirect is not None and is_abstract_type(target_type):
        redirected = lookup_redirect(default_key)
        if redirected and redirected.strip():
            logger.debug(f"Redirecting abstract type key {default_key} to {redirected}")
            return redirected

    return default_key


@dataclass
class SettingsBinding:
    """Per-type resolution data kept in the resolver's dispatch table.

    Attributes:
        target_type: The type requested by callers
        key: The key used to query the source chain
        deserialize_as: The type the raw value is deserialized into. For an
                        abstract type redirected to the name of one of its
                        concrete subclasses, that subclass; otherwise target_type.
    """

    target_type: Any
    key: str
    deserialize_as: Any


def concrete_type_for(target_type: Any, key: str) -> Any:
    """Find the concrete subclass of an abstract type whose name is ``key``.

    Returns ``target_type`` itself for concrete types or when no subclass matches.
    """
    if not is_abstract_type(target_type):
        return target_type

    pending = list(target_type.__subclasses__())
    seen = set()
    while pending:
        candidate = pending.pop(0)
        if candidate in seen:
            continue
        seen.add(candidate)
        if not is_abstract_type(candidate) and key in (candidate.__name__, candidate.__qualname__):
            return candidate
        pending.extend(candidate.__subclasses__())

    return target_type


class KeyBuilder:
    """Type-keyed table of settings bindings.

    Keys are built once per type and can be overridden with ``set_key``.
    """

    def __init__(self, lookup_redirect: LookupRedirect | None = None):
        self._lookup_redirect = lookup_redirect
        self._bindings: dict[Any, SettingsBinding] = {}
        self._lock = threading.Lock()

    def binding_for(self, target_type: Any) -> SettingsBinding:
        with self._lock:
            binding = self._bindings.get(target_type)
            if binding is None:
                key = build_key(target_type, self._lookup_redirect)
                binding = SettingsBinding(target_type, key, concrete_type_for(target_type, key))
                self._bindings[target_type] = binding
            return binding

    def key_for(self, target_type: Any) -> str:
        return self.binding_for(target_type).key

    def set_key(self, target_type: Any, key: str) -> None:
        if key is None or not key.strip():
            raise InvalidSettingArgumentError(
                "The key cannot be null, empty, or consist entirely of whitespace."
            )
        with self._lock:
            self._bindings[target_type] = SettingsBinding(
                target_type, key, concrete_type_for(target_type, key)
            )
