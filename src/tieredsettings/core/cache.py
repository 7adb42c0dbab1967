"""Resolution cache for settings objects."""

import logging
import threading
from collections.abc import Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)


class _KeySpace:
    """One key space of the cache with per-key computation locks."""

    def __init__(self, label: str):
        self.label = label
        self._entries: dict[Hashable, Any] = {}
        self._key_locks: dict[Hashable, threading.Lock] = {}
        self._lock = threading.Lock()
        self._generation = 0

    def get_or_compute(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())
            generation = self._generation

        with key_lock:
            with self._lock:
                if key in self._entries:
                    return self._entries[key]

            value = factory()

            with self._lock:
                if self._generation != generation:
                    # Cleared while computing; do not leak into the new generation
                    return value
                existing = self._entries.setdefault(key, value)
                logger.debug(f"Cached {self.label} entry for {key!r}")
                return existing

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._key_locks.clear()
            self._generation += 1

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ResolutionCache:
    """Memoizes resolved settings by type and by explicit name.

    The two key spaces are independent: a value cached for a type is never
    returned for a name and vice versa. Each key holds at most one visible
    value per generation; ``clear`` starts a new generation.
    """

    def __init__(self) -> None:
        self.by_type = _KeySpace("type")
        self.by_name = _KeySpace("name")

    def get_or_compute(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        return self.by_type.get_or_compute(key, factory)

    def get_or_compute_by_name(self, name: str, factory: Callable[[], Any]) -> Any:
        return self.by_name.get_or_compute(name, factory)

    def set(self, key: Hashable, value: Any) -> None:
        self.by_type.set(key, value)

    def set_by_name(self, name: str, value: Any) -> None:
        self.by_name.set(name, value)

    def clear(self) -> None:
        self.by_type.clear()
        self.by_name.clear()
