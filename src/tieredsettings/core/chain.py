"""
Settings source chain.

The chain holds the sources queried for a key, highest precedence first.
Lookup is first-match-wins: the first non-blank value is returned and the
remaining sources are never consulted. Values from different sources are
never merged.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator

from .sources.base import SettingsSource
from .sources.directory import ConfigDirectorySource, SettingsFile

logger = logging.getLogger(__name__)


class SettingsSourceChain:
    """Ordered, lazily materialized list of settings sources.

    Args:
        sources: Either the sources themselves, or a callable producing them.
                 A callable is invoked once, on first use.
    """

    def __init__(self, sources: Iterable[SettingsSource] | Callable[[], Iterable[SettingsSource]]):
        self._factory: Callable[[], Iterable[SettingsSource]] | None
        self._sources: tuple[SettingsSource, ...] | None
        if callable(sources):
            self._factory = sources
            self._sources = None
        else:
            self._factory = None
            self._sources = tuple(sources)
        self._lock = threading.Lock()

    @property
    def materialized(self) -> bool:
        return self._sources is not None

    @property
    def sources(self) -> tuple[SettingsSource, ...]:
        sources = self._sources
        if sources is not None:
            return sources

        with self._lock:
            if self._sources is None:
                assert self._factory is not None
                self._sources = tuple(self._factory())
                logger.debug(f"Materialized source chain with {len(self._sources)} sources")
            return self._sources

    @property
    def directory_sources(self) -> list[ConfigDirectorySource]:
        return [s for s in self.sources if isinstance(s, ConfigDirectorySource)]

    def files(self) -> list[SettingsFile]:
        """Files of the directory sources, highest precedence first.

        Files with the same case-insensitive name are reported once, from the
        directory with the highest precedence.
        """
        seen: dict[str, SettingsFile] = {}
        for source in self.directory_sources:
            for settings_file in source.files:
                seen.setdefault(settings_file.name.lower(), settings_file)
        return list(seen.values())

    def get_serialized_setting(self, key: str) -> str | None:
        """Return the first non-blank value any source has for ``key``."""
        for source in self.sources:
            value = source.get_serialized_setting(key)
            if value is not None and value.strip():
                logger.debug(f"Resolved {key} from {source.name}")
                return value
        return None

    def __iter__(self) -> Iterator[SettingsSource]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)
