"""
Base class for settings sources.

A settings source maps a canonical key to the raw serialized text of a
setting. Sources are combined into a ``SettingsSourceChain`` and queried in
order until one of them returns a non-blank value.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

GetSerializedSetting = Callable[[str], str | None]


class SettingsSource(ABC):
    """
    Abstract base class for settings sources.

    ## Implementation Requirements

    All sources must implement:

    - `name`: A human readable description used in diagnostics
    - `get_serialized_setting`: Return the raw text stored under a key

    ## Missing Values

    A source that does not know a key returns ``None`` (an empty or
    whitespace-only string is treated the same way by the chain). Raising is
    reserved for real failures, such as a secure value that cannot be
    decrypted, because it stops the chain.

    ## Implementation Example

    ```python
    from tieredsettings.core.sources import SettingsSource

    class DictSettingsSource(SettingsSource):
        '''Serves settings from an in-memory mapping.'''

        def __init__(self, values: dict[str, str]):
            self._values = dict(values)

        @property
        def name(self) -> str:
            return "in-memory dictionary"

        def get_serialized_setting(self, key: str) -> str | None:
            return self._values.get(key)
    ```

    ## Thread Safety

    Sources are shared by every thread that resolves settings through the
    same resolver. Keep them immutable after construction or lock any
    mutable state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the diagnostic name of this source."""
        pass

    @abstractmethod
    def get_serialized_setting(self, key: str) -> str | None:
        """Return the raw text stored under ``key``, or None if absent."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
