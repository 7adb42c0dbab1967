"""App-settings loader.

The app-settings store is the legacy key/value lookup that backs the last
source in the default chain, abstract-type redirects and the precedence
setting. It is a flat YAML mapping:

```yaml
TieredSettings.Settings.Precedence: "Production|Shared"
IStorageSettings: S3StorageSettings
RetryCount: 3
```
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import AppSettingsError

logger = logging.getLogger(__name__)

APP_SETTINGS_ENV = "TIEREDSETTINGS_APP_SETTINGS"
DEFAULT_APP_SETTINGS_FILE = "appsettings.yml"


class AppSettingsStore:
    """Read-only key/value store of app settings."""

    def __init__(self, values: Mapping[str, Any] | None = None, path: Path | None = None):
        self._values = {str(k): _to_text(v) for k, v in (values or {}).items()}
        self.path = path

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def keys(self) -> list[str]:
        return list(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def load_app_settings(
    path: Path | None = None, root_directory: Path | None = None
) -> AppSettingsStore:
    """Load the app-settings store from a YAML file.

    Args:
        path: Optional explicit path to the app-settings file.
              If not provided, looks for:
              1. TIEREDSETTINGS_APP_SETTINGS environment variable
              2. <root_directory>/appsettings.yml

    Returns:
        AppSettingsStore with the file's values, empty if no file exists

    Raises:
        AppSettingsError: If the file exists but is not a YAML mapping
    """
    if path is None:
        env_path = os.environ.get(APP_SETTINGS_ENV)
        if env_path:
            path = Path(env_path)
        elif root_directory is not None:
            path = Path(root_directory) / DEFAULT_APP_SETTINGS_FILE

    if path is None or not path.exists():
        logger.debug(f"No app settings file found at {path}, using empty app settings")
        return AppSettingsStore(path=path)

    logger.debug(f"Loading app settings from: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise AppSettingsError(f"Invalid YAML in app settings file {path}: {e}") from e

    if raw is None:
        return AppSettingsStore(path=path)

    if not isinstance(raw, dict):
        raise AppSettingsError(
            f"App settings file {path} must contain a mapping, got {type(raw).__name__}"
        )

    for key, value in raw.items():
        if isinstance(value, (dict, list)):
            raise AppSettingsError(f"App setting '{key}' in {path} must be a scalar value")

    return AppSettingsStore(raw, path=path)
