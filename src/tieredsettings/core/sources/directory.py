"""
Config directory settings source.

Each ``<key>.json`` file in a directory holds the serialized settings for
one key; ``<key>.json.secure`` holds the same content as a base64 PKCS#7
envelope. The directory is scanned once, when the source is created.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from ...models import SettingsBaseModel
from ..errors import SecureSettingDecryptionError, SettingConflictError, SettingsFileError
from .base import SettingsSource

logger = logging.getLogger(__name__)

PLAIN_SUFFIX = ".json"
SECURE_SUFFIX = ".secure"
CERTIFICATE_SUFFIX = ".pfx"

# (ciphertext, file name) -> plaintext
DecryptSetting = Callable[[str, str], str]


class SettingsFile(SettingsBaseModel):
    """A file discovered in a config directory."""

    name: str
    extension: str
    path: Path


class ConfigDirectorySource(SettingsSource):
    """Source that serves settings files from a single directory.

    Args:
        directory_path: Directory to scan. A missing directory yields an empty source.
        decrypt: Callable used to decrypt secure settings. Without it, reading a
                 secure setting raises SecureSettingDecryptionError.

    Raises:
        SettingConflictError: If two files map to the same case-insensitive key,
                              or a secure file is not named ``<key>.json.secure``
        SettingsFileError: If a settings file is not valid UTF-8 text
    """

    def __init__(self, directory_path: str | Path, decrypt: DecryptSetting | None = None):
        self.directory_path = Path(directory_path)
        self._decrypt = decrypt
        self._contents: dict[str, str] = {}
        self._file_names: dict[str, str] = {}
        self._secure_keys: set[str] = set()
        self._files: list[SettingsFile] = []
        self._read_files()

    def _read_files(self) -> None:
        if not self.directory_path.is_dir():
            logger.debug(f"Config directory {self.directory_path} does not exist, skipping")
            return

        entries = sorted(
            (p for p in self.directory_path.iterdir() if p.is_file()),
            key=lambda p: p.name.casefold(),
        )
        for file_path in entries:
            extension = file_path.suffix
            self._files.append(
                SettingsFile(name=file_path.name, extension=extension, path=file_path)
            )

            if extension.lower() == PLAIN_SUFFIX:
                self._add(file_path.stem, file_path, secure=False)
            elif extension.lower() == SECURE_SUFFIX:
                stem = file_path.stem
                if not stem.lower().endswith(PLAIN_SUFFIX) or len(stem) == len(PLAIN_SUFFIX):
                    raise SettingConflictError(
                        str(file_path),
                        reason=f"Malformed secure settings file name, expected <key>{PLAIN_SUFFIX}{SECURE_SUFFIX}",
                    )
                self._add(stem[: -len(PLAIN_SUFFIX)], file_path, secure=True)

        logger.debug(
            f"Scanned {self.directory_path}: {len(self._contents)} settings "
            f"({len(self._secure_keys)} secure), {len(self._files)} files"
        )

    def _add(self, key: str, file_path: Path, secure: bool) -> None:
        folded = key.casefold()
        if folded in self._contents:
            raise SettingConflictError(str(file_path))

        try:
            self._contents[folded] = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SettingsFileError(str(file_path), f"not valid UTF-8 text ({e})") from e
        self._file_names[folded] = file_path.name
        if secure:
            self._secure_keys.add(folded)

    @property
    def name(self) -> str:
        return f"settings folder ({self.directory_path})"

    @property
    def files(self) -> tuple[SettingsFile, ...]:
        """Files found in the directory, sorted by case-insensitive name."""
        return tuple(self._files)

    def is_secure(self, key: str) -> bool:
        return key.casefold() in self._secure_keys

    def get_serialized_setting(self, key: str) -> str | None:
        folded = key.casefold()
        value = self._contents.get(folded)
        if value is None:
            return None

        if folded not in self._secure_keys:
            return value

        file_name = self._file_names[folded]
        if self._decrypt is None:
            raise SecureSettingDecryptionError(
                f"No decryptor configured for secure setting {file_name}", file_name=file_name
            )
        logger.debug(f"Decrypting secure setting {file_name}")
        return self._decrypt(value, file_name)
