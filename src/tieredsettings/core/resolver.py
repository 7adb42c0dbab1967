"""
Settings resolver.

This module provides the ConfigResolver class that:
1. Derives the canonical key of a settings type
2. Queries the settings source chain in precedence order
3. Deserializes the first match and caches the result until the next reset
"""

import logging
import os
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, TypeVar

from .cache import ResolutionCache
from .chain import SettingsSourceChain
from .decryption import (
    CertificatePassword,
    CertificatePasswordHolder,
    CertificateStore,
    DecryptionCandidate,
    SecureValueDecryptor,
    default_certificate_store,
    no_certificate_password,
)
from .errors import InvalidSettingArgumentError, SettingNotFoundError
from .keys import KeyBuilder
from .loader import AppSettingsStore, load_app_settings
from .serialization import (
    DEFAULT_REPRESENTATION,
    DeserializeSettings,
    DeserializerFactory,
    SerializerRepresentation,
    default_deserializer_factory,
)
from .sources import (
    AppSettingsSource,
    ConfigDirectorySource,
    EnvironmentSettingsSource,
    GetSerializedSetting,
    SettingsFile,
    SettingsSource,
    create_source,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

COMMON_PRECEDENCE = "Common"
DEFAULT_CONFIG_DIRECTORY_NAME = ".config"
PRECEDENCE_SETTING = "TieredSettings.Settings.Precedence"
ROOT_DIRECTORY_ENV = "TIEREDSETTINGS_ROOT"


def with_common_precedence(tiers: Iterable[str]) -> tuple[str, ...]:
    """Return the tiers with the common tier appended unless already present."""
    values = tuple(t for t in tiers if t and t.strip())
    if COMMON_PRECEDENCE in values:
        return values
    return values + (COMMON_PRECEDENCE,)


@dataclass(frozen=True)
class ResolverSnapshot:
    """Configuration of a resolver, replaced as a whole on every change.

    Attributes:
        settings_directory: Directory holding the tier directories
        precedence: Tier names, highest precedence first
        chain: Source chain queried for settings
        custom_sources: Whether the chain was supplied by the caller
        representation: Serialization used when a call supplies no override
        deserializer_factory: Builds deserializers from representations
        deserialize: Deserializer for ``representation``
        certificate_password: Holder of the callable mapping certificate file
                              names to passwords, shared by the chains built
                              between two resets
        certificate_store: Certificates tried after the config directory ones
        app_settings: Legacy key/value store
        keys: Type-keyed dispatch table of canonical keys
    """

    settings_directory: Path
    precedence: tuple[str, ...]
    chain: SettingsSourceChain
    custom_sources: bool
    representation: SerializerRepresentation
    deserializer_factory: DeserializerFactory
    deserialize: DeserializeSettings
    certificate_password: CertificatePasswordHolder
    certificate_store: CertificateStore
    app_settings: AppSettingsStore
    keys: KeyBuilder


class ConfigResolver:
    """
    Resolves strongly-typed settings objects from a chain of settings sources.

    ## Default Source Chain

    1. Environment variables named after the canonical key
    2. ``<root>/.config/<tier>/`` for each precedence tier, in order
    3. ``<root>/.config/``
    4. The app-settings store (``<root>/appsettings.yml``)

    The first source with a non-blank value wins. Directory sources serve
    ``<key>.json`` files and decrypt ``<key>.json.secure`` files with the
    certificates found in the active directories or the certificate store.

    ## Usage Examples

    ```python
    from pydantic import BaseModel
    from tieredsettings import ConfigResolver

    class DatabaseSettings(BaseModel):
        host: str
        port: int = 5432

    resolver = ConfigResolver(root_directory="/srv/app")
    resolver.set_precedence("Production")

    # Reads /srv/app/.config/Production/DatabaseSettings.json, falling back
    # to /srv/app/.config/Common/ and /srv/app/.config/
    settings = resolver.get(DatabaseSettings)
    ```

    ## Overrides

    ```python
    resolver.set(DatabaseSettings(host="localhost"))
    resolver.set_by_name("reporting-db", DatabaseSettings(host="reports"))
    ```

    Overrides last until the next ``reset``.

    ## Thread Safety

    All methods may be called from several threads. Configuration changes
    (``reset``, ``set_precedence``, ``set_serialization``, assigning
    ``sources``) replace an immutable snapshot under a single lock, so a
    concurrent ``get`` sees either the old or the new configuration, never a
    mix. Secure settings are decrypted with the certificates of the chain
    that holds them. Assigning ``certificate_password`` applies to every
    chain built since the last ``reset``. Resolved objects are cached per key.
    """

    def __init__(
        self,
        root_directory: str | Path | None = None,
        config_directory_name: str | None = None,
        certificate_store: CertificateStore | None = None,
    ):
        """
        Initialize the ConfigResolver.

        Args:
            root_directory: Directory containing the config directory. Defaults to
                            $TIEREDSETTINGS_ROOT, then the current working directory.
            config_directory_name: Name of the config directory; defaults to ".config"
            certificate_store: Certificates tried after the config directory ones;
                               defaults to the store named by $TIEREDSETTINGS_CERT_STORE
        """
        self._lock = threading.Lock()
        self._cache = ResolutionCache()
        self._certificate_store_override = certificate_store
        self._snapshot: ResolverSnapshot
        self.reset(root_directory, config_directory_name)

    # Configuration lifecycle

    def reset(
        self,
        root_directory: str | Path | None = None,
        config_directory_name: str | None = None,
    ) -> None:
        """Reset the resolver to its default behavior.

        Clears both caches, recomputes the settings directory, restores the
        default serialization and certificate password, re-reads the
        precedence setting and rebuilds the source chain on next use.

        Args:
            root_directory: Optional root directory override
            config_directory_name: Optional config directory name override
        """
        base_directory = Path(root_directory or os.environ.get(ROOT_DIRECTORY_ENV) or Path.cwd())
        directory_name = config_directory_name or DEFAULT_CONFIG_DIRECTORY_NAME
        settings_directory = base_directory / directory_name

        app_settings = load_app_settings(root_directory=base_directory)
        keys = KeyBuilder(lambda key: self._app_setting(app_settings, key))
        precedence = self._default_precedence(app_settings)
        certificate_store = self._certificate_store_override or default_certificate_store()
        certificate_password = CertificatePasswordHolder()

        with self._lock:
            self._cache.clear()
            self._snapshot = ResolverSnapshot(
                settings_directory=settings_directory,
                precedence=precedence,
                chain=self._default_chain(
                    settings_directory,
                    precedence,
                    app_settings,
                    certificate_password,
                    certificate_store,
                ),
                custom_sources=False,
                representation=DEFAULT_REPRESENTATION,
                deserializer_factory=default_deserializer_factory,
                deserialize=default_deserializer_factory(DEFAULT_REPRESENTATION),
                certificate_password=certificate_password,
                certificate_store=certificate_store,
                app_settings=app_settings,
                keys=keys,
            )

        logger.debug(
            f"Reset resolver: settings directory {settings_directory}, "
            f"precedence {'|'.join(precedence)}"
        )

    def _default_precedence(self, app_settings: AppSettingsStore) -> tuple[str, ...]:
        configured = self._app_setting(app_settings, PRECEDENCE_SETTING)
        values: list[str] = []
        if configured and configured.strip():
            values = [v for v in configured.split("|") if v]
        return with_common_precedence(values)

    @staticmethod
    def _default_chain(
        settings_directory: Path,
        precedence: tuple[str, ...],
        app_settings: AppSettingsStore,
        certificate_password: CertificatePasswordHolder,
        certificate_store: CertificateStore,
    ) -> SettingsSourceChain:
        chain: SettingsSourceChain

        def decrypt(ciphertext: str, file_name: str) -> str:
            # Certificates come from the chain that owns the secure file
            decryptor = SecureValueDecryptor(chain.files, certificate_password, certificate_store)
            return decryptor.decrypt(ciphertext, file_name)

        def build() -> Iterator[SettingsSource]:
            yield EnvironmentSettingsSource()
            for tier in precedence:
                yield ConfigDirectorySource(settings_directory / tier, decrypt)
            yield ConfigDirectorySource(settings_directory, decrypt)
            yield AppSettingsSource(app_settings)

        chain = SettingsSourceChain(build)
        return chain

    def _default_chain_for(
        self, snapshot: ResolverSnapshot, precedence: tuple[str, ...]
    ) -> SettingsSourceChain:
        return self._default_chain(
            snapshot.settings_directory,
            precedence,
            snapshot.app_settings,
            snapshot.certificate_password,
            snapshot.certificate_store,
        )

    def _replace_snapshot(self, **changes: Any) -> None:
        with self._lock:
            self._snapshot = replace(self._snapshot, **changes)

    def set_precedence(self, *precedence: str) -> None:
        """Set the tier names to search, highest precedence first.

        The common tier is appended when missing. A default source chain is
        rebuilt on next use; a caller-supplied chain is kept. The resolution
        cache is not cleared.
        """
        tiers = with_common_precedence(precedence)
        with self._lock:
            snapshot = self._snapshot
            changes: dict[str, Any] = {"precedence": tiers}
            if not snapshot.custom_sources:
                changes["chain"] = self._default_chain_for(snapshot, tiers)
            self._snapshot = replace(snapshot, **changes)

    @property
    def precedence(self) -> tuple[str, ...]:
        return self._snapshot.precedence

    def set_serialization(
        self,
        representation: SerializerRepresentation,
        factory: DeserializerFactory | None = None,
    ) -> None:
        """Set the serialization used when ``get`` is called without an override.

        Args:
            representation: How raw settings text is interpreted
            factory: Builds the deserializer; defaults to the pydantic-backed factory
        """
        if representation is None:
            raise InvalidSettingArgumentError("representation must not be None")
        factory = factory or default_deserializer_factory
        self._replace_snapshot(
            representation=representation,
            deserializer_factory=factory,
            deserialize=factory(representation),
        )

    @property
    def representation(self) -> SerializerRepresentation:
        return self._snapshot.representation

    @property
    def sources(self) -> tuple[SettingsSource, ...]:
        """The sources queried for settings, highest precedence first.

        Assigning a list of sources replaces the chain; assigning None restores
        the default chain.
        """
        return self._snapshot.chain.sources

    @sources.setter
    def sources(self, value: Iterable[SettingsSource] | None) -> None:
        with self._lock:
            snapshot = self._snapshot
            if value is None:
                chain = self._default_chain_for(snapshot, snapshot.precedence)
                self._snapshot = replace(snapshot, chain=chain, custom_sources=False)
            else:
                self._snapshot = replace(
                    snapshot, chain=SettingsSourceChain(list(value)), custom_sources=True
                )

    @property
    def settings_directory(self) -> Path:
        return self._snapshot.settings_directory

    @property
    def certificate_password(self) -> CertificatePassword:
        """Maps a certificate file name to its password; None means no password."""
        return self._snapshot.certificate_password.value

    @certificate_password.setter
    def certificate_password(self, value: CertificatePassword | None) -> None:
        with self._lock:
            self._snapshot.certificate_password.value = value or no_certificate_password

    @property
    def certificate_store(self) -> CertificateStore:
        return self._snapshot.certificate_store

    # Resolution

    def get(self, target_type: type[T], serializer: SerializerRepresentation | None = None) -> T:
        """Get the settings object of the specified type.

        Args:
            target_type: Type to resolve
            serializer: Optional serialization used instead of the resolver default

        Returns:
            The cached or newly deserialized settings object

        Raises:
            SettingNotFoundError: If no source has a value for the type's key
            SettingDeserializationError: If the value cannot be deserialized
            SecureSettingDecryptionError: If a secure value cannot be decrypted
        """
        snapshot = self._snapshot

        def compute() -> Any:
            binding = snapshot.keys.binding_for(target_type)
            return self._resolve(snapshot, binding.deserialize_as, binding.key, serializer)

        return self._cache.get_or_compute(target_type, compute)

    def get_by_name(
        self,
        name: str,
        target_type: type[T],
        serializer: SerializerRepresentation | None = None,
    ) -> T:
        """Get a settings object stored under an explicit name rather than a derived key."""
        _require_key(name, "name")
        snapshot = self._snapshot
        return self._cache.get_or_compute_by_name(
            name, lambda: self._resolve(snapshot, target_type, name, serializer)
        )

    def _resolve(
        self,
        snapshot: ResolverSnapshot,
        target_type: Any,
        key: str,
        serializer: SerializerRepresentation | None,
    ) -> Any:
        logger.debug(f"Resolving settings for key {key}")
        serialized = snapshot.chain.get_serialized_setting(key)
        if serialized is None:
            raise SettingNotFoundError(target_type, key)

        deserialize = snapshot.deserialize
        if serializer is not None:
            deserialize = snapshot.deserializer_factory(serializer)
        return deserialize(target_type, serialized)

    def get_serialized_setting(self, key: str) -> str | None:
        """Return the raw value the source chain has for a key, or None."""
        return self._snapshot.chain.get_serialized_setting(key)

    def set(self, value: Any, target_type: Any = None) -> None:
        """Override the object returned by ``get`` for a type.

        Args:
            value: The settings object to return
            target_type: Type to override; defaults to ``type(value)``
        """
        if value is None:
            raise InvalidSettingArgumentError("setting must not be None")
        self._cache.set(target_type if target_type is not None else type(value), value)

    def set_by_name(self, name: str, value: Any) -> None:
        """Override the object returned by ``get_by_name`` for a name."""
        _require_key(name, "name")
        if value is None:
            raise InvalidSettingArgumentError("setting must not be None")
        self._cache.set_by_name(name, value)

    def get_key(self, target_type: Any) -> str:
        """Return the key used to look up a type's settings."""
        return self._snapshot.keys.key_for(target_type)

    def set_key(self, target_type: Any, key: str) -> None:
        """Look up a type's settings under a custom key until the next reset."""
        self._snapshot.keys.set_key(target_type, key)

    # App settings

    @staticmethod
    def _app_setting(app_settings: AppSettingsStore, key: str) -> str | None:
        value = os.environ.get(key)
        if value and value.strip():
            return value
        return app_settings.get(key)

    def app_setting(self, key: str) -> str | None:
        """Get an app setting, checking environment variables before the app-settings store."""
        return self._app_setting(self._snapshot.app_settings, key)

    @staticmethod
    def create_source(get_setting: GetSerializedSetting, name: str | None = None) -> SettingsSource:
        """Create a settings source from a lookup callable."""
        return create_source(get_setting, name)

    # Files and certificates

    def get_files(self) -> list[SettingsFile]:
        """Files in the active config directories.

        Files with the same case-insensitive name are reported once, from the
        directory with the highest precedence.
        """
        return self._snapshot.chain.files()

    def get_file(self, matching: Callable[[SettingsFile], bool]) -> SettingsFile | None:
        """Return the first active file matching a predicate, in precedence order."""
        return next((f for f in self.get_files() if matching(f)), None)

    def _decryptor(self) -> SecureValueDecryptor:
        snapshot = self._snapshot
        return SecureValueDecryptor(
            snapshot.chain.files, snapshot.certificate_password, snapshot.certificate_store
        )

    def get_certificates_from_config_directory(self) -> list[DecryptionCandidate]:
        """Load the certificate bundles found in the active config directories."""
        return self._decryptor().directory_candidates()


def _require_key(value: str, label: str) -> None:
    if value is None or not value.strip():
        raise InvalidSettingArgumentError(
            f"The {label} cannot be null, empty, or consist entirely of whitespace."
        )
