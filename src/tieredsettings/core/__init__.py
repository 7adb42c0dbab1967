"""tieredsettings core - settings resolution.

## Key Modules

### Resolver (`tieredsettings.core.resolver`)
- `ConfigResolver`: Resolves settings objects through the source chain and caches them

### Sources (`tieredsettings.core.sources`)
- `EnvironmentSettingsSource`, `ConfigDirectorySource`, `AppSettingsSource`
- `create_source()`: Wrap a lookup callable as a source

### Supporting modules
- `keys`: Canonical key derivation and abstract-type redirects
- `chain`: First-match-wins source chain
- `cache`: Resolution cache
- `decryption`: PKCS#7 decryption of secure settings
- `serialization`: Pluggable deserialization (pydantic by default)
- `loader`: App-settings store loading
"""

from .cache import ResolutionCache
from .chain import SettingsSourceChain
from .decryption import (
    CertificatePasswordHolder,
    CertificateStore,
    DecryptionCandidate,
    DirectoryCertificateStore,
    EmptyCertificateStore,
    SecureValueDecryptor,
    encrypt_value,
)
from .errors import (
    AppSettingsError,
    InvalidSettingArgumentError,
    SecureSettingDecryptionError,
    SettingConflictError,
    SettingsFileError,
    SettingDeserializationError,
    SettingNotFoundError,
    TieredSettingsError,
)
from .keys import KeyBuilder, build_key, flatten_type_name, is_abstract_type
from .loader import AppSettingsStore, load_app_settings
from .resolver import (
    COMMON_PRECEDENCE,
    DEFAULT_CONFIG_DIRECTORY_NAME,
    PRECEDENCE_SETTING,
    ConfigResolver,
)
from .serialization import (
    DeserializeSettings,
    SerializationKind,
    SerializerRepresentation,
    default_deserializer_factory,
)
from .sources import (
    AnonymousSettingsSource,
    AppSettingsSource,
    ConfigDirectorySource,
    EnvironmentSettingsSource,
    SettingsFile,
    SettingsSource,
    create_source,
)

__all__ = [
    "AnonymousSettingsSource",
    "AppSettingsError",
    "AppSettingsSource",
    "AppSettingsStore",
    "COMMON_PRECEDENCE",
    "CertificatePasswordHolder",
    "CertificateStore",
    "ConfigDirectorySource",
    "ConfigResolver",
    "DEFAULT_CONFIG_DIRECTORY_NAME",
    "DecryptionCandidate",
    "DeserializeSettings",
    "DirectoryCertificateStore",
    "EmptyCertificateStore",
    "EnvironmentSettingsSource",
    "InvalidSettingArgumentError",
    "KeyBuilder",
    "PRECEDENCE_SETTING",
    "ResolutionCache",
    "SecureSettingDecryptionError",
    "SecureValueDecryptor",
    "SerializationKind",
    "SerializerRepresentation",
    "SettingConflictError",
    "SettingsFileError",
    "SettingDeserializationError",
    "SettingNotFoundError",
    "SettingsFile",
    "SettingsSource",
    "SettingsSourceChain",
    "TieredSettingsError",
    "build_key",
    "create_source",
    "default_deserializer_factory",
    "encrypt_value",
    "flatten_type_name",
    "is_abstract_type",
    "load_app_settings",
]
