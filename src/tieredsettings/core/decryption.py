"""
Secure setting decryption.

Secure settings files contain a base64-encoded DER PKCS#7 envelope. They are
decrypted with the first certificate that works, taken from:

1. ``.pfx`` files found in the active config directories, in precedence order
2. a ``CertificateStore`` (by default a directory of ``.pfx`` files named by
   the ``TIEREDSETTINGS_CERT_STORE`` environment variable)
"""

import base64
import binascii
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs7, pkcs12

from .errors import SecureSettingDecryptionError
from .sources.directory import CERTIFICATE_SUFFIX, SettingsFile

logger = logging.getLogger(__name__)

CERT_STORE_ENV = "TIEREDSETTINGS_CERT_STORE"

# Maps a certificate file name to its password, or None when it has none
CertificatePassword = Callable[[str], str | bytes | None]


def no_certificate_password(certificate_name: str) -> str | bytes | None:
    return None


class CertificatePasswordHolder:
    """Mutable reference to the current CertificatePassword callable.

    A source chain keeps the holder it was built with, so a password assigned
    after the chain was built still applies to it.
    """

    def __init__(self, value: CertificatePassword | None = None):
        self.value: CertificatePassword = value or no_certificate_password

    def __call__(self, certificate_name: str) -> str | bytes | None:
        return self.value(certificate_name)


@dataclass(frozen=True)
class DecryptionCandidate:
    """A certificate and its private key, tried in turn on secure settings.

    Attributes:
        origin: Where the candidate came from, used in log messages
        certificate: The recipient certificate
        private_key: The private key matching the certificate
    """

    origin: str
    certificate: x509.Certificate
    private_key: Any


class CertificateStore(Protocol):
    """Provides decryption candidates outside the config directories."""

    def candidates(self) -> list[DecryptionCandidate]: ...


class EmptyCertificateStore:
    """Certificate store with no certificates."""

    def candidates(self) -> list[DecryptionCandidate]:
        return []


class DirectoryCertificateStore:
    """Certificate store backed by the ``.pfx`` files in one directory."""

    def __init__(
        self,
        directory: str | Path,
        certificate_password: CertificatePassword = no_certificate_password,
    ):
        self.directory = Path(directory)
        self.certificate_password = certificate_password

    def candidates(self) -> list[DecryptionCandidate]:
        if not self.directory.is_dir():
            logger.debug(f"Certificate store {self.directory} does not exist")
            return []

        found = []
        for path in sorted(self.directory.iterdir(), key=lambda p: p.name.casefold()):
            if path.is_file() and path.suffix.lower() == CERTIFICATE_SUFFIX:
                candidate = load_pfx(path, self.certificate_password(path.name))
                if candidate is not None:
                    found.append(candidate)
        return found


def default_certificate_store() -> CertificateStore:
    """Build the certificate store named by TIEREDSETTINGS_CERT_STORE, if any."""
    store_path = os.environ.get(CERT_STORE_ENV)
    if store_path:
        return DirectoryCertificateStore(store_path)
    return EmptyCertificateStore()


def load_pfx(path: Path, password: str | bytes | None) -> DecryptionCandidate | None:
    """Load a PKCS#12 bundle as a decryption candidate.

    Bundles that cannot be opened (wrong or missing password, corrupt data) or
    that lack a key or certificate are logged and skipped.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")

    try:
        private_key, certificate, _ = pkcs12.load_key_and_certificates(
            path.read_bytes(), password
        )
    except ValueError as e:
        logger.warning(f"Skipping certificate {path}: {e}")
        return None

    if private_key is None or certificate is None:
        logger.warning(f"Skipping certificate {path}: bundle has no private key or certificate")
        return None

    return DecryptionCandidate(origin=str(path), certificate=certificate, private_key=private_key)


class SecureValueDecryptor:
    """Decrypts secure settings with the certificates currently available.

    Args:
        certificate_files: Returns the ``.pfx`` files of the active config directories
        certificate_password: Maps a certificate file name to its password
        store: Additional certificates tried after the config directory ones
    """

    def __init__(
        self,
        certificate_files: Callable[[], Iterable[SettingsFile]],
        certificate_password: CertificatePassword = no_certificate_password,
        store: CertificateStore | None = None,
    ):
        self._certificate_files = certificate_files
        self._certificate_password = certificate_password
        self._store = store or EmptyCertificateStore()

    def directory_candidates(self) -> list[DecryptionCandidate]:
        """Load every certificate bundle found in the active config directories."""
        found = []
        for settings_file in self._certificate_files():
            if settings_file.extension.lower() != CERTIFICATE_SUFFIX:
                continue
            candidate = load_pfx(settings_file.path, self._certificate_password(settings_file.name))
            if candidate is not None:
                found.append(candidate)
        return found

    def candidates(self) -> list[DecryptionCandidate]:
        return self.directory_candidates() + list(self._store.candidates())

    def decrypt(self, ciphertext: str, file_name: str | None = None) -> str:
        """Decrypt a base64 PKCS#7 envelope.

        Args:
            ciphertext: Base64 text of the DER-encoded envelope
            file_name: Name of the file the ciphertext came from, for error messages

        Returns:
            The decrypted text

        Raises:
            SecureSettingDecryptionError: If the text is not valid base64 or no
                                          candidate certificate can decrypt it
        """
        label = file_name or "secure setting"
        try:
            envelope = base64.b64decode("".join(ciphertext.split()), validate=True)
        except binascii.Error as e:
            raise SecureSettingDecryptionError(
                f"Secure setting {label} is not valid base64: {e}", file_name=file_name
            ) from e

        candidates = self.candidates()
        for candidate in candidates:
            try:
                plaintext = pkcs7.pkcs7_decrypt_der(
                    envelope, candidate.certificate, candidate.private_key, []
                )
            except (ValueError, TypeError) as e:
                logger.debug(f"Certificate {candidate.origin} cannot decrypt {label}: {e}")
                continue

            logger.debug(f"Decrypted {label} with certificate {candidate.origin}")
            try:
                return plaintext.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise SecureSettingDecryptionError(
                    f"Decrypted {label} is not valid UTF-8 text: {e}", file_name=file_name
                ) from e

        raise SecureSettingDecryptionError(
            f"None of the {len(candidates)} available certificates could decrypt {label}",
            file_name=file_name,
        )


def encrypt_value(plaintext: str | bytes, certificate: x509.Certificate) -> str:
    """Encrypt text for a certificate, producing secure settings file content.

    Args:
        plaintext: The setting text to protect
        certificate: The recipient certificate; its private key decrypts the result

    Returns:
        Base64 text of the DER-encoded PKCS#7 envelope
    """
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")

    envelope = (
        pkcs7.PKCS7EnvelopeBuilder()
        .set_data(plaintext)
        .add_recipient(certificate)
        .encrypt(serialization.Encoding.DER, [])
    )
    return base64.b64encode(envelope).decode("ascii")
