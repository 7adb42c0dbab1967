"""
Global pytest configuration and fixtures.
"""

import datetime
import json
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from tieredsettings.core.decryption import encrypt_value

RESOLVER_ENV_VARS = (
    "TIEREDSETTINGS_ROOT",
    "TIEREDSETTINGS_APP_SETTINGS",
    "TIEREDSETTINGS_CERT_STORE",
    "TIEREDSETTINGS_DEBUG",
    "TieredSettings.Settings.Precedence",
)


@pytest.fixture(autouse=True)
def isolate_resolver_environment(monkeypatch):
    """Keep the developer's environment from leaking into resolver tests."""
    for name in RESOLVER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class Identity:
    """A self-signed certificate and its private key."""

    def __init__(self, common_name: str):
        self.private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
        now = datetime.datetime.now(datetime.timezone.utc)
        self.certificate = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(self.private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - datetime.timedelta(days=1))
            .not_valid_after(now + datetime.timedelta(days=30))
            .sign(self.private_key, hashes.SHA256())
        )

    def write_pfx(self, path: Path, password: str | None = None) -> Path:
        encryption = (
            serialization.BestAvailableEncryption(password.encode("utf-8"))
            if password
            else serialization.NoEncryption()
        )
        path.write_bytes(
            pkcs12.serialize_key_and_certificates(
                b"tieredsettings-test", self.private_key, self.certificate, None, encryption
            )
        )
        return path

    def write_pem(self, path: Path) -> Path:
        path.write_bytes(self.certificate.public_bytes(serialization.Encoding.PEM))
        return path

    def encrypt(self, plaintext: str) -> str:
        return encrypt_value(plaintext, self.certificate)


@pytest.fixture(scope="session")
def identity() -> Identity:
    return Identity("tieredsettings-test")


@pytest.fixture(scope="session")
def other_identity() -> Identity:
    return Identity("tieredsettings-other")


@pytest.fixture
def write_setting():
    """Write a plain settings file: write_setting(directory, key, data)."""

    def _write(directory: Path, key: str, data) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{key}.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path

    return _write
