"""
Tests for the default deserializers.
"""

import abc
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from tieredsettings.core.errors import SettingDeserializationError
from tieredsettings.core.serialization import (
    SerializationKind,
    SerializerRepresentation,
    default_deserializer_factory,
    deserialize_default,
)


class DatabaseSettings(BaseModel):
    host: str
    port: int = 5432


@dataclass
class RetrySettings:
    attempts: int
    backoff: float


class BaseSettings(abc.ABC):
    @abc.abstractmethod
    def describe(self) -> str: ...


class TestJsonDeserializer:
    """Test JSON deserialization."""

    def test_pydantic_model(self):
        settings = deserialize_default(DatabaseSettings, '{"host": "db"}')
        assert settings == DatabaseSettings(host="db", port=5432)

    def test_dataclass(self):
        settings = deserialize_default(RetrySettings, '{"attempts": 3, "backoff": 0.5}')
        assert settings == RetrySettings(attempts=3, backoff=0.5)

    def test_generic_container(self):
        assert deserialize_default(dict[str, list[int]], '{"a": [1, 2]}') == {"a": [1, 2]}

    def test_lax_coercion_by_default(self):
        assert deserialize_default(DatabaseSettings, '{"host": "db", "port": "1"}').port == 1

    def test_strict_mode(self):
        deserialize = default_deserializer_factory(SerializerRepresentation(strict=True))
        with pytest.raises(SettingDeserializationError):
            deserialize(DatabaseSettings, '{"host": "db", "port": "1"}')

    def test_invalid_payload(self):
        with pytest.raises(SettingDeserializationError, match="Invalid settings for") as exc_info:
            deserialize_default(DatabaseSettings, '{"port": 1}')
        assert exc_info.value.target_type is DatabaseSettings
        assert exc_info.value.__cause__ is not None

    def test_abstract_type_cannot_be_instantiated(self):
        with pytest.raises(SettingDeserializationError) as exc_info:
            deserialize_default(BaseSettings, "{}")
        assert str(exc_info.value).startswith(
            f"Could not create an instance of type {__name__}.BaseSettings. "
            "Type is an interface or abstract class and cannot be instantiated."
        )


class TestYamlDeserializer:
    """Test YAML deserialization."""

    def test_yaml_model(self):
        deserialize = default_deserializer_factory(
            SerializerRepresentation(kind=SerializationKind.YAML)
        )
        assert deserialize(DatabaseSettings, "host: db\nport: 6543\n") == DatabaseSettings(
            host="db", port=6543
        )

    def test_invalid_yaml(self):
        deserialize = default_deserializer_factory(
            SerializerRepresentation(kind=SerializationKind.YAML)
        )
        with pytest.raises(SettingDeserializationError):
            deserialize(DatabaseSettings, "host: [unclosed")


def test_representation_from_string_kind():
    representation = SerializerRepresentation.model_validate({"kind": "yaml"})
    assert representation.kind is SerializationKind.YAML
