"""
Deserialization of raw settings text.

Deserialization is an injectable seam: a ``DeserializeSettings`` callable
takes the target type and the raw text and returns an instance. The default
factory builds pydantic-backed deserializers for JSON and YAML text, so any
type pydantic can validate (models, dataclasses, TypedDicts, builtin
containers) can be used as a settings type.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

import yaml
from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from ..models import SettingsBaseModel
from .errors import SettingDeserializationError, qualified_type_name
from .keys import is_abstract_type

logger = logging.getLogger(__name__)

DeserializeSettings = Callable[[Any, str], Any]


class SerializationKind(Enum):
    """Text formats understood by the default deserializer factory."""

    JSON = "json"
    YAML = "yaml"


class SerializerRepresentation(SettingsBaseModel):
    """Describes how raw settings text becomes an instance.

    Attributes:
        kind: Text format of the raw setting
        strict: Disable pydantic's lax type coercion
    """

    kind: SerializationKind = SerializationKind.JSON
    strict: bool = False


DeserializerFactory = Callable[[SerializerRepresentation], DeserializeSettings]

DEFAULT_REPRESENTATION = SerializerRepresentation()


def _check_instantiable(target_type: Any) -> None:
    if is_abstract_type(target_type):
        raise SettingDeserializationError(
            target_type,
            f"Could not create an instance of type {qualified_type_name(target_type)}. "
            "Type is an interface or abstract class and cannot be instantiated.",
        )


def _adapter(target_type: Any) -> TypeAdapter[Any]:
    try:
        return TypeAdapter(target_type)
    except PydanticSchemaGenerationError as e:
        raise SettingDeserializationError(
            target_type, f"Cannot deserialize settings of type {qualified_type_name(target_type)}: {e}"
        ) from e


def default_deserializer_factory(representation: SerializerRepresentation) -> DeserializeSettings:
    """Build a pydantic-backed deserializer for a representation."""
    strict = representation.strict

    if representation.kind is SerializationKind.YAML:

        def deserialize_yaml(target_type: Any, serialized: str) -> Any:
            _check_instantiable(target_type)
            adapter = _adapter(target_type)
            try:
                data = yaml.safe_load(serialized)
                return adapter.validate_python(data, strict=strict)
            except (yaml.YAMLError, ValidationError) as e:
                raise SettingDeserializationError(
                    target_type, f"Invalid settings for {qualified_type_name(target_type)}: {e}"
                ) from e

        return deserialize_yaml

    def deserialize_json(target_type: Any, serialized: str) -> Any:
        _check_instantiable(target_type)
        adapter = _adapter(target_type)
        try:
            return adapter.validate_json(serialized, strict=strict)
        except ValidationError as e:
            raise SettingDeserializationError(
                target_type, f"Invalid settings for {qualified_type_name(target_type)}: {e}"
            ) from e

    return deserialize_json


def deserialize_default(target_type: Any, serialized: str) -> Any:
    """Deserialize JSON settings text with the default representation."""
    return default_deserializer_factory(DEFAULT_REPRESENTATION)(target_type, serialized)
