"""Base Pydantic models for tieredsettings.

This module provides the base model class that all tieredsettings Pydantic
models inherit from. It establishes consistent configuration across models:

- Strict field validation (no extra fields allowed)
- Immutable instances so they can be shared between threads

Example:
    >>> from tieredsettings.models import SettingsBaseModel
    >>>
    >>> class Endpoint(SettingsBaseModel):
    ...     host: str
    ...     port: int = 443
    >>>
    >>> Endpoint(host="example.com").model_dump()
    {'host': 'example.com', 'port': 443}
"""

from pydantic import BaseModel, ConfigDict


class SettingsBaseModel(BaseModel):
    """Base model for tieredsettings Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable and hashable
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
