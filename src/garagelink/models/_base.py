"""Base models shared by the Particle and door-state models.

:class:`ParticleBaseModel` is the base for Particle cloud responses:

* frozen, unknown keys ignored
* ``None`` values dropped so the field default is used
* the original response dict stashed in ``raw``

:class:`CamelModel` is the base for records whose wire format is
camelCase (the door-state record and the voice-platform envelopes).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ParticleBaseModel(BaseModel):
    """Base for Particle cloud API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicitly passed raw= untouched.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class CamelModel(BaseModel):
    """Frozen model serialised with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise with wire (camelCase) keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)
