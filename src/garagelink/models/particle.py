"""Particle cloud API response models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import field_validator

from garagelink.models._base import ParticleBaseModel


class FunctionCallResponse(ParticleBaseModel):
    """Response of ``POST /devices/{id}/{function}``.

    ``return_value`` is whatever the firmware function returned.
    """

    id: str = ""
    name: str = ""
    last_app: str = ""
    connected: bool = False
    return_value: int
    execution_time: int | None = None


class VariableResponse(ParticleBaseModel):
    """Response of ``GET /devices/{id}/{variable}``."""

    name: str = ""
    result: str

    @field_validator("result", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Numeric and boolean cloud variables come back as JSON scalars.
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class ButtonPressResult(StrEnum):
    """Outcome of a button press the firmware accepted."""

    PRESSED = "pressed"
    ALREADY_ACTIVE = "already_active"
