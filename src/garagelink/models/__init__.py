"""Data models for garagelink."""

from garagelink.models._base import CamelModel, ParticleBaseModel
from garagelink.models.alexa import (
    Intent,
    IntentName,
    OutputSpeech,
    RequestType,
    ResponseBody,
    SkillRequest,
    SkillRequestBody,
    SkillResponse,
    SkillSession,
    build_response,
)
from garagelink.models.door import DoorState, DoorStatus
from garagelink.models.particle import ButtonPressResult, FunctionCallResponse, VariableResponse

__all__ = [
    "ButtonPressResult",
    "CamelModel",
    "DoorState",
    "DoorStatus",
    "FunctionCallResponse",
    "Intent",
    "IntentName",
    "OutputSpeech",
    "ParticleBaseModel",
    "RequestType",
    "ResponseBody",
    "SkillRequest",
    "SkillRequestBody",
    "SkillResponse",
    "SkillSession",
    "VariableResponse",
    "build_response",
]
