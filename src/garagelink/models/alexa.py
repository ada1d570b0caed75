"""Voice platform request and response envelopes.

Only the parts of the Alexa skill envelope the handlers read are
modelled; everything else is ignored on input.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from garagelink.models._base import CamelModel


class RequestType(StrEnum):
    LAUNCH = "LaunchRequest"
    INTENT = "IntentRequest"
    SESSION_ENDED = "SessionEndedRequest"


class IntentName(StrEnum):
    PRESS_BUTTON = "PressButtonIntent"
    GET_STATUS = "GetStatusIntent"
    HELP = "AMAZON.HelpIntent"
    CANCEL = "AMAZON.CancelIntent"
    STOP = "AMAZON.StopIntent"


class Intent(CamelModel):
    name: str = ""
    slots: dict[str, Any] = Field(default_factory=dict)


class SkillRequestBody(CamelModel):
    type: str = ""
    request_id: str = ""
    timestamp: str = ""
    locale: str = ""
    intent: Intent = Field(default_factory=Intent)


class SkillSession(CamelModel):
    new: bool = False
    session_id: str = ""
    application: dict[str, Any] = Field(default_factory=dict)
    user: dict[str, Any] = Field(default_factory=dict)


class SkillRequest(CamelModel):
    """Incoming skill invocation."""

    version: str = ""
    session: SkillSession = Field(default_factory=SkillSession)
    request: SkillRequestBody = Field(default_factory=SkillRequestBody)
    context: Any = None

    @property
    def request_type(self) -> str:
        return self.request.type

    @property
    def intent_name(self) -> str:
        return self.request.intent.name


class OutputSpeech(CamelModel):
    type: str = "PlainText"
    text: str


class ResponseBody(CamelModel):
    output_speech: OutputSpeech
    should_end_session: bool


class SkillResponse(CamelModel):
    """Outgoing skill response envelope."""

    version: str = "1.0"
    response: ResponseBody

    @property
    def text(self) -> str:
        return self.response.output_speech.text

    @property
    def should_end_session(self) -> bool:
        return self.response.should_end_session


def build_response(text: str, should_end_session: bool) -> SkillResponse:
    """Plain-text speech response."""
    return SkillResponse(
        response=ResponseBody(
            output_speech=OutputSpeech(text=text),
            should_end_session=should_end_session,
        )
    )
