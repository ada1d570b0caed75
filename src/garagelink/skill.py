"""Voice skill request handling.

Maps voice-platform requests onto the opener: press the button, read the
door status, or answer with help/goodbye text. Every path returns a
well-formed response envelope; failures become an apologetic sentence.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from garagelink.client import ParticleClient
from garagelink.config import GarageConfig
from garagelink.exceptions import GarageError, StateStoreError
from garagelink.models.alexa import IntentName, RequestType, SkillRequest, SkillResponse, build_response
from garagelink.models.door import DoorState
from garagelink.models.particle import ButtonPressResult
from garagelink.phrasing import status_sentence
from garagelink.state.reconcile import duration_minutes, reconcile
from garagelink.state.store import StateStore

_logger = logging.getLogger(__name__)

LAUNCH_SPEECH = "Garage door controller ready. Say 'press button' to activate the garage door."
HELP_SPEECH = (
    "You can say 'press button' to activate the garage door, "
    "or 'get status' to check if the door is open or closed."
)
GOODBYE_SPEECH = "Goodbye"
UNKNOWN_REQUEST_SPEECH = "I don't understand that request."
UNKNOWN_INTENT_SPEECH = "I don't understand that command."
PRESSED_SPEECH = "Garage door button pressed. The relay has been activated for one second."
ALREADY_ACTIVE_SPEECH = "The garage door button is already active. Please wait and try again."
PRESS_FAILED_SPEECH = "Sorry, I couldn't communicate with the garage door opener. Please try again."
STATUS_FAILED_SPEECH = "Sorry, I couldn't get the garage door status. Please try again."


async def handle_skill_request(
    event: SkillRequest | Mapping[str, Any],
    *,
    config: GarageConfig,
    client: ParticleClient,
    store: StateStore | None = None,
    clock: Callable[[], float] = time.time,
) -> SkillResponse:
    """Answer one voice-platform request.

    *store* may be ``None`` when no door-state table is configured; the
    spoken result never depends on persistence succeeding.
    """
    if isinstance(event, SkillRequest):
        request = event
    else:
        try:
            request = SkillRequest.model_validate(dict(event))
        except (TypeError, ValueError, ValidationError):
            _logger.warning("Unparseable skill request", exc_info=True)
            return build_response(UNKNOWN_REQUEST_SPEECH, True)

    _logger.info("Request type: %s", request.request_type)

    try:
        if request.request_type == RequestType.LAUNCH:
            return build_response(LAUNCH_SPEECH, False)
        if request.request_type == RequestType.INTENT:
            return await _handle_intent(request, config, client, store, clock)
        if request.request_type == RequestType.SESSION_ENDED:
            return build_response(GOODBYE_SPEECH, True)
        return build_response(UNKNOWN_REQUEST_SPEECH, True)
    except Exception:
        _logger.exception("Unhandled error answering %s", request.request_type)
        return build_response(PRESS_FAILED_SPEECH, True)


async def _handle_intent(
    request: SkillRequest,
    config: GarageConfig,
    client: ParticleClient,
    store: StateStore | None,
    clock: Callable[[], float],
) -> SkillResponse:
    intent_name = request.intent_name
    _logger.info("Intent: %s", intent_name)

    if intent_name == IntentName.PRESS_BUTTON:
        return await _handle_press_button(config, client, store, clock)
    if intent_name == IntentName.GET_STATUS:
        return await _handle_get_status(config, client, store, clock)
    if intent_name == IntentName.HELP:
        return build_response(HELP_SPEECH, False)
    if intent_name in (IntentName.CANCEL, IntentName.STOP):
        return build_response(GOODBYE_SPEECH, True)
    return build_response(UNKNOWN_INTENT_SPEECH, True)


async def _handle_press_button(
    config: GarageConfig,
    client: ParticleClient,
    store: StateStore | None,
    clock: Callable[[], float],
) -> SkillResponse:
    _logger.info("Pressing garage door button")
    try:
        result = await client.press_button()
    except GarageError as exc:
        _logger.warning("Button press failed: %s", exc)
        return build_response(PRESS_FAILED_SPEECH, True)

    if result is ButtonPressResult.ALREADY_ACTIVE:
        return build_response(ALREADY_ACTIVE_SPEECH, True)

    if store is not None:
        record_button_press(store, config.device_id, int(clock()))
    return build_response(PRESSED_SPEECH, True)


async def _handle_get_status(
    config: GarageConfig,
    client: ParticleClient,
    store: StateStore | None,
    clock: Callable[[], float],
) -> SkillResponse:
    _logger.info("Getting garage door status")
    try:
        status = await client.get_door_status()
    except GarageError as exc:
        _logger.warning("Status read failed: %s", exc)
        return build_response(STATUS_FAILED_SPEECH, True)

    now = int(clock())
    open_minutes = 0
    if store is not None:
        state = record_status(store, config, status, now)
        open_minutes = duration_minutes(state, now)
    return build_response(status_sentence(status, open_minutes), True)


def _load_or_default(store: StateStore, device_id: str) -> DoorState | None:
    try:
        return store.get(device_id)
    except StateStoreError as exc:
        _logger.warning("Error getting existing state: %s", exc)
        return None


def record_button_press(store: StateStore, device_id: str, now: int) -> DoorState:
    """Stamp the button press on the stored record, best effort."""
    state = _load_or_default(store, device_id) or DoorState.default(device_id)
    state = state.model_copy(
        update={"device_id": device_id, "last_button_press": now, "last_checked": now}
    )
    try:
        store.put(state)
    except StateStoreError as exc:
        _logger.warning("Error recording button press: %s", exc)
    else:
        _logger.info("Button press recorded")
    return state


def record_status(store: StateStore, config: GarageConfig, status: str, now: int) -> DoorState:
    """Reconcile a status read into the stored record, best effort.

    Threshold alerts are left to the door monitor.
    """
    previous = _load_or_default(store, config.device_id)
    state, _ = reconcile(previous, status, now, config.threshold_minutes, device_id=config.device_id)
    try:
        store.put(state)
    except StateStoreError as exc:
        _logger.warning("Error updating door status: %s", exc)
    else:
        _logger.info("Door status updated: %s", status)
    return state
