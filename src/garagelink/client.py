"""Async client for the Particle device cloud."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from garagelink._constants import (
    DOOR_STATUS_VARIABLE,
    PRESS_BUTTON_FUNCTION,
    RETURN_ALREADY_ACTIVE,
    RETURN_PRESSED,
)
from garagelink._transport import ParticleTransport, Transport
from garagelink.config import GarageConfig
from garagelink.exceptions import GarageConfigError, ParticleApiError, ParticleTransportError
from garagelink.models.particle import ButtonPressResult, FunctionCallResponse, VariableResponse

_logger = logging.getLogger(__name__)


class ParticleClient:
    """Calls functions and reads variables on one Particle device.

    Usage::

        async with ParticleClient(config) as client:
            status = await client.get_door_status()
    """

    def __init__(
        self,
        config: GarageConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ParticleClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = ParticleTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise ParticleTransportError("Client not initialized; use 'async with ParticleClient(...)'")
        return self._transport

    def _endpoint(self, name: str) -> str:
        if not self._config.device_id:
            raise GarageConfigError("PARTICLE_DEVICE_ID not configured")
        return f"/devices/{self._config.device_id}/{name}"

    # ------------------------------------------------------------------
    # Raw cloud calls
    # ------------------------------------------------------------------

    async def call_function(self, name: str, arg: str = "") -> FunctionCallResponse:
        """Invoke a cloud function on the device."""
        transport = self._require_transport()
        endpoint = self._endpoint(name)
        data = await transport.post_json(endpoint, {"arg": arg})
        try:
            response = FunctionCallResponse.model_validate(data)
        except ValidationError as exc:
            raise ParticleApiError(
                f"Malformed function response from {endpoint}: {exc.error_count()} error(s)",
                endpoint=endpoint,
            ) from exc
        _logger.debug(
            "Particle function %s: return_value=%d connected=%s",
            name,
            response.return_value,
            response.connected,
        )
        return response

    async def get_variable(self, name: str) -> str:
        """Read a cloud variable from the device."""
        transport = self._require_transport()
        endpoint = self._endpoint(name)
        data = await transport.get_json(endpoint)
        try:
            response = VariableResponse.model_validate(data)
        except ValidationError as exc:
            raise ParticleApiError(
                f"Malformed variable response from {endpoint}: {exc.error_count()} error(s)",
                endpoint=endpoint,
            ) from exc
        return response.result

    # ------------------------------------------------------------------
    # Garage door operations
    # ------------------------------------------------------------------

    async def press_button(self) -> ButtonPressResult:
        """Pulse the opener relay.

        Raises
        ------
        ParticleApiError
            If the firmware returns anything other than pressed (``1``)
            or already active (``0``).
        """
        response = await self.call_function(PRESS_BUTTON_FUNCTION)
        if response.return_value == RETURN_PRESSED:
            return ButtonPressResult.PRESSED
        if response.return_value == RETURN_ALREADY_ACTIVE:
            return ButtonPressResult.ALREADY_ACTIVE
        raise ParticleApiError(
            f"Unexpected {PRESS_BUTTON_FUNCTION} return value {response.return_value}",
            code=str(response.return_value),
            endpoint=self._endpoint(PRESS_BUTTON_FUNCTION),
        )

    async def get_door_status(self) -> str:
        """Current door sensor reading, passed through unchanged."""
        return await self.get_variable(DOOR_STATUS_VARIABLE)
