"""HTTP transport for the Particle device cloud."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from garagelink._constants import USER_AGENT
from garagelink._redact import redact_for_log
from garagelink.config import GarageConfig
from garagelink.exceptions import ParticleApiError, ParticleTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`ParticleClient`.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`ParticleTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        ...


class ParticleTransport:
    """Bearer-authenticated JSON transport with a bounded per-call timeout.

    A timeout is reported as a :class:`ParticleTransportError` like any
    other network failure; nothing is retried.
    """

    def __init__(self, config: GarageConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "authorization": f"Bearer {self._config.access_token}",
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

    def _url(self, endpoint: str) -> str:
        return f"{self._config.api_base_url.rstrip('/')}{endpoint}"

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        return await self._request("GET", endpoint, None)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", endpoint, payload)

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        url = self._url(endpoint)
        headers = self._headers()
        body: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json"
            body = json.dumps(dict(payload), separators=(",", ":"))

        _logger.debug("%s %s body=%s", method, url, redact_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise ParticleTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except ParticleTransportError:
            raise
        except UnicodeDecodeError as exc:
            raise ParticleTransportError(
                f"Undecodable response body from {endpoint}: {exc.reason}",
                endpoint=endpoint,
            ) from exc
        except asyncio.TimeoutError as exc:
            raise ParticleTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise ParticleTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        return parse_body(text, endpoint)


def parse_body(text: str, endpoint: str) -> dict[str, Any]:
    """Decode a Particle response body and surface cloud-side errors."""
    try:
        result = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParticleTransportError(
            f"Invalid JSON from {endpoint}: {text[:200]}",
            endpoint=endpoint,
        ) from exc

    if not isinstance(result, dict):
        raise ParticleTransportError(
            f"Unexpected payload from {endpoint}: expected an object",
            endpoint=endpoint,
        )

    error = result.get("error")
    if error:
        description = result.get("error_description") or result.get("info") or error
        raise ParticleApiError(
            f"Particle error from {endpoint}: {description}",
            code=str(error),
            endpoint=endpoint,
        )

    _logger.debug("Response from %s: %s", endpoint, redact_for_log(result))
    return result
