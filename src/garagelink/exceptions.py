"""Custom exception hierarchy for garagelink."""

from __future__ import annotations


class GarageError(Exception):
    """Base exception for all garagelink errors."""


class GarageConfigError(GarageError):
    """Invalid or missing configuration."""


class ParticleError(GarageError):
    """Base for failures talking to the Particle device cloud."""


class ParticleTransportError(ParticleError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ParticleApiError(ParticleError):
    """The cloud answered, but with an error or an unusable result."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class StateStoreError(GarageError):
    """Door state could not be read from or written to the store."""


class NotificationError(GarageError):
    """A notification could not be dispatched."""
