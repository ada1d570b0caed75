"""Runtime configuration for garagelink."""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Callable
from typing import Any, TypeVar

from garagelink._constants import (
    DEFAULT_NOTIFY_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_THRESHOLD_MINUTES,
    PARTICLE_API_BASE,
)

_logger = logging.getLogger(__name__)

_N = TypeVar("_N", int, float)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_number(name: str, value: str | None, default: _N, kind: Callable[[str], _N]) -> _N:
    if value is None or not value.strip():
        return default
    try:
        return kind(value.strip())
    except ValueError:
        _logger.warning("Unparseable %s=%r, using %s", name, value, default)
        return default


def parse_threshold(value: str | None, default: int = DEFAULT_THRESHOLD_MINUTES) -> int:
    """Parse a threshold in minutes, falling back to *default* when absent or unparseable."""
    return _parse_number("THRESHOLD_MINUTES", value, default, int)


@dataclasses.dataclass(frozen=True)
class GarageConfig:
    """Handler configuration, read once per process.

    Parameters
    ----------
    access_token : str
        Particle cloud access token, sent as a bearer token.
    device_id : str
        Particle device id of the opener. Also the state record key.
    api_base_url : str
        Particle cloud API base URL.
    state_table : str
        Name of the door-state table. Empty disables persistence in the
        skill handler.
    state_db_path : str
        SQLite database file backing the door-state table.
    notification_topic : str
        Topic the door monitor publishes alerts to.
    threshold_minutes : int
        Minutes the door may stay open before one alert is sent.
    request_timeout : float
        Total timeout in seconds for one Particle cloud call.
    mqtt_host : str
        Broker host for the alert notifier.
    mqtt_port : int
        Broker port for the alert notifier.
    mqtt_username : str or None
        Broker username, if the broker requires one.
    mqtt_password : str or None
        Broker password.
    mqtt_tls : bool
        Connect to the broker over TLS.
    notify_timeout : float
        Seconds to wait for the broker to acknowledge an alert.
    log_level : str
        Root log level applied by the Lambda entry points.
    """

    access_token: str = ""
    device_id: str = ""
    api_base_url: str = PARTICLE_API_BASE
    state_table: str = ""
    state_db_path: str = "door_state.sqlite3"
    notification_topic: str = ""
    threshold_minutes: int = DEFAULT_THRESHOLD_MINUTES
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    mqtt_host: str = ""
    mqtt_port: int = 1883
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_tls: bool = False
    notify_timeout: float = DEFAULT_NOTIFY_TIMEOUT
    log_level: str = "INFO"

    @property
    def persistence_enabled(self) -> bool:
        """Whether a door-state table has been configured."""
        return bool(self.state_table)

    def missing_settings(self) -> list[str]:
        """Names of the environment variables that still need a value."""
        missing: list[str] = []
        if not self.access_token:
            missing.append("PARTICLE_ACCESS_TOKEN")
        if not self.device_id:
            missing.append("PARTICLE_DEVICE_ID")
        if not self.state_table:
            missing.append("DOOR_STATE_TABLE")
        return missing

    def warn_missing(self, *, notifications: bool = False) -> list[str]:
        """Log a warning for every unset setting and return their names.

        Handlers keep running with missing settings; the first call that
        needs one fails on its own.
        """
        missing = self.missing_settings()
        if notifications and not self.notification_topic:
            missing.append("NOTIFICATION_TOPIC")
        for name in missing:
            _logger.warning("%s not set", name)
        return missing

    @classmethod
    def from_env(cls, **overrides: Any) -> GarageConfig:
        """Create configuration from environment variables.

        Explicit keyword arguments override environment values. Numeric
        settings that cannot be parsed are logged and left at their
        defaults so the handlers keep answering.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PARTICLE_ACCESS_TOKEN": "access_token",
            "PARTICLE_DEVICE_ID": "device_id",
            "PARTICLE_API_BASE": "api_base_url",
            "DOOR_STATE_TABLE": "state_table",
            "DOOR_STATE_DB": "state_db_path",
            "NOTIFY_MQTT_HOST": "mqtt_host",
            "NOTIFY_MQTT_USERNAME": "mqtt_username",
            "NOTIFY_MQTT_PASSWORD": "mqtt_password",
            "LOG_LEVEL": "log_level",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        topic = env.get("NOTIFICATION_TOPIC") or env.get("NOTIFICATION_TOPIC_ARN")
        if topic is not None:
            config_kwargs["notification_topic"] = topic

        if "threshold_minutes" not in overrides:
            config_kwargs["threshold_minutes"] = parse_threshold(env.get("THRESHOLD_MINUTES"))

        numeric_settings: tuple[tuple[str, str, Any, Callable[[str], Any]], ...] = (
            ("PARTICLE_REQUEST_TIMEOUT", "request_timeout", DEFAULT_REQUEST_TIMEOUT, float),
            ("NOTIFY_TIMEOUT", "notify_timeout", DEFAULT_NOTIFY_TIMEOUT, float),
            ("NOTIFY_MQTT_PORT", "mqtt_port", 1883, int),
        )
        for env_key, field_name, default, kind in numeric_settings:
            if field_name not in overrides:
                config_kwargs[field_name] = _parse_number(env_key, env.get(env_key), default, kind)

        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("NOTIFY_MQTT_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
