from __future__ import annotations

import logging

import pytest

from garagelink.config import GarageConfig, parse_threshold

_ENV_KEYS = (
    "PARTICLE_ACCESS_TOKEN",
    "PARTICLE_DEVICE_ID",
    "PARTICLE_API_BASE",
    "PARTICLE_REQUEST_TIMEOUT",
    "DOOR_STATE_TABLE",
    "DOOR_STATE_DB",
    "NOTIFICATION_TOPIC",
    "NOTIFICATION_TOPIC_ARN",
    "THRESHOLD_MINUTES",
    "NOTIFY_MQTT_HOST",
    "NOTIFY_MQTT_PORT",
    "NOTIFY_MQTT_TLS",
    "NOTIFY_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_when_environment_empty() -> None:
    config = GarageConfig.from_env()
    assert config.threshold_minutes == 120
    assert config.api_base_url == "https://api.particle.io/v1"
    assert config.request_timeout == 10.0
    assert config.persistence_enabled is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARTICLE_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("PARTICLE_DEVICE_ID", "dev-1")
    monkeypatch.setenv("DOOR_STATE_TABLE", "garage_door_state")
    monkeypatch.setenv("NOTIFICATION_TOPIC_ARN", "garage/alerts")
    monkeypatch.setenv("THRESHOLD_MINUTES", "45")
    monkeypatch.setenv("NOTIFY_MQTT_PORT", "8883")
    monkeypatch.setenv("NOTIFY_MQTT_TLS", "yes")

    config = GarageConfig.from_env()
    assert config.access_token == "tok"
    assert config.device_id == "dev-1"
    assert config.state_table == "garage_door_state"
    assert config.notification_topic == "garage/alerts"
    assert config.threshold_minutes == 45
    assert config.mqtt_port == 8883
    assert config.mqtt_tls is True
    assert config.missing_settings() == []


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("THRESHOLD_MINUTES", "45")
    monkeypatch.setenv("PARTICLE_DEVICE_ID", "dev-1")
    config = GarageConfig.from_env(threshold_minutes=5, device_id="dev-2")
    assert config.threshold_minutes == 5
    assert config.device_id == "dev-2"


@pytest.mark.parametrize("raw", [None, "", "  ", "two hours", "1.5"])
def test_threshold_falls_back_to_default(raw: str | None) -> None:
    assert parse_threshold(raw) == 120


def test_threshold_parses_integer() -> None:
    assert parse_threshold(" 30 ") == 30


@pytest.mark.parametrize(
    ("env_key", "field_name", "default"),
    [
        ("PARTICLE_REQUEST_TIMEOUT", "request_timeout", 10.0),
        ("NOTIFY_TIMEOUT", "notify_timeout", 10.0),
        ("NOTIFY_MQTT_PORT", "mqtt_port", 1883),
    ],
)
def test_invalid_numeric_setting_falls_back_to_default(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    env_key: str,
    field_name: str,
    default: float,
) -> None:
    monkeypatch.setenv(env_key, "eighty")
    with caplog.at_level(logging.WARNING, logger="garagelink.config"):
        config = GarageConfig.from_env()
    assert getattr(config, field_name) == default
    assert f"Unparseable {env_key}='eighty'" in caplog.text


def test_numeric_settings_parse(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARTICLE_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("NOTIFY_MQTT_PORT", "8883")
    config = GarageConfig.from_env()
    assert config.request_timeout == 2.5
    assert config.mqtt_port == 8883


def test_warn_missing_logs_each_setting(caplog: pytest.LogCaptureFixture) -> None:
    config = GarageConfig(device_id="dev-1")
    with caplog.at_level(logging.WARNING, logger="garagelink.config"):
        missing = config.warn_missing(notifications=True)
    assert missing == ["PARTICLE_ACCESS_TOKEN", "DOOR_STATE_TABLE", "NOTIFICATION_TOPIC"]
    assert "PARTICLE_ACCESS_TOKEN not set" in caplog.text
    assert "NOTIFICATION_TOPIC not set" in caplog.text
