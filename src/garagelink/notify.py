"""Door alert notifier.

Alerts are published as one JSON message per alert to a fixed MQTT
topic. Each publish opens its own short-lived connection; handlers are
invoked on a schedule and hold no connection between runs.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol, cast

import paho.mqtt.client as mqtt

from garagelink.config import GarageConfig
from garagelink.exceptions import NotificationError

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Structural notifier interface used by the door monitor."""

    def publish(self, subject: str, body: str) -> None:
        ...


def _default_client_factory(client_id: str) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=client_id,
        protocol=mqtt.MQTTv5,
    )


class MqttNotifier:
    """Publish alerts to a broker topic with QoS 1.

    Parameters
    ----------
    host : str
        Broker host name.
    port : int
        Broker port.
    topic : str
        Topic every alert is published to.
    username, password : str or None
        Broker credentials.
    tls : bool
        Use TLS with the system trust store.
    timeout : float
        Seconds to wait for the broker to acknowledge the message.
    client_factory : callable
        Builds the paho client from a client id. Replaced in tests.
    """

    def __init__(
        self,
        *,
        host: str,
        topic: str,
        port: int = 1883,
        username: str | None = None,
        password: str | None = None,
        tls: bool = False,
        timeout: float = 10.0,
        client_factory: Callable[[str], Any] = _default_client_factory,
    ) -> None:
        self._host = host
        self._port = port
        self._topic = topic
        self._username = username
        self._password = password
        self._tls = tls
        self._timeout = timeout
        self._client_factory = client_factory

    @classmethod
    def from_config(cls, config: GarageConfig, **overrides: Any) -> MqttNotifier:
        kwargs: dict[str, Any] = {
            "host": config.mqtt_host,
            "port": config.mqtt_port,
            "topic": config.notification_topic,
            "username": config.mqtt_username,
            "password": config.mqtt_password,
            "tls": config.mqtt_tls,
            "timeout": config.notify_timeout,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    @property
    def topic(self) -> str:
        return self._topic

    def publish(self, subject: str, body: str) -> None:
        """Publish one alert and wait for the broker acknowledgement.

        Raises
        ------
        NotificationError
            If the notifier is not configured, the broker is unreachable
            or the message is not acknowledged in time.
        """
        if not self._topic:
            raise NotificationError("NOTIFICATION_TOPIC not configured")
        if not self._host:
            raise NotificationError("NOTIFY_MQTT_HOST not configured")

        message = json.dumps(
            {"subject": subject, "body": body, "sentAt": int(time.time())},
            ensure_ascii=False,
        )
        client = None
        started = False
        try:
            client = self._client_factory(f"garagelink-{int(time.time() * 1000)}")
            if self._username:
                client.username_pw_set(self._username, self._password)
            if self._tls:
                client.tls_set()
            client.connect(self._host, self._port, keepalive=60)
            client.loop_start()
            started = True
            info = client.publish(self._topic, message, qos=1)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                raise NotificationError(f"Publish to {self._topic} rejected: rc={info.rc}")
            info.wait_for_publish(timeout=self._timeout)
            if not info.is_published():
                raise NotificationError(f"Publish to {self._topic} not acknowledged within {self._timeout}s")
        except NotificationError:
            raise
        except (OSError, RuntimeError, ValueError) as exc:
            raise NotificationError(f"Publish to {self._topic} failed: {exc}") from exc
        finally:
            if started:
                client.disconnect()
                client.loop_stop()
        _logger.info("Alert published to %s: %s", self._topic, subject)
