from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from garagelink.client import ParticleClient
from garagelink.config import GarageConfig
from garagelink.exceptions import NotificationError, StateStoreError
from garagelink.models.door import DoorState
from garagelink.state.store import InMemoryStateStore

DEVICE_ID = "e00fce68garage"
T0 = 1_771_000_000


@dataclass
class FakeParticleCloud:
    """In-process stand-in for the Particle cloud transport."""

    device_id: str = DEVICE_ID
    door_status: Any = "closed"
    return_value: int = 1
    fail_with: Exception | None = None
    calls: list[tuple[str, str, dict[str, Any] | None]] = field(default_factory=list)

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        self.calls.append(("GET", endpoint, None))
        if self.fail_with is not None:
            raise self.fail_with
        if endpoint == f"/devices/{self.device_id}/doorStatus":
            return {
                "cmd": "VarReturn",
                "name": "doorStatus",
                "result": self.door_status,
                "coreInfo": {"deviceID": self.device_id, "connected": True},
            }
        raise AssertionError(f"Unexpected endpoint in fake cloud: {endpoint}")

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        self.calls.append(("POST", endpoint, dict(payload)))
        if self.fail_with is not None:
            raise self.fail_with
        if endpoint == f"/devices/{self.device_id}/pressButton":
            return {
                "id": self.device_id,
                "name": "garage",
                "last_app": "",
                "connected": True,
                "return_value": self.return_value,
            }
        raise AssertionError(f"Unexpected endpoint in fake cloud: {endpoint}")


class FlakyStore(InMemoryStateStore):
    """In-memory store whose reads or writes can be made to fail."""

    def __init__(self, *, fail_get: bool = False, fail_put: bool = False) -> None:
        super().__init__()
        self.fail_get = fail_get
        self.fail_put = fail_put
        self.puts = 0

    def get(self, device_id: str) -> DoorState | None:
        if self.fail_get:
            raise StateStoreError("table unavailable")
        return super().get(device_id)

    def put(self, state: DoorState) -> None:
        self.puts += 1
        if self.fail_put:
            raise StateStoreError("table unavailable")
        super().put(state)


@dataclass
class RecordingNotifier:
    fail: bool = False
    sent: list[tuple[str, str]] = field(default_factory=list)

    def publish(self, subject: str, body: str) -> None:
        if self.fail:
            raise NotificationError("broker unreachable")
        self.sent.append((subject, body))


@pytest.fixture
def config() -> GarageConfig:
    return GarageConfig(
        access_token="token-123",
        device_id=DEVICE_ID,
        state_table="garage_door_state",
        notification_topic="garage/alerts",
        threshold_minutes=120,
    )


@pytest.fixture
def cloud() -> FakeParticleCloud:
    return FakeParticleCloud()


@pytest.fixture
def client(config: GarageConfig, cloud: FakeParticleCloud) -> ParticleClient:
    return ParticleClient(config, transport=cloud)


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
