"""Tests for the scheduled door monitor cycle."""

from __future__ import annotations

import pytest

from conftest import DEVICE_ID, T0, FakeParticleCloud, FlakyStore, RecordingNotifier
from garagelink.client import ParticleClient
from garagelink.config import GarageConfig
from garagelink.exceptions import ParticleApiError, ParticleTransportError, StateStoreError
from garagelink.models.door import DoorState
from garagelink.monitor import MonitorReport, run_monitor_cycle
from garagelink.notify import MqttNotifier, Notifier


async def _poll(
    config: GarageConfig,
    client: ParticleClient,
    store: FlakyStore,
    notifier: Notifier | None,
    now: int,
) -> MonitorReport:
    return await run_monitor_cycle(
        config=config,
        client=client,
        store=store,
        notifier=notifier,
        clock=lambda: now,
    )


@pytest.mark.asyncio
async def test_first_poll_creates_record(config, client, cloud: FakeParticleCloud, store, notifier) -> None:
    cloud.door_status = "open"
    report = await _poll(config, client, store, notifier, T0)

    assert report.previous_status is None
    assert report.status == "open"
    assert report.duration_minutes == 0
    assert report.notified is False
    assert store.get(DEVICE_ID) == DoorState(
        device_id=DEVICE_ID,
        status="open",
        last_checked=T0,
        last_opened_time=T0,
    )
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_notifies_once_past_threshold(config, client, cloud: FakeParticleCloud, store, notifier) -> None:
    cloud.door_status = "open"
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0))

    report = await _poll(config, client, store, notifier, T0 + 7260)
    assert report.notification_due is True
    assert report.notified is True
    assert report.duration_minutes == 121
    assert notifier.sent[0][0] == "Garage Door Open Alert - 121 mins"
    assert "2 hours and 1 minutes" in notifier.sent[0][1]

    state = store.get(DEVICE_ID)
    assert state is not None
    assert state.notification_sent is True
    assert state.duration_open_mins == 121

    report = await _poll(config, client, store, notifier, T0 + 7560)
    assert report.notified is False
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_below_threshold_does_not_notify(config, client, cloud: FakeParticleCloud, store, notifier) -> None:
    cloud.door_status = "open"
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0))

    report = await _poll(config, client, store, notifier, T0 + 119 * 60)
    assert report.duration_minutes == 119
    assert report.notification_due is False
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_failed_dispatch_is_retried_next_cycle(config, client, cloud: FakeParticleCloud, store) -> None:
    cloud.door_status = "open"
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0))
    notifier = RecordingNotifier(fail=True)

    report = await _poll(config, client, store, notifier, T0 + 7260)
    assert report.notification_due is True
    assert report.notified is False
    state = store.get(DEVICE_ID)
    assert state is not None and state.notification_sent is False

    notifier.fail = False
    report = await _poll(config, client, store, notifier, T0 + 7560)
    assert report.notified is True
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_broken_notifier_setup_still_persists(config, client, cloud: FakeParticleCloud, store) -> None:
    class _TlsFailingClient:
        def tls_set(self) -> None:
            raise OSError("ssl context unavailable")

    notifier = MqttNotifier(
        host="broker.local",
        topic="garage/alerts",
        tls=True,
        client_factory=lambda _client_id: _TlsFailingClient(),
    )
    cloud.door_status = "open"
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0))

    report = await _poll(config, client, store, notifier, T0 + 7260)
    assert report.notification_due is True
    assert report.notified is False
    state = store.get(DEVICE_ID)
    assert state is not None
    assert state.last_checked == T0 + 7260
    assert state.notification_sent is False


@pytest.mark.asyncio
async def test_closing_resets_notification(config, client, cloud: FakeParticleCloud, store, notifier) -> None:
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0, notification_sent=True))
    cloud.door_status = "closed"

    report = await _poll(config, client, store, notifier, T0 + 9000)
    assert report.previous_status == "open"
    state = store.get(DEVICE_ID)
    assert state is not None
    assert state.last_closed_time == T0 + 9000
    assert state.notification_sent is False
    assert state.duration_open_mins == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ParticleTransportError("HTTP 502", status_code=502), ParticleApiError("device offline", code="timed out")],
)
async def test_status_read_failure_skips_write(config, client, cloud: FakeParticleCloud, store, notifier, error) -> None:
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0))
    puts_before = store.puts
    cloud.fail_with = error

    with pytest.raises(type(error)):
        await _poll(config, client, store, notifier, T0 + 9000)
    assert store.puts == puts_before
    state = store.get(DEVICE_ID)
    assert state is not None and state.last_checked == 0


@pytest.mark.asyncio
async def test_store_read_failure_falls_back_to_default(config, client, cloud: FakeParticleCloud, notifier) -> None:
    store = FlakyStore(fail_get=True)
    cloud.door_status = "closed"

    report = await _poll(config, client, store, notifier, T0)
    assert report.previous_status is None
    assert store.puts == 1
    store.fail_get = False
    state = store.get(DEVICE_ID)
    assert state is not None
    assert state.status == "closed"
    assert state.last_closed_time == T0


@pytest.mark.asyncio
async def test_store_write_failure_fails_cycle(config, client, cloud: FakeParticleCloud, notifier) -> None:
    store = FlakyStore(fail_put=True)
    with pytest.raises(StateStoreError):
        await _poll(config, client, store, notifier, T0)


@pytest.mark.asyncio
async def test_without_notifier_leaves_flag_unset(config, client, cloud: FakeParticleCloud, store) -> None:
    cloud.door_status = "open"
    store.put(DoorState(device_id=DEVICE_ID, status="open", last_opened_time=T0))

    report = await _poll(config, client, store, None, T0 + 7260)
    assert report.notification_due is True
    assert report.notified is False
    state = store.get(DEVICE_ID)
    assert state is not None and state.notification_sent is False


@pytest.mark.asyncio
async def test_button_press_timestamp_survives_poll(config, client, cloud: FakeParticleCloud, store, notifier) -> None:
    store.put(DoorState(device_id=DEVICE_ID, status="closed", last_button_press=T0 - 30))
    await _poll(config, client, store, notifier, T0)
    state = store.get(DEVICE_ID)
    assert state is not None and state.last_button_press == T0 - 30
