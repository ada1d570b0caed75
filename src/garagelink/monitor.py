"""Scheduled door monitor.

One cycle reads the door sensor, reconciles it with the stored record,
sends at most one alert per open session once the door has been open
past the threshold, and writes the record back.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from garagelink._redact import redact_for_log
from garagelink.client import ParticleClient
from garagelink.config import GarageConfig
from garagelink.exceptions import NotificationError, StateStoreError
from garagelink.models.door import DoorState
from garagelink.notify import Notifier
from garagelink.phrasing import build_open_door_alert
from garagelink.state.reconcile import mark_notified, reconcile
from garagelink.state.store import StateStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonitorReport:
    """Outcome of one monitor cycle."""

    state: DoorState
    previous_status: str | None
    notification_due: bool
    notified: bool

    @property
    def status(self) -> str:
        return self.state.status

    @property
    def duration_minutes(self) -> int:
        return self.state.duration_open_mins


async def run_monitor_cycle(
    *,
    config: GarageConfig,
    client: ParticleClient,
    store: StateStore,
    notifier: Notifier | None,
    clock: Callable[[], float] = time.time,
) -> MonitorReport:
    """Run one poll of the door sensor.

    Raises
    ------
    ParticleError
        The status read failed. Nothing is written.
    StateStoreError
        The new record could not be written.
    """
    _logger.info("Door monitor triggered")

    status = await client.get_door_status()
    _logger.info("Current door status: %s", status)

    try:
        previous = store.get(config.device_id)
    except StateStoreError as exc:
        # Continue from an empty record.
        _logger.warning("Error getting previous state: %s", exc)
        previous = None

    now = int(clock())
    state, should_notify = reconcile(
        previous,
        status,
        now,
        config.threshold_minutes,
        device_id=config.device_id,
    )
    if state.is_open:
        _logger.info("Door has been open for %d minutes", state.duration_open_mins)

    notified = False
    if should_notify:
        if notifier is None:
            _logger.warning("Door open past threshold but no notifier configured")
        else:
            subject, body = build_open_door_alert(state.duration_open_mins, now)
            try:
                notifier.publish(subject, body)
            except NotificationError as exc:
                _logger.error("Error sending notification: %s", exc)
            else:
                state = mark_notified(state)
                notified = True
                _logger.info("Notification sent")

    _logger.debug("Writing door state: %s", redact_for_log(state))
    store.put(state)
    _logger.info("Monitor completed")

    return MonitorReport(
        state=state,
        previous_status=previous.status if previous is not None else None,
        notification_due=should_notify,
        notified=notified,
    )
