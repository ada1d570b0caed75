"""Door state reconciliation.

Pure functions over :class:`DoorState`. No I/O happens here; the
handlers load the previous record, call :func:`reconcile` and persist
what it returns.
"""

from __future__ import annotations

import logging

from garagelink.models.door import DoorState, DoorStatus

_logger = logging.getLogger(__name__)


def duration_minutes(state: DoorState, now: int) -> int:
    """Whole minutes the door has been open as of *now*.

    ``0`` unless the door is open with a known open time.
    """
    if state.status == DoorStatus.OPEN and state.last_opened_time > 0:
        return (now - state.last_opened_time) // 60
    return 0


def reconcile(
    previous: DoorState | None,
    observed_status: str,
    now: int,
    threshold_minutes: int,
    *,
    device_id: str = "",
) -> tuple[DoorState, bool]:
    """Fold a fresh status observation into the previous door state.

    Policy:
    - No previous record: start from an ``unknown`` record with zeroed timestamps.
    - Transition into ``open`` stamps ``last_opened_time`` and clears ``notification_sent``.
    - Transition into ``closed`` stamps ``last_closed_time`` and clears ``notification_sent``.
    - Any other transition (``moving``, ``unknown``, unrecognised strings) only
      updates the status.
    - Repeated observations of the same status change nothing but ``last_checked``.

    Returns the next record and whether a threshold notification is due.
    The caller dispatches it and, only on success, persists
    :func:`mark_notified` of the record.
    """
    if previous is None:
        previous = DoorState.default(device_id)

    observed_status = str(observed_status)

    update: dict[str, object] = {"status": observed_status, "last_checked": now}
    if device_id and not previous.device_id:
        update["device_id"] = device_id

    if observed_status != previous.status:
        _logger.info("Door status changed: %s -> %s", previous.status, observed_status)
        if observed_status == DoorStatus.OPEN:
            update["last_opened_time"] = now
            update["notification_sent"] = False
        elif observed_status == DoorStatus.CLOSED:
            update["last_closed_time"] = now
            update["notification_sent"] = False

    current = previous.model_copy(update=update)
    minutes = duration_minutes(current, now)
    current = current.model_copy(update={"duration_open_mins": minutes})

    should_notify = current.is_open and minutes >= threshold_minutes and not current.notification_sent
    return current, should_notify


def mark_notified(state: DoorState) -> DoorState:
    """Record that the open-door notification went out for this session."""
    return state.model_copy(update={"notification_sent": True})
