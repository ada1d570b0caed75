"""Door state record persisted per device."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import field_validator

from garagelink.models._base import CamelModel


class DoorStatus(StrEnum):
    """Statuses the door sensor reports.

    The sensor may report other strings; those are stored as-is and
    never touch the open/closed timestamps.
    """

    OPEN = "open"
    CLOSED = "closed"
    MOVING = "moving"
    UNKNOWN = "unknown"


class DoorState(CamelModel):
    """Last known state of one garage door.

    Timestamps are unix seconds, ``0`` meaning "never". Records are
    immutable; use :meth:`model_copy` with ``update=`` to derive the
    next record.
    """

    device_id: str = ""
    status: str = DoorStatus.UNKNOWN.value
    last_checked: int = 0
    last_opened_time: int = 0
    last_closed_time: int = 0
    last_button_press: int = 0
    notification_sent: bool = False
    duration_open_mins: int = 0

    @field_validator(
        "last_checked",
        "last_opened_time",
        "last_closed_time",
        "last_button_press",
        "duration_open_mins",
        mode="before",
    )
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        # Stores omit never-set timestamps.
        return 0 if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _plain_status(cls, value: Any) -> Any:
        if value is None:
            return DoorStatus.UNKNOWN.value
        if isinstance(value, DoorStatus):
            return value.value
        return value

    @classmethod
    def default(cls, device_id: str) -> DoorState:
        """Record used when nothing has been persisted yet."""
        return cls(device_id=device_id)

    @property
    def is_open(self) -> bool:
        return self.status == DoorStatus.OPEN

    def to_record(self) -> dict[str, Any]:
        """Full record with wire keys, as written to a store."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> DoorState:
        return cls.model_validate(record)
