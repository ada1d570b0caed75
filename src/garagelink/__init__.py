"""garagelink - voice skill and door monitor for a Particle garage door opener."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("garagelink")
except PackageNotFoundError:
    __version__ = "0+local"
from garagelink.client import ParticleClient
from garagelink.config import GarageConfig
from garagelink.exceptions import (
    GarageConfigError,
    GarageError,
    NotificationError,
    ParticleApiError,
    ParticleError,
    ParticleTransportError,
    StateStoreError,
)
from garagelink.models import (
    ButtonPressResult,
    DoorState,
    DoorStatus,
    SkillRequest,
    SkillResponse,
)
from garagelink.monitor import MonitorReport, run_monitor_cycle
from garagelink.notify import MqttNotifier, Notifier
from garagelink.phrasing import build_open_door_alert, format_duration
from garagelink.skill import handle_skill_request
from garagelink.state import (
    InMemoryStateStore,
    SqliteStateStore,
    StateStore,
    duration_minutes,
    mark_notified,
    reconcile,
)

__all__ = [
    "__version__",
    "ButtonPressResult",
    "DoorState",
    "DoorStatus",
    "GarageConfig",
    "GarageConfigError",
    "GarageError",
    "InMemoryStateStore",
    "MonitorReport",
    "MqttNotifier",
    "NotificationError",
    "Notifier",
    "ParticleApiError",
    "ParticleClient",
    "ParticleError",
    "ParticleTransportError",
    "SkillRequest",
    "SkillResponse",
    "SqliteStateStore",
    "StateStore",
    "StateStoreError",
    "build_open_door_alert",
    "duration_minutes",
    "format_duration",
    "handle_skill_request",
    "mark_notified",
    "reconcile",
    "run_monitor_cycle",
]
