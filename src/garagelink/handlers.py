"""Lambda-style entry points.

``skill_handler`` answers voice-platform requests and ``monitor_handler``
runs one scheduled door monitor cycle. Both are synchronous wrappers
around the async handlers; configuration is read from the environment
once per process and passed down explicitly.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any

from garagelink._redact import redact_for_log
from garagelink.client import ParticleClient
from garagelink.config import GarageConfig
from garagelink.exceptions import GarageError
from garagelink.models.alexa import build_response
from garagelink.monitor import run_monitor_cycle
from garagelink.notify import MqttNotifier
from garagelink.skill import PRESS_FAILED_SPEECH, handle_skill_request
from garagelink.state.store import SqliteStateStore

_logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Apply *level* to the root logger, installing a handler if none exists."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_LOG_FORMAT)
    try:
        root.setLevel(level.strip().upper())
    except ValueError:
        root.setLevel(logging.INFO)
        _logger.warning("Unknown LOG_LEVEL %r, using INFO", level)


@functools.cache
def startup_config(*, notifications: bool = False) -> GarageConfig:
    """Read configuration once and warn about anything missing."""
    config = GarageConfig.from_env()
    configure_logging(config.log_level)
    config.warn_missing(notifications=notifications)
    _logger.debug("Configuration: %s", redact_for_log(config))
    if notifications:
        _logger.info("Monitor initialized - threshold: %d minutes", config.threshold_minutes)
    return config


async def _run_skill(event: dict[str, Any], config: GarageConfig) -> dict[str, Any]:
    store = SqliteStateStore(config.state_db_path, config.state_table) if config.persistence_enabled else None
    try:
        async with ParticleClient(config) as client:
            response = await handle_skill_request(event, config=config, client=client, store=store)
    finally:
        if store is not None:
            store.close()
    return response.to_dict()


def skill_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Voice-platform entry point. Always returns a response envelope."""
    try:
        config = startup_config()
        return asyncio.run(_run_skill(event, config))
    except Exception:
        _logger.exception("Skill invocation failed")
        return build_response(PRESS_FAILED_SPEECH, True).to_dict()


async def _run_monitor(config: GarageConfig) -> dict[str, Any]:
    notifier = MqttNotifier.from_config(config) if config.notification_topic else None
    with SqliteStateStore(config.state_db_path, config.state_table or "door_state") as store:
        async with ParticleClient(config) as client:
            report = await run_monitor_cycle(
                config=config,
                client=client,
                store=store,
                notifier=notifier,
            )
    return {
        "success": True,
        "status": report.status,
        "durationOpenMins": report.duration_minutes,
        "notified": report.notified,
    }


def monitor_handler(event: Any = None, context: Any = None) -> dict[str, Any]:
    """Scheduled entry point. The event payload is ignored."""
    try:
        config = startup_config(notifications=True)
        return asyncio.run(_run_monitor(config))
    except GarageError as exc:
        _logger.error("Monitor cycle failed: %s", exc)
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        _logger.exception("Monitor cycle failed unexpectedly")
        return {"success": False, "error": f"{type(exc).__name__}: {exc}"}
