#!/usr/bin/env python3
"""Run one door monitor cycle against the configured device.

Usage
-----
Set environment variables and run::

    export PARTICLE_ACCESS_TOKEN="..."
    export PARTICLE_DEVICE_ID="..."
    python scripts/poll_once.py --memory

Options::

    --memory             Keep state in memory instead of the SQLite table
    --threshold N        Override THRESHOLD_MINUTES for this run
    --no-notify          Never publish an alert
    --json               Print the resulting record as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from garagelink import (  # noqa: E402
    GarageConfig,
    GarageError,
    InMemoryStateStore,
    MqttNotifier,
    ParticleClient,
    SqliteStateStore,
    format_duration,
    run_monitor_cycle,
)
from garagelink.state.store import StateStore  # noqa: E402


async def run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.threshold is not None:
        overrides["threshold_minutes"] = args.threshold
    config = GarageConfig.from_env(**overrides)
    for name in config.warn_missing():
        print(f"warning: {name} not set", file=sys.stderr)

    store: StateStore
    if args.memory:
        store = InMemoryStateStore()
    else:
        store = SqliteStateStore(config.state_db_path, config.state_table or "door_state")

    notifier = None
    if not args.no_notify and config.notification_topic:
        notifier = MqttNotifier.from_config(config)

    try:
        async with ParticleClient(config) as client:
            report = await run_monitor_cycle(config=config, client=client, store=store, notifier=notifier)
    except GarageError as exc:
        print(f"monitor cycle failed: {exc}", file=sys.stderr)
        return 1
    finally:
        if isinstance(store, SqliteStateStore):
            store.close()

    if args.json:
        print(json.dumps(report.state.to_record(), indent=2))
    else:
        print(f"status:   {report.status} (was {report.previous_status})")
        if report.state.is_open:
            print(f"open for: {format_duration(report.duration_minutes) or 'under a minute'}")
        print(f"alert:    due={report.notification_due} sent={report.notified}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one garage door monitor cycle")
    parser.add_argument("--memory", action="store_true", help="Keep state in memory")
    parser.add_argument("--threshold", type=int, help="Override THRESHOLD_MINUTES")
    parser.add_argument("--no-notify", action="store_true", help="Never publish an alert")
    parser.add_argument("--json", action="store_true", help="Print the record as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
