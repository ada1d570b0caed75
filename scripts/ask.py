#!/usr/bin/env python3
"""Send one skill request through the handler and print the spoken answer.

Usage
-----
::

    python scripts/ask.py status
    python scripts/ask.py press --yes
    python scripts/ask.py launch --raw

Intents map to ``GetStatusIntent``, ``PressButtonIntent``,
``AMAZON.HelpIntent`` and ``AMAZON.StopIntent``. ``press`` moves a real
door and needs ``--yes``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from garagelink import GarageConfig, ParticleClient, SqliteStateStore, handle_skill_request  # noqa: E402

_INTENTS = {
    "status": "GetStatusIntent",
    "press": "PressButtonIntent",
    "help": "AMAZON.HelpIntent",
    "stop": "AMAZON.StopIntent",
}


def _build_event(command: str) -> dict[str, Any]:
    if command == "launch":
        return {"version": "1.0", "request": {"type": "LaunchRequest"}}
    return {
        "version": "1.0",
        "request": {"type": "IntentRequest", "intent": {"name": _INTENTS[command]}},
    }


async def run(args: argparse.Namespace) -> int:
    if args.command == "press" and not args.yes:
        print("refusing to press the opener button without --yes", file=sys.stderr)
        return 2

    config = GarageConfig.from_env()
    config.warn_missing()
    store = SqliteStateStore(config.state_db_path, config.state_table) if config.persistence_enabled else None
    try:
        async with ParticleClient(config) as client:
            response = await handle_skill_request(
                _build_event(args.command),
                config=config,
                client=client,
                store=store,
            )
    finally:
        if store is not None:
            store.close()

    if args.raw:
        print(json.dumps(response.to_dict(), indent=2))
    else:
        print(response.text)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Send one request to the garage door skill")
    parser.add_argument("command", choices=["launch", *_INTENTS])
    parser.add_argument("--yes", action="store_true", help="Confirm pressing the real opener button")
    parser.add_argument("--raw", action="store_true", help="Print the full response envelope")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
