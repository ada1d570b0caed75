"""Door state stores.

A store holds one full :class:`DoorState` record per device id. Writes
overwrite the whole record, so callers read, modify and write back.
Concurrent writers are not coordinated: the last write wins.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import re
import sqlite3
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import ValidationError

from garagelink.exceptions import GarageConfigError, StateStoreError
from garagelink.models.door import DoorState

_logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]{0,127}$")


class StateStore(Protocol):
    """Structural store interface used by the handlers."""

    def get(self, device_id: str) -> DoorState | None:
        ...

    def put(self, state: DoorState) -> None:
        ...


def _decode_record(device_id: str, record: dict[str, Any]) -> DoorState:
    try:
        return DoorState.from_record(record)
    except ValidationError as exc:
        raise StateStoreError(f"Corrupt door state record for {device_id}: {exc}") from exc


class InMemoryStateStore:
    """Process-local store keeping records as plain dicts."""

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = copy.deepcopy(records) if records else {}

    def get(self, device_id: str) -> DoorState | None:
        record = self._records.get(device_id)
        if record is None:
            return None
        return _decode_record(device_id, copy.deepcopy(record))

    def put(self, state: DoorState) -> None:
        self._records[state.device_id] = state.to_record()

    def records(self) -> dict[str, dict[str, Any]]:
        """Copy of every stored record, keyed by device id."""
        return copy.deepcopy(self._records)


class SqliteStateStore:
    """Store backed by one SQLite table of JSON records.

    Parameters
    ----------
    db_path : str
        Database file path, or ``":memory:"``.
    table : str
        Table name. Created on first use.
    """

    def __init__(self, db_path: str, table: str) -> None:
        if not _TABLE_NAME_RE.match(table):
            raise GarageConfigError(f"Invalid door state table name: {table!r}")
        self._db_path = db_path
        self._table = table
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> SqliteStateStore:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        try:
            directory = os.path.dirname(self._db_path)
            if directory and self._db_path != ":memory:":
                os.makedirs(directory, exist_ok=True)
            conn = sqlite3.connect(self._db_path)
            conn.row_factory = sqlite3.Row
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS "{self._table}" (
                    device_id TEXT PRIMARY KEY,
                    record_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
            conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StateStoreError(f"Cannot open door state table {self._table}: {exc}") from exc
        self._conn = conn
        return conn

    def get(self, device_id: str) -> DoorState | None:
        conn = self._connect()
        try:
            row = conn.execute(
                f'SELECT record_json FROM "{self._table}" WHERE device_id = ?',
                (device_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StateStoreError(f"Error reading door state for {device_id}: {exc}") from exc
        if row is None:
            return None
        try:
            record = json.loads(row["record_json"])
        except json.JSONDecodeError as exc:
            raise StateStoreError(f"Corrupt door state record for {device_id}: {exc}") from exc
        if not isinstance(record, dict):
            raise StateStoreError(f"Corrupt door state record for {device_id}: not an object")
        return _decode_record(device_id, record)

    def put(self, state: DoorState) -> None:
        conn = self._connect()
        try:
            conn.execute(
                f'INSERT OR REPLACE INTO "{self._table}" (device_id, record_json, updated_at) VALUES (?, ?, ?)',
                (
                    state.device_id,
                    json.dumps(state.to_record(), separators=(",", ":")),
                    datetime.now(UTC).isoformat(),
                ),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StateStoreError(f"Error writing door state for {state.device_id}: {exc}") from exc
        _logger.debug("Door state written for %s: %s", state.device_id, state.status)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
