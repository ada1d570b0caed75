"""Door state reconciliation and persistence."""

from garagelink.state.reconcile import duration_minutes, mark_notified, reconcile
from garagelink.state.store import InMemoryStateStore, SqliteStateStore, StateStore

__all__ = [
    "InMemoryStateStore",
    "SqliteStateStore",
    "StateStore",
    "duration_minutes",
    "mark_notified",
    "reconcile",
]
