"""Mutable subjects that operations mutate and snapshots capture."""
from __future__ import annotations

from aumos_undo_ledger.subjects.records import Record, RecordStore
from aumos_undo_ledger.subjects.settings import (
    DEFAULT_SETTINGS,
    DEFAULT_VALIDATORS,
    SettingsStore,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "DEFAULT_VALIDATORS",
    "Record",
    "RecordStore",
    "SettingsStore",
]
