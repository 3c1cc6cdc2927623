"""Reversible operations subpackage."""
from __future__ import annotations

from aumos_undo_ledger.operations.base import ReversibleOperation
from aumos_undo_ledger.operations.composite import CompositeOperation
from aumos_undo_ledger.operations.records import (
    DEFAULT_PRIORITY_RANGE,
    CompleteRecordOperation,
    CreateRecordOperation,
    DeleteRecordOperation,
    ReopenRecordOperation,
    SetPriorityOperation,
    UpdateRecordOperation,
)
from aumos_undo_ledger.operations.settings import UpdateSettingsOperation

__all__ = [
    "CompleteRecordOperation",
    "CompositeOperation",
    "CreateRecordOperation",
    "DEFAULT_PRIORITY_RANGE",
    "DeleteRecordOperation",
    "ReopenRecordOperation",
    "ReversibleOperation",
    "SetPriorityOperation",
    "UpdateRecordOperation",
    "UpdateSettingsOperation",
]
