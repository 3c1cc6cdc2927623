"""aumos-undo-ledger: bounded, branch-pruning undo/redo history.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import aumos_undo_ledger as undo
>>> undo.__version__
'0.1.0'
>>> tasks = undo.CommandOrchestrator(capacity=3)
>>> record = tasks.do_create("Draft release notes")
>>> tasks.undo()
True
>>> tasks.can_redo()
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from aumos_undo_ledger.errors import (
    IntegrityError,
    LedgerError,
    NotFoundError,
    SerializationError,
    ValidationError,
)

# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------
from aumos_undo_ledger.ledger import DEFAULT_CAPACITY, HistoryLedger, LedgerState
from aumos_undo_ledger.snapshot import Snapshot, fingerprint
from aumos_undo_ledger.events import ChangeEvent, ListenerRegistry

# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
from aumos_undo_ledger.operations import (
    CompleteRecordOperation,
    CompositeOperation,
    CreateRecordOperation,
    DeleteRecordOperation,
    ReopenRecordOperation,
    ReversibleOperation,
    SetPriorityOperation,
    UpdateRecordOperation,
    UpdateSettingsOperation,
)

# ---------------------------------------------------------------------------
# Subjects
# ---------------------------------------------------------------------------
from aumos_undo_ledger.subjects import RecordStore, SettingsStore

# ---------------------------------------------------------------------------
# Orchestrators
# ---------------------------------------------------------------------------
from aumos_undo_ledger.orchestrator import (
    CommandOrchestrator,
    HistoryItem,
    SnapshotOrchestrator,
)
from aumos_undo_ledger.convenience import (
    build_command_orchestrator,
    build_snapshot_orchestrator,
)

# ---------------------------------------------------------------------------
# Ambient
# ---------------------------------------------------------------------------
from aumos_undo_ledger.audit.logger import AuditLogger
from aumos_undo_ledger.config import ConfigLoader, LedgerConfig
from aumos_undo_ledger.rendering import HistoryRenderer

__all__ = [
    "__version__",
    # Errors
    "IntegrityError",
    "LedgerError",
    "NotFoundError",
    "SerializationError",
    "ValidationError",
    # Core
    "ChangeEvent",
    "DEFAULT_CAPACITY",
    "HistoryLedger",
    "LedgerState",
    "ListenerRegistry",
    "Snapshot",
    "fingerprint",
    # Operations
    "CompleteRecordOperation",
    "CompositeOperation",
    "CreateRecordOperation",
    "DeleteRecordOperation",
    "ReopenRecordOperation",
    "ReversibleOperation",
    "SetPriorityOperation",
    "UpdateRecordOperation",
    "UpdateSettingsOperation",
    # Subjects
    "RecordStore",
    "SettingsStore",
    # Orchestrators
    "CommandOrchestrator",
    "HistoryItem",
    "SnapshotOrchestrator",
    "build_command_orchestrator",
    "build_snapshot_orchestrator",
    # Ambient
    "AuditLogger",
    "ConfigLoader",
    "HistoryRenderer",
    "LedgerConfig",
]
