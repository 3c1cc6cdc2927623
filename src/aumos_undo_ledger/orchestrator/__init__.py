"""Orchestrators: one subject bound to one history ledger."""
from __future__ import annotations

from aumos_undo_ledger.orchestrator.base import BaseOrchestrator, HistoryItem
from aumos_undo_ledger.orchestrator.commands import CommandOrchestrator
from aumos_undo_ledger.orchestrator.snapshots import (
    BASELINE_DESCRIPTION,
    SnapshotOrchestrator,
)

__all__ = [
    "BASELINE_DESCRIPTION",
    "BaseOrchestrator",
    "CommandOrchestrator",
    "HistoryItem",
    "SnapshotOrchestrator",
]
