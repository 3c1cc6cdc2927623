"""Audit trail package: append-only JSONL records of ledger activity."""
from __future__ import annotations

from aumos_undo_ledger.audit.logger import AuditLogger

__all__ = [
    "AuditLogger",
]
