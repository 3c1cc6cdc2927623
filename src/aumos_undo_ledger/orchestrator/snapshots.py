"""Snapshot-backed orchestrator over a :class:`SettingsStore`.

After every change the full settings map is captured as a
:class:`~aumos_undo_ledger.snapshot.Snapshot` and appended to the ledger, so
the ledger cursor always points at the snapshot matching the live state.
Undo moves the cursor back one snapshot and replaces the live state with
that snapshot's copy; redo moves forward.

A baseline snapshot of the initial state is saved on construction (and
again before the first change after :meth:`clear`), which makes the first
change undoable.  Undo is unavailable while the cursor sits on the oldest
retained snapshot.

Example
-------
>>> config = SnapshotOrchestrator()
>>> config.do_update("theme", "dark")["theme"]
'dark'
>>> config.undo()
True
>>> config.store.get("theme")
'light'
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aumos_undo_ledger.ledger import DEFAULT_CAPACITY
from aumos_undo_ledger.operations.settings import UpdateSettingsOperation
from aumos_undo_ledger.orchestrator.base import BaseOrchestrator
from aumos_undo_ledger.snapshot import Snapshot
from aumos_undo_ledger.subjects.settings import SettingsStore

if TYPE_CHECKING:
    from aumos_undo_ledger.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

BASELINE_DESCRIPTION = "Initial state"


class SnapshotOrchestrator(BaseOrchestrator):
    """Binds a :class:`SettingsStore` to a ledger of snapshots.

    Parameters
    ----------
    store:
        Subject to manage.  A store with default settings is created if
        omitted.
    capacity:
        Ledger capacity, baseline included (default: 100).
    verify_on_restore:
        Check each snapshot's fingerprint before restoring it (default:
        True).  A mismatch raises
        :class:`~aumos_undo_ledger.errors.IntegrityError` and leaves both
        the cursor and the store unchanged.
    audit_logger:
        Optional audit trail.
    """

    def __init__(
        self,
        store: SettingsStore | None = None,
        capacity: int = DEFAULT_CAPACITY,
        verify_on_restore: bool = True,
        audit_logger: "AuditLogger | None" = None,
    ) -> None:
        self._store = store if store is not None else SettingsStore()
        super().__init__(self._store, capacity=capacity, audit_logger=audit_logger)
        self._verify_on_restore = verify_on_restore
        self.save(BASELINE_DESCRIPTION)

    @property
    def store(self) -> SettingsStore:
        """The settings store this orchestrator manages."""
        return self._store

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def save(self, description: str = "") -> Snapshot:
        """Capture the current settings as a new ledger entry."""
        with self._lock:
            snapshot = Snapshot.capture(self._store.state(), description)
            self._ledger.append(snapshot)
            self._audit("save", description)
            return snapshot

    # ------------------------------------------------------------------
    # Domain verbs
    # ------------------------------------------------------------------

    def do_update(
        self,
        key: str,
        value: object,
        description: str | None = None,
    ) -> dict[str, object]:
        """Change one setting and return the resulting settings map."""
        return self.do_update_many({key: value}, description)

    def do_update_many(
        self,
        settings: dict[str, object],
        description: str | None = None,
    ) -> dict[str, object]:
        """Change several settings atomically and return the resulting map.

        Raises
        ------
        ValidationError
            When any key is unknown or any value is rejected.  Nothing is
            changed and nothing is recorded.
        """
        operation = UpdateSettingsOperation(self._store, settings)
        with self._lock:
            operation.validate()
            if len(self._ledger) == 0:
                self.save(BASELINE_DESCRIPTION)
            changes = operation.execute()
            label = description or operation.describe()
            try:
                snapshot = Snapshot.capture(self._store.state(), label)
            except Exception:
                operation.undo()
                raise
            self._ledger.append(snapshot)
            self._publish("do", label, tuple(changes))  # type: ignore[arg-type]
            return self._store.state()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self._ledger.cursor > 0

    def undo(self) -> bool:
        with self._lock:
            if self._ledger.cursor <= 0:
                return False
            target = self._ledger.entries()[self._ledger.cursor - 1]
            self._check(target)
            self._ledger.undo()
            self._apply_snapshot(target, "undo")
            return True

    def redo(self) -> bool:
        with self._lock:
            target = self._ledger.peek_redo()
            if target is None:
                return False
            self._check(target)
            self._ledger.redo()
            self._apply_snapshot(target, "redo")
            return True

    def restore_to(self, index: int) -> Snapshot:
        """Jump to the snapshot at *index* and make it the live state.

        Raises
        ------
        IndexError
            When *index* is outside ``0 <= index < len(ledger)``.
        IntegrityError
            When verification is enabled and the snapshot has drifted.
        """
        with self._lock:
            if not 0 <= index < len(self._ledger):
                raise IndexError(
                    f"Ledger index {index} out of range (length {len(self._ledger)})"
                )
            self._check(self._ledger.entries()[index])
            target = self._ledger.jump_to(index)
            self._apply_snapshot(target, "restore")
            logger.info("Restored settings to snapshot %d (%s)", index, target.description)
            return target

    def _check(self, snapshot: Snapshot) -> None:
        if self._verify_on_restore:
            snapshot.ensure_integrity()

    def _apply_snapshot(self, snapshot: Snapshot, source: str) -> None:
        changes = self._store.replace_state(snapshot.restore())  # type: ignore[arg-type]
        self._publish(source, snapshot.description, tuple(changes))


__all__ = [
    "BASELINE_DESCRIPTION",
    "SnapshotOrchestrator",
]
