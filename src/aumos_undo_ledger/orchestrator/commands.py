"""Operation-backed orchestrator over a :class:`RecordStore`.

Every ``do_*`` verb validates, executes one reversible operation against the
store and, only if the target existed, appends the operation to the ledger.
``undo()`` applies the inverse of the operation at the cursor; ``redo()``
re-applies the next one.

Example
-------
>>> app = CommandOrchestrator(capacity=50)
>>> record = app.do_create("Write report", priority=2)
>>> app.do_complete(record["id"])
True
>>> app.undo()
True
>>> app.store.get(record["id"])["completed"]
False
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from aumos_undo_ledger.ledger import DEFAULT_CAPACITY
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
from aumos_undo_ledger.orchestrator.base import BaseOrchestrator
from aumos_undo_ledger.subjects.records import Record, RecordStore

if TYPE_CHECKING:
    from aumos_undo_ledger.audit.logger import AuditLogger

logger = logging.getLogger(__name__)


class CommandOrchestrator(BaseOrchestrator):
    """Binds a :class:`RecordStore` to a ledger of reversible operations.

    Parameters
    ----------
    store:
        Subject to operate on.  A new empty store is created if omitted.
    capacity:
        Ledger capacity (default: 100).
    priority_range:
        Inclusive ``(low, high)`` bounds for record priorities.
    default_priority:
        Priority used by :meth:`do_create` when none is given.
    audit_logger:
        Optional audit trail.
    """

    def __init__(
        self,
        store: RecordStore | None = None,
        capacity: int = DEFAULT_CAPACITY,
        priority_range: tuple[int, int] = DEFAULT_PRIORITY_RANGE,
        default_priority: int = 3,
        audit_logger: "AuditLogger | None" = None,
    ) -> None:
        self._store = store if store is not None else RecordStore()
        super().__init__(self._store, capacity=capacity, audit_logger=audit_logger)
        self._priority_range = priority_range
        self._default_priority = default_priority

    @property
    def store(self) -> RecordStore:
        """The record store this orchestrator mutates."""
        return self._store

    # ------------------------------------------------------------------
    # Generic entry points
    # ------------------------------------------------------------------

    def perform(self, operation: ReversibleOperation) -> object:
        """Execute *operation* and record it if it found its target.

        Raises
        ------
        ValueError
            When *operation* is bound to a different subject.
        ValidationError
            When the operation rejects its parameters.  Nothing is recorded.
        """
        self._check_subject(operation)
        with self._lock:
            result = operation.execute()
            self._record(operation)
        return result

    async def perform_async(self, operation: ReversibleOperation) -> object:
        """Await ``operation.execute_async()`` and record it afterwards.

        Concurrent calls are serialised so the ledger append always follows
        the awaited side effect of the same call.
        """
        self._check_subject(operation)
        async with self._async_lock:
            result = await operation.execute_async()
            with self._lock:
                self._record(operation)
        return result

    def _check_subject(self, operation: ReversibleOperation) -> None:
        if operation.subject is not self._store:
            raise ValueError(f"{operation!r} is bound to a different subject")

    def _record(self, operation: ReversibleOperation) -> None:
        if not operation.succeeded:
            logger.debug("Not recording %r: target not found", operation)
            return
        self._ledger.append(operation)
        self._publish("do", operation.describe(), operation.affected())

    # ------------------------------------------------------------------
    # Domain verbs
    # ------------------------------------------------------------------

    def do_create(
        self,
        title: str,
        description: str = "",
        priority: int | None = None,
        **fields: object,
    ) -> Record:
        """Create a record and return a copy of it."""
        operation = CreateRecordOperation(
            self._store,
            title,
            description,
            self._default_priority if priority is None else priority,
            fields=fields,
            priority_range=self._priority_range,
        )
        return self.perform(operation)  # type: ignore[return-value]

    def do_update(self, record_id: int, **fields: object) -> Record | None:
        """Set *fields* on a record.  Returns the updated copy or None."""
        operation = UpdateRecordOperation(
            self._store, record_id, fields, priority_range=self._priority_range
        )
        return self.perform(operation)  # type: ignore[return-value]

    def do_complete(self, record_id: int) -> bool:
        """Mark a record completed.  Returns False if it does not exist."""
        return bool(self.perform(CompleteRecordOperation(self._store, record_id)))

    def do_reopen(self, record_id: int) -> bool:
        """Mark a record not completed.  Returns False if it does not exist."""
        return bool(self.perform(ReopenRecordOperation(self._store, record_id)))

    def do_set_priority(self, record_id: int, priority: int) -> bool:
        """Change a record's priority.  Returns False if it does not exist."""
        operation = SetPriorityOperation(
            self._store, record_id, priority, priority_range=self._priority_range
        )
        return bool(self.perform(operation))

    def do_delete(self, record_id: int) -> bool:
        """Delete a record.  Returns False if it does not exist."""
        return bool(self.perform(DeleteRecordOperation(self._store, record_id)))

    def do_batch(
        self,
        description: str,
        operations: Sequence[ReversibleOperation],
    ) -> list[object] | None:
        """Run *operations* as one ledger entry; undo reverts all of them."""
        for operation in operations:
            self._check_subject(operation)
        return self.perform(CompositeOperation(self._store, description, operations))  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        with self._lock:
            operation = self._ledger.undo()
            if operation is None:
                return False
            operation.undo()
            self._publish("undo", operation.describe(), operation.affected())
            return True

    def redo(self) -> bool:
        with self._lock:
            operation = self._ledger.redo()
            if operation is None:
                return False
            operation.redo()
            self._publish("redo", operation.describe(), operation.affected())
            return True

    def restore_to(self, index: int) -> int:
        """Undo or redo until the ledger cursor equals *index*.

        ``-1`` rewinds past the oldest retained entry.  Returns the number of
        steps taken.

        Raises
        ------
        IndexError
            When *index* is outside ``-1 <= index < len(ledger)``.
        """
        with self._lock:
            if not -1 <= index < len(self._ledger):
                raise IndexError(
                    f"Ledger index {index} out of range (length {len(self._ledger)})"
                )
            steps = 0
            while self._ledger.cursor > index and self.undo():
                steps += 1
            while self._ledger.cursor < index and self.redo():
                steps += 1
            logger.info("Restored record history to index %d in %d steps", index, steps)
            return steps

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_record(self, record_id: int) -> Record | None:
        """Return a copy of a record, or None."""
        return self._store.get(record_id)

    def all_records(self) -> list[Record]:
        """Return copies of all records ordered by id."""
        return self._store.all()


__all__ = [
    "CommandOrchestrator",
]
