"""Concrete reversible operations over a :class:`RecordStore`.

Each mutation captures a full copy of the record before touching it and a
copy after, so ``undo`` restores the exact prior record and ``redo``
restores the exact post-mutation record (timestamps included).

Operations
----------
CreateRecordOperation   : Insert a record; undo removes it.
UpdateRecordOperation   : Set arbitrary fields.
CompleteRecordOperation : Mark a record completed.
ReopenRecordOperation   : Mark a record not completed.
SetPriorityOperation    : Change the priority within an allowed range.
DeleteRecordOperation   : Remove a record; undo re-inserts it.
"""
from __future__ import annotations

import copy
import datetime
from abc import abstractmethod

from aumos_undo_ledger.errors import ValidationError
from aumos_undo_ledger.operations.base import ReversibleOperation
from aumos_undo_ledger.subjects.records import Record, RecordStore

DEFAULT_PRIORITY_RANGE: tuple[int, int] = (1, 5)

_PROTECTED_FIELDS = frozenset({"id", "created_at"})


def _check_priority(priority: object, priority_range: tuple[int, int]) -> None:
    low, high = priority_range
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ValidationError("priority", priority, "must be an integer")
    if not low <= priority <= high:
        raise ValidationError("priority", priority, f"must be between {low} and {high}")


def _check_title(title: object) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title", title, "must be a non-empty string")


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class CreateRecordOperation(ReversibleOperation):
    """Insert a new record.  Redo re-inserts it under the same id."""

    def __init__(
        self,
        store: RecordStore,
        title: str,
        description: str = "",
        priority: int = 3,
        fields: dict[str, object] | None = None,
        priority_range: tuple[int, int] = DEFAULT_PRIORITY_RANGE,
    ) -> None:
        super().__init__(store)
        self._store = store
        self.title = title
        self.description = description
        self.priority = priority
        self.fields = dict(fields or {})
        self._priority_range = priority_range
        self._created: Record | None = None

    def validate(self) -> None:
        _check_title(self.title)
        _check_priority(self.priority, self._priority_range)
        clash = _PROTECTED_FIELDS.intersection(self.fields)
        if clash:
            name = sorted(clash)[0]
            raise ValidationError(name, self.fields[name], "is assigned by the store")

    def _apply(self) -> Record:
        self._created = self._store.create(
            self.title, self.description, self.priority, **self.fields
        )
        return copy.deepcopy(self._created)

    def _revert(self) -> None:
        if self._created is not None:
            self._store.remove(self._created["id"])

    def _reapply(self) -> None:
        if self._created is not None:
            self._store.put(self._created)

    def _describe(self) -> str:
        return f"Create record: {self.title}"

    def affected(self) -> tuple[object, ...]:
        return (self._created["id"],) if self._created is not None else ()

    @property
    def record_id(self) -> int | None:
        """Id assigned on execute, or None."""
        return self._created["id"] if self._created is not None else None


# ---------------------------------------------------------------------------
# In-place mutations
# ---------------------------------------------------------------------------


class _RecordMutation(ReversibleOperation):
    """Shared capture/restore logic for operations that edit one record."""

    verb: str = "Update"

    def __init__(self, store: RecordStore, record_id: int) -> None:
        super().__init__(store)
        self._store = store
        self.record_id = record_id
        self._after: Record | None = None

    @abstractmethod
    def _changes(self, record: Record) -> dict[str, object]:
        """Return the fields to set on *record*."""

    def _apply(self) -> object:
        before = self._store.get(self.record_id)
        if before is None:
            return False
        self._prior_state = before
        self._after = self._store.update(self.record_id, **self._changes(before))
        return True

    def _revert(self) -> None:
        self._store.put(self._prior_state)

    def _reapply(self) -> None:
        self._store.put(self._after)

    def _title(self) -> object:
        if isinstance(self._prior_state, dict):
            return self._prior_state.get("title", self.record_id)
        record = self._store.get(self.record_id)
        return record["title"] if record is not None else self.record_id

    def _describe(self) -> str:
        return f"{self.verb} record: {self._title()}"

    def affected(self) -> tuple[object, ...]:
        return (self.record_id,)


class UpdateRecordOperation(_RecordMutation):
    """Set arbitrary fields on a record.  Returns the updated record or None."""

    def __init__(
        self,
        store: RecordStore,
        record_id: int,
        fields: dict[str, object],
        priority_range: tuple[int, int] = DEFAULT_PRIORITY_RANGE,
    ) -> None:
        super().__init__(store, record_id)
        self.fields = dict(fields)
        self._priority_range = priority_range

    def validate(self) -> None:
        if not self.fields:
            raise ValidationError("fields", self.fields, "at least one field is required")
        clash = _PROTECTED_FIELDS.intersection(self.fields)
        if clash:
            name = sorted(clash)[0]
            raise ValidationError(name, self.fields[name], "cannot be changed")
        if "title" in self.fields:
            _check_title(self.fields["title"])
        if "priority" in self.fields:
            _check_priority(self.fields["priority"], self._priority_range)

    def _changes(self, record: Record) -> dict[str, object]:
        return self.fields

    def _apply(self) -> Record | None:
        if not super()._apply():
            return None
        return copy.deepcopy(self._after)

    def _describe(self) -> str:
        names = ", ".join(sorted(self.fields))
        return f"Update record: {self._title()} ({names})"


class CompleteRecordOperation(_RecordMutation):
    """Mark a record completed and stamp ``completed_at``."""

    verb = "Complete"

    def _changes(self, record: Record) -> dict[str, object]:
        return {
            "completed": True,
            "completed_at": datetime.datetime.now(datetime.timezone.utc),
        }


class ReopenRecordOperation(_RecordMutation):
    """Mark a record not completed and clear ``completed_at``."""

    verb = "Reopen"

    def _changes(self, record: Record) -> dict[str, object]:
        return {"completed": False, "completed_at": None}


class SetPriorityOperation(_RecordMutation):
    """Change a record's priority.  The value is checked before lookup."""

    def __init__(
        self,
        store: RecordStore,
        record_id: int,
        priority: int,
        priority_range: tuple[int, int] = DEFAULT_PRIORITY_RANGE,
    ) -> None:
        super().__init__(store, record_id)
        self.priority = priority
        self._priority_range = priority_range

    def validate(self) -> None:
        _check_priority(self.priority, self._priority_range)

    def _changes(self, record: Record) -> dict[str, object]:
        return {"priority": self.priority}

    def _describe(self) -> str:
        return f"Update priority of record: {self._title()} to {self.priority}"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class DeleteRecordOperation(ReversibleOperation):
    """Remove a record.  Undo re-inserts the removed copy."""

    def __init__(self, store: RecordStore, record_id: int) -> None:
        super().__init__(store)
        self._store = store
        self.record_id = record_id

    def _apply(self) -> bool:
        removed = self._store.remove(self.record_id)
        if removed is None:
            return False
        self._prior_state = removed
        return True

    def _revert(self) -> None:
        self._store.put(self._prior_state)

    def _reapply(self) -> None:
        self._store.remove(self.record_id)

    def _describe(self) -> str:
        if isinstance(self._prior_state, dict):
            return f"Delete record: {self._prior_state['title']}"
        return f"Delete record: {self.record_id}"

    def affected(self) -> tuple[object, ...]:
        return (self.record_id,)


__all__ = [
    "CompleteRecordOperation",
    "CreateRecordOperation",
    "DEFAULT_PRIORITY_RANGE",
    "DeleteRecordOperation",
    "ReopenRecordOperation",
    "SetPriorityOperation",
    "UpdateRecordOperation",
]
