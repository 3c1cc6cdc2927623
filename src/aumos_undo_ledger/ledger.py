"""Bounded, branch-pruning history ledger.

The ledger is an ordered list of entries plus a cursor.  The cursor points at
the entry that represents "now"; ``-1`` means nothing has been recorded yet or
everything has been undone.

Transitions
-----------
append  : Prune every entry after the cursor, push, move the cursor to the
          head, then evict the oldest entry if capacity is exceeded.
undo    : Return the entry at the cursor, then step the cursor back.
redo    : Step the cursor forward, then return the entry it lands on.
jump_to : Move the cursor to an arbitrary retained index.
clear   : Drop everything and reset the cursor to ``-1``.

Boundaries are benign: ``undo`` on an empty or fully rewound ledger and
``redo`` at the head both return ``None``.

Example
-------
>>> ledger = HistoryLedger(capacity=3)
>>> for name in "ABCD":
...     _ = ledger.append(name)
>>> ledger.entries()
['B', 'C', 'D']
>>> ledger.undo(), ledger.cursor
('D', 1)
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, TypeVar

from aumos_undo_ledger.operations.base import ReversibleOperation
from aumos_undo_ledger.snapshot import Snapshot

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT")

DEFAULT_CAPACITY: int = 100


class LedgerState(str, Enum):
    """Coarse position of the cursor within the ledger."""

    EMPTY = "empty"      # no entries
    AT_HEAD = "at_head"  # cursor on the newest entry, redo unavailable
    AT_MID = "at_mid"    # entries exist after the cursor, redo available


def _entry_kind(entry: object) -> type:
    if isinstance(entry, ReversibleOperation):
        return ReversibleOperation
    if isinstance(entry, Snapshot):
        return Snapshot
    return type(entry)


class HistoryLedger(Generic[EntryT]):
    """Ordered, cursor-addressed sequence of reversible entries.

    A ledger holds either operations or snapshots, never both: the first
    appended entry fixes the kind until :meth:`clear` is called.

    The ledger is not synchronised.  It is owned by exactly one
    orchestrator, which serialises access to it.

    Parameters
    ----------
    capacity:
        Maximum number of retained entries (default: 100).  Must be >= 1.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Ledger capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: list[EntryT] = []
        self._cursor: int = -1
        self._kind: type | None = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        """Maximum number of retained entries."""
        return self._capacity

    @property
    def cursor(self) -> int:
        """Index of the current entry, or ``-1`` when there is none."""
        return self._cursor

    @property
    def state(self) -> LedgerState:
        """Return the :class:`LedgerState` for the current cursor position."""
        if not self._entries:
            return LedgerState.EMPTY
        if self._cursor == len(self._entries) - 1:
            return LedgerState.AT_HEAD
        return LedgerState.AT_MID

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[EntryT]:
        """Return the retained entries, oldest first, as a new list."""
        return list(self._entries)

    def current(self) -> EntryT | None:
        """Return the entry at the cursor, or None."""
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def peek_undo(self) -> EntryT | None:
        """Return the entry the next :meth:`undo` would yield, without moving."""
        return self.current()

    def peek_redo(self) -> EntryT | None:
        """Return the entry the next :meth:`redo` would yield, without moving."""
        if not self.can_redo():
            return None
        return self._entries[self._cursor + 1]

    def can_undo(self) -> bool:
        """Return True when :meth:`undo` would yield an entry."""
        return self._cursor >= 0

    def can_redo(self) -> bool:
        """Return True when :meth:`redo` would yield an entry."""
        return self._cursor < len(self._entries) - 1

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def append(self, entry: EntryT) -> int:
        """Record *entry* as the new head and return the new length.

        Any redo-able entries after the cursor are discarded first.  When
        the append pushes the ledger over capacity the oldest entry is
        evicted and the cursor shifts down by one.

        Raises
        ------
        TypeError
            When *entry* is not of the kind this ledger already holds.
        """
        kind = _entry_kind(entry)
        if self._kind is None:
            self._kind = kind
        elif not isinstance(entry, self._kind):
            raise TypeError(
                f"Ledger holds {self._kind.__name__} entries; "
                f"cannot append {type(entry).__name__}"
            )

        if self._cursor < len(self._entries) - 1:
            pruned = len(self._entries) - (self._cursor + 1)
            del self._entries[self._cursor + 1 :]
            logger.debug("Pruned %d redo entries after cursor %d", pruned, self._cursor)

        self._entries.append(entry)
        self._cursor = len(self._entries) - 1

        if len(self._entries) > self._capacity:
            self._entries.pop(0)
            self._cursor -= 1
            logger.debug("Evicted oldest entry (capacity %d)", self._capacity)

        logger.debug("Appended entry; length=%d cursor=%d", len(self._entries), self._cursor)
        return len(self._entries)

    def undo(self) -> EntryT | None:
        """Return the entry at the cursor and step the cursor back.

        Returns None when there is nothing to undo.
        """
        if self._cursor < 0:
            return None
        entry = self._entries[self._cursor]
        self._cursor -= 1
        logger.debug("Undo; cursor=%d", self._cursor)
        return entry

    def redo(self) -> EntryT | None:
        """Step the cursor forward and return the entry it lands on.

        Returns None when there is nothing to redo.
        """
        if self._cursor >= len(self._entries) - 1:
            return None
        self._cursor += 1
        logger.debug("Redo; cursor=%d", self._cursor)
        return self._entries[self._cursor]

    def jump_to(self, index: int) -> EntryT:
        """Move the cursor to *index* and return that entry.

        Raises
        ------
        IndexError
            When *index* is outside ``0 <= index < len(self)``.
        """
        if not 0 <= index < len(self._entries):
            raise IndexError(
                f"Ledger index {index} out of range (length {len(self._entries)})"
            )
        self._cursor = index
        logger.debug("Jumped to cursor=%d", index)
        return self._entries[index]

    def clear(self) -> None:
        """Drop every entry and reset the cursor."""
        self._entries.clear()
        self._cursor = -1
        self._kind = None

    def __repr__(self) -> str:
        return (
            f"HistoryLedger(length={len(self._entries)}, "
            f"cursor={self._cursor}, capacity={self._capacity})"
        )


__all__ = [
    "DEFAULT_CAPACITY",
    "HistoryLedger",
    "LedgerState",
]
