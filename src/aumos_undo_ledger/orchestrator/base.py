"""Shared orchestrator plumbing: ledger ownership, locking, listeners, audit.

An orchestrator binds exactly one subject to exactly one
:class:`~aumos_undo_ledger.ledger.HistoryLedger`.  Subclasses provide the
domain verbs and the undo/redo semantics for their entry kind.
"""
from __future__ import annotations

import asyncio
import datetime
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from aumos_undo_ledger.events import ChangeEvent, Listener, ListenerRegistry
from aumos_undo_ledger.ledger import DEFAULT_CAPACITY, HistoryLedger
from aumos_undo_ledger.snapshot import Snapshot

if TYPE_CHECKING:
    from aumos_undo_ledger.audit.logger import AuditLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryItem:
    """Read-only projection of one ledger entry for display or audit.

    Attributes
    ----------
    index:
        Position in the ledger, oldest first.
    description:
        The entry's description.
    timestamp:
        When the entry was created.
    is_current:
        True for the entry at the ledger cursor.
    """

    index: int
    description: str
    timestamp: datetime.datetime
    is_current: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
            "is_current": self.is_current,
        }


def _describe_entry(entry: object) -> tuple[str, datetime.datetime]:
    if isinstance(entry, Snapshot):
        return entry.description, entry.timestamp
    return entry.describe(), entry.timestamp  # type: ignore[attr-defined]


class BaseOrchestrator(ABC):
    """Owns one subject, one ledger, a listener registry and the locks.

    Parameters
    ----------
    subject:
        The mutable aggregate this orchestrator controls.
    capacity:
        Ledger capacity (default: 100).
    audit_logger:
        Optional :class:`AuditLogger` receiving one record per change.
    """

    def __init__(
        self,
        subject: object,
        capacity: int = DEFAULT_CAPACITY,
        audit_logger: "AuditLogger | None" = None,
    ) -> None:
        self._subject = subject
        self._ledger: HistoryLedger = HistoryLedger(capacity)
        self._listeners = ListenerRegistry()
        self._audit_logger = audit_logger
        self._lock = threading.RLock()
        self._async_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def subject(self) -> object:
        """The subject whose state this orchestrator mutates."""
        return self._subject

    @property
    def ledger(self) -> HistoryLedger:
        """The ledger owned by this orchestrator."""
        return self._ledger

    def can_undo(self) -> bool:
        """Return True when :meth:`undo` would change the subject."""
        return self._ledger.can_undo()

    def can_redo(self) -> bool:
        """Return True when :meth:`redo` would change the subject."""
        return self._ledger.can_redo()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @abstractmethod
    def undo(self) -> bool:
        """Step back one entry.  Returns False when nothing can be undone."""

    @abstractmethod
    def redo(self) -> bool:
        """Step forward one entry.  Returns False when nothing can be redone."""

    def undo_many(self, count: int) -> int:
        """Undo up to *count* entries and return how many were undone."""
        undone = 0
        with self._lock:
            while undone < count and self.undo():
                undone += 1
        return undone

    def redo_many(self, count: int) -> int:
        """Redo up to *count* entries and return how many were redone."""
        redone = 0
        with self._lock:
            while redone < count and self.redo():
                redone += 1
        return redone

    def history(self) -> list[HistoryItem]:
        """Return the ledger as display-ready :class:`HistoryItem` records."""
        with self._lock:
            cursor = self._ledger.cursor
            items: list[HistoryItem] = []
            for index, entry in enumerate(self._ledger.entries()):
                description, timestamp = _describe_entry(entry)
                items.append(
                    HistoryItem(
                        index=index,
                        description=description,
                        timestamp=timestamp,
                        is_current=index == cursor,
                    )
                )
            return items

    def clear(self) -> None:
        """Drop all history.  The subject keeps its current state."""
        with self._lock:
            dropped = len(self._ledger)
            self._ledger.clear()
            logger.info("Cleared %d history entries", dropped)
            self._audit("clear", f"Cleared {dropped} entries")

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        return self._listeners.add(listener)

    def _publish(self, source: str, description: str, changes: tuple[object, ...]) -> None:
        self._audit(source, description)
        self._listeners.notify(
            ChangeEvent(source=source, description=description, changes=changes)
        )

    def _audit(self, event: str, description: str) -> None:
        if self._audit_logger is None:
            return
        self._audit_logger.record_change(
            event, description, cursor=self._ledger.cursor, length=len(self._ledger)
        )


__all__ = [
    "BaseOrchestrator",
    "HistoryItem",
]
