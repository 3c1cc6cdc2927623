"""Change events and isolated listener dispatch.

Orchestrators publish a :class:`ChangeEvent` after every successful mutation.
Listeners run one at a time; an exception raised by one listener is logged
and does not stop the others or affect the mutation that triggered it.

Example
-------
>>> registry = ListenerRegistry()
>>> remove = registry.add(lambda event: print(event.source))
>>> registry.notify(ChangeEvent(source="do", description="Set theme"))
do
0
>>> remove()
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """Notification that a subject changed.

    Attributes
    ----------
    source:
        What caused the change: ``"do"``, ``"undo"``, ``"redo"`` or
        ``"restore"``.
    description:
        Description of the ledger entry involved.
    changes:
        For settings, ``(key, old, new)`` tuples; for records, the ids of
        the records touched.
    timestamp:
        UTC time the event was created.
    """

    source: str
    description: str
    changes: tuple[object, ...] = ()
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


Listener = Callable[[ChangeEvent], None]


class ListenerRegistry:
    """Ordered set of change listeners with per-listener failure isolation."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def add(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a function that unregisters it.

        Raises
        ------
        TypeError
            When *listener* is not callable.
        """
        if not callable(listener):
            raise TypeError("Listener must be callable")
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def notify(self, event: ChangeEvent) -> int:
        """Deliver *event* to every listener and return how many failed."""
        failures = 0
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                failures += 1
                logger.warning(
                    "Change listener %r failed on %s event", listener, event.source,
                    exc_info=True,
                )
        return failures

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = [
    "ChangeEvent",
    "Listener",
    "ListenerRegistry",
]
