"""Composite operation: several operations recorded as one ledger entry."""
from __future__ import annotations

import logging
from typing import Sequence

from aumos_undo_ledger.operations.base import ReversibleOperation

logger = logging.getLogger(__name__)


class CompositeOperation(ReversibleOperation):
    """Execute child operations in order and undo them in reverse.

    Every child is validated before the first one runs.  The batch is
    all-or-nothing: when a child raises while running, every child that
    already executed is undone before the exception propagates.  Children
    whose target is missing are skipped on undo and redo.

    Parameters
    ----------
    subject:
        The subject all children share.
    description:
        Label for the batch as a whole.
    operations:
        Children, executed in the given order.
    """

    def __init__(
        self,
        subject: object,
        description: str,
        operations: Sequence[ReversibleOperation],
    ) -> None:
        super().__init__(subject)
        self.description = description
        self._operations: list[ReversibleOperation] = list(operations)

    @property
    def operations(self) -> list[ReversibleOperation]:
        return list(self._operations)

    def validate(self) -> None:
        """Validate every child before the first one runs."""
        for operation in self._operations:
            operation.validate()

    def _apply(self) -> list[object] | None:
        results: list[object] = []
        done: list[ReversibleOperation] = []
        try:
            for operation in self._operations:
                results.append(operation.execute())
                done.append(operation)
        except Exception:
            logger.debug("Rolling back %d child operations of %r", len(done), self.description)
            for operation in reversed(done):
                operation.undo()
            raise
        if not any(op.succeeded for op in self._operations):
            return None
        return results

    def _revert(self) -> None:
        for operation in reversed(self._operations):
            operation.undo()

    def _reapply(self) -> None:
        for operation in self._operations:
            operation.redo()

    def _describe(self) -> str:
        return self.description

    def affected(self) -> tuple[object, ...]:
        keys: list[object] = []
        for operation in self._operations:
            for key in operation.affected():
                if key not in keys:
                    keys.append(key)
        return tuple(keys)


__all__ = [
    "CompositeOperation",
]
