"""Abstract reversible operation.

A :class:`ReversibleOperation` binds one subject and a set of parameters to a
forward mutation and its inverse.  Concrete operations implement three hooks:

- ``_apply()``: perform the mutation, capture prior state, return a result
- ``_revert()``: restore the captured prior state
- ``_describe()``: human-readable label

``execute()`` always runs :meth:`validate` first, so invalid input raises
before the subject is touched.  A result of ``None`` or ``False`` from
``_apply()`` means the target did not exist; such an operation is never
considered executed and its ``undo()`` is a no-op.
"""
from __future__ import annotations

import copy
import datetime
import uuid
from abc import ABC, abstractmethod


class ReversibleOperation(ABC):
    """Base class for every operation that can be recorded in a ledger.

    Parameters
    ----------
    subject:
        The mutable aggregate this operation acts on.

    Attributes
    ----------
    operation_id:
        Unique identifier for this operation.
    timestamp:
        UTC creation time.
    """

    def __init__(self, subject: object) -> None:
        self._subject = subject
        self.operation_id: str = f"op-{uuid.uuid4().hex[:12]}"
        self.timestamp: datetime.datetime = datetime.datetime.now(datetime.timezone.utc)
        self._prior_state: object = None
        self._executed: bool = False
        self._undone: bool = False
        self._description: str | None = None

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Raise :class:`~aumos_undo_ledger.errors.ValidationError` on bad input.

        Runs before any mutation.  The default accepts everything.
        """

    @abstractmethod
    def _apply(self) -> object:
        """Perform the forward mutation and return the domain result."""

    @abstractmethod
    def _revert(self) -> None:
        """Apply the inverse of the last forward mutation."""

    def _reapply(self) -> None:
        """Re-run the forward mutation after an undo."""
        self._apply()

    @abstractmethod
    def _describe(self) -> str:
        """Return the label shown in history listings."""

    def affected(self) -> tuple[object, ...]:
        """Return the keys or ids this operation touches."""
        return ()

    async def _apply_async(self) -> object:
        return self._apply()

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    def execute(self) -> object:
        """Validate, then perform the mutation.

        Returns
        -------
        object
            The domain result, or ``None``/``False`` when the target does
            not exist.

        Raises
        ------
        ValidationError
            When :meth:`validate` rejects the parameters.
        """
        self.validate()
        result = self._apply()
        self._finish(result)
        return result

    async def execute_async(self) -> object:
        """Awaitable counterpart of :meth:`execute`.

        Subclasses with an asynchronous side effect override
        ``_apply_async``; the mutation must still be all-or-nothing.
        """
        self.validate()
        result = await self._apply_async()
        self._finish(result)
        return result

    def undo(self) -> bool:
        """Apply the captured inverse.  Returns False if never executed."""
        if not self._executed or self._undone:
            return False
        self._revert()
        self._undone = True
        return True

    def redo(self) -> bool:
        """Re-apply the forward direction after :meth:`undo`."""
        if not self._executed or not self._undone:
            return False
        self._reapply()
        self._undone = False
        return True

    def describe(self) -> str:
        """Return a stable description for audit and history display."""
        if self._description is not None:
            return self._description
        return self._describe()

    @property
    def subject(self) -> object:
        """The subject this operation is bound to."""
        return self._subject

    @property
    def succeeded(self) -> bool:
        """True once :meth:`execute` has found and mutated its target."""
        return self._executed

    @property
    def prior_state(self) -> object:
        """Deep copy of the state captured for undo (None before execute)."""
        return copy.deepcopy(self._prior_state)

    def _finish(self, result: object) -> None:
        self._executed = result is not None and result is not False
        self._undone = False
        if self._executed:
            self._description = self._describe()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()!r})"


__all__ = [
    "ReversibleOperation",
]
