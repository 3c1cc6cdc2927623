"""Exception hierarchy for the undo ledger.

Error taxonomy
--------------
ValidationError     : Bad input to a domain verb.  Raised before any mutation.
NotFoundError       : The target of an operation does not exist.  Domain verbs
                      surface this as ``None``/``False``; only strict
                      accessors raise it.
IntegrityError      : A snapshot fingerprint failed verification.
SerializationError  : State handed to a snapshot cannot be copied or
                      serialised (for example it contains a cycle).

Navigation boundaries (nothing left to undo or redo) are never errors.
"""
from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by :mod:`aumos_undo_ledger`."""


class ValidationError(LedgerError, ValueError):
    """Raised when a domain verb receives invalid input.

    Attributes
    ----------
    field:
        Name of the offending field or setting key.
    value:
        The rejected value.
    message:
        Human-readable explanation.
    """

    def __init__(self, field: str, value: object, message: str) -> None:
        self.field = field
        self.value = value
        self.message = message
        super().__init__(f"Invalid value for '{field}': {message}")


class NotFoundError(LedgerError, LookupError):
    """Raised by strict accessors when a record id is unknown.

    Attributes
    ----------
    target_id:
        The identifier that could not be resolved.
    """

    def __init__(self, target_id: object) -> None:
        self.target_id = target_id
        super().__init__(f"Target not found: {target_id!r}")


class IntegrityError(LedgerError):
    """Raised when a snapshot's stored fingerprint no longer matches its state.

    Attributes
    ----------
    snapshot_id:
        Identifier of the snapshot that failed verification.
    expected:
        The fingerprint recorded at capture time.
    actual:
        The fingerprint recomputed from the current stored state.
    """

    def __init__(self, snapshot_id: str, expected: str, actual: str) -> None:
        self.snapshot_id = snapshot_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Snapshot '{snapshot_id}' failed integrity check "
            f"(expected {expected[:12]}, got {actual[:12]})"
        )


class SerializationError(LedgerError, TypeError):
    """Raised when state cannot be deep-copied or serialised for capture."""


__all__ = [
    "IntegrityError",
    "LedgerError",
    "NotFoundError",
    "SerializationError",
    "ValidationError",
]
