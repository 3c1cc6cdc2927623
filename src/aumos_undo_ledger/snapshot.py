"""Immutable state snapshots with drift-detection fingerprints.

A :class:`Snapshot` holds a private deep copy of some subject state together
with a description, a capture timestamp and a SHA-256 fingerprint of the
canonical JSON form of that state.  Every read hands out a fresh deep copy,
so nothing outside the snapshot can change what it stores.

Key objects
-----------
fingerprint : Compute the canonical digest of a state value.
Snapshot    : Frozen capture of state with ``restore`` / ``verify`` helpers.

Example
-------
>>> state = {"theme": "light"}
>>> snap = Snapshot.capture(state, "Initial configuration")
>>> state["theme"] = "dark"
>>> snap.restore()
{'theme': 'light'}
>>> snap.verify(snap.restore())
True
"""
from __future__ import annotations

import copy
import datetime
import decimal
import hashlib
import json
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum

from aumos_undo_ledger.errors import IntegrityError, SerializationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fingerprint
# ---------------------------------------------------------------------------


def _json_default(value: object) -> object:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (uuid.UUID, decimal.Decimal)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=_canonical)
    raise TypeError(f"Object of type {type(value).__name__} has no stable serialised form")


def _canonical(state: object) -> str:
    try:
        return json.dumps(state, sort_keys=True, default=_json_default)
    except ValueError as exc:
        # json reports self-referencing containers as ValueError.
        raise SerializationError(f"State cannot be serialised: {exc}") from exc
    except TypeError as exc:
        raise SerializationError(f"State cannot be serialised: {exc}") from exc


def fingerprint(state: object) -> str:
    """Return the SHA-256 hex digest of the canonical JSON form of *state*.

    Keys are sorted.  Dates and times, enums, UUIDs, decimals and sets
    (as sorted lists) are converted to a stable JSON form; any other value
    JSON cannot express natively is rejected.

    Raises
    ------
    SerializationError
        When *state* contains a reference cycle, keys that cannot be
        ordered, or a value with no stable serialised form.
    """
    return hashlib.sha256(_canonical(state).encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Snapshot:
    """Immutable capture of subject state at one point in time.

    Build instances with :meth:`capture`; the constructor is used directly
    only when rehydrating a snapshot and re-checks the fingerprint.

    Attributes
    ----------
    snapshot_id:
        Unique identifier for this snapshot.
    description:
        Human-readable label shown in history listings.
    timestamp:
        UTC time at which the state was captured.
    fingerprint:
        SHA-256 of the canonical serialised state.
    """

    snapshot_id: str
    description: str
    timestamp: datetime.datetime
    fingerprint: str
    _state: object = field(repr=False, compare=False)
    _extra: dict[str, object] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        actual = fingerprint(self._state)
        if actual != self.fingerprint:
            raise IntegrityError(self.snapshot_id, self.fingerprint, actual)

    @classmethod
    def capture(
        cls,
        state: object,
        description: str = "",
        metadata: dict[str, object] | None = None,
    ) -> Snapshot:
        """Deep-copy *state* and fingerprint the copy.

        Parameters
        ----------
        state:
            The state to capture.  Must be acyclic and JSON-representable
            (dates, enums, UUIDs, decimals and sets are also accepted).
        description:
            Label for history display.
        metadata:
            Optional context dict stored alongside the snapshot.

        Raises
        ------
        SerializationError
            When *state* contains a cycle, a value with no stable
            serialised form, or cannot be deep-copied.
        """
        # Serialise first so cycles are rejected before deepcopy, which
        # would happily reproduce them.
        _canonical(state)
        try:
            state_copy = copy.deepcopy(state)
        except (TypeError, copy.Error) as exc:
            raise SerializationError(f"State cannot be deep-copied: {exc}") from exc

        return cls(
            snapshot_id=f"snap-{uuid.uuid4().hex[:12]}",
            description=description,
            timestamp=datetime.datetime.now(datetime.timezone.utc),
            fingerprint=fingerprint(state_copy),
            _state=state_copy,
            _extra=copy.deepcopy(dict(metadata or {})),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def restore(self, check: bool = False) -> object:
        """Return a fresh deep copy of the captured state.

        Parameters
        ----------
        check:
            When True, run :meth:`verify_integrity` first and raise on
            mismatch.

        Raises
        ------
        IntegrityError
            When *check* is set and the stored state has drifted.
        """
        if check:
            self.ensure_integrity()
        return copy.deepcopy(self._state)

    def metadata(self) -> dict[str, object]:
        """Return descriptive metadata without exposing the state."""
        return {
            "snapshot_id": self.snapshot_id,
            "description": self.description,
            "timestamp": self.timestamp,
            "fingerprint": self.fingerprint,
            **copy.deepcopy(self._extra),
        }

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify(self, candidate_state: object) -> bool:
        """Return True when *candidate_state* fingerprints to the stored digest."""
        try:
            return fingerprint(candidate_state) == self.fingerprint
        except SerializationError:
            return False

    def verify_integrity(self) -> bool:
        """Return True when the stored state still matches :attr:`fingerprint`."""
        return self.verify(self._state)

    def ensure_integrity(self) -> None:
        """Raise :class:`IntegrityError` if the stored state has drifted."""
        actual = fingerprint(self._state)
        if actual != self.fingerprint:
            logger.error(
                "Snapshot %s failed integrity check (%s != %s)",
                self.snapshot_id,
                actual,
                self.fingerprint,
            )
            raise IntegrityError(self.snapshot_id, self.fingerprint, actual)


__all__ = [
    "Snapshot",
    "fingerprint",
]
