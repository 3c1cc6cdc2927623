"""Keyed record collection used as the subject of command-style history.

Records are plain dicts keyed by a monotonically increasing integer id.  The
store copies on the way in and on the way out, so callers never hold a
reference to stored data.

Example
-------
>>> store = RecordStore()
>>> record = store.create("Write report", priority=2)
>>> record["id"]
1
>>> store.get(1)["title"]
'Write report'
"""
from __future__ import annotations

import copy
import datetime
from typing import Iterable

from aumos_undo_ledger.errors import NotFoundError

Record = dict[str, object]


class RecordStore:
    """Mutable collection of records, the "current truth" for record history.

    Parameters
    ----------
    records:
        Optional initial records.  Each must carry an integer ``id``.
    """

    def __init__(self, records: Iterable[Record] | None = None) -> None:
        self._records: dict[int, Record] = {}
        self._last_id: int = 0
        for record in records or ():
            self.put(record)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(
        self,
        title: str,
        description: str = "",
        priority: int = 3,
        **fields: object,
    ) -> Record:
        """Insert a new record with a fresh id and return a copy of it."""
        self._last_id += 1
        record: Record = {
            **copy.deepcopy(fields),
            "id": self._last_id,
            "title": title,
            "description": description,
            "priority": priority,
            "completed": False,
            "created_at": datetime.datetime.now(datetime.timezone.utc),
            "completed_at": None,
        }
        self._records[self._last_id] = record
        return copy.deepcopy(record)

    def put(self, record: Record) -> None:
        """Insert or replace a record by its ``id``."""
        record_id = record["id"]
        if not isinstance(record_id, int):
            raise TypeError(f"Record id must be an int, got {type(record_id).__name__}")
        self._records[record_id] = copy.deepcopy(record)
        self._last_id = max(self._last_id, record_id)

    def update(self, record_id: int, **fields: object) -> Record | None:
        """Set *fields* on an existing record.  Returns None if missing."""
        record = self._records.get(record_id)
        if record is None:
            return None
        record.update(copy.deepcopy(fields))
        return copy.deepcopy(record)

    def remove(self, record_id: int) -> Record | None:
        """Delete a record and return it, or None if it does not exist."""
        return self._records.pop(record_id, None)

    def replace_state(self, state: dict[int, Record]) -> None:
        """Replace every record with the contents of *state*."""
        self._records = copy.deepcopy(dict(state))
        if self._records:
            self._last_id = max(self._last_id, max(self._records))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, record_id: int) -> Record | None:
        """Return a copy of the record, or None."""
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def require(self, record_id: int) -> Record:
        """Return a copy of the record.

        Raises
        ------
        NotFoundError
            When no record has *record_id*.
        """
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def all(self) -> list[Record]:
        """Return copies of every record, ordered by id."""
        return [copy.deepcopy(self._records[key]) for key in sorted(self._records)]

    def state(self) -> dict[int, Record]:
        """Return a deep copy of the full store contents."""
        return copy.deepcopy(self._records)

    @property
    def last_id(self) -> int:
        """Highest id ever assigned.  Ids are never reused."""
        return self._last_id

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __repr__(self) -> str:
        return f"RecordStore(records={len(self._records)}, last_id={self._last_id})"


__all__ = [
    "Record",
    "RecordStore",
]
