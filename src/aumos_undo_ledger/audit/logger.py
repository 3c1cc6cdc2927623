"""JSON Lines audit trail of ledger activity.

Every line is one event: what happened (``do``, ``undo``, ``redo``,
``restore``, ``save`` or ``clear``), the description of the ledger entry
involved, and where the cursor ended up.  Subject state is never written,
so the trail records history navigation without being able to replay it.

Each line is stamped with a UTC timestamp, the logger's session id and a
per-session sequence number that orders events written within the same
clock tick.

Example
-------
>>> from pathlib import Path
>>> audit = AuditLogger(Path("/tmp/ledger_audit.jsonl"), session_id="demo")
>>> audit.record_change("undo", "Create record: Draft", cursor=-1, length=1)
>>> audit.last_n(1)[0]["seq"]
1
"""
from __future__ import annotations

import itertools
import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_STAMPED_FIELDS = ("timestamp", "session_id", "seq")


class AuditLogger:
    """Appends ledger events to a ``.jsonl`` file.

    Parameters
    ----------
    log_path:
        Destination file; missing parent directories are created on the
        first write.
    session_id:
        Identifier written on every line (a UUID4 when omitted).
    """

    def __init__(self, log_path: Path, session_id: str | None = None) -> None:
        self._log_path = log_path
        self._session_id = session_id or str(uuid.uuid4())
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def session_id(self) -> str:
        return self._session_id

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def record_change(self, event: str, description: str, cursor: int, length: int) -> None:
        """Write one ledger event with the cursor position after it."""
        self.log(
            {"event": event, "description": description, "cursor": cursor, "length": length}
        )

    def log(self, entry: dict[str, object]) -> None:
        """Write *entry* as one line.

        ``timestamp``, ``session_id`` and ``seq`` are always set by the
        logger; caller-supplied values for them are discarded.  Values
        JSON cannot represent are written with ``str``.
        """
        with self._lock:
            line = {key: value for key, value in entry.items() if key not in _STAMPED_FIELDS}
            line["timestamp"] = datetime.now(tz=timezone.utc).isoformat()
            line["session_id"] = self._session_id
            line["seq"] = next(self._sequence)
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(line, default=str) + "\n")

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return every parsed line, oldest first.  Unparseable lines are skipped."""
        if not self._log_path.exists():
            return []
        with self._lock:
            raw_lines = self._log_path.read_text(encoding="utf-8").splitlines()

        records: list[dict[str, object]] = []
        for number, raw in enumerate(raw_lines, start=1):
            if not raw.strip():
                continue
            try:
                records.append(json.loads(raw))
            except json.JSONDecodeError:
                logger.warning("Skipping malformed audit line %d in %s", number, self._log_path)
        return records

    def query(self, filters: dict[str, object]) -> list[dict[str, object]]:
        """Return the lines whose top-level fields equal every value in *filters*."""
        return [
            record
            for record in self.read_all()
            if all(record.get(key) == value for key, value in filters.items())
        ]

    def count(self) -> int:
        return len(self.read_all())

    def last_n(self, n: int) -> list[dict[str, object]]:
        """Return up to *n* of the newest lines (none when ``n <= 0``)."""
        return self.read_all()[-n:] if n > 0 else []


__all__ = [
    "AuditLogger",
]
