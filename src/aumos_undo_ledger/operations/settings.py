"""Reversible settings update over a :class:`SettingsStore`."""
from __future__ import annotations

from aumos_undo_ledger.operations.base import ReversibleOperation
from aumos_undo_ledger.subjects.settings import Change, SettingsStore


class UpdateSettingsOperation(ReversibleOperation):
    """Set one or more settings atomically.

    Every pair is validated before the first write, so a rejected value
    leaves the store untouched.  ``execute()`` returns the list of
    ``(key, old, new)`` changes (possibly empty when nothing differed).
    """

    def __init__(self, store: SettingsStore, settings: dict[str, object]) -> None:
        super().__init__(store)
        self._store = store
        self.settings = dict(settings) if isinstance(settings, dict) else settings
        self.changes: list[Change] = []

    def validate(self) -> None:
        self._store.validate_many(self.settings)

    def _apply(self) -> list[Change]:
        self._prior_state = {key: self._store.get(key) for key in self.settings}
        self.changes = self._store.apply(self.settings)
        return list(self.changes)

    def _revert(self) -> None:
        self._store.apply(self._prior_state)

    def _describe(self) -> str:
        if len(self.settings) == 1:
            key, value = next(iter(self.settings.items()))
            return f"Set {key} to {value!r}"
        return "Update settings: " + ", ".join(sorted(self.settings))

    def affected(self) -> tuple[object, ...]:
        return tuple(key for key, _, _ in self.changes)


__all__ = [
    "UpdateSettingsOperation",
]
