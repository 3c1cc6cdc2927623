"""Validated configuration map used as the subject of snapshot history.

The key set is fixed when the store is created.  Each key may carry a
validator; :meth:`SettingsStore.validate` rejects unknown keys and values a
validator refuses, and never mutates anything.

Example
-------
>>> store = SettingsStore({"refresh_rate": 60})
>>> store.validate("theme", "dark")
>>> store.apply({"theme": "dark"})
[('theme', 'light', 'dark')]
"""
from __future__ import annotations

import copy
from typing import Callable

from aumos_undo_ledger.errors import ValidationError

Validator = Callable[[object], bool]
Change = tuple[str, object, object]

DEFAULT_SETTINGS: dict[str, object] = {
    "theme": "light",
    "language": "en",
    "notifications": True,
    "performance_mode": False,
}


def _is_bool(value: object) -> bool:
    return isinstance(value, bool)


def _is_language(value: object) -> bool:
    return isinstance(value, str) and len(value) == 2


def _is_theme(value: object) -> bool:
    return value in ("light", "dark", "system")


DEFAULT_VALIDATORS: dict[str, Validator] = {
    "theme": _is_theme,
    "language": _is_language,
    "notifications": _is_bool,
    "performance_mode": _is_bool,
}


class SettingsStore:
    """Mutable settings map with per-key validators.

    Parameters
    ----------
    initial:
        Values merged over :data:`DEFAULT_SETTINGS`.  New keys introduced
        here become part of the fixed key set.
    defaults:
        Replacement for :data:`DEFAULT_SETTINGS`.
    """

    def __init__(
        self,
        initial: dict[str, object] | None = None,
        defaults: dict[str, object] | None = None,
    ) -> None:
        base = DEFAULT_SETTINGS if defaults is None else defaults
        self._settings: dict[str, object] = {**copy.deepcopy(base), **copy.deepcopy(initial or {})}
        self._validators: dict[str, Validator] = dict(DEFAULT_VALIDATORS)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def register_validator(self, key: str, validator: Validator) -> None:
        """Attach *validator* to *key*, replacing any existing one."""
        if not callable(validator):
            raise TypeError("Validator must be callable")
        self._validators[key] = validator

    def validate(self, key: str, value: object) -> None:
        """Raise :class:`ValidationError` if *value* is not acceptable for *key*."""
        if key not in self._settings:
            raise ValidationError(key, value, "unknown setting key")
        validator = self._validators.get(key)
        if validator is not None and not validator(value):
            raise ValidationError(key, value, f"rejected value {value!r}")

    def validate_many(self, settings: dict[str, object]) -> None:
        """Validate every pair in *settings* before anything is applied."""
        if not isinstance(settings, dict) or not settings:
            raise ValidationError("settings", settings, "must be a non-empty mapping")
        for key, value in settings.items():
            self.validate(key, value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def apply(self, settings: dict[str, object]) -> list[Change]:
        """Write *settings* without validation and return what changed."""
        changes: list[Change] = []
        for key, value in settings.items():
            old = self._settings.get(key)
            if old != value:
                changes.append((key, copy.deepcopy(old), copy.deepcopy(value)))
            self._settings[key] = copy.deepcopy(value)
        return changes

    def replace_state(self, state: dict[str, object]) -> list[Change]:
        """Swap in *state* wholesale and return the keys whose values changed."""
        new_state = copy.deepcopy(dict(state))
        changes = self.diff(self._settings, new_state)
        self._settings = new_state
        return changes

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str) -> object:
        """Return a copy of the value for *key* (None if unknown)."""
        return copy.deepcopy(self._settings.get(key))

    def state(self) -> dict[str, object]:
        """Return a deep copy of every setting."""
        return copy.deepcopy(self._settings)

    def keys(self) -> list[str]:
        return list(self._settings)

    @staticmethod
    def diff(old: dict[str, object], new: dict[str, object]) -> list[Change]:
        """Return ``(key, old, new)`` for every key whose value differs."""
        changes: list[Change] = []
        for key in list(old) + [k for k in new if k not in old]:
            before = old.get(key)
            after = new.get(key)
            if before != after:
                changes.append((key, copy.deepcopy(before), copy.deepcopy(after)))
        return changes

    def __contains__(self, key: object) -> bool:
        return key in self._settings

    def __repr__(self) -> str:
        return f"SettingsStore(keys={sorted(self._settings)})"


__all__ = [
    "DEFAULT_SETTINGS",
    "DEFAULT_VALIDATORS",
    "SettingsStore",
]
