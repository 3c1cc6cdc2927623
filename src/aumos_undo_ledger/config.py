"""Ledger configuration loader with Pydantic v2 validation.

Loads and validates a ``ledger.yaml`` file into a typed :class:`LedgerConfig`
object.  Unknown keys are allowed to support future schema additions without
breakage.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string("ledger: {capacity: 25}")
>>> config.ledger.capacity
25
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from aumos_undo_ledger.ledger import DEFAULT_CAPACITY
from aumos_undo_ledger.subjects.settings import DEFAULT_SETTINGS


class HistoryConfig(BaseModel):
    """Configuration for the history ledger itself."""

    model_config = {"extra": "allow"}

    capacity: int = Field(default=DEFAULT_CAPACITY, ge=1)
    verify_on_restore: bool = Field(default=True)


class RecordsConfig(BaseModel):
    """Configuration for record validation."""

    model_config = {"extra": "allow"}

    priority_min: int = Field(default=1)
    priority_max: int = Field(default=5)
    default_priority: int = Field(default=3)

    @model_validator(mode="after")
    def check_priority_bounds(self) -> RecordsConfig:
        if self.priority_min > self.priority_max:
            raise ValueError(
                f"priority_min ({self.priority_min}) exceeds priority_max ({self.priority_max})"
            )
        if not self.priority_min <= self.default_priority <= self.priority_max:
            raise ValueError(
                f"default_priority {self.default_priority} outside "
                f"[{self.priority_min}, {self.priority_max}]"
            )
        return self

    @property
    def priority_range(self) -> tuple[int, int]:
        return (self.priority_min, self.priority_max)


class AuditConfig(BaseModel):
    """Configuration for the audit trail."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=False)
    log_path: Path = Field(default=Path("./ledger_audit.jsonl"))
    session_id: str | None = Field(default=None)


class SettingsConfig(BaseModel):
    """Initial values for a settings store."""

    model_config = {"extra": "allow"}

    defaults: dict[str, object] = Field(default_factory=lambda: dict(DEFAULT_SETTINGS))
    initial: dict[str, object] = Field(default_factory=dict)


class LedgerConfig(BaseModel):
    """Top-level configuration schema.

    Loaded from ``ledger.yaml``.  All sections are optional and fall back to
    sensible defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    ledger: HistoryConfig = Field(default_factory=HistoryConfig)
    records: RecordsConfig = Field(default_factory=RecordsConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    settings: SettingsConfig = Field(default_factory=SettingsConfig)


class ConfigLoader:
    """Loads and validates ledger YAML configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("ledger.yaml"))
    """

    def load(self, config_path: Path) -> LedgerConfig:
        """Load and validate a ledger YAML file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Ledger config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return LedgerConfig.model_validate(raw)

    def load_string(self, yaml_content: str) -> LedgerConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return LedgerConfig.model_validate(raw)

    def defaults(self) -> LedgerConfig:
        """Return a default configuration with all defaults applied."""
        return LedgerConfig()


__all__ = [
    "AuditConfig",
    "ConfigLoader",
    "HistoryConfig",
    "LedgerConfig",
    "RecordsConfig",
    "SettingsConfig",
]
