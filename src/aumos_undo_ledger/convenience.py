"""Convenience factories that wire a :class:`LedgerConfig` into orchestrators.

Example
-------
::

    from aumos_undo_ledger import build_command_orchestrator
    tasks = build_command_orchestrator()
    record = tasks.do_create("Write report")
    tasks.undo()

"""
from __future__ import annotations

from aumos_undo_ledger.audit.logger import AuditLogger
from aumos_undo_ledger.config import LedgerConfig
from aumos_undo_ledger.orchestrator.commands import CommandOrchestrator
from aumos_undo_ledger.orchestrator.snapshots import SnapshotOrchestrator
from aumos_undo_ledger.subjects.records import RecordStore
from aumos_undo_ledger.subjects.settings import SettingsStore


def _audit_logger(config: LedgerConfig) -> AuditLogger | None:
    if not config.audit.enabled:
        return None
    return AuditLogger(config.audit.log_path, session_id=config.audit.session_id)


def build_command_orchestrator(
    config: LedgerConfig | None = None,
    store: RecordStore | None = None,
) -> CommandOrchestrator:
    """Return a :class:`CommandOrchestrator` configured from *config*.

    Parameters
    ----------
    config:
        Validated configuration.  Defaults apply when omitted.
    store:
        Existing record store to bind.  A new empty store is used otherwise.
    """
    effective = config if config is not None else LedgerConfig()
    return CommandOrchestrator(
        store=store,
        capacity=effective.ledger.capacity,
        priority_range=effective.records.priority_range,
        default_priority=effective.records.default_priority,
        audit_logger=_audit_logger(effective),
    )


def build_snapshot_orchestrator(
    config: LedgerConfig | None = None,
    store: SettingsStore | None = None,
) -> SnapshotOrchestrator:
    """Return a :class:`SnapshotOrchestrator` configured from *config*.

    When *store* is omitted a :class:`SettingsStore` is built from
    ``config.settings.defaults`` overlaid with ``config.settings.initial``.
    """
    effective = config if config is not None else LedgerConfig()
    if store is None:
        store = SettingsStore(
            initial=effective.settings.initial,
            defaults=effective.settings.defaults,
        )
    return SnapshotOrchestrator(
        store=store,
        capacity=effective.ledger.capacity,
        verify_on_restore=effective.ledger.verify_on_restore,
        audit_logger=_audit_logger(effective),
    )


__all__ = [
    "build_command_orchestrator",
    "build_snapshot_orchestrator",
]
