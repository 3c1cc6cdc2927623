"""Tests for SnapshotOrchestrator."""
from __future__ import annotations

from pathlib import Path

import pytest

from aumos_undo_ledger.audit.logger import AuditLogger
from aumos_undo_ledger.errors import IntegrityError, SerializationError, ValidationError
from aumos_undo_ledger.events import ChangeEvent
from aumos_undo_ledger.orchestrator import BASELINE_DESCRIPTION, SnapshotOrchestrator
from aumos_undo_ledger.subjects.settings import DEFAULT_SETTINGS, SettingsStore


@pytest.fixture()
def config() -> SnapshotOrchestrator:
    return SnapshotOrchestrator(capacity=10)


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------


class TestBaseline:
    def test_baseline_saved_on_construction(self, config: SnapshotOrchestrator) -> None:
        history = config.history()
        assert len(history) == 1
        assert history[0].description == BASELINE_DESCRIPTION
        assert history[0].is_current is True

    def test_cannot_undo_at_baseline(self, config: SnapshotOrchestrator) -> None:
        assert config.can_undo() is False
        assert config.undo() is False
        assert config.store.state() == DEFAULT_SETTINGS

    def test_baseline_uses_supplied_store(self) -> None:
        store = SettingsStore({"theme": "dark"})
        config = SnapshotOrchestrator(store)
        config.do_update("theme", "system")
        config.undo()
        assert config.store.get("theme") == "dark"


# ---------------------------------------------------------------------------
# Changes
# ---------------------------------------------------------------------------


class TestChanges:
    def test_do_update_returns_state(self, config: SnapshotOrchestrator) -> None:
        state = config.do_update("theme", "dark")
        assert state["theme"] == "dark"
        assert config.history()[-1].description == "Set theme to 'dark'"

    def test_custom_description(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark", description="Go dark")
        assert config.history()[-1].description == "Go dark"

    def test_invalid_value_records_nothing(self, config: SnapshotOrchestrator) -> None:
        with pytest.raises(ValidationError):
            config.do_update("theme", "purple")
        assert len(config.ledger) == 1
        assert config.store.state() == DEFAULT_SETTINGS

    def test_unknown_key_records_nothing(self, config: SnapshotOrchestrator) -> None:
        with pytest.raises(ValidationError):
            config.do_update_many({"theme": "dark", "font": "mono"})
        assert config.store.get("theme") == "light"
        assert len(config.ledger) == 1

    def test_unserialisable_value_reverted(self) -> None:
        class Handler:
            pass

        config = SnapshotOrchestrator(SettingsStore({"handler": None}))
        with pytest.raises(SerializationError):
            config.do_update("handler", Handler())
        assert config.store.get("handler") is None
        assert len(config.ledger) == 1

    def test_do_update_many_is_one_entry(self, config: SnapshotOrchestrator) -> None:
        config.do_update_many({"theme": "dark", "language": "fr"})
        assert len(config.ledger) == 2
        config.undo()
        assert config.store.state() == DEFAULT_SETTINGS


# ---------------------------------------------------------------------------
# Undo / redo
# ---------------------------------------------------------------------------


class TestUndoRedo:
    def test_round_trip(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark")
        config.do_update("language", "de")
        after = config.store.state()
        assert config.undo() is True
        assert config.store.get("language") == "en"
        assert config.undo() is True
        assert config.store.state() == DEFAULT_SETTINGS
        assert config.redo() is True
        assert config.redo() is True
        assert config.store.state() == after
        assert config.redo() is False

    def test_capacity_scenario(self) -> None:
        config = SnapshotOrchestrator(capacity=3)
        config.do_update("theme", "dark", description="A")
        config.do_update("language", "fr", description="B")
        config.do_update("theme", "system", description="C")
        config.do_update("notifications", False, description="D")
        assert [item.description for item in config.history()] == ["B", "C", "D"]

        config.undo()
        config.undo()
        assert config.ledger.cursor == 0
        assert config.store.state() == {
            **DEFAULT_SETTINGS,
            "theme": "dark",
            "language": "fr",
        }
        assert config.can_undo() is False

        config.do_update("performance_mode", True, description="E")
        assert [item.description for item in config.history()] == ["B", "E"]
        assert config.can_redo() is False

    def test_restore_to(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark")
        config.do_update("theme", "system")
        snapshot = config.restore_to(1)
        assert snapshot.description == "Set theme to 'dark'"
        assert config.store.get("theme") == "dark"
        assert config.can_redo() is True
        config.restore_to(0)
        assert config.store.state() == DEFAULT_SETTINGS

    def test_restore_to_out_of_range(self, config: SnapshotOrchestrator) -> None:
        with pytest.raises(IndexError):
            config.restore_to(3)
        with pytest.raises(IndexError):
            config.restore_to(-1)

    def test_clear_then_rebaseline(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark")
        config.clear()
        assert config.history() == []
        assert config.can_undo() is False
        config.do_update("language", "es")
        assert [item.description for item in config.history()] == [
            BASELINE_DESCRIPTION,
            "Set language to 'es'",
        ]
        config.undo()
        assert config.store.get("theme") == "dark"
        assert config.store.get("language") == "en"

    def test_save_records_manual_checkpoint(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark")
        snapshot = config.save("Checkpoint")
        assert config.history()[-1].description == "Checkpoint"
        assert snapshot.verify(config.store.state()) is True


# ---------------------------------------------------------------------------
# Integrity
# ---------------------------------------------------------------------------


class TestIntegrity:
    def test_tampered_snapshot_blocks_undo(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark")
        baseline = config.ledger.entries()[0]
        baseline._state["theme"] = "system"  # type: ignore[index]
        with pytest.raises(IntegrityError):
            config.undo()
        assert config.ledger.cursor == 1
        assert config.store.get("theme") == "dark"

    def test_tampered_snapshot_blocks_restore(self, config: SnapshotOrchestrator) -> None:
        config.do_update("theme", "dark")
        config.do_update("theme", "system")
        config.ledger.entries()[1]._state["theme"] = "light"  # type: ignore[index]
        with pytest.raises(IntegrityError):
            config.restore_to(1)
        assert config.ledger.cursor == 2

    def test_verification_can_be_disabled(self) -> None:
        config = SnapshotOrchestrator(verify_on_restore=False)
        config.do_update("theme", "dark")
        config.ledger.entries()[0]._state["theme"] = "system"  # type: ignore[index]
        assert config.undo() is True
        assert config.store.get("theme") == "system"


# ---------------------------------------------------------------------------
# Listeners and audit
# ---------------------------------------------------------------------------


class TestNotifications:
    def test_events_carry_changes(self, config: SnapshotOrchestrator) -> None:
        events: list[ChangeEvent] = []
        config.add_listener(events.append)
        config.do_update("theme", "dark")
        config.undo()
        config.redo()
        assert [e.source for e in events] == ["do", "undo", "redo"]
        assert events[0].changes == (("theme", "light", "dark"),)
        assert events[1].changes == (("theme", "dark", "light"),)

    def test_save_does_not_notify(self, config: SnapshotOrchestrator) -> None:
        events: list[ChangeEvent] = []
        config.add_listener(events.append)
        config.save("Checkpoint")
        assert events == []

    def test_failing_listener_does_not_block_undo(self, config: SnapshotOrchestrator) -> None:
        def broken(event: ChangeEvent) -> None:
            raise ValueError("nope")

        config.add_listener(broken)
        config.do_update("theme", "dark")
        assert config.undo() is True
        assert config.store.get("theme") == "light"

    def test_audit_trail(self, tmp_path: Path) -> None:
        audit = AuditLogger(tmp_path / "audit.jsonl")
        config = SnapshotOrchestrator(audit_logger=audit)
        config.do_update("theme", "dark")
        config.undo()
        config.restore_to(1)
        events = [record["event"] for record in audit.read_all()]
        assert events == ["save", "do", "undo", "restore"]
        assert audit.last_n(1)[0]["cursor"] == 1
