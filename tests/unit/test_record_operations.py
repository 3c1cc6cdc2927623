"""Tests for record subjects and the record operations."""
from __future__ import annotations

import pytest

from aumos_undo_ledger.errors import NotFoundError, ValidationError
from aumos_undo_ledger.operations import (
    CompleteRecordOperation,
    CompositeOperation,
    CreateRecordOperation,
    DeleteRecordOperation,
    ReopenRecordOperation,
    SetPriorityOperation,
    UpdateRecordOperation,
)
from aumos_undo_ledger.operations.records import _RecordMutation
from aumos_undo_ledger.subjects.records import RecordStore


@pytest.fixture()
def store() -> RecordStore:
    return RecordStore()


@pytest.fixture()
def seeded(store: RecordStore) -> RecordStore:
    store.create("Write report", "Quarterly numbers", 2)
    store.create("Review PR", priority=4)
    return store


# ---------------------------------------------------------------------------
# RecordStore
# ---------------------------------------------------------------------------


class TestRecordStore:
    def test_create_assigns_incrementing_ids(self, store: RecordStore) -> None:
        first = store.create("a")
        second = store.create("b")
        assert (first["id"], second["id"]) == (1, 2)

    def test_create_defaults(self, store: RecordStore) -> None:
        record = store.create("a")
        assert record["priority"] == 3
        assert record["completed"] is False
        assert record["completed_at"] is None
        assert record["created_at"] is not None

    def test_extra_fields_kept(self, store: RecordStore) -> None:
        record = store.create("a", owner="sam")
        assert record["owner"] == "sam"

    def test_get_returns_copy(self, seeded: RecordStore) -> None:
        record = seeded.get(1)
        assert record is not None
        record["title"] = "changed"
        assert seeded.get(1)["title"] == "Write report"

    def test_get_missing_returns_none(self, store: RecordStore) -> None:
        assert store.get(42) is None

    def test_require_missing_raises(self, store: RecordStore) -> None:
        with pytest.raises(NotFoundError) as excinfo:
            store.require(42)
        assert excinfo.value.target_id == 42

    def test_ids_not_reused_after_remove(self, store: RecordStore) -> None:
        store.create("a")
        store.remove(1)
        assert store.create("b")["id"] == 2

    def test_put_rejects_non_int_id(self, store: RecordStore) -> None:
        with pytest.raises(TypeError):
            store.put({"id": "x", "title": "bad"})

    def test_state_and_replace_state(self, seeded: RecordStore) -> None:
        saved = seeded.state()
        seeded.remove(1)
        seeded.replace_state(saved)
        assert len(seeded) == 2
        assert 1 in seeded

    def test_all_ordered_by_id(self, seeded: RecordStore) -> None:
        assert [r["id"] for r in seeded.all()] == [1, 2]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateRecordOperation:
    def test_execute_returns_record(self, store: RecordStore) -> None:
        op = CreateRecordOperation(store, "Write report", priority=2)
        record = op.execute()
        assert record["title"] == "Write report"
        assert op.succeeded is True
        assert op.record_id == 1

    def test_undo_removes_record(self, store: RecordStore) -> None:
        op = CreateRecordOperation(store, "Write report")
        op.execute()
        assert op.undo() is True
        assert len(store) == 0

    def test_redo_reuses_id(self, store: RecordStore) -> None:
        op = CreateRecordOperation(store, "Write report")
        created = op.execute()
        op.undo()
        op.redo()
        assert store.get(created["id"]) == created

    @pytest.mark.parametrize("priority", [0, 6, "high", True])
    def test_invalid_priority_rejected(self, store: RecordStore, priority: object) -> None:
        op = CreateRecordOperation(store, "x", priority=priority)  # type: ignore[arg-type]
        with pytest.raises(ValidationError):
            op.execute()
        assert len(store) == 0

    def test_blank_title_rejected(self, store: RecordStore) -> None:
        with pytest.raises(ValidationError) as excinfo:
            CreateRecordOperation(store, "   ").execute()
        assert excinfo.value.field == "title"

    def test_protected_fields_rejected(self, store: RecordStore) -> None:
        with pytest.raises(ValidationError):
            CreateRecordOperation(store, "x", fields={"id": 99}).execute()

    def test_describe(self, store: RecordStore) -> None:
        assert CreateRecordOperation(store, "Ship it").describe() == "Create record: Ship it"

    def test_undo_without_execute_is_noop(self, store: RecordStore) -> None:
        assert CreateRecordOperation(store, "x").undo() is False


# ---------------------------------------------------------------------------
# In-place mutations
# ---------------------------------------------------------------------------


class TestMutations:
    def test_mutation_without_changes_cannot_be_built(self, seeded: RecordStore) -> None:
        class Touch(_RecordMutation):
            verb = "Touch"

        with pytest.raises(TypeError):
            Touch(seeded, 1)  # type: ignore[abstract]

    def test_complete_and_undo(self, seeded: RecordStore) -> None:
        before = seeded.get(1)
        op = CompleteRecordOperation(seeded, 1)
        assert op.execute() is True
        assert seeded.get(1)["completed"] is True
        assert seeded.get(1)["completed_at"] is not None
        op.undo()
        assert seeded.get(1) == before

    def test_complete_redo_restores_exact_record(self, seeded: RecordStore) -> None:
        op = CompleteRecordOperation(seeded, 1)
        op.execute()
        after = seeded.get(1)
        op.undo()
        op.redo()
        assert seeded.get(1) == after

    def test_reopen(self, seeded: RecordStore) -> None:
        CompleteRecordOperation(seeded, 1).execute()
        op = ReopenRecordOperation(seeded, 1)
        assert op.execute() is True
        assert seeded.get(1)["completed"] is False
        assert op.describe() == "Reopen record: Write report"

    def test_missing_target_returns_false(self, store: RecordStore) -> None:
        op = CompleteRecordOperation(store, 99)
        assert op.execute() is False
        assert op.succeeded is False
        assert op.undo() is False

    def test_set_priority(self, seeded: RecordStore) -> None:
        op = SetPriorityOperation(seeded, 1, 5)
        assert op.execute() is True
        assert seeded.get(1)["priority"] == 5
        assert op.describe() == "Update priority of record: Write report to 5"
        op.undo()
        assert seeded.get(1)["priority"] == 2

    def test_set_priority_validates_before_lookup(self, store: RecordStore) -> None:
        with pytest.raises(ValidationError):
            SetPriorityOperation(store, 99, 9).execute()

    def test_update_returns_updated_record(self, seeded: RecordStore) -> None:
        op = UpdateRecordOperation(seeded, 2, {"title": "Review PR #12", "owner": "kim"})
        updated = op.execute()
        assert updated["title"] == "Review PR #12"
        assert updated["owner"] == "kim"
        op.undo()
        assert "owner" not in seeded.get(2)

    def test_update_missing_returns_none(self, store: RecordStore) -> None:
        assert UpdateRecordOperation(store, 5, {"title": "x"}).execute() is None

    def test_update_requires_fields(self, seeded: RecordStore) -> None:
        with pytest.raises(ValidationError):
            UpdateRecordOperation(seeded, 1, {}).execute()

    def test_update_cannot_change_id(self, seeded: RecordStore) -> None:
        with pytest.raises(ValidationError):
            UpdateRecordOperation(seeded, 1, {"id": 7}).execute()

    def test_prior_state_is_copy(self, seeded: RecordStore) -> None:
        op = CompleteRecordOperation(seeded, 1)
        op.execute()
        prior = op.prior_state
        prior["title"] = "tampered"
        op.undo()
        assert seeded.get(1)["title"] == "Write report"

    def test_description_stable_after_delete(self, seeded: RecordStore) -> None:
        op = CompleteRecordOperation(seeded, 1)
        op.execute()
        seeded.remove(1)
        assert op.describe() == "Complete record: Write report"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDeleteRecordOperation:
    def test_delete_and_undo(self, seeded: RecordStore) -> None:
        before = seeded.get(1)
        op = DeleteRecordOperation(seeded, 1)
        assert op.execute() is True
        assert 1 not in seeded
        assert op.describe() == "Delete record: Write report"
        op.undo()
        assert seeded.get(1) == before

    def test_delete_redo(self, seeded: RecordStore) -> None:
        op = DeleteRecordOperation(seeded, 1)
        op.execute()
        op.undo()
        op.redo()
        assert 1 not in seeded

    def test_delete_missing(self, store: RecordStore) -> None:
        op = DeleteRecordOperation(store, 3)
        assert op.execute() is False
        assert op.describe() == "Delete record: 3"


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------


class TestCompositeOperation:
    def test_executes_in_order_and_undoes_in_reverse(self, seeded: RecordStore) -> None:
        before = seeded.state()
        batch = CompositeOperation(
            seeded,
            "Triage",
            [CompleteRecordOperation(seeded, 1), DeleteRecordOperation(seeded, 2)],
        )
        assert batch.execute() == [True, True]
        assert batch.affected() == (1, 2)
        batch.undo()
        assert seeded.state() == before

    def test_validates_every_child_before_running(self, seeded: RecordStore) -> None:
        before = seeded.state()
        complete = CompleteRecordOperation(seeded, 1)
        create = CreateRecordOperation(seeded, "Extra")
        batch = CompositeOperation(
            seeded,
            "Bad batch",
            [complete, create, SetPriorityOperation(seeded, 2, 42)],
        )
        with pytest.raises(ValidationError):
            batch.execute()
        assert seeded.state() == before
        assert seeded.last_id == 2
        assert complete.succeeded is False
        assert create.succeeded is False
        assert batch.succeeded is False

    def test_rolls_back_when_child_fails_while_running(self, seeded: RecordStore) -> None:
        class Exploding(DeleteRecordOperation):
            def _apply(self) -> bool:
                raise RuntimeError("storage offline")

        before = seeded.state()
        batch = CompositeOperation(
            seeded,
            "Partial",
            [CompleteRecordOperation(seeded, 1), Exploding(seeded, 2)],
        )
        with pytest.raises(RuntimeError):
            batch.execute()
        assert seeded.state() == before
        assert batch.succeeded is False

    def test_all_missing_targets_is_not_found(self, store: RecordStore) -> None:
        batch = CompositeOperation(store, "Nothing", [DeleteRecordOperation(store, 1)])
        assert batch.execute() is None
        assert batch.succeeded is False

    def test_redo(self, seeded: RecordStore) -> None:
        batch = CompositeOperation(
            seeded, "Finish", [CompleteRecordOperation(seeded, 1), CompleteRecordOperation(seeded, 2)]
        )
        batch.execute()
        after = seeded.state()
        batch.undo()
        batch.redo()
        assert seeded.state() == after
        assert batch.describe() == "Finish"
