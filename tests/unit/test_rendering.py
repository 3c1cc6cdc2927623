"""Tests for HistoryRenderer."""
from __future__ import annotations

import json

import pytest

from aumos_undo_ledger.orchestrator import CommandOrchestrator
from aumos_undo_ledger.orchestrator.base import HistoryItem
from aumos_undo_ledger.rendering import HistoryRenderer


@pytest.fixture()
def renderer() -> HistoryRenderer:
    return HistoryRenderer(width=120)


@pytest.fixture()
def items() -> list[HistoryItem]:
    app = CommandOrchestrator()
    app.do_create("Write report")
    app.do_create("Review draft")
    app.undo()
    return app.history()


class TestRenderText:
    def test_marks_current(self, renderer: HistoryRenderer, items: list[HistoryItem]) -> None:
        lines = renderer.render_text(items).splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("0: Create record: Write report (")
        assert lines[0].endswith("*CURRENT*")
        assert "*CURRENT*" not in lines[1]

    def test_empty(self, renderer: HistoryRenderer) -> None:
        assert renderer.render_text([]) == "No history recorded."


class TestRenderTable:
    def test_contains_descriptions(
        self, renderer: HistoryRenderer, items: list[HistoryItem]
    ) -> None:
        output = renderer.render_table(items, title="Tasks")
        assert "Tasks" in output
        assert "Create record: Write report" in output
        assert "current" in output

    def test_empty_panel(self, renderer: HistoryRenderer) -> None:
        assert "No history recorded." in renderer.render_table([])


class TestRenderJson:
    def test_round_trips_through_json(
        self, renderer: HistoryRenderer, items: list[HistoryItem]
    ) -> None:
        data = json.loads(renderer.render_json(items))
        assert [entry["is_current"] for entry in data] == [True, False]
        assert data[1]["description"] == "Create record: Review draft"

    def test_empty(self, renderer: HistoryRenderer) -> None:
        assert json.loads(renderer.render_json([])) == []
