"""History rendering using Rich for terminal output.

HistoryRenderer turns an orchestrator's ``history()`` projection into:
- a Rich table (for terminals)
- plain text lines with the current entry marked ``*CURRENT*`` (for logs)
- JSON (for programmatic consumption)

Example
-------
>>> from aumos_undo_ledger import SnapshotOrchestrator
>>> config = SnapshotOrchestrator()
>>> _ = config.do_update("theme", "dark")
>>> print(HistoryRenderer().render_text(config.history()))
0: Initial state (...)
1: Set theme to 'dark' (...) *CURRENT*
"""
from __future__ import annotations

import io
import json
from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aumos_undo_ledger.orchestrator.base import HistoryItem


class HistoryRenderer:
    """Renders :class:`HistoryItem` sequences in several formats."""

    def __init__(self, width: int = 100) -> None:
        self._width = width

    # ------------------------------------------------------------------
    # Rich rendering
    # ------------------------------------------------------------------

    def render_table(self, items: Sequence[HistoryItem], title: str = "History") -> str:
        """Render *items* as a Rich table and return the captured output.

        The current entry is highlighted; an empty history renders a dim
        placeholder panel instead.
        """
        output_buffer = io.StringIO()
        console = Console(file=output_buffer, highlight=False, width=self._width)

        if not items:
            console.print(Panel("[dim]No history recorded.[/dim]", title=title))
            return output_buffer.getvalue()

        table = Table(
            "#",
            "Description",
            "Timestamp",
            "",
            title=title,
            show_header=True,
            header_style="bold cyan",
        )
        for item in items:
            marker = "[bold green]current[/bold green]" if item.is_current else ""
            style = "bold" if item.is_current else None
            table.add_row(
                str(item.index),
                item.description,
                item.timestamp.isoformat(timespec="seconds"),
                marker,
                style=style,
            )
        console.print(table)
        return output_buffer.getvalue()

    # ------------------------------------------------------------------
    # Plain rendering
    # ------------------------------------------------------------------

    def render_text(self, items: Sequence[HistoryItem]) -> str:
        """Render one line per entry, suffixing the current one with ``*CURRENT*``."""
        if not items:
            return "No history recorded."
        lines: list[str] = []
        for item in items:
            line = f"{item.index}: {item.description} ({item.timestamp.isoformat()})"
            if item.is_current:
                line += " *CURRENT*"
            lines.append(line)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # JSON rendering
    # ------------------------------------------------------------------

    def render_json(self, items: Sequence[HistoryItem]) -> str:
        """Render *items* as an indented JSON array."""
        return json.dumps([item.to_dict() for item in items], indent=2)


__all__ = [
    "HistoryRenderer",
]
