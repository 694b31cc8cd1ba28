"""Calculation history management."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from rich.console import Console
from rich.table import Table

console = Console()

DEFAULT_HISTORY_LIMIT = 10


@dataclass
class HistoryEntry:
    """A single calculation record."""

    expression: str
    result: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"


class CalculationHistory:
    """Bounded calculation history, most recent entry first."""

    def __init__(self, max_size: int = DEFAULT_HISTORY_LIMIT):
        self._entries: List[HistoryEntry] = []
        self._max_size = max_size

    def add(self, expression: str, result: str) -> HistoryEntry:
        """Add a calculation to the front of the history.

        Once the history holds more than ``max_size`` entries the oldest one
        is dropped.
        """
        entry = HistoryEntry(expression=expression, result=result)
        self._entries.insert(0, entry)

        if len(self._entries) > self._max_size:
            self._entries.pop()

        return entry

    @property
    def entries(self) -> List[HistoryEntry]:
        """Return a copy of all entries, most recent first."""
        return list(self._entries)

    def get_last(self, count: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryEntry]:
        """Get the ``count`` most recent calculations."""
        return self._entries[:count]

    def clear(self) -> None:
        """Clear all history."""
        self._entries.clear()

    @property
    def size(self) -> int:
        """Return current history size."""
        return len(self._entries)

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._entries)

    def show(self, count: int = DEFAULT_HISTORY_LIMIT):
        """Print the history as a table."""
        entries = self.get_last(count)
        if not entries:
            console.print("[dim]No calculations in history.[/dim]")
            return

        table = Table(title="History")
        table.add_column("#", style="dim", width=3)
        table.add_column("Expression", style="cyan")
        table.add_column("Result", style="green")
        table.add_column("Time", style="dim", width=8)

        for i, entry in enumerate(entries, 1):
            table.add_row(
                str(i),
                entry.expression,
                entry.result,
                entry.timestamp.strftime("%H:%M:%S"),
            )

        console.print(table)
