"""Rich tables and JSON export for truth tables."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from truthy.expr.logic import TruthRow


def render_truth_table(
    text: str,
    names: list[str],
    rows: list[TruthRow],
    console: Console | None = None,
) -> None:
    """Print a Rich table with one column per identifier plus the result."""
    if console is None:
        console = Console()

    table = Table(title=f"Truth table: {text}")
    for name in names:
        table.add_column(name, justify="center")
    table.add_column("result", justify="center", style="bold")

    for row in rows:
        cells = ["T" if value else "F" for _, value in row.assignment]
        cells.append("T" if row.result else "F")
        table.add_row(*cells, style="green" if row.result else "dim")

    console.print(table)
    true_count = sum(1 for row in rows if row.result)
    console.print(f"{true_count} of {len(rows)} assignments are truthy")


def truth_table_to_json(text: str, names: list[str], rows: list[TruthRow]) -> dict:
    """Convert a truth table to a JSON-serializable dict."""
    return {
        "expression": text,
        "identifiers": names,
        "rows": [
            {"assignment": row.as_dict(), "result": row.result} for row in rows
        ],
    }
