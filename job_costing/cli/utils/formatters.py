"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import List, Optional, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message in green."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return click.style(f"ℹ {message}", fg="blue")


def format_amount(value: Optional[Decimal]) -> str:
    """Format a money amount with thousands separators and 2 decimals.

    Example:
        >>> format_amount(Decimal("1515"))
        '1,515.00'
        >>> format_amount(None)
        '-'
    """
    if value is None:
        return "-"
    return f"{value:,.2f}"


def format_table(
    headers: List[str],
    rows: Sequence[Sequence[object]],
    numeric_columns: Sequence[int] = (),
    max_width: int = 40,
) -> str:
    """Format data as a plain text table.

    Args:
        headers: Column headers
        rows: Data rows (cells are converted with str())
        numeric_columns: Indexes of columns to right-align
        max_width: Maximum width of a column; longer cells are truncated

    Returns:
        The table as a string (empty when there are no headers)
    """
    if not headers:
        return ""

    cells = [[str(cell) for cell in row[: len(headers)]] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    widths = [min(w, max_width) for w in widths]

    def render(row: Sequence[str]) -> str:
        parts = []
        for i, cell in enumerate(row):
            cell = cell[: widths[i]]
            parts.append(
                f" {cell:>{widths[i]}} " if i in numeric_columns else f" {cell:<{widths[i]}} "
            )
        return "|" + "|".join(parts) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, render(headers), separator]
    if cells:
        lines.extend(render(row) for row in cells)
        lines.append(separator)
    return "\n".join(lines)
