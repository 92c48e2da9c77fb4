"""Shared text formatting helpers for stagebench.

Provides digit-grouped numbers, fixed-precision seconds and percentages,
separator lines and aligned tables of styled cells.  Nothing here decides
colours: cells carry a :class:`Style` tag and the caller supplies a
*paint* function that turns a tag into terminal escapes (or nothing).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Sequence


class Style(enum.Enum):
    """Semantic emphasis of a rendered cell.

    Advisory only: a style never changes the text of a cell.
    """

    NEUTRAL = "neutral"
    HEADER = "header"
    MUTED = "muted"
    INFO = "info"
    DETAIL = "detail"
    COUNT = "count"
    HIGHLIGHT = "highlight"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Cell:
    """A single display cell: text plus emphasis."""

    text: str = ""
    style: Style = Style.NEUTRAL
    bold: bool = False


Painter = Callable[[str, Cell], str]


def format_number(value: int, separator: str = "_") -> str:
    """Format an integer with grouped digits: ``1_000_000``.

    Display only: the grouping never feeds back into computed values.
    """
    grouped = f"{int(value):,}"
    if separator == ",":
        return grouped
    return grouped.replace(",", separator)


def format_seconds(seconds: float, precision: int = 3) -> str:
    """Format seconds with a fixed number of decimals: ``'0.125'``."""
    return f"{seconds:.{precision}f}"


def format_micros(seconds: float, separator: str = "_") -> str:
    """Format seconds as whole microseconds (truncated): ``'1_250'``."""
    return format_number(int(seconds * 1_000_000), separator)


def format_percent(value: float, precision: int = 2, *, signed: bool = False) -> str:
    """Format a percentage: ``'5.00%'``, or ``'+5.00%'`` when *signed*."""
    if signed:
        sign = "+" if value >= 0 else "-"
        return f"{sign}{abs(value):.{precision}f}%"
    return f"{value:.{precision}f}%"


def format_separator(title: str, width: int, fill: str = "-") -> str:
    """Pad *title* with *fill* up to *width* characters.

    ``format_separator("--- Results ", 20)`` gives
    ``'--- Results --------'``.  A title longer than *width* is returned
    unchanged.
    """
    return title + fill * max(0, width - len(title))


def _plain(text: str, cell: Cell) -> str:
    return text


def format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str | Cell]],
    *,
    alignments: Sequence[str] | None = None,
    indent: int = 2,
    rule: str | None = "-",
    paint: Painter | None = None,
) -> str:
    """Format rows of cells as an aligned text table.

    Column widths are computed from the plain cell text, so escape codes
    added by *paint* never disturb the alignment.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of strings or :class:`Cell`.
            Short rows are padded with blank cells.
        alignments: Per-column alignment: ``'l'``, ``'r'``, or ``'c'``.
        indent: Number of leading spaces per line.
        rule: Character used for the line under the header, or None.
        paint: Called with the padded text and its cell to apply styling.

    Returns:
        The formatted table as a string.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments) if alignments is not None else []
    while len(aligns) < ncols:
        aligns.append("l")
    painter = paint or _plain

    header_cells = [Cell(h, Style.HEADER) for h in headers]
    body: list[list[Cell]] = []
    for row in rows:
        cells = [c if isinstance(c, Cell) else Cell(str(c)) for c in row]
        cells += [Cell()] * (ncols - len(cells))
        body.append(cells[:ncols])

    widths = [len(h) for h in headers]
    for cells in body:
        for ci, cell in enumerate(cells):
            widths[ci] = max(widths[ci], len(cell.text))

    def _format_cell(cell: Cell, width: int, align: str) -> str:
        if align == "r":
            text = cell.text.rjust(width)
        elif align == "c":
            text = cell.text.center(width)
        else:
            text = cell.text.ljust(width)
        if not cell.text:
            return text
        return painter(text, cell)

    prefix = " " * indent

    def _line(cells: list[Cell]) -> str:
        parts = (_format_cell(cells[i], widths[i], aligns[i]) for i in range(ncols))
        return (prefix + "  ".join(parts)).rstrip()

    lines = [_line(header_cells)]
    if rule:
        lines.append(prefix + "  ".join(rule * w for w in widths))
    for cells in body:
        lines.append(_line(cells))
    return "\n".join(lines)
