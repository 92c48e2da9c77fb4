"""Terminal display for benchmark results.

The :class:`Reporter` is the only place stagebench writes to a terminal.
It renders tables of styled cells, prints status lines and sizes the
separator line to the terminal width.  Colour goes through
``click.style``; output goes through ``click.echo``, which drops the
escape codes when the stream is not a terminal.
"""

from __future__ import annotations

import shutil
from typing import IO, TYPE_CHECKING, Any, Sequence

import click

from stagebench.config import ReportConfig
from stagebench.formatting import (
    Cell,
    Style,
    format_micros,
    format_number,
    format_percent,
    format_seconds,
    format_separator,
    format_table,
)

if TYPE_CHECKING:
    from stagebench.bench.benchmark import Result
    from stagebench.bench.perf import PerfSummary
    from stagebench.bench.stats import DurationStats

RESULTS_TITLE = "--- Benchmark results "

_STYLE_ARGS: dict[Style, dict[str, Any]] = {
    Style.NEUTRAL: {},
    Style.HEADER: {"bold": True},
    Style.MUTED: {"fg": "bright_black"},
    Style.INFO: {"fg": "blue"},
    Style.DETAIL: {"fg": "cyan"},
    Style.COUNT: {"fg": "magenta"},
    Style.HIGHLIGHT: {"fg": "yellow"},
    Style.SUCCESS: {"fg": "green"},
    Style.ERROR: {"fg": "red"},
}


# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------


class Reporter:
    """Render benchmark output to a stream.

    Args:
        config: Display settings; defaults to :class:`ReportConfig()`.
        file: Output stream; ``None`` means standard output.
    """

    def __init__(self, config: ReportConfig | None = None, *, file: IO[str] | None = None):
        self.config = config or ReportConfig()
        self.file = file

    def paint(self, text: str, cell: Cell) -> str:
        """Apply the terminal style of *cell* to *text*."""
        if self.config.color is False:
            return text
        args = dict(_STYLE_ARGS[cell.style])
        if cell.bold:
            args["bold"] = True
        if not args:
            return text
        return click.style(text, **args)

    def styled(self, text: str, style: Style = Style.NEUTRAL, *, bold: bool = False) -> str:
        """Shortcut for painting a bare string."""
        return self.paint(text, Cell(text, style, bold))

    def number(self, value: int) -> str:
        """Format an integer with the configured digit separator."""
        return format_number(value, self.config.number_separator)

    def seconds(self, value: float) -> str:
        return format_seconds(value, self.config.precision)

    def echo(self, text: str = "") -> None:
        """Write one line to the output stream."""
        click.echo(text, file=self.file, color=self.config.color)

    def status(self, text: str) -> None:
        """Write a dimmed informational status line, if enabled."""
        if self.config.show_status:
            self.echo(self.styled(text, Style.MUTED))

    def terminal_width(self) -> int:
        """Current terminal width, or the configured fallback."""
        fallback = self.config.fallback_width
        columns = shutil.get_terminal_size((fallback, 24)).columns
        return columns if columns > 0 else fallback

    def separator(self, title: str = RESULTS_TITLE) -> str:
        """A *title* line padded with dashes to the terminal width."""
        return self.styled(format_separator(title, self.terminal_width()), Style.MUTED)

    def render_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str | Cell]],
        alignments: Sequence[str] | None = None,
    ) -> str:
        """Render rows of cells under *headers* as an aligned table."""
        return format_table(headers, rows, alignments=alignments, indent=1, paint=self.paint)


# ---------------------------------------------------------------------------
# Result formatting
# ---------------------------------------------------------------------------


def format_result(result: Result, reporter: Reporter) -> str:
    """Format a single benchmark result as a multi-line report."""
    r = reporter
    if result.errors > 0:
        errors = r.styled(r.number(result.errors), Style.ERROR)
        error_rate = ", error rate: " + r.styled(format_percent(result.error_rate), Style.ERROR)
    else:
        errors = "None"
        error_rate = ""
    ns = result.ns_per_iteration
    ns_text = r.number(ns) if ns is not None else "N/A"
    return "\n".join(
        [
            r.separator(),
            (
                f"Iterations: {r.styled(r.number(result.iterations), Style.COUNT)}, "
                f"success: {r.styled(r.number(result.succeeded), Style.SUCCESS)}, "
                f"errors: {errors}{error_rate}"
            ),
            "Elapsed:",
            (
                f" {r.styled(r.seconds(result.elapsed), Style.INFO)} secs "
                f"({r.styled(r.seconds(result.elapsed * 1000), Style.DETAIL)} msecs)"
            ),
            f" {r.styled(r.number(result.speed), Style.HIGHLIGHT)} iters/s",
            f" {r.styled(ns_text, Style.COUNT)} ns per iter",
        ]
    )


def format_perf_summary(summary: PerfSummary, reporter: Reporter) -> str:
    """Format a checkpoint profile: per-checkpoint and total min/max/avg."""
    r = reporter
    sep = r.config.number_separator

    def _row(label: Cell, stats: DurationStats) -> list[Cell]:
        return [
            label,
            Cell(format_micros(stats.min, sep), Style.INFO, bold=True),
            Cell(format_micros(stats.max, sep), Style.HIGHLIGHT),
            Cell(format_micros(stats.mean, sep), Style.SUCCESS, bold=True),
        ]

    rows = [_row(Cell(name), stats) for name, stats in summary.checkpoints]
    rows.append([Cell("-----", Style.MUTED)])
    rows.append(_row(Cell("TOTAL", Style.HIGHLIGHT, bold=True), summary.total))

    return "\n".join(
        [
            f"Iterations: {r.styled(str(summary.iterations), Style.COUNT)}",
            "",
            r.render_table(["checkpoint", "min", "max", "avg"], rows, ["l", "r", "r", "r"]),
            "",
            r.styled("(the durations are provided in microseconds)", Style.MUTED),
        ]
    )


def format_latency(avg: float, min_: float, max_: float, reporter: Reporter) -> str:
    """Format a one-line latency summary in microseconds."""
    r = reporter
    sep = r.config.number_separator
    return (
        f"latency (μs) avg: {r.styled(format_micros(avg, sep), Style.HIGHLIGHT)}, "
        f"min: {r.styled(format_micros(min_, sep), Style.SUCCESS)}, "
        f"max: {r.styled(format_micros(max_, sep), Style.ERROR)}"
    )
