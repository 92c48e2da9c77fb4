"""Checkpoint profiling of repeated passes.

A :class:`Perf` splits every measured pass into named segments.  Call
:meth:`Perf.start` at the top of each pass and :meth:`Perf.checkpoint`
after each step; every checkpoint records the time since the previous
mark, so the values are segment durations, not cumulative ones.

The checkpoint order is taken from the first pass.  Every later pass is
expected to hit the same checkpoints in the same order: per-pass totals
add up the N-th duration of every checkpoint.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stagebench.bench.display import Reporter, format_perf_summary
from stagebench.bench.stats import DurationStats, column_totals, describe
from stagebench.bench.timing import Clock, elapsed_since, resolve_clock
from stagebench.errors import EmptyProfileError
from stagebench.logging import get_logger

log = get_logger("perf")


@dataclass
class PerfSummary:
    """Aggregates of a checkpoint profile, durations in seconds."""

    iterations: int
    checkpoints: list[tuple[str, DurationStats]] = field(default_factory=list)
    total: DurationStats = field(default_factory=lambda: describe([]))


class Perf:
    """Per-pass checkpoint profiler."""

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = resolve_clock(clock)
        self._mark = self._clock()
        self.iterations = 0
        self.checkpoints: list[str] = []
        self.measurements: dict[str, list[float]] = {}

    def reset(self) -> None:
        self.iterations = 0
        self.checkpoints.clear()
        self.measurements.clear()

    def start(self) -> None:
        """Begin a measured pass."""
        self.iterations += 1
        self._mark = self._clock()

    def checkpoint(self, name: str) -> None:
        """Record the time since the last mark under *name*."""
        self.measurements.setdefault(name, []).append(elapsed_since(self._mark, self._clock))
        if self.iterations == 1 and name not in self.checkpoints:
            self.checkpoints.append(name)
        self._mark = self._clock()

    def summary(self) -> PerfSummary:
        """Compute min/max/avg per checkpoint and per-pass totals.

        Totals only cover passes for which every checkpoint has a value,
        so a skipped checkpoint shortens the totals instead of
        misaligning them.

        Raises:
            EmptyProfileError: If no pass or no checkpoint was recorded.
        """
        if self.iterations == 0 or not self.checkpoints:
            raise EmptyProfileError("No checkpoints recorded")
        series = [self.measurements[name] for name in self.checkpoints]
        lengths = {len(s) for s in series}
        if len(lengths) > 1:
            log.warning(
                "Checkpoint series have different lengths %s; totals cover %d passes",
                sorted(lengths),
                min(lengths),
            )
        return PerfSummary(
            iterations=self.iterations,
            checkpoints=[(name, describe(s)) for name, s in zip(self.checkpoints, series)],
            total=describe(column_totals(series)),
        )

    def print_summary(self, reporter: Reporter | None = None) -> None:
        """Print the profile table, durations in microseconds."""
        reporter = reporter or Reporter()
        reporter.echo(format_perf_summary(self.summary(), reporter))
