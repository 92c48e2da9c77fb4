"""Single timed benchmark runs.

A :class:`Benchmark` starts its timer when it is created.  The caller
runs the measured code, then either calls :meth:`Benchmark.finish` to
freeze the elapsed time or queries :meth:`Benchmark.result` directly for
a live snapshot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from stagebench.bench.display import Reporter, format_result
from stagebench.bench.timing import Clock, elapsed_since, resolve_clock
from stagebench.config import ReportConfig
from stagebench.logging import get_logger

log = get_logger("benchmark")


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


def compute_speed(iterations: int, errors: int, elapsed: float) -> int:
    """Successful iterations per second, rounded down.

    Returns 0 when *elapsed* is not positive or the quotient is not
    finite, instead of an infinity or NaN.
    """
    if elapsed <= 0:
        return 0
    speed = max(iterations - errors, 0) / elapsed
    if not math.isfinite(speed):
        return 0
    return int(speed)


@dataclass(frozen=True)
class Result:
    """Outcome of a benchmark or a stage."""

    elapsed: float
    iterations: int
    errors: int
    speed: int

    @property
    def succeeded(self) -> int:
        """Iterations that did not fail."""
        return max(self.iterations - self.errors, 0)

    @property
    def error_rate(self) -> float:
        """Failed iterations as a percentage; 0.0 with no iterations."""
        if self.iterations == 0:
            return 0.0
        return self.errors / self.iterations * 100

    @property
    def ns_per_iteration(self) -> int | None:
        """Nanoseconds per successful iteration, or None at zero speed."""
        if self.speed == 0:
            return None
        return 1_000_000_000 // self.speed


# ---------------------------------------------------------------------------
# Benchmark
# ---------------------------------------------------------------------------


class Benchmark:
    """A simple benchmark, or one stage of a staged benchmark.

    Args:
        iterations: Expected iteration count, used when none is given at
            finish time.  ``reset()`` restores it.
        clock: Monotonic clock returning seconds.
    """

    def __init__(self, iterations: int = 0, *, clock: Clock | None = None) -> None:
        self._clock = resolve_clock(clock)
        self.started = self._clock()
        self.preset_iterations = iterations
        self.iterations = iterations
        self.errors = 0
        self.elapsed: float | None = None

    def __repr__(self) -> str:
        state = "running" if self.elapsed is None else f"elapsed={self.elapsed:.6f}"
        return f"Benchmark(iterations={self.iterations}, errors={self.errors}, {state})"

    def __str__(self) -> str:
        return self.format_result(reporter=Reporter(ReportConfig(color=False)))

    @property
    def finished(self) -> bool:
        return self.elapsed is not None

    def reset(self) -> None:
        """Restart the timer and restore the preset counters."""
        self.started = self._clock()
        self.iterations = self.preset_iterations
        self.errors = 0
        self.elapsed = None

    def increment(self) -> None:
        """Count one iteration.

        Not needed if the iteration count is given at creation or finish.
        """
        self.iterations += 1

    def increment_errors(self) -> None:
        """Count one failed iteration.

        Not needed if the error count is given at finish.
        """
        self.errors += 1

    def finish(self, iterations: int | None = None, errors: int | None = None) -> None:
        """Freeze the elapsed time, optionally overriding the counters."""
        self.elapsed = elapsed_since(self.started, self._clock)
        if iterations is not None:
            self.iterations = iterations
        if errors is not None:
            self.errors = errors
        if self.errors > self.iterations:
            log.warning(
                "Benchmark finished with more errors (%d) than iterations (%d)",
                self.errors,
                self.iterations,
            )

    def result(self, iterations: int | None = None, errors: int | None = None) -> Result:
        """Compute the result.

        Uses the frozen elapsed time if finished, else the time elapsed so
        far.  Overrides replace the stored counters for this query only.
        """
        elapsed = self.elapsed
        if elapsed is None:
            elapsed = elapsed_since(self.started, self._clock)
        it = self.iterations if iterations is None else iterations
        errs = self.errors if errors is None else errors
        return Result(
            elapsed=elapsed,
            iterations=it,
            errors=errs,
            speed=compute_speed(it, errs, elapsed),
        )

    def format_result(
        self,
        iterations: int | None = None,
        errors: int | None = None,
        reporter: Reporter | None = None,
    ) -> str:
        return format_result(self.result(iterations, errors), reporter or Reporter())

    def print_result(
        self,
        iterations: int | None = None,
        errors: int | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        """Print the result report."""
        reporter = reporter or Reporter()
        reporter.echo(self.format_result(iterations, errors, reporter))
