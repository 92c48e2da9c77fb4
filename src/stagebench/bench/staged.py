"""Staged benchmarks: named, comparable timed runs.

Each stage is a :class:`~stagebench.bench.benchmark.Benchmark` stored
under a unique name.  Results are always reported in ascending name
order, independent of the order stages were started, and can be compared
against a reference stage whose speed counts as 100%.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stagebench.bench.benchmark import Benchmark, Result
from stagebench.bench.display import Reporter
from stagebench.bench.timing import Clock
from stagebench.config import DEFAULT_DIFF_THRESHOLD
from stagebench.errors import DuplicateStageError, NoActiveStageError, UnknownStageError
from stagebench.formatting import Cell, Style, format_percent
from stagebench.logging import get_logger

log = get_logger("staged")


# ---------------------------------------------------------------------------
# Speed comparison
# ---------------------------------------------------------------------------


def speed_diff(
    speed: int,
    reference_speed: int,
    threshold: float = DEFAULT_DIFF_THRESHOLD,
) -> float | None:
    """Relative speed difference against a reference, in percent.

    Positive when *speed* is faster than *reference_speed*.  Returns None
    when the difference is inside the ``threshold`` band around a ratio
    of 1 (speeds jitter), or when the reference speed is zero and no
    ratio exists.
    """
    if reference_speed == 0 or speed == reference_speed:
        return None
    ratio = speed / reference_speed
    if abs(ratio - 1) < threshold:
        return None
    return (ratio - 1) * 100


# ---------------------------------------------------------------------------
# ResultTable
# ---------------------------------------------------------------------------


@dataclass
class ResultTable:
    """Headers and display rows of a staged benchmark comparison."""

    headers: list[str]
    rows: list[list[Cell]] = field(default_factory=list)
    alignments: list[str] = field(default_factory=list)

    def column(self, header: str) -> list[str]:
        """Plain text of every cell under *header*.

        Raises:
            KeyError: If there is no such column.
        """
        try:
            index = self.headers.index(header)
        except ValueError:
            raise KeyError(header) from None
        return [row[index].text for row in self.rows]

    def render(self, reporter: Reporter) -> str:
        return reporter.render_table(self.headers, self.rows, self.alignments)


# ---------------------------------------------------------------------------
# StagedBenchmark
# ---------------------------------------------------------------------------


class StagedBenchmark:
    """A collection of named benchmark stages.

    Args:
        reporter: Receives status lines and renders tables.
        clock: Monotonic clock shared by every stage.
    """

    def __init__(self, *, reporter: Reporter | None = None, clock: Clock | None = None) -> None:
        self.reporter = reporter or Reporter()
        self._clock = clock
        self._benchmarks: dict[str, Benchmark] = {}
        self.current_stage: str | None = None

    def __len__(self) -> int:
        return len(self._benchmarks)

    def __contains__(self, name: object) -> bool:
        return name in self._benchmarks

    def __getitem__(self, name: str) -> Benchmark:
        try:
            return self._benchmarks[name]
        except KeyError:
            raise UnknownStageError(name) from None

    @property
    def stages(self) -> list[str]:
        """Stage names in report order."""
        return sorted(self._benchmarks)

    def start(self, name: str) -> Benchmark:
        """Start a new stage and make it the current one.

        Raises:
            DuplicateStageError: If *name* was already started.
        """
        if name in self._benchmarks:
            raise DuplicateStageError(name)
        benchmark = Benchmark(clock=self._clock)
        self._benchmarks[name] = benchmark
        self.current_stage = name
        log.debug("Stage %s started", name)
        self.reporter.status(f"!!! stage started: {name} ")
        return benchmark

    def finish(self, name: str, iterations: int, errors: int = 0) -> Result:
        """Finish a stage with its iteration and error counts.

        Raises:
            UnknownStageError: If *name* was never started.
        """
        benchmark = self[name]
        benchmark.finish(iterations, errors)
        if self.current_stage == name:
            self.current_stage = None
        result = benchmark.result()
        log.debug(
            "Stage %s completed: %d iterations, %d errors, %.6fs",
            name,
            iterations,
            errors,
            result.elapsed,
        )
        self.reporter.status(
            f"*** stage completed: {name} "
            f"({self.reporter.number(iterations)} iters, {result.elapsed:.3f} secs)"
        )
        return result

    def finish_current(self, iterations: int, errors: int = 0) -> Result:
        """Finish the most recently started stage.

        Raises:
            NoActiveStageError: If no stage is open.
        """
        if self.current_stage is None:
            raise NoActiveStageError()
        return self.finish(self.current_stage, iterations, errors)

    def reset(self) -> None:
        """Drop every stage."""
        self._benchmarks.clear()
        self.current_stage = None

    def stage_results(self) -> list[tuple[str, Result]]:
        """Results of every stage, in name order."""
        return [(name, self._benchmarks[name].result()) for name in self.stages]

    def result_table(self, reference: str | None = None) -> ResultTable:
        """Build the comparison table.

        Error columns appear only if some stage recorded errors.  With a
        *reference* stage, a ``diff.s`` column shows each stage's speed
        relative to it.

        Raises:
            UnknownStageError: If *reference* is not a stage.
        """
        results = self.stage_results()
        reference_speed: int | None = None
        if reference is not None:
            # Same snapshot as the rows, so a running reference compares
            # equal to itself.
            snapshot = dict(results)
            if reference not in snapshot:
                raise UnknownStageError(reference)
            reference_speed = snapshot[reference].speed

        have_errors = any(result.errors > 0 for _, result in results)
        headers = ["stage", "iters"]
        if have_errors:
            headers += ["succs", "errs", "err.rate"]
        headers += ["secs", "msecs", "iters/s"]
        if reference_speed is not None:
            headers.append("diff.s")

        table = ResultTable(headers=headers, alignments=["l"] + ["r"] * (len(headers) - 1))
        for name, result in results:
            table.rows.append(self._row(name, result, have_errors, reference_speed))
        return table

    def _row(
        self,
        name: str,
        result: Result,
        have_errors: bool,
        reference_speed: int | None,
    ) -> list[Cell]:
        r = self.reporter
        cells = [Cell(name), Cell(r.number(result.iterations), Style.COUNT)]
        if have_errors:
            succeeded = result.succeeded
            cells.append(Cell(r.number(succeeded), Style.SUCCESS) if succeeded > 0 else Cell())
            if result.errors > 0:
                cells.append(Cell(r.number(result.errors), Style.ERROR))
                cells.append(Cell(format_percent(result.error_rate), Style.ERROR))
            else:
                cells += [Cell(), Cell()]
        cells += [
            Cell(r.seconds(result.elapsed), Style.INFO),
            Cell(r.seconds(result.elapsed * 1000), Style.DETAIL),
            Cell(r.number(result.speed), Style.HIGHLIGHT),
        ]
        if reference_speed is not None:
            diff = speed_diff(result.speed, reference_speed, r.config.diff_threshold)
            if diff is None:
                cells.append(Cell())
            else:
                style = Style.SUCCESS if diff > 0 else Style.ERROR
                cells.append(Cell(format_percent(diff, signed=True), style))
        return cells

    def print_table(self, reference: str | None = None) -> None:
        """Print the comparison table, optionally against *reference*."""
        table = self.result_table(reference)
        self.reporter.echo(self.reporter.separator())
        self.reporter.echo(table.render(self.reporter))
