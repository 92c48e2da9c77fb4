"""Process-wide default benchmark instances.

One :class:`Benchmark` and one :class:`StagedBenchmark` are created on
first use and live for the rest of the process.  Each is guarded by its
own lock, held for a single operation only, so calls from several threads
are serialized but not coordinated.  Benchmarking the same default stage
from several threads at once gives meaningless counts; threads that need
their own numbers should use their own instances.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from stagebench.bench.benchmark import Benchmark
from stagebench.bench.display import Reporter
from stagebench.bench.staged import StagedBenchmark
from stagebench.config import ReportConfig, check_config

_init_lock = threading.Lock()
_benchmark_lock = threading.Lock()
_staged_lock = threading.Lock()

_reporter: Reporter | None = None
_benchmark: Benchmark | None = None
_staged: StagedBenchmark | None = None


def default_reporter() -> Reporter:
    global _reporter
    with _init_lock:
        if _reporter is None:
            _reporter = Reporter()
        return _reporter


def default_benchmark() -> Benchmark:
    """Return the default benchmark, creating it on first use."""
    global _benchmark
    with _init_lock:
        if _benchmark is None:
            _benchmark = Benchmark()
        return _benchmark


def default_staged_benchmark() -> StagedBenchmark:
    """Return the default staged benchmark, creating it on first use."""
    global _staged
    reporter = default_reporter()
    with _init_lock:
        if _staged is None:
            _staged = StagedBenchmark(reporter=reporter)
        return _staged


@contextmanager
def locked_benchmark() -> Iterator[Benchmark]:
    """Hold the default benchmark's lock for a block of operations."""
    benchmark = default_benchmark()
    with _benchmark_lock:
        yield benchmark


@contextmanager
def locked_staged_benchmark() -> Iterator[StagedBenchmark]:
    """Hold the default staged benchmark's lock for a block of operations."""
    staged = default_staged_benchmark()
    with _staged_lock:
        yield staged


def configure(config: ReportConfig) -> None:
    """Replace the display settings used by the default instances.

    Raises:
        ValueError: If *config* fails validation; the old settings stay.
    """
    check_config(config)
    reporter = default_reporter()
    with _init_lock:
        reporter.config = config


# ---------------------------------------------------------------------------
# Single-operation helpers
# ---------------------------------------------------------------------------


def benchmark_start() -> None:
    """Restart the default benchmark."""
    with locked_benchmark() as benchmark:
        benchmark.reset()


def benchmark_print(iterations: int | None = None, errors: int | None = None) -> None:
    """Print the default benchmark result so far."""
    reporter = default_reporter()
    with locked_benchmark() as benchmark:
        benchmark.print_result(iterations, errors, reporter)


def staged_start(name: str) -> None:
    with locked_staged_benchmark() as staged:
        staged.start(name)


def staged_finish(name: str, iterations: int, errors: int = 0) -> None:
    with locked_staged_benchmark() as staged:
        staged.finish(name, iterations, errors)


def staged_finish_current(iterations: int, errors: int = 0) -> None:
    """Finish the last stage started on the default staged benchmark."""
    with locked_staged_benchmark() as staged:
        staged.finish_current(iterations, errors)


def staged_reset() -> None:
    with locked_staged_benchmark() as staged:
        staged.reset()


def staged_print(reference: str | None = None) -> None:
    """Print the default staged benchmark table, optionally against *reference*."""
    with locked_staged_benchmark() as staged:
        staged.print_table(reference)
