"""stagebench: time code, compare stages, profile checkpoints.

Quick start::

    from stagebench import StagedBenchmark

    staged = StagedBenchmark()
    staged.start("list")
    for _ in range(100_000):
        x in some_list
    staged.finish("list", 100_000)
    staged.start("set")
    for _ in range(100_000):
        x in some_set
    staged.finish("set", 100_000)
    staged.print_table(reference="list")
"""

from __future__ import annotations

from stagebench.bench.benchmark import Benchmark, Result
from stagebench.bench.display import Reporter
from stagebench.bench.latency import LatencyBenchmark
from stagebench.bench.perf import Perf, PerfSummary
from stagebench.bench.staged import ResultTable, StagedBenchmark
from stagebench.config import ReportConfig, load_config
from stagebench.errors import (
    BenchmarkError,
    DuplicateStageError,
    EmptyProfileError,
    NoActiveStageError,
    OperationNotStartedError,
    UnknownStageError,
)
from stagebench.logging import setup_logging
from stagebench.runner import benchmark_stage, run_benchmark, run_stage, warmup

__version__ = "0.1.0"

__all__ = [
    "Benchmark",
    "BenchmarkError",
    "DuplicateStageError",
    "EmptyProfileError",
    "LatencyBenchmark",
    "NoActiveStageError",
    "OperationNotStartedError",
    "Perf",
    "PerfSummary",
    "ReportConfig",
    "Reporter",
    "Result",
    "ResultTable",
    "StagedBenchmark",
    "UnknownStageError",
    "benchmark_stage",
    "load_config",
    "run_benchmark",
    "run_stage",
    "setup_logging",
    "warmup",
]
