"""Loop runners for benchmarks and stages.

Wrap a callable so it is executed a fixed number of times between the
start and finish of a benchmark or a stage.  In *check* mode the callable
must return a truthy value on success; every falsy return is counted as
an error.

Example::

    @benchmark_stage(1_000)
    def test_dict_lookup():
        table.get("key")

    test_dict_lookup()           # runs stage "dict_lookup" 1_000 times
    defaults.staged_print()
"""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from stagebench import defaults
from stagebench.bench.benchmark import Benchmark, Result
from stagebench.bench.display import Reporter
from stagebench.bench.staged import StagedBenchmark
from stagebench.bench.timing import Clock, spin
from stagebench.logging import get_logger

log = get_logger("runner")

F = TypeVar("F", bound=Callable[..., Any])

_STRIPPED_PREFIXES = ("test_", "benchmark_")

WARMUP_DURATION = 5.0


def _loop(iterations: int, func: Callable[[], Any], check: bool) -> int:
    """Call *func* *iterations* times and return the number of failures."""
    errors = 0
    if check:
        for _ in range(iterations):
            if not func():
                errors += 1
    else:
        for _ in range(iterations):
            func()
    return errors


def run_benchmark(
    iterations: int,
    func: Callable[[], Any],
    *,
    check: bool = False,
    benchmark: Benchmark | None = None,
    reporter: Reporter | None = None,
) -> Result:
    """Time *iterations* calls of *func* and print the result.

    Uses the process-wide default benchmark unless *benchmark* is given;
    its lock is not held while the loop runs.
    """
    if benchmark is None:
        defaults.benchmark_start()
        errors = _loop(iterations, func, check)
        with defaults.locked_benchmark() as default:
            default.finish(iterations, errors)
            result = default.result()
            default.print_result(reporter=reporter or defaults.default_reporter())
        return result

    benchmark.reset()
    errors = _loop(iterations, func, check)
    benchmark.finish(iterations, errors)
    benchmark.print_result(reporter=reporter)
    return benchmark.result()


def run_stage(
    name: str,
    iterations: int,
    func: Callable[[], Any],
    *,
    check: bool = False,
    staged: StagedBenchmark | None = None,
) -> Result:
    """Run *func* *iterations* times as stage *name*.

    Uses the process-wide default staged benchmark unless *staged* is
    given.  The default instance is locked only while the stage starts
    and finishes, not while the loop runs.

    Raises:
        DuplicateStageError: If the stage name is already taken.
    """
    if staged is None:
        defaults.staged_start(name)
        errors = _loop(iterations, func, check)
        with defaults.locked_staged_benchmark() as default:
            return default.finish(name, iterations, errors)

    staged.start(name)
    errors = _loop(iterations, func, check)
    return staged.finish(name, iterations, errors)


def stage_name(func: Callable[..., Any]) -> str:
    """Default stage name for *func*: its name minus a test/benchmark prefix."""
    name = func.__name__
    for prefix in _STRIPPED_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix) :]
    return name


def benchmark_stage(
    iterations: int,
    name: str | None = None,
    *,
    check: bool = False,
    staged: StagedBenchmark | None = None,
) -> Callable[[F], F]:
    """Decorator turning a function body into a benchmark stage.

    Calling the decorated function runs its body *iterations* times as a
    stage of the default (or the given) staged benchmark and returns the
    stage :class:`Result`.

    Args:
        iterations: Number of times the body runs per call.
        name: Stage name; defaults to the function name with a leading
            ``test_`` or ``benchmark_`` removed.
        check: Count falsy return values as errors.
        staged: Staged benchmark to record into.
    """
    if iterations < 0:
        raise ValueError(f"Iterations cannot be negative (got {iterations})")

    def decorator(func: F) -> F:
        stage = name or stage_name(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Result:
            return run_stage(
                stage,
                iterations,
                functools.partial(func, *args, **kwargs),
                check=check,
                staged=staged,
            )

        return wrapper  # type: ignore[return-value]

    return decorator


def warmup(
    duration: float = WARMUP_DURATION,
    *,
    reporter: Reporter | None = None,
    clock: Clock | None = None,
) -> None:
    """Keep a CPU busy for *duration* seconds before a speed comparison."""
    reporter = reporter or defaults.default_reporter()
    reporter.status("warming up")
    passes = spin(duration, clock)
    log.debug("Warm-up finished after %d passes", passes)
    reporter.status("CPU has been warmed up")
