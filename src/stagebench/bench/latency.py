"""Per-operation latency tracking."""

from __future__ import annotations

from stagebench.bench.display import Reporter, format_latency
from stagebench.bench.timing import Clock, elapsed_since, resolve_clock
from stagebench.errors import OperationNotStartedError


class LatencyBenchmark:
    """Collects the latency of individual operations, in seconds.

    Either bracket each operation with :meth:`op_start` / :meth:`op_finish`
    or :meth:`push` latencies measured elsewhere.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = resolve_clock(clock)
        self.latencies: list[float] = []
        self._op: float | None = None

    def __len__(self) -> int:
        return len(self.latencies)

    def clear(self) -> None:
        self.latencies.clear()
        self._op = None

    def op_start(self) -> None:
        self._op = self._clock()

    def op_finish(self) -> None:
        """Record the latency of the operation opened by :meth:`op_start`.

        Raises:
            OperationNotStartedError: If no operation is open.
        """
        if self._op is None:
            raise OperationNotStartedError("op_finish() called without op_start()")
        self.latencies.append(elapsed_since(self._op, self._clock))
        self._op = None

    def push(self, latency: float) -> None:
        self.latencies.append(latency)

    def avg(self) -> float:
        if not self.latencies:
            return 0.0
        return sum(self.latencies) / len(self.latencies)

    def min(self) -> float:
        return min(self.latencies, default=0.0)

    def max(self) -> float:
        return max(self.latencies, default=0.0)

    def print_summary(self, reporter: Reporter | None = None) -> None:
        reporter = reporter or Reporter()
        reporter.echo(format_latency(self.avg(), self.min(), self.max(), reporter))
