"""Tests for stagebench.bench.latency — per-operation latencies."""

from __future__ import annotations

import unittest

from bench_test_helpers import ManualClock, make_reporter, output_of

from stagebench.bench.latency import LatencyBenchmark
from stagebench.errors import OperationNotStartedError


class TestLatencyBenchmark(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = ManualClock()
        self.lat = LatencyBenchmark(clock=self.clock)

    def _op(self, seconds: float) -> None:
        self.lat.op_start()
        self.clock.advance(seconds)
        self.lat.op_finish()

    def test_empty(self) -> None:
        self.assertEqual(len(self.lat), 0)
        self.assertEqual(self.lat.avg(), 0.0)
        self.assertEqual(self.lat.min(), 0.0)
        self.assertEqual(self.lat.max(), 0.0)

    def test_op_start_finish(self) -> None:
        self._op(0.25)
        self._op(0.75)
        self.assertEqual(self.lat.latencies, [0.25, 0.75])
        self.assertEqual(self.lat.avg(), 0.5)
        self.assertEqual(self.lat.min(), 0.25)
        self.assertEqual(self.lat.max(), 0.75)

    def test_finish_without_start(self) -> None:
        with self.assertRaises(OperationNotStartedError):
            self.lat.op_finish()

    def test_finish_twice(self) -> None:
        self._op(0.5)
        with self.assertRaises(OperationNotStartedError):
            self.lat.op_finish()

    def test_push(self) -> None:
        self.lat.push(2.0)
        self.lat.push(4.0)
        self.assertEqual(self.lat.avg(), 3.0)

    def test_clear(self) -> None:
        self._op(0.5)
        self.lat.op_start()
        self.lat.clear()
        self.assertEqual(len(self.lat), 0)
        with self.assertRaises(OperationNotStartedError):
            self.lat.op_finish()

    def test_print_summary(self) -> None:
        self._op(0.25)
        self._op(0.5)
        self._op(0.75)
        reporter = make_reporter()
        self.lat.print_summary(reporter)
        self.assertEqual(
            output_of(reporter),
            "latency (μs) avg: 500_000, min: 250_000, max: 750_000\n",
        )


if __name__ == "__main__":
    unittest.main()
