"""Tests for stagebench.bench.benchmark — single timed runs."""

from __future__ import annotations

import unittest

from bench_test_helpers import ManualClock, make_reporter, output_of

from stagebench.bench.benchmark import Benchmark, Result, compute_speed


# ---------------------------------------------------------------------------
# Result tests
# ---------------------------------------------------------------------------


class TestResult(unittest.TestCase):
    """Tests for the Result dataclass."""

    def test_succeeded(self) -> None:
        r = Result(elapsed=1.0, iterations=100, errors=5, speed=95)
        self.assertEqual(r.succeeded, 95)

    def test_succeeded_never_negative(self) -> None:
        r = Result(elapsed=1.0, iterations=3, errors=5, speed=0)
        self.assertEqual(r.succeeded, 0)

    def test_error_rate(self) -> None:
        r = Result(elapsed=1.0, iterations=100, errors=5, speed=95)
        self.assertAlmostEqual(r.error_rate, 5.0)

    def test_error_rate_without_iterations(self) -> None:
        r = Result(elapsed=1.0, iterations=0, errors=0, speed=0)
        self.assertEqual(r.error_rate, 0.0)

    def test_ns_per_iteration(self) -> None:
        r = Result(elapsed=0.5, iterations=1000, errors=0, speed=2000)
        self.assertEqual(r.ns_per_iteration, 500_000)

    def test_ns_per_iteration_zero_speed(self) -> None:
        r = Result(elapsed=0.0, iterations=10, errors=0, speed=0)
        self.assertIsNone(r.ns_per_iteration)


class TestComputeSpeed(unittest.TestCase):
    def test_floor(self) -> None:
        self.assertEqual(compute_speed(10, 0, 4.0), 2)

    def test_errors_subtracted(self) -> None:
        self.assertEqual(compute_speed(100, 10, 0.5), 180)

    def test_zero_elapsed(self) -> None:
        self.assertEqual(compute_speed(100, 0, 0.0), 0)

    def test_no_iterations(self) -> None:
        self.assertEqual(compute_speed(0, 0, 1.0), 0)

    def test_more_errors_than_iterations(self) -> None:
        self.assertEqual(compute_speed(5, 10, 1.0), 0)


# ---------------------------------------------------------------------------
# Benchmark lifecycle tests
# ---------------------------------------------------------------------------


class TestBenchmark(unittest.TestCase):
    """Tests for Benchmark timing and counters."""

    def setUp(self) -> None:
        self.clock = ManualClock(10.0)

    def test_new_defaults(self) -> None:
        b = Benchmark(clock=self.clock)
        self.assertEqual(b.iterations, 0)
        self.assertEqual(b.errors, 0)
        self.assertIsNone(b.elapsed)
        self.assertFalse(b.finished)
        self.assertEqual(b.started, 10.0)

    def test_new_with_iterations(self) -> None:
        b = Benchmark(500, clock=self.clock)
        self.assertEqual(b.iterations, 500)

    def test_speed_with_errors(self) -> None:
        """speed == floor((n - e) / elapsed)."""
        for n, e in [(0, 0), (1, 0), (100, 10), (1000, 1000), (7, 3)]:
            with self.subTest(n=n, e=e):
                clock = ManualClock()
                b = Benchmark(n, clock=clock)
                clock.advance(0.25)
                b.finish(None, e)
                self.assertEqual(b.result().speed, int((n - e) / 0.25))

    def test_finish_freezes_elapsed(self) -> None:
        b = Benchmark(10, clock=self.clock)
        self.clock.advance(1.5)
        b.finish()
        self.clock.advance(100.0)
        self.assertEqual(b.elapsed, 1.5)
        self.assertEqual(b.result().elapsed, 1.5)
        self.assertTrue(b.finished)

    def test_finish_overrides_counters(self) -> None:
        b = Benchmark(10, clock=self.clock)
        b.finish(iterations=20, errors=2)
        self.assertEqual(b.iterations, 20)
        self.assertEqual(b.errors, 2)

    def test_finish_keeps_live_counters(self) -> None:
        b = Benchmark(clock=self.clock)
        b.increment()
        b.increment()
        b.increment_errors()
        b.finish()
        self.assertEqual(b.iterations, 2)
        self.assertEqual(b.errors, 1)

    def test_finish_again_refreezes(self) -> None:
        b = Benchmark(clock=self.clock)
        self.clock.advance(1.0)
        b.finish()
        self.clock.advance(1.0)
        b.finish()
        self.assertEqual(b.elapsed, 2.0)

    def test_live_result_before_finish(self) -> None:
        b = Benchmark(100, clock=self.clock)
        self.clock.advance(2.0)
        self.assertEqual(b.result().elapsed, 2.0)
        self.assertEqual(b.result().speed, 50)
        self.clock.advance(2.0)
        self.assertEqual(b.result().elapsed, 4.0)
        self.assertIsNone(b.elapsed)

    def test_result_overrides_do_not_mutate(self) -> None:
        b = Benchmark(100, clock=self.clock)
        self.clock.advance(1.0)
        b.finish()
        r = b.result(iterations=50, errors=10)
        self.assertEqual((r.iterations, r.errors, r.speed), (50, 10, 40))
        self.assertEqual(b.iterations, 100)
        self.assertEqual(b.errors, 0)

    def test_zero_elapsed_speed_is_zero(self) -> None:
        b = Benchmark(100, clock=self.clock)
        b.finish()
        self.assertEqual(b.result().speed, 0)

    def test_reset_restores_preset(self) -> None:
        b = Benchmark(50, clock=self.clock)
        b.increment()
        b.increment_errors()
        self.clock.advance(1.0)
        b.finish()
        self.clock.advance(3.0)
        b.reset()
        self.assertEqual(b.iterations, 50)
        self.assertEqual(b.errors, 0)
        self.assertIsNone(b.elapsed)
        self.assertEqual(b.started, 14.0)

    def test_reset_restarts_timer(self) -> None:
        """Elapsed time after reset is measured from the reset instant."""
        kept = Benchmark(clock=self.clock)
        restarted = Benchmark(clock=self.clock)
        self.clock.advance(5.0)
        restarted.reset()
        self.clock.advance(1.0)
        self.assertEqual(restarted.result().elapsed, 1.0)
        self.assertGreater(kept.result().elapsed, restarted.result().elapsed)

    def test_more_errors_than_iterations_warns(self) -> None:
        b = Benchmark(3, clock=self.clock)
        with self.assertLogs("stagebench", level="WARNING") as cm:
            b.finish(errors=5)
        self.assertIn("more errors", cm.output[0])

    def test_repr(self) -> None:
        b = Benchmark(3, clock=self.clock)
        self.assertIn("running", repr(b))
        self.clock.advance(0.5)
        b.finish()
        self.assertIn("elapsed=0.500000", repr(b))


# ---------------------------------------------------------------------------
# Report text tests
# ---------------------------------------------------------------------------


class TestBenchmarkReport(unittest.TestCase):
    """Tests for format_result / print_result."""

    def setUp(self) -> None:
        self.clock = ManualClock()
        self.reporter = make_reporter()

    def test_format_without_errors(self) -> None:
        b = Benchmark(1000, clock=self.clock)
        self.clock.advance(0.5)
        b.finish()
        lines = b.format_result(reporter=self.reporter).splitlines()
        self.assertTrue(lines[0].startswith("--- Benchmark results "))
        self.assertEqual(lines[1], "Iterations: 1_000, success: 1_000, errors: None")
        self.assertEqual(lines[2], "Elapsed:")
        self.assertEqual(lines[3], " 0.500 secs (500.000 msecs)")
        self.assertEqual(lines[4], " 2_000 iters/s")
        self.assertEqual(lines[5], " 500_000 ns per iter")

    def test_format_with_errors(self) -> None:
        b = Benchmark(1000, clock=self.clock)
        self.clock.advance(0.5)
        b.finish(errors=10)
        lines = b.format_result(reporter=self.reporter).splitlines()
        self.assertEqual(
            lines[1], "Iterations: 1_000, success: 990, errors: 10, error rate: 1.00%"
        )
        self.assertEqual(lines[4], " 1_980 iters/s")
        self.assertEqual(lines[5], " 505_050 ns per iter")

    def test_format_zero_speed(self) -> None:
        b = Benchmark(clock=self.clock)
        b.finish()
        text = b.format_result(reporter=self.reporter)
        self.assertIn("N/A ns per iter", text)

    def test_format_with_overrides(self) -> None:
        b = Benchmark(clock=self.clock)
        self.clock.advance(1.0)
        text = b.format_result(iterations=42, reporter=self.reporter)
        self.assertIn("Iterations: 42,", text)

    def test_print_result(self) -> None:
        b = Benchmark(4, clock=self.clock)
        self.clock.advance(2.0)
        b.finish()
        b.print_result(reporter=self.reporter)
        self.assertIn(" 2 iters/s", output_of(self.reporter))

    def test_str_is_plain_text(self) -> None:
        b = Benchmark(10, clock=self.clock)
        self.clock.advance(1.0)
        b.finish()
        text = str(b)
        self.assertIn("Iterations: 10,", text)
        self.assertNotIn("\x1b[", text)


if __name__ == "__main__":
    unittest.main()
