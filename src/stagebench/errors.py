"""Exceptions raised by stagebench on API misuse.

All of these signal a contract violation by the calling program (reused
stage names, finishing something that was never started, profiling with
no data). They are raised immediately and never retried.
"""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for every stagebench error."""


class StageError(BenchmarkError):
    """A stage name was used in a way its lifecycle does not allow."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class DuplicateStageError(StageError):
    """``start()`` was called with a name that already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Benchmark stage {name} already exists")


class UnknownStageError(StageError):
    """A stage was finished or referenced but never started."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Benchmark stage {name} not found")


class NoActiveStageError(BenchmarkError):
    """``finish_current()`` was called with no open stage."""

    def __init__(self) -> None:
        super().__init__("No active benchmark stage")


class EmptyProfileError(BenchmarkError):
    """A profile summary was requested before anything was recorded."""


class OperationNotStartedError(BenchmarkError):
    """A latency operation was finished without being started."""
