"""Clock capture for benchmark timers.

Every timer in stagebench reads instants from a *clock*: a zero-argument
callable returning monotonic seconds as a float.  The default is
:func:`time.perf_counter`; tests inject a fake clock to get exact
durations.
"""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def monotonic() -> float:
    """Return the current instant of the default clock, in seconds."""
    return time.perf_counter()


def resolve_clock(clock: Clock | None) -> Clock:
    """Return *clock*, or the default clock if it is ``None``."""
    return clock if clock is not None else monotonic


def elapsed_since(started: float, clock: Clock) -> float:
    """Seconds between *started* and now, never negative."""
    return max(clock() - started, 0.0)


def spin(duration: float, clock: Clock | None = None) -> int:
    """Busy-wait for *duration* seconds.

    Yields the GIL on every pass so other threads keep running.

    Returns:
        The number of loop passes made.
    """
    clock = resolve_clock(clock)
    start = clock()
    passes = 0
    while clock() - start < duration:
        time.sleep(0)
        passes += 1
    return passes
