"""Aggregate statistics for recorded durations.

Only simple arithmetic aggregates are provided: count, minimum, maximum
and mean.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class DurationStats:
    """Summary of a series of durations, in seconds."""

    n: int
    min: float
    max: float
    mean: float


def describe(values: Sequence[float]) -> DurationStats:
    """Compute min/max/mean for a series of durations.

    An empty series yields ``n=0`` and NaN for every aggregate.
    """
    if not values:
        nan = float("nan")
        return DurationStats(n=0, min=nan, max=nan, mean=nan)
    return DurationStats(
        n=len(values),
        min=min(values),
        max=max(values),
        mean=sum(values) / len(values),
    )


def column_totals(series: Sequence[Sequence[float]]) -> list[float]:
    """Sum several series index by index.

    The result is as long as the shortest series; trailing values of
    longer series have no counterpart and are ignored.
    """
    if not series:
        return []
    length = min(len(s) for s in series)
    return [sum(s[i] for s in series) for i in range(length)]
