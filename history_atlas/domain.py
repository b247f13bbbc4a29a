"""
Temporal domain of the time control.

The domain is either a continuous [min, max] range stepped by a fixed
constant, or the discrete list of distinct times that actually occur in the
data (one slider index per time, so the control never lands on an empty
moment).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Union

import numpy as np

from history_atlas.errors import EmptyDomainError
from history_atlas.records import is_finite_time

CONTINUOUS = "continuous"
DISCRETE = "discrete"
DOMAIN_MODES = (CONTINUOUS, DISCRETE)


@dataclass(frozen=True)
class ContinuousRange:
    """Closed time range [min, max]; values may be negative (BCE)."""

    min: float
    max: float

    def clamp(self, time: float) -> float:
        return float(min(max(time, self.min), self.max))


@dataclass(frozen=True)
class DiscreteTimeline:
    """Strictly ascending, distinct times observed in the data."""

    times: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.times)

    def time_at(self, index: int) -> float:
        """Return the time at index, clamping out-of-range indices to the ends."""
        if not self.times:
            raise EmptyDomainError("Timeline has no times.")
        clamped = min(max(int(index), 0), len(self.times) - 1)
        return self.times[clamped]


TemporalDomain = Union[ContinuousRange, DiscreteTimeline]


def collect_times(datasets: Iterable[Sequence[Any]]) -> np.ndarray:
    """Gather the finite times of every record across all datasets."""
    values: list[float] = []
    for records in datasets:
        for record in records:
            value = getattr(record, "time", None)
            if is_finite_time(value):
                values.append(float(value))
    return np.asarray(values, dtype=float)


def build_domain(datasets: Iterable[Sequence[Any]], mode: str) -> TemporalDomain:
    """Build the temporal domain for the given datasets.

    Raises EmptyDomainError when no record has a finite time and ValueError
    for an unknown mode.
    """
    if mode not in DOMAIN_MODES:
        raise ValueError(f"Unknown domain mode '{mode}'. Expected one of {DOMAIN_MODES}.")

    times = collect_times(datasets)
    if times.size == 0:
        raise EmptyDomainError("No records with a finite time.")

    if mode == CONTINUOUS:
        return ContinuousRange(min=float(np.min(times)), max=float(np.max(times)))
    return DiscreteTimeline(times=tuple(float(t) for t in np.unique(times)))
