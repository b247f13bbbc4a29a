"""
Visibility policies for a query time.

Each dataset kind is filtered independently so events and routes can use
different policies (routes are dated more coarsely and get a wider window).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, TypeVar, Union

from history_atlas.records import is_finite_time

R = TypeVar("R")


@dataclass(frozen=True)
class ExactMatch:
    """Visible iff the record time equals the query time exactly."""

    def matches(self, record_time: Any, query_time: float) -> bool:
        return is_finite_time(record_time) and bool(record_time == query_time)


@dataclass(frozen=True)
class Windowed:
    """Visible iff query - width <= record time <= query + width."""

    width: float

    def __post_init__(self) -> None:
        if isinstance(self.width, bool) or not isinstance(self.width, (int, float)):
            raise ValueError(f"Window width must be a number, got {self.width!r}.")
        if not math.isfinite(self.width) or self.width < 0:
            raise ValueError(f"Window width must be finite and >= 0, got {self.width!r}.")

    def matches(self, record_time: Any, query_time: float) -> bool:
        if not is_finite_time(record_time):
            return False
        return bool(query_time - self.width <= record_time <= query_time + self.width)


MatchPolicy = Union[ExactMatch, Windowed]


def select(records: Sequence[R], query_time: float, policy: MatchPolicy) -> list[R]:
    """Return the records visible at query_time, in input order."""
    return [
        record
        for record in records
        if policy.matches(getattr(record, "time", None), query_time)
    ]


def policy_from_config(
    policy_cfg: Optional[dict[str, Any]], default: MatchPolicy
) -> MatchPolicy:
    """Build a policy from a config mapping such as {"match": "window", "width": 1000}."""
    if not policy_cfg:
        return default
    match = str(policy_cfg.get("match", "")).strip().lower()
    if match == "exact":
        return ExactMatch()
    if match in {"window", "windowed"}:
        width = policy_cfg.get("width")
        if width is None:
            raise ValueError("Windowed policy requires a 'width'.")
        return Windowed(width=float(width))
    raise ValueError(f"Unknown match policy '{match}'. Use 'exact' or 'window'.")
