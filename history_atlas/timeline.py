"""
Slider-facing controller: domain → slider settings → filter → reconcile.

The controller is the only object the UI talks to. A slider value is a time
in continuous mode and an index into the observed times in discrete mode;
`time_for_value` hides the difference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from history_atlas.domain import (
    CONTINUOUS,
    ContinuousRange,
    DiscreteTimeline,
    TemporalDomain,
    build_domain,
)
from history_atlas.errors import EmptyDomainError
from history_atlas.filtering import ExactMatch, MatchPolicy, Windowed, select
from history_atlas.popup import format_time
from history_atlas.records import Event, Route
from history_atlas.reconcile import LayerReconciler

DEFAULT_STEP = 100
EMPTY_LABEL = "No dated records"


@dataclass(frozen=True)
class SliderSettings:
    start: float
    end: float
    step: float
    value: float
    disabled: bool


@dataclass(frozen=True)
class VisibleSet:
    time: Optional[float]
    events: tuple[Event, ...]
    routes: tuple[Route, ...]


def default_policies(mode: str) -> tuple[MatchPolicy, MatchPolicy]:
    """Exact matching for discrete timelines, windows for continuous ranges."""
    if mode == CONTINUOUS:
        return Windowed(1000), Windowed(2000)
    return ExactMatch(), ExactMatch()


class TimelineController:
    """Run filter and reconcile passes for slider positions."""

    def __init__(
        self,
        events: Sequence[Event],
        routes: Sequence[Route],
        reconciler: LayerReconciler,
        *,
        mode: str = CONTINUOUS,
        step: float = DEFAULT_STEP,
        event_policy: Optional[MatchPolicy] = None,
        route_policy: Optional[MatchPolicy] = None,
        label_prefix: str = "Year",
    ):
        if step <= 0:
            raise ValueError(f"Slider step must be positive, got {step!r}.")
        self.events = tuple(events)
        self.routes = tuple(routes)
        self.reconciler = reconciler
        self.mode = mode
        self.step = step
        default_event_policy, default_route_policy = default_policies(mode)
        self.event_policy = event_policy or default_event_policy
        self.route_policy = route_policy or default_route_policy
        self.label_prefix = label_prefix
        try:
            self.domain: Optional[TemporalDomain] = build_domain(
                [self.events, self.routes], mode
            )
        except EmptyDomainError:
            print("[WARN] No records with a finite time; time control disabled.")
            self.domain = None

    @property
    def enabled(self) -> bool:
        return self.domain is not None

    def slider_settings(self) -> SliderSettings:
        """Range, step and initial value for the time slider."""
        domain = self.domain
        if domain is None:
            return SliderSettings(start=0, end=1, step=1, value=0, disabled=True)
        if isinstance(domain, ContinuousRange):
            if domain.min == domain.max:
                return SliderSettings(
                    start=domain.min,
                    end=domain.min + self.step,
                    step=self.step,
                    value=domain.min,
                    disabled=True,
                )
            return SliderSettings(
                start=domain.min,
                end=domain.max,
                step=self.step,
                value=domain.min,
                disabled=False,
            )
        last_index = len(domain) - 1
        return SliderSettings(
            start=0,
            end=max(last_index, 1),
            step=1,
            value=0,
            disabled=last_index < 1,
        )

    def time_for_value(self, value: float) -> Optional[float]:
        """Translate a slider value into a query time."""
        domain = self.domain
        if domain is None:
            return None
        if isinstance(domain, DiscreteTimeline):
            return domain.time_at(int(round(value)))
        return domain.clamp(float(value))

    def label_text(self, time: Optional[float]) -> str:
        if time is None:
            return EMPTY_LABEL
        return f"{self.label_prefix}: {format_time(time)}"

    def visible_at(self, time: Optional[float]) -> VisibleSet:
        """Filter both datasets for a query time without touching the map."""
        if time is None:
            return VisibleSet(time=None, events=(), routes=())
        return VisibleSet(
            time=time,
            events=tuple(select(self.events, time, self.event_policy)),
            routes=tuple(select(self.routes, time, self.route_policy)),
        )

    def show(self, value: float) -> VisibleSet:
        """Run one full filter → reconcile pass for a slider value."""
        visible = self.visible_at(self.time_for_value(value))
        self.reconciler.reconcile(visible.events, visible.routes)
        return visible

    def next_value(self, value: float) -> float:
        """Advance one slider step for replay, wrapping back to the start."""
        settings = self.slider_settings()
        if settings.disabled:
            return settings.value
        upper = settings.end
        if isinstance(self.domain, DiscreteTimeline):
            upper = len(self.domain) - 1
        if value >= upper:
            return settings.start
        return min(value + settings.step, upper)
