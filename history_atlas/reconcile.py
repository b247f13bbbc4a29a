"""
Keep the map's overlay layers in step with the visible set.

Every cycle detaches all handles from the previous cycle and then attaches a
fresh handle per visible record. Detach always runs before attach so a record
that stays visible is never drawn twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional, Protocol, Sequence

from history_atlas.classify import Classifier, default_classifier
from history_atlas.popup import event_popup_html, route_popup_html
from history_atlas.records import Event, Route


@dataclass(frozen=True)
class MarkerStyle:
    """Circle marker style for point events."""

    fill_color: str
    line_color: str = "#000"
    radius: float = 6
    line_width: float = 1
    fill_alpha: float = 0.85


@dataclass(frozen=True)
class PathStyle:
    """Polyline style for routes."""

    line_color: str
    line_width: float = 3
    line_alpha: float = 0.8


class PresentationPort(Protocol):
    """Rendering surface the reconciler draws on."""

    def attach_point(
        self, lat: float, lon: float, style: MarkerStyle, popup_html: str
    ) -> Hashable:
        ...

    def attach_path(
        self, points: Sequence[tuple[float, float]], style: PathStyle, popup_html: str
    ) -> Hashable:
        ...

    def detach(self, handle: Hashable) -> None:
        ...


DEFAULT_ROUTE_STYLE = PathStyle(line_color="#34495e")


class LayerReconciler:
    """Owns the handles currently attached to a presentation port."""

    def __init__(
        self,
        presentation: PresentationPort,
        classifier: Optional[Classifier] = None,
        *,
        marker_radius: float = 6,
        route_style: PathStyle = DEFAULT_ROUTE_STYLE,
    ):
        self.presentation = presentation
        self.classifier = classifier or default_classifier()
        self.marker_radius = marker_radius
        self.route_style = route_style
        self._handles: list[Any] = []

    @property
    def handles(self) -> tuple[Any, ...]:
        return tuple(self._handles)

    def clear(self) -> None:
        """Detach every handle from the previous cycle."""
        handles, self._handles = self._handles, []
        for handle in handles:
            self.presentation.detach(handle)

    def reconcile(
        self, events: Sequence[Event], routes: Sequence[Route] = ()
    ) -> tuple[Any, ...]:
        """Replace the drawn overlays with the given visible records."""
        self.clear()

        attached: list[Any] = []
        for event in events:
            visual_class = self.classifier.classify(event.type)
            style = MarkerStyle(fill_color=visual_class.color, radius=self.marker_radius)
            attached.append(
                self.presentation.attach_point(
                    event.lat, event.lon, style, event_popup_html(event, visual_class)
                )
            )

        for route in routes:
            if not route.path:
                continue
            points = [(point.lat, point.lon) for point in route.path]
            attached.append(
                self.presentation.attach_path(
                    points, self.route_style, route_popup_html(route)
                )
            )

        self._handles = attached
        return tuple(attached)
