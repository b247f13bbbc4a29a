"""
Bokeh implementation of the presentation port.

Each attached record gets its own renderer and ColumnDataSource on a
Web Mercator figure; the handle returned to the reconciler is an integer key
into the renderer table. A single hover tool shows the record's popup HTML.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional, Sequence

import numpy as np
from bokeh.models import ColumnDataSource, HoverTool, Select
from bokeh.plotting import figure
from pyproj import Transformer
from xyzservices import providers as xyz_providers

from history_atlas.reconcile import MarkerStyle, PathStyle

MAX_ABS_LAT = 85.0
POPUP_TOOLTIP = "<div>@popup{safe}</div>"

_TO_MERCATOR = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


def lonlat_to_web_mercator(
    lon_values: Sequence[float], lat_values: Sequence[float]
) -> tuple[np.ndarray, np.ndarray]:
    """Project longitude/latitude pairs to Web Mercator, clamping polar latitudes."""
    lon_arr = np.asarray(lon_values, dtype=float)
    lat_arr = np.clip(np.asarray(lat_values, dtype=float), -MAX_ABS_LAT, MAX_ABS_LAT)
    x, y = _TO_MERCATOR.transform(lon_arr, lat_arr)
    return np.asarray(x, dtype=float), np.asarray(y, dtype=float)


def resolve_tile_provider(path: str) -> Any | None:
    """Resolve a dotted xyzservices provider path."""
    if not path:
        return None
    provider: Any = xyz_providers
    for part in path.split("."):
        provider = getattr(provider, part, None)
        if provider is None:
            return None
    return provider


def build_map_figure(map_cfg: dict[str, Any]) -> Any:
    """Create the mercator figure centred on the configured view."""
    center = map_cfg.get("center", {}) or {}
    lat = float(center.get("lat", 20.0))
    lon = float(center.get("lon", 0.0))
    lat_half = float(map_cfg.get("lat_span", 140.0)) / 2.0
    lon_half = float(map_cfg.get("lon_span", 360.0)) / 2.0
    x_vals, y_vals = lonlat_to_web_mercator(
        [max(lon - lon_half, -180.0), min(lon + lon_half, 180.0)],
        [lat - lat_half, lat + lat_half],
    )
    plot = figure(
        title=str(map_cfg.get("title", "History atlas")),
        x_axis_type="mercator",
        y_axis_type="mercator",
        x_range=(float(x_vals[0]), float(x_vals[1])),
        y_range=(float(y_vals[0]), float(y_vals[1])),
        width=int(map_cfg.get("width", 1100)),
        height=int(map_cfg.get("height", 640)),
        tools="pan,wheel_zoom,reset,save",
        active_scroll="wheel_zoom",
    )
    plot.grid.visible = False
    return plot


def add_basemaps(plot: Any, basemaps: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """Add one tile renderer per configured basemap; only the first is visible."""
    tiles: dict[str, Any] = {}
    for entry in basemaps:
        label = str(entry.get("label") or entry.get("provider") or "")
        provider = resolve_tile_provider(str(entry.get("provider", "")))
        if provider is None:
            print(f"[WARN] Unknown basemap provider '{entry.get('provider')}', skipped.")
            continue
        renderer = plot.add_tile(provider, retina=bool(entry.get("retina", False)))
        renderer.visible = not tiles
        tiles[label] = renderer
    if not tiles:
        print("[WARN] No basemap available; rendering overlays on a blank background.")
    return tiles


def build_basemap_select(tiles: dict[str, Any]) -> Optional[Select]:
    """Select widget that toggles which basemap tile renderer is shown."""
    if not tiles:
        return None
    labels = list(tiles)
    select = Select(title="Basemap", value=labels[0], options=labels, width=200)

    def _on_basemap_change(attr: str, old: str, new: str) -> None:
        for label, renderer in tiles.items():
            renderer.visible = label == new

    select.on_change("value", _on_basemap_change)
    return select


class BokehPresentation:
    """Attach and detach record overlays on a Bokeh map figure."""

    def __init__(self, plot: Any):
        self.plot = plot
        self.hover = HoverTool(tooltips=POPUP_TOOLTIP, renderers=[])
        self.plot.add_tools(self.hover)
        self._renderers: dict[int, Any] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._renderers)

    def _register(self, renderer: Any) -> int:
        handle = next(self._ids)
        self._renderers[handle] = renderer
        self.hover.renderers = list(self._renderers.values())
        return handle

    def attach_point(
        self, lat: float, lon: float, style: MarkerStyle, popup_html: str
    ) -> int:
        x_vals, y_vals = lonlat_to_web_mercator([lon], [lat])
        source = ColumnDataSource(
            data={
                "x": x_vals.tolist(),
                "y": y_vals.tolist(),
                "popup": [popup_html],
            }
        )
        renderer = self.plot.scatter(
            "x",
            "y",
            source=source,
            size=style.radius * 2,
            fill_color=style.fill_color,
            fill_alpha=style.fill_alpha,
            line_color=style.line_color,
            line_width=style.line_width,
        )
        return self._register(renderer)

    def attach_path(
        self, points: Sequence[tuple[float, float]], style: PathStyle, popup_html: str
    ) -> int:
        lats = [point[0] for point in points]
        lons = [point[1] for point in points]
        x_vals, y_vals = lonlat_to_web_mercator(lons, lats)
        source = ColumnDataSource(
            data={
                "x": x_vals.tolist(),
                "y": y_vals.tolist(),
                "popup": [popup_html] * len(points),
            }
        )
        if len(points) > 1:
            renderer = self.plot.line(
                "x",
                "y",
                source=source,
                line_color=style.line_color,
                line_width=style.line_width,
                line_alpha=style.line_alpha,
            )
        else:
            # A one-point route has no segment to draw.
            renderer = self.plot.scatter(
                "x",
                "y",
                source=source,
                marker="square",
                size=style.line_width * 3,
                fill_color=style.line_color,
                line_color=style.line_color,
                alpha=style.line_alpha,
            )
        return self._register(renderer)

    def detach(self, handle: int) -> None:
        """Remove a renderer; unknown handles are ignored."""
        renderer = self._renderers.pop(handle, None)
        if renderer is None:
            return
        self.plot.renderers = [r for r in self.plot.renderers if r is not renderer]
        self.hover.renderers = list(self._renderers.values())
