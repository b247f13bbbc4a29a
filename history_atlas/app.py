"""
Interactive history map: scrub a slider to see which events and migration
routes were active at (or around) a point in time.

Run:
    python -m history_atlas.app --config configs/atlas.yaml
    python -m history_atlas.app --events data/events.json --routes data/routes.json --mode discrete

Config (yaml):
    timeline:
        mode: continuous      # or "discrete" (one slider stop per observed time)
        step: 100             # continuous mode only
        events: {match: window, width: 1000}
        routes: {match: window, width: 2000}
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Optional, Sequence

from bokeh.layouts import column, row
from bokeh.models import Button, Div, Slider
from bokeh.server.server import Server

from history_atlas.bokeh_port import (
    BokehPresentation,
    add_basemaps,
    build_basemap_select,
    build_map_figure,
)
from history_atlas.classify import Classifier, classifier_from_config
from history_atlas.config import load_config
from history_atlas.domain import DOMAIN_MODES
from history_atlas.filtering import policy_from_config
from history_atlas.loader import load_datasets
from history_atlas.popup import escape
from history_atlas.records import Event, Route
from history_atlas.reconcile import LayerReconciler, PathStyle
from history_atlas.timeline import TimelineController, default_policies


def build_legend_html(classifier: Classifier) -> str:
    """Small color key for the event classes."""
    items = [
        "<span style='margin-right: 12px;'>"
        f"<span style='color:{escape(visual_class.color)};'>&#9679;</span> "
        f"{escape(visual_class.name)}</span>"
        for visual_class in classifier.legend()
    ]
    return "<div>" + "".join(items) + "</div>"


def build_controller(
    config: dict[str, Any],
    events: Sequence[Event],
    routes: Sequence[Route],
    presentation: Any,
) -> TimelineController:
    """Wire classifier, reconciler and policies from config."""
    timeline_cfg = config.get("timeline", {}) or {}
    map_cfg = config.get("map", {}) or {}
    classes_cfg = config.get("classes", {}) or {}

    mode = str(timeline_cfg.get("mode", "continuous")).strip().lower()
    if mode not in DOMAIN_MODES:
        raise SystemExit(f"timeline.mode must be one of {DOMAIN_MODES}, got '{mode}'.")
    default_event_policy, default_route_policy = default_policies(mode)
    try:
        classifier = classifier_from_config(
            classes_cfg.get("rules"), classes_cfg.get("default")
        )
        event_policy = policy_from_config(timeline_cfg.get("events"), default_event_policy)
        route_policy = policy_from_config(timeline_cfg.get("routes"), default_route_policy)
    except ValueError as exc:
        raise SystemExit(f"Invalid config: {exc}") from exc

    reconciler = LayerReconciler(
        presentation,
        classifier,
        marker_radius=float(map_cfg.get("marker_radius", 6)),
        route_style=PathStyle(
            line_color=str(map_cfg.get("route_color", "#34495e")),
            line_width=float(map_cfg.get("route_width", 3)),
        ),
    )
    return TimelineController(
        events,
        routes,
        reconciler,
        mode=mode,
        step=float(timeline_cfg.get("step", 100)),
        event_policy=event_policy,
        route_policy=route_policy,
        label_prefix=str(timeline_cfg.get("label_prefix", "Year")),
    )


def build_layout(
    config: dict[str, Any], events: Sequence[Event], routes: Sequence[Route]
) -> tuple[Any, TimelineController, Slider, Button]:
    """Build the map, controls and controller for one document."""
    map_cfg = config.get("map", {}) or {}
    timeline_cfg = config.get("timeline", {}) or {}

    plot = build_map_figure(map_cfg)
    tiles = add_basemaps(plot, map_cfg.get("basemaps", []) or [])
    basemap_select = build_basemap_select(tiles)

    presentation = BokehPresentation(plot)
    controller = build_controller(config, events, routes, presentation)
    settings = controller.slider_settings()

    slider = Slider(
        start=settings.start,
        end=settings.end,
        step=settings.step,
        value=settings.value,
        title="Time",
        show_value=False,
        disabled=settings.disabled,
        width=int(map_cfg.get("width", 1100)) - 100,
    )
    initial_time = controller.time_for_value(settings.value)
    time_div = Div(
        text=f"<b>{escape(controller.label_text(initial_time))}</b>", name="time_label"
    )
    status_div = Div(text="", name="visible_status")
    play_button = Button(
        label="Play", button_type="success", width=80, disabled=settings.disabled
    )

    def render(value: float) -> None:
        visible = controller.show(value)
        time_div.text = f"<b>{escape(controller.label_text(visible.time))}</b>"
        status_div.text = (
            f"{len(visible.events)} events, {len(visible.routes)} routes visible"
            if controller.enabled
            else "<i>No dated records loaded.</i>"
        )

    slider.on_change("value", lambda attr, old, new: render(new))

    replay: dict[str, Any] = {"callback": None}
    play_interval_ms = int(timeline_cfg.get("play_interval_ms", 400))

    def advance() -> None:
        slider.value = controller.next_value(slider.value)

    def toggle_play() -> None:
        doc = play_button.document
        if play_button.label == "Play":
            play_button.label = "Pause"
            if doc is not None:
                replay["callback"] = doc.add_periodic_callback(advance, play_interval_ms)
        else:
            play_button.label = "Play"
            callback = replay["callback"]
            if doc is not None and callback is not None:
                doc.remove_periodic_callback(callback)
            replay["callback"] = None

    play_button.on_click(toggle_play)

    render(settings.value)

    header: list[Any] = [time_div, status_div]
    if basemap_select is not None:
        header.insert(0, basemap_select)
    layout = column(
        row(*header),
        plot,
        row(play_button, slider),
        Div(text=build_legend_html(controller.reconciler.classifier)),
    )
    return layout, controller, slider, play_button


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(description="History atlas map viewer")
    parser.add_argument("--config", type=Path, help="Path to config yaml file")
    parser.add_argument("--events", help="Events JSON path or URL (overrides config)")
    parser.add_argument("--routes", help="Routes JSON path or URL (overrides config)")
    parser.add_argument(
        "--mode",
        choices=list(DOMAIN_MODES),
        help="Time control mode (overrides config)",
    )
    parser.add_argument("--port", type=int, default=5006, help="Bokeh server port")
    parser.add_argument(
        "--no-show", action="store_true", help="Do not open a browser window"
    )
    return parser


def resolve_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load config and apply CLI overrides."""
    config = load_config(args.config)
    data_cfg = config.setdefault("data", {})
    if args.events:
        data_cfg["events"] = args.events
    if args.routes:
        data_cfg["routes"] = args.routes
    if args.mode:
        config.setdefault("timeline", {})["mode"] = args.mode
    return config


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse CLI arguments, load the datasets and serve the map."""
    args = build_arg_parser().parse_args(argv)
    config = resolve_config(args)
    data_cfg = config.get("data", {}) or {}

    print("Configuration loaded:")
    print(f"  Events: {data_cfg.get('events')}")
    print(f"  Routes: {data_cfg.get('routes')}")
    print(f"  Mode: {(config.get('timeline', {}) or {}).get('mode')}")

    events, routes = load_datasets(
        data_cfg.get("events"),
        data_cfg.get("routes"),
        timeout=float(data_cfg.get("timeout", 15)),
    )

    def modify_doc(doc) -> None:
        layout, _, _, _ = build_layout(config, events, routes)
        doc.add_root(layout)
        doc.title = str((config.get("map", {}) or {}).get("title", "History atlas"))

    server = Server({"/": modify_doc}, num_procs=1, port=args.port)
    server.start()
    print(f"[INFO] Serving on http://localhost:{args.port}/")
    if not args.no_show:
        server.io_loop.add_callback(server.show, "/")
    server.io_loop.start()


if __name__ == "__main__":
    main()
