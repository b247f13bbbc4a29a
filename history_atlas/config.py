"""YAML configuration for the map viewer, merged over built-in defaults."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Optional

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "data": {
        "events": "data/events.json",
        "routes": "data/routes.json",
        "timeout": 15,
    },
    "timeline": {
        "mode": "continuous",
        "step": 100,
        "label_prefix": "Year",
        "play_interval_ms": 400,
        # None falls back to the mode default (window for continuous, exact for discrete).
        "events": None,
        "routes": None,
    },
    "map": {
        "title": "History atlas",
        "width": 1100,
        "height": 640,
        "center": {"lat": 20.0, "lon": 0.0},
        "lat_span": 140.0,
        "lon_span": 360.0,
        "marker_radius": 6,
        "route_color": "#34495e",
        "route_width": 3,
        "basemaps": [
            {"label": "Carto Light (EN)", "provider": "CartoDB.Positron"},
            {"label": "OSM (Local labels)", "provider": "OpenStreetMap.Mapnik"},
        ],
    },
    "classes": {
        "rules": [],
        "default": {"name": "other", "color": "#f39c12"},
    },
}


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merged[key] = merge_config(base[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> dict[str, Any]:
    """Load configuration from file or use defaults."""
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    requested_path = config_path
    resolved_path = (
        config_path if config_path.is_absolute() else (Path.cwd() / config_path)
    )
    if not resolved_path.exists():
        raise SystemExit(
            "Config file "
            f"'{requested_path}' not found. Use '--config configs/<name>.yaml'."
        )

    with resolved_path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise SystemExit(f"Config file '{requested_path}' must contain a mapping.")

    config = merge_config(DEFAULT_CONFIG, loaded)
    base_dir = resolved_path.parent
    data_cfg = config.get("data", {}) or {}
    for key in ("events", "routes"):
        data_cfg[key] = resolve_source(data_cfg.get(key), base_dir)
    return config


def resolve_source(value: Any, base_dir: Path) -> Optional[str]:
    """Resolve relative dataset paths against the config file's directory."""
    if not value:
        return None
    text = str(value).strip()
    if text.lower().startswith(("http://", "https://")):
        return text
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return str(path)
