"""
Record types for the historical dataset.

Two kinds of records share a timestamp: point events and migration routes.
Both are frozen once parsed; anything derived from them (visible sets,
popups, renderers) is built fresh per query.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

import numpy as np
import pandas as pd

from history_atlas.errors import MalformedRecordError


def coerce_float(value: Any) -> Optional[float]:
    """Return value as a float when possible, None for missing or non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, np.number)):
            numeric = float(value)
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            numeric = float(pd.to_numeric(text, errors="coerce"))
        else:
            return None
    except (OverflowError, TypeError, ValueError):
        return None
    if pd.isna(numeric):
        return None
    return numeric


def coerce_text(value: Any) -> Optional[str]:
    """Return stripped text, or None for missing/blank values."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def coerce_text_list(value: Any) -> tuple[str, ...]:
    """Normalize a string or list of strings into a tuple of non-empty strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    items = (coerce_text(item) for item in value)
    return tuple(item for item in items if item)


def is_finite_time(value: Any) -> bool:
    """True when value is a real number that is neither NaN nor infinite."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.number)):
        return False
    try:
        return math.isfinite(value)
    except (OverflowError, TypeError):
        return False


@dataclass(frozen=True)
class PathPoint:
    """A single vertex of a route."""

    lat: float
    lon: float


@dataclass(frozen=True)
class Event:
    """A dated point event."""

    time: float
    lat: float
    lon: float
    title: str
    type: Optional[str] = None
    desc: Optional[str] = None
    images: tuple[str, ...] = ()
    refs: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Event":
        """Build an event from a JSON object."""
        if not isinstance(raw, dict):
            raise MalformedRecordError(f"event is not an object: {raw!r}")
        time = coerce_float(raw.get("time"))
        if time is None or not math.isfinite(time):
            raise MalformedRecordError(f"event has no finite time: {raw.get('time')!r}")
        lat = coerce_float(raw.get("lat"))
        lon = coerce_float(raw.get("lon"))
        if lat is None or lon is None or not (math.isfinite(lat) and math.isfinite(lon)):
            raise MalformedRecordError(
                f"event '{raw.get('title', '')}' has no usable coordinates"
            )
        return cls(
            time=time,
            lat=lat,
            lon=lon,
            title=coerce_text(raw.get("title")) or "",
            type=coerce_text(raw.get("type")),
            desc=coerce_text(raw.get("desc")),
            images=coerce_text_list(raw.get("images")),
            refs=coerce_text_list(raw.get("refs")),
        )


@dataclass(frozen=True)
class Route:
    """A dated migration route drawn as a polyline."""

    time: float
    title: str
    path: tuple[PathPoint, ...]
    desc: Optional[str] = None
    refs: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Route":
        """Build a route from a JSON object; points without coordinates are dropped."""
        if not isinstance(raw, dict):
            raise MalformedRecordError(f"route is not an object: {raw!r}")
        time = coerce_float(raw.get("time"))
        if time is None or not math.isfinite(time):
            raise MalformedRecordError(f"route has no finite time: {raw.get('time')!r}")
        raw_path = raw.get("path") or []
        if not isinstance(raw_path, (list, tuple)):
            raise MalformedRecordError(
                f"route '{raw.get('title', '')}' has a non-list path"
            )
        points: list[PathPoint] = []
        for item in raw_path:
            if isinstance(item, dict):
                lat, lon = coerce_float(item.get("lat")), coerce_float(item.get("lon"))
            elif isinstance(item, (list, tuple)) and len(item) >= 2:
                lat, lon = coerce_float(item[0]), coerce_float(item[1])
            else:
                continue
            if lat is None or lon is None:
                continue
            if not (math.isfinite(lat) and math.isfinite(lon)):
                continue
            points.append(PathPoint(lat=lat, lon=lon))
        if not points:
            raise MalformedRecordError(
                f"route '{raw.get('title', '')}' has no path points"
            )
        return cls(
            time=time,
            title=coerce_text(raw.get("title")) or "",
            path=tuple(points),
            desc=coerce_text(raw.get("desc")),
            refs=coerce_text_list(raw.get("refs")),
        )


Record = Union[Event, Route]

RECORD_TYPES: dict[str, type] = {
    "events": Event,
    "routes": Route,
}


def parse_records(items: Iterable[Any], kind: str) -> list[Record]:
    """Parse raw JSON items into records, skipping the malformed ones."""
    try:
        record_type = RECORD_TYPES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown record kind '{kind}'. Expected one of {sorted(RECORD_TYPES)}."
        ) from None

    records: list[Record] = []
    skipped = 0
    for item in items:
        try:
            records.append(record_type.from_dict(item))
        except MalformedRecordError:
            skipped += 1
    if skipped:
        print(f"[WARN] Skipped {skipped} malformed {kind} record(s).")
    return records
