"""
Load event and route datasets from a local file or an HTTP(S) URL.

A dataset that cannot be fetched or parsed is reported and replaced with an
empty list; one failing source never affects the other.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

import requests

from history_atlas.errors import DataFetchError
from history_atlas.records import Record, parse_records

DEFAULT_TIMEOUT = 15


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def fetch_json(source: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> Any:
    """Fetch and decode a JSON document, raising DataFetchError on any failure."""
    label = str(source)
    if isinstance(source, str) and is_url(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DataFetchError(label, f"request failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise DataFetchError(label, f"invalid JSON: {exc}") from exc

    path = Path(source).expanduser()
    if not path.exists():
        raise DataFetchError(label, "file not found")
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        raise DataFetchError(label, f"could not read file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DataFetchError(label, f"invalid JSON: {exc}") from exc


def load_records(
    source: Optional[Union[str, Path]],
    kind: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[Record]:
    """Load one dataset; any fetch or parse failure yields an empty list."""
    if not source:
        print(f"[INFO] No {kind} source configured; continuing without {kind}.")
        return []
    try:
        payload = fetch_json(source, timeout=timeout)
        if not isinstance(payload, list):
            raise DataFetchError(
                str(source), f"expected a JSON array, got {type(payload).__name__}"
            )
    except DataFetchError as exc:
        print(f"[WARN] Failed to load {kind} from {exc.source}: {exc.reason}")
        return []

    records = parse_records(payload, kind)
    print(f"[INFO] Loaded {len(records)} {kind} from {source}.")
    return records


def load_datasets(
    events_source: Optional[Union[str, Path]],
    routes_source: Optional[Union[str, Path]],
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[list[Record], list[Record]]:
    """Load events and routes independently."""
    events = load_records(events_source, "events", timeout=timeout)
    routes = load_records(routes_source, "routes", timeout=timeout)
    return events, routes
