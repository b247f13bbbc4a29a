"""Popup HTML for map records. All record text is escaped before embedding."""

from __future__ import annotations

import html
from typing import Optional

from history_atlas.classify import VisualClass
from history_atlas.records import Event, Route


def escape(value: Optional[str]) -> str:
    """Escape &, <, >, " and ' for safe embedding in markup."""
    if not value:
        return ""
    return html.escape(str(value), quote=True)


def format_time(value: float) -> str:
    """Render a time value, dropping the fraction for whole numbers."""
    numeric = float(value)
    if numeric.is_integer():
        return str(int(numeric))
    return f"{numeric:g}"


def build_images_html(images: tuple[str, ...]) -> str:
    if not images:
        return ""
    tags = [
        f"<img src='{escape(url)}' "
        "style='width: 200px; max-width: 100%; border: 1px solid #ddd;'>"
        for url in images
    ]
    return "<div>" + "".join(tags) + "</div>"


def build_refs_html(refs: tuple[str, ...]) -> str:
    if not refs:
        return ""
    items = "".join(f"<li>{escape(ref)}</li>" for ref in refs)
    return f"<div><b>References</b><ul style='margin: 2px 0;'>{items}</ul></div>"


def event_popup_html(event: Event, visual_class: Optional[VisualClass] = None) -> str:
    """Build the popup payload for a point event."""
    category = escape(event.type)
    parts = [f"<b>{escape(event.title)}</b>"]
    if category:
        swatch = ""
        if visual_class is not None:
            swatch = (
                f"<span style='color:{escape(visual_class.color)};'>&#9679;</span> "
            )
        parts.append(f"{swatch}<i>{category}</i>")
    parts.append(f"Time: {format_time(event.time)}")
    if event.desc:
        parts.append(escape(event.desc))
    body = "<br>".join(parts)
    return (
        "<div style='max-width: 320px;'>"
        f"{body}{build_images_html(event.images)}{build_refs_html(event.refs)}"
        "</div>"
    )


def route_popup_html(route: Route) -> str:
    """Build the popup payload for a migration route."""
    parts = [
        f"<b>{escape(route.title)}</b>",
        f"Time: {format_time(route.time)}",
    ]
    if route.desc:
        parts.append(escape(route.desc))
    body = "<br>".join(parts)
    return (
        "<div style='max-width: 320px;'>"
        f"{body}{build_refs_html(route.refs)}"
        "</div>"
    )
