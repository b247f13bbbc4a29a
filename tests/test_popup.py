from conftest import make_event, make_route
from history_atlas.classify import VisualClass
from history_atlas.popup import (
    escape,
    event_popup_html,
    format_time,
    route_popup_html,
)


def test_escape_all_special_characters():
    assert escape("&<>\"'") == "&amp;&lt;&gt;&quot;&#x27;"
    assert escape(None) == ""


def test_script_title_is_escaped():
    ev = make_event(1, "<script>alert(1)</script>", type="<b>x</b>")
    popup = event_popup_html(ev)
    assert "<script>" not in popup
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in popup
    assert "&lt;b&gt;x&lt;/b&gt;" in popup


def test_event_popup_contents():
    ev = make_event(
        -3000,
        "Founding",
        type="human settlement",
        desc="A & B",
        images=("http://x/a.png?'onerror='1",),
        refs=("Smith 2001",),
    )
    popup = event_popup_html(ev, VisualClass("human", "#e74c3c"))
    assert "<b>Founding</b>" in popup
    assert "<i>human settlement</i>" in popup
    assert "Time: -3000" in popup
    assert "A &amp; B" in popup
    assert "&#x27;onerror=&#x27;1" in popup
    assert "<li>Smith 2001</li>" in popup
    assert "#e74c3c" in popup


def test_route_popup_escapes_text():
    route = make_route(1347, "Plague <route>", desc='"quoted"', refs=("a<b",))
    popup = route_popup_html(route)
    assert "Plague &lt;route&gt;" in popup
    assert "&quot;quoted&quot;" in popup
    assert "a&lt;b" in popup
    assert "Time: 1347" in popup


def test_format_time():
    assert format_time(1000.0) == "1000"
    assert format_time(-45000) == "-45000"
    assert format_time(1.5) == "1.5"
