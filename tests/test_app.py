from history_atlas.app import build_arg_parser, build_layout, resolve_config
from history_atlas.config import load_config
from history_atlas.records import parse_records


def load_sample():
    events = parse_records(
        [
            {"time": 500, "lat": 10, "lon": 10, "title": "early", "type": "human"},
            {"time": 1500, "lat": 20, "lon": 20, "title": "late", "type": "plant"},
        ],
        "events",
    )
    routes = parse_records(
        [{"time": 1000, "title": "r", "path": [{"lat": 0, "lon": 0}, {"lat": 5, "lon": 5}]}],
        "routes",
    )
    return events, routes


def make_config(mode, **timeline):
    config = load_config(None)
    config["map"]["basemaps"] = []
    config["timeline"]["mode"] = mode
    config["timeline"].update(timeline)
    return config


def labels(layout):
    time_div = layout.select_one({"name": "time_label"})
    status_div = layout.select_one({"name": "visible_status"})
    return time_div.text, status_div.text


def test_continuous_slider_moves_update_label_and_layers():
    events, routes = load_sample()
    config = make_config("continuous", events={"match": "window", "width": 100})
    layout, controller, slider, play_button = build_layout(config, events, routes)

    assert slider.start == 500 and slider.end == 1500 and slider.step == 100
    assert not slider.disabled
    assert labels(layout) == ("<b>Year: 500</b>", "1 events, 1 routes visible")
    assert len(controller.reconciler.handles) == 2

    slider.value = 1100
    assert labels(layout) == ("<b>Year: 1100</b>", "0 events, 1 routes visible")
    assert len(controller.reconciler.presentation) == 1

    slider.value = 1500
    assert labels(layout) == ("<b>Year: 1500</b>", "1 events, 1 routes visible")
    assert len(controller.reconciler.presentation) == 2


def test_discrete_label_shows_year_not_index():
    events, routes = load_sample()
    layout, controller, slider, _ = build_layout(make_config("discrete"), events, routes)

    assert (slider.start, slider.end, slider.step) == (0, 2, 1)
    assert labels(layout) == ("<b>Year: 500</b>", "1 events, 0 routes visible")

    slider.value = 1
    assert labels(layout) == ("<b>Year: 1000</b>", "0 events, 1 routes visible")
    assert len(controller.reconciler.presentation) == 1

    slider.value = 2
    assert labels(layout) == ("<b>Year: 1500</b>", "1 events, 0 routes visible")
    assert len(controller.reconciler.presentation) == 1


def test_layout_with_no_data_still_builds():
    layout, controller, slider, play_button = build_layout(
        make_config("continuous"), [], []
    )
    assert slider.disabled
    assert play_button.disabled
    assert controller.reconciler.handles == ()
    assert labels(layout) == ("<b>No dated records</b>", "<i>No dated records loaded.</i>")


def test_cli_overrides():
    args = build_arg_parser().parse_args(
        ["--events", "e.json", "--routes", "http://x/r.json", "--mode", "discrete"]
    )
    config = resolve_config(args)
    assert config["data"]["events"] == "e.json"
    assert config["data"]["routes"] == "http://x/r.json"
    assert config["timeline"]["mode"] == "discrete"
