from conftest import make_event, make_route
from history_atlas.reconcile import LayerReconciler, PathStyle
from history_atlas.records import Route


def test_reconcile_attaches_exactly_visible_set(presentation):
    reconciler = LayerReconciler(presentation)
    events = [make_event(1, "a", "human"), make_event(1, "b")]
    routes = [make_route(1, "r")]
    handles = reconciler.reconcile(events, routes)

    assert set(handles) == set(presentation.attached)
    kinds = sorted(item[0] for item in presentation.attached.values())
    assert kinds == ["path", "point", "point"]


def test_detach_runs_before_attach(presentation):
    reconciler = LayerReconciler(presentation)
    reconciler.reconcile([make_event(1, "a")])
    presentation.calls.clear()
    reconciler.reconcile([make_event(2, "b")])
    assert [call[0] for call in presentation.calls] == ["detach", "attach"]


def test_reconcile_same_set_is_stable(presentation):
    reconciler = LayerReconciler(presentation)
    events = [make_event(1, "a"), make_event(1, "b")]
    reconciler.reconcile(events)
    first = sorted(item[3] for item in presentation.attached.values())
    reconciler.reconcile(events)
    second = sorted(item[3] for item in presentation.attached.values())
    assert first == second
    assert len(presentation.attached) == 2
    assert set(reconciler.handles) == set(presentation.attached)


def test_reconcile_to_empty_clears_everything(presentation):
    reconciler = LayerReconciler(presentation)
    reconciler.reconcile([make_event(1)], [make_route(1)])
    reconciler.reconcile([], [])
    assert presentation.attached == {}
    assert reconciler.handles == ()


def test_marker_color_comes_from_classifier(presentation):
    reconciler = LayerReconciler(presentation, marker_radius=4)
    reconciler.reconcile([make_event(1, "a", "animal domestication")])
    (_, coords, style, _), = presentation.attached.values()
    assert coords == (10.0, 10.0)
    assert style.fill_color == "#27ae60"
    assert style.radius == 4


def test_route_without_points_is_skipped(presentation):
    reconciler = LayerReconciler(presentation, route_style=PathStyle("#123456"))
    empty = Route(time=1, title="empty", path=())
    reconciler.reconcile([], [empty, make_route(1, "ok")])
    (kind, points, style, popup), = presentation.attached.values()
    assert kind == "path"
    assert points == ((10.0, 10.0), (20.0, 20.0))
    assert style.line_color == "#123456"
    assert "ok" in popup


def test_popups_are_escaped(presentation):
    reconciler = LayerReconciler(presentation)
    reconciler.reconcile([make_event(1, "<script>x</script>")])
    (_, _, _, popup), = presentation.attached.values()
    assert "<script>" not in popup


def test_independent_reconcilers_do_not_share_state(presentation):
    first = LayerReconciler(presentation)
    second = LayerReconciler(presentation)
    first.reconcile([make_event(1)])
    assert second.handles == ()
