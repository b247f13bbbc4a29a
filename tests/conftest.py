import pytest

from history_atlas.records import Event, PathPoint, Route


class FakePresentation:
    """Records attach/detach calls in place of a real map."""

    def __init__(self):
        self.attached = {}
        self.calls = []
        self._next = 0

    def attach_point(self, lat, lon, style, popup_html):
        self._next += 1
        self.attached[self._next] = ("point", (lat, lon), style, popup_html)
        self.calls.append(("attach", self._next))
        return self._next

    def attach_path(self, points, style, popup_html):
        self._next += 1
        self.attached[self._next] = ("path", tuple(points), style, popup_html)
        self.calls.append(("attach", self._next))
        return self._next

    def detach(self, handle):
        self.attached.pop(handle, None)
        self.calls.append(("detach", handle))


def make_event(time, title="E", type=None, lat=10.0, lon=10.0, **kwargs):
    return Event(time=time, lat=lat, lon=lon, title=title, type=type, **kwargs)


def make_route(time, title="R", path=((10.0, 10.0), (20.0, 20.0)), **kwargs):
    return Route(
        time=time,
        title=title,
        path=tuple(PathPoint(lat=lat, lon=lon) for lat, lon in path),
        **kwargs,
    )


@pytest.fixture
def presentation():
    return FakePresentation()


@pytest.fixture
def events():
    return [
        make_event(500, "early", "human migration"),
        make_event(1500, "late", "plant domestication"),
    ]
