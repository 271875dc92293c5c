import pytest
from fastapi.testclient import TestClient

from map_engine.app.build import build
from map_engine.app.server import create_server
from map_engine.domain.entities.geography import BoundingBox, LocationRecord, Vertex
from map_engine.domain.errors import NoRouteFound
from map_engine.domain.state import Dataset


class RecordingHooks:
    def __init__(self):
        self.events = []

    def load_start(self, **kw):
        self.events.append(("load_start", kw))

    def load_end(self, **kw):
        self.events.append(("load_end", kw))

    def query(self, kind, **kw):
        self.events.append((kind, kw))

    def error(self, kind, **kw):
        self.events.append(("error:" + kind, kw))


A, B = Vertex(37.87, -122.26, id=1), Vertex(37.87, -122.25, id=2)
C, D = Vertex(37.85, -122.23, id=3), Vertex(37.85, -122.22, id=4)


@pytest.fixture
def dataset():
    ds = Dataset(source="inline")
    for v in (A, B, C, D):
        ds.graph.add_vertex(v)
    ds.graph.add_edge(A, B)
    ds.graph.add_edge(C, D)  # separate component
    for name, v in [("Cafe Strada", A), ("Cafe Milano", B), ("Cafe Strada", C)]:
        ds.index.insert(name, LocationRecord(name, v.lat, v.lon, v.id))
    return ds


@pytest.fixture
def app(dataset):
    return build({"name": "inline"}, dataset=dataset, use_logging=False)


def test_prebuilt_dataset_is_frozen(app, dataset):
    assert app.dataset is dataset
    assert dataset.graph.frozen
    assert dataset.index.frozen
    assert dataset.stats() == {"vertices": 4, "edges": 2, "names": 2, "locations": 3}


def test_search_prefix_exact_and_limit(app):
    engine = app.engine
    assert engine.search("cafe") == ["Cafe Strada", "Cafe Milano"]
    assert engine.search("cafe", limit=1) == ["Cafe Strada"]
    assert [r.id for r in engine.search("CAFE STRADA", exact=True)] == [1, 3]
    assert len(engine.search("cafe strada", exact=True, limit=1)) == 1
    assert engine.search("cafe", exact=True) == []


def test_hooks_see_queries_and_errors(app):
    hooks = RecordingHooks()
    app.engine.hooks = hooks
    path = app.engine.route(A.lat, A.lon, B.lat, B.lon)
    assert path.ids == [1, 2]
    with pytest.raises(NoRouteFound):
        app.engine.route(A.lat, A.lon, D.lat, D.lon)
    app.engine.resolve_tiles(BoundingBox(37.88, -122.29, 37.83, -122.22), ppd=0)
    kinds = [k for k, _ in hooks.events]
    assert kinds == ["route", "error:route", "raster"]
    assert hooks.events[0][1]["size"] == 2
    assert hooks.events[2][1]["depth"] == 0


def test_build_reports_load_phase(dataset, monkeypatch):
    hooks = RecordingHooks()
    monkeypatch.setattr("map_engine.app.build.NoopHooks", lambda: hooks)
    build({}, dataset=dataset, use_logging=False)
    (start, end) = hooks.events
    assert start == ("load_start", {"source": "inline"})
    assert end[1]["vertices"] == 4 and end[1]["names"] == 2


def test_server_maps_missing_route_to_404(app):
    client = TestClient(create_server(app))
    params = {"start_lat": A.lat, "start_lon": A.lon, "end_lat": D.lat, "end_lon": D.lon}
    r = client.get("/route", params=params)
    assert r.status_code == 404
    assert r.json() == {"detail": "no_route"}


def test_empty_dataset_has_no_vertices():
    app = build({}, use_logging=False)
    client = TestClient(create_server(app))
    params = {"start_lat": 0, "start_lon": 0, "end_lat": 1, "end_lon": 1}
    r = client.get("/route", params=params)
    assert r.status_code == 404
    assert r.json() == {"detail": "no_vertices"}
