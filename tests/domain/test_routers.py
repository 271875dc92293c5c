import itertools
import math

import numpy as np
import pytest

from map_engine.domain.engines.engine_graph import SpatialGraph
from map_engine.domain.engines.engine_routers import AStarRouter, DijkstraRouter
from map_engine.domain.entities.geography import Vertex
from map_engine.domain.errors import NoRouteFound

A, B, C = Vertex(0.0, 0.0, 1), Vertex(1.0, 0.0, 2), Vertex(2.0, 0.0, 3)


def _graph(vertices, edges) -> SpatialGraph:
    g = SpatialGraph()
    for v in vertices:
        g.add_vertex(v)
    for a, b, w in edges:
        g.add_edge(a, b, w)
    return g.freeze()


def _random_graph(seed: int, n: int = 12, p: float = 0.25) -> SpatialGraph:
    rng = np.random.default_rng(seed)
    pts = [Vertex(float(x), float(y), i) for i, (x, y) in enumerate(rng.uniform(0, 10, (n, 2)))]
    edges = [(a, b, None) for a, b in itertools.combinations(pts, 2) if rng.random() < p]
    return _graph(pts, edges)


def _path_cost(g: SpatialGraph, vertices) -> float:
    total = 0.0
    for u, v in zip(vertices, vertices[1:]):
        w = g.edge_weight(u, v)
        assert w is not None, f"{u} -> {v} is not an edge"
        total += w
    return total


# ---------- Concrete scenarios


def test_three_vertex_line():
    g = _graph([A, B, C], [(A, B, 1.0), (B, C, 1.0)])
    path = AStarRouter(g).route(0.0, 0.0, 2.0, 0.0)
    assert path.ids == [1, 2, 3]
    assert path.cost == pytest.approx(2.0)


def test_route_snaps_free_coordinates_to_nearest_vertices():
    g = _graph([A, B, C], [(A, B, 1.0), (B, C, 1.0)])
    path = AStarRouter(g).route(-0.3, 0.1, 2.2, -0.4)
    assert path.ids == [1, 2, 3]


def test_same_nearest_vertex_is_single_vertex_path():
    g = _graph([A, B, C], [(A, B, 1.0), (B, C, 1.0)])
    path = AStarRouter(g).route(1.0, 0.1, 0.9, -0.1)
    assert path.ids == [2]
    assert path.cost == 0.0
    assert AStarRouter(g).route_between(C, C).ids == [3]


def test_prefers_cheaper_detour():
    D = Vertex(1.0, 1.0, 4)
    # direct A-C is long; A-D-C is shorter in weight
    g = _graph([A, C, D], [(A, C, 5.0), (A, D, 1.5), (D, C, 1.5)])
    path = AStarRouter(g).route_between(A, C)
    assert path.ids == [1, 4, 3]
    assert path.cost == pytest.approx(3.0)


def test_disconnected_raises_no_route():
    far1, far2 = Vertex(10.0, 10.0, 8), Vertex(11.0, 10.0, 9)
    g = _graph([A, B, far1, far2], [(A, B, 1.0), (far1, far2, 1.0)])
    with pytest.raises(NoRouteFound):
        AStarRouter(g).route_between(A, far2)
    with pytest.raises(NoRouteFound):
        DijkstraRouter(g).route(0.0, 0.0, 11.0, 10.0)


def test_isolated_start_raises_no_route():
    g = _graph([A, B, C], [(B, C, 1.0)])
    with pytest.raises(NoRouteFound):
        AStarRouter(g).route_between(A, C)


def test_parallel_edges_use_the_cheapest():
    g = _graph([A, B], [(A, B, 3.0), (A, B, 1.0)])
    assert AStarRouter(g).route_between(A, B).cost == pytest.approx(1.0)


# ---------- Optimality vs. the exhaustive baseline


@pytest.mark.parametrize("seed", range(8))
def test_astar_matches_dijkstra_on_random_graphs(seed):
    g = _random_graph(seed)
    astar, dijkstra = AStarRouter(g), DijkstraRouter(g)
    vertices = list(g)
    for a, b in itertools.combinations(vertices, 2):
        try:
            base = dijkstra.route_between(a, b)
        except NoRouteFound:
            with pytest.raises(NoRouteFound):
                astar.route_between(a, b)
            continue
        got = astar.route_between(a, b)
        assert got.vertices[0] == a and got.vertices[-1] == b
        assert _path_cost(g, got.vertices) == pytest.approx(got.cost)
        assert got.cost == pytest.approx(base.cost)
        assert astar.distance(a, b) == pytest.approx(base.cost)


def test_route_is_symmetric_in_cost():
    g = _random_graph(42, n=15, p=0.3)
    r = AStarRouter(g)
    for a, b in itertools.combinations(list(g)[:6], 2):
        try:
            fwd = r.route_between(a, b).cost
        except NoRouteFound:
            continue
        assert r.route_between(b, a).cost == pytest.approx(fwd)


def test_search_state_is_not_shared_between_calls():
    pts = [Vertex(float(i % 3), float(i // 3), i) for i in range(9)]
    grid = [(u, v, None) for u, v in itertools.combinations(pts, 2) if u.distance_to(v) == 1.0]
    g = _graph(pts, grid)
    r = AStarRouter(g)
    a, b = pts[0], pts[-1]
    first = r.route_between(a, b)
    r.route_between(b, a)
    again = r.route_between(a, b)
    assert again.ids == first.ids
    assert again.cost == pytest.approx(4.0)
    assert not math.isnan(again.cost)


def test_shortcut_weights_cannot_mislead_astar():
    start, x, y, goal = (
        Vertex(0.0, 0.0, 1),
        Vertex(9.0, 0.0, 2),
        Vertex(0.0, 5.0, 3),
        Vertex(10.0, 0.0, 4),
    )
    g = SpatialGraph()
    for v in (start, x, y, goal):
        g.add_vertex(v)
    g.add_edge(start, x, 9.0)
    g.add_edge(x, goal, 1.0)
    with pytest.raises(ValueError):
        g.add_edge(start, y, 0.1)
    with pytest.raises(ValueError):
        g.add_edge(y, goal, 0.1)
    # the same detour at its true length is longer than the straight road
    g.add_edge(start, y, None)
    g.add_edge(y, goal, None)
    g.freeze()
    a = AStarRouter(g).route_between(start, goal)
    d = DijkstraRouter(g).route_between(start, goal)
    assert a.ids == d.ids == [1, 2, 4]
    assert a.cost == pytest.approx(d.cost)
    assert a.cost == pytest.approx(10.0)
