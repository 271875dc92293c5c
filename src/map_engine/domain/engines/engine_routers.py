import heapq
import math
from dataclasses import dataclass, field

from map_engine.app.protocols import Router
from map_engine.domain.engines.engine_graph import SpatialGraph
from map_engine.domain.entities.geography import RoutePath, Vertex
from map_engine.domain.errors import NoRouteFound


@dataclass
class _SearchState:
    """Per-call search state; never shared between route queries."""

    frontier: list[tuple[float, int, int]] = field(default_factory=list)  # (f, seq, slot)
    cost: dict[int, float] = field(default_factory=dict)
    pred: dict[int, int] = field(default_factory=dict)
    visited: set[int] = field(default_factory=set)
    seq: int = 0
    expanded: int = 0

    def push(self, slot: int, estimate: float) -> None:
        # seq keeps insertion order among equal estimates
        self.seq += 1
        heapq.heappush(self.frontier, (estimate, self.seq, slot))

    def pop(self) -> int | None:
        while self.frontier:
            _, _, slot = heapq.heappop(self.frontier)
            if slot not in self.visited:  # stale entries left by re-insertion
                return slot
        return None


class AStarRouter(Router):
    def __init__(self, graph: SpatialGraph):
        self.G = graph

    def route(self, start_lat, start_lon, end_lat, end_lon) -> RoutePath:
        a = self.G.nearest(start_lat, start_lon)
        b = self.G.nearest(end_lat, end_lon)
        return self.route_between(a, b)

    def route_between(self, a: Vertex, b: Vertex) -> RoutePath:
        start, goal = self.G.slot(a), self.G.slot(b)
        if start == goal:
            return RoutePath([self.G.vertex(start)], 0.0)

        goal_v = self.G.vertex(goal)
        s = _SearchState()
        s.cost[start] = 0.0
        s.push(start, self._h(self.G.vertex(start), goal_v))
        while True:
            u = s.pop()
            if u is None:
                break
            if u == goal:
                return self._reconstruct(s, start, goal)
            s.visited.add(u)
            s.expanded += 1
            for e in self.G.edges_at(u):
                w = self.G.slot(e.end)
                if w in s.visited:
                    continue
                cand = s.cost[u] + e.weight
                if cand < s.cost.get(w, math.inf):
                    s.cost[w], s.pred[w] = cand, u
                    s.push(w, cand + self._h(e.end, goal_v))
        raise NoRouteFound(a, b)

    def distance(self, a: Vertex, b: Vertex) -> float:
        return self.route_between(a, b).cost

    def _reconstruct(self, s: _SearchState, start: int, goal: int) -> RoutePath:
        slots = [goal]
        while slots[-1] != start:
            slots.append(s.pred[slots[-1]])
        slots.reverse()
        return RoutePath([self.G.vertex(i) for i in slots], s.cost[goal])

    def _h(self, v: Vertex, goal: Vertex) -> float:
        # straight-line distance: admissible and consistent for Euclidean edge weights
        return v.distance_to(goal)


class DijkstraRouter(AStarRouter):
    """A* with a zero heuristic; the exhaustive baseline."""

    def _h(self, v: Vertex, goal: Vertex) -> float:
        return 0.0
