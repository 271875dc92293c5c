# map_engine/domain/engines/engine_graph.py
from collections.abc import Iterable, Iterator

import numpy as np

from map_engine.domain.entities.geography import Edge, Vertex
from map_engine.domain.errors import GraphFrozenError, VertexNotFound

_WEIGHT_TOL = 1e-9


class SpatialGraph:
    """
    Undirected weighted graph over geographic vertices.

    Vertices live in an arena (``_vertices``) addressed by a dense slot; ``_slots`` maps a
    coordinate to its slot and ``_adj[slot]`` holds the outgoing edges. Built once during
    the load phase, then frozen and read-only.
    """

    def __init__(self):
        self._vertices: list[Vertex] = []
        self._slots: dict[Vertex, int] = {}
        self._adj: list[list[Edge]] = []
        self._coords: np.ndarray | None = None
        self._frozen = False

    # ---------------- load phase -----------------

    def add_vertex(self, v: Vertex) -> int:
        """Register ``v`` and return its slot; a known coordinate keeps its first slot."""
        slot = self._slots.get(v)
        if slot is not None:
            return slot
        self._check_mutable()
        slot = len(self._vertices)
        self._slots[v] = slot
        self._vertices.append(v)
        self._adj.append([])
        return slot

    def add_edge(self, a: Vertex, b: Vertex, weight: float | None = None) -> None:
        # parallel edges are not deduplicated
        self._check_mutable()
        sa, sb = self.slot(a), self.slot(b)
        straight = a.distance_to(b)
        w = straight if weight is None else float(weight)
        if w < 0:
            raise ValueError(f"edge weight must be >= 0, got {w}")
        # the router's straight-line heuristic must never overestimate
        if w < straight - _WEIGHT_TOL * max(1.0, straight):
            raise ValueError(f"edge weight {w} is below the straight-line distance {straight}")
        va, vb = self._vertices[sa], self._vertices[sb]
        self._adj[sa].append(Edge(va, vb, w))
        self._adj[sb].append(Edge(vb, va, w))

    def add_edges(self, triples: Iterable[tuple[Vertex, Vertex, float | None]]) -> None:
        for a, b, w in triples:
            self.add_edge(a, b, w)

    def freeze(self) -> "SpatialGraph":
        if not self._frozen:
            self._coords = self._coord_array()
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozenError("graph is read-only after freeze()")

    # ---------------- queries -----------------

    def slot(self, v: Vertex) -> int:
        try:
            return self._slots[v]
        except KeyError:
            raise VertexNotFound(f"vertex ({v.lat}, {v.lon}) is not registered") from None

    def vertex(self, slot: int) -> Vertex:
        return self._vertices[slot]

    def __contains__(self, v: Vertex) -> bool:
        return v in self._slots

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    @property
    def edge_count(self) -> int:
        """Number of logical (undirected) connections."""
        return sum(len(es) for es in self._adj) // 2

    def edges(self, v: Vertex) -> list[Edge]:
        return list(self._adj[self.slot(v)])

    def edges_at(self, slot: int) -> list[Edge]:
        # slot-level access for the router hot loop; callers must not mutate
        return self._adj[slot]

    def neighbors(self, v: Vertex) -> list[Vertex]:
        return [e.end for e in self._adj[self.slot(v)]]

    def edge_weight(self, a: Vertex, b: Vertex) -> float | None:
        for e in self._adj[self.slot(a)]:
            if e.end == b:
                return e.weight
        return None

    def nearest(self, lat: float, lon: float) -> Vertex:
        """Closest vertex by Euclidean distance; ties go to the earliest registered."""
        if not self._vertices:
            raise VertexNotFound("graph has no vertices")
        coords = self._coords if self._coords is not None else self._coord_array()
        d2 = (coords[:, 0] - lat) ** 2 + (coords[:, 1] - lon) ** 2
        return self._vertices[int(np.argmin(d2))]  # argmin returns the first minimum

    def _coord_array(self) -> np.ndarray:
        return np.array([(v.lat, v.lon) for v in self._vertices], dtype=float).reshape(-1, 2)
