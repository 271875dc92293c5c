from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from map_engine.domain.entities.geography import BoundingBox, LocationRecord, RoutePath, Vertex


# ------------- Engines --------------------
@runtime_checkable
class Router(Protocol):
    """
    Responsibilities:
      • Snap free coordinates to the nearest graph vertices.
      • Compute a least-cost path between them, or raise NoRouteFound.
    Each call owns its search state; implementations hold only read-only graph refs.
    """

    def route(
        self, start_lat: float, start_lon: float, end_lat: float, end_lon: float
    ) -> RoutePath: ...
    def route_between(self, a: Vertex, b: Vertex) -> RoutePath: ...
    def distance(self, a: Vertex, b: Vertex) -> float: ...


@runtime_checkable
class NameIndex(Protocol):
    """
    Responsibilities:
      • Normalize names identically at insert and lookup time.
      • Exact lookup of location records; lazy prefix completion of names.
    Empty or fully-stripped input yields an empty result, never an error.
    """

    def insert(self, raw_name: str, record: LocationRecord | None = None) -> bool: ...
    def lookup_exact(self, raw_key: str) -> list[LocationRecord]: ...
    def autocomplete(self, raw_prefix: str) -> Iterable[str]: ...


@runtime_checkable
class TileSelector(Protocol):
    """Resolve a viewport + resolution into a rectangular grid of tile names."""

    def depth_for(self, ppd: float) -> int: ...
    def resolve_tiles(self, query: BoundingBox, ppd: float): ...
    def resolve_viewport(self, query: BoundingBox, width_px: float): ...
