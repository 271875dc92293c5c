# map_engine/domain/engines/engine_core.py
import time
from dataclasses import dataclass, field

from map_engine.app.hooks import EngineHooks, NoopHooks
from map_engine.app.protocols import NameIndex, Router, TileSelector
from map_engine.domain.engines.engine_quadtree import TileQuery
from map_engine.domain.entities.geography import BoundingBox, LocationRecord, RoutePath
from map_engine.domain.errors import MapEngineError


@dataclass
class MapEngine:
    """Query façade over the three read-only engines; safe to share between callers."""

    router: Router
    tiles: TileSelector
    index: NameIndex
    hooks: EngineHooks = field(default_factory=NoopHooks)

    def route(
        self, start_lat: float, start_lon: float, end_lat: float, end_lon: float
    ) -> RoutePath:
        t0 = time.perf_counter()
        try:
            path = self.router.route(start_lat, start_lon, end_lat, end_lon)
        except MapEngineError as exc:
            self.hooks.error(
                "route", exc=exc, start=(start_lat, start_lon), end=(end_lat, end_lon)
            )
            raise
        self.hooks.query("route", ms=_ms(t0), size=len(path), cost=path.cost)
        return path

    def resolve_tiles(self, query: BoundingBox, ppd: float) -> TileQuery:
        t0 = time.perf_counter()
        result = self.tiles.resolve_tiles(query, ppd)
        self.hooks.query("raster", ms=_ms(t0), size=result.rows * result.cols, depth=result.depth)
        return result

    def resolve_viewport(self, query: BoundingBox, width_px: float) -> TileQuery:
        t0 = time.perf_counter()
        result = self.tiles.resolve_viewport(query, width_px)
        self.hooks.query("raster", ms=_ms(t0), size=result.rows * result.cols, depth=result.depth)
        return result

    def search(
        self, raw_query: str, exact: bool = False, limit: int | None = None
    ) -> list[str] | list[LocationRecord]:
        """Names completing ``raw_query``, or the location records matching it exactly."""
        t0 = time.perf_counter()
        if exact:
            out = self.index.lookup_exact(raw_query)
        else:
            out = []
            for name in self.index.autocomplete(raw_query):
                if limit is not None and len(out) >= limit:
                    break
                out.append(name)
        if exact and limit is not None:
            out = out[:limit]
        self.hooks.query("search", ms=_ms(t0), size=len(out), exact=exact)
        return out


def _ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000
