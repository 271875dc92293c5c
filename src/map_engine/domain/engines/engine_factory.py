# map_engine/domain/engines/engine_factory.py

from map_engine.app.hooks import EngineHooks, NoopHooks
from map_engine.config.models import QuadTreeModel, RouterUnion
from map_engine.domain.engines.engine_core import MapEngine
from map_engine.domain.engines.engine_quadtree import QuadTree
from map_engine.domain.entities.geography import BoundingBox
from map_engine.domain.state import Dataset
from map_engine.runtime.registries import make_router


def build_quadtree(cfg: QuadTreeModel) -> QuadTree:
    r = cfg.root
    box = BoundingBox(r.ul_lat, r.ul_lon, r.lr_lat, r.lr_lon)
    return QuadTree(box, max_depth=cfg.max_depth, tile_size=cfg.tile_size)


def build_engine(
    router_cfg: RouterUnion,
    tiles_cfg: QuadTreeModel,
    dataset: Dataset,
    *,
    hooks: EngineHooks | None = None,
) -> MapEngine:
    graph = dataset.freeze().graph  # no-op when the loader already froze it
    router = make_router(router_cfg, deps={"graph": graph})
    return MapEngine(
        router=router,
        tiles=build_quadtree(tiles_cfg),
        index=dataset.index,
        hooks=hooks or NoopHooks(),
    )
