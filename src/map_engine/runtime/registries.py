# runtime/registries.py
from collections.abc import Callable
from typing import Any

from map_engine.app.protocols import Router
from map_engine.config.models import (
    DatasetByPath,
    RouterAStarModel,
    RouterDijkstraModel,
    RouterUnion,
)
from map_engine.domain.engines.engine_routers import AStarRouter, DijkstraRouter
from map_engine.domain.state import Dataset
from map_engine.runtime.resources import dataset_exists, load_dataset_from_path

RouterFactory = Callable[[RouterUnion, dict[str, Any]], Router]

_router_registry: dict[str, RouterFactory] = {}


# --------------------- Datasets  ---------------------


def resolve_dataset(ref: DatasetByPath | None, *, deps: dict) -> Dataset:
    """
    deps can include:
      - 'dataset': Dataset   # a prebuilt dataset, used when no ref is configured
    """
    if ref is None:
        return deps.get("dataset") or Dataset(source="<empty>")
    if isinstance(ref, DatasetByPath):
        if not dataset_exists(ref.file):
            if ref.must_exist:
                raise FileNotFoundError(ref.file)
            return Dataset(source=ref.file)
        return load_dataset_from_path(ref.file, ref.fmt, frozenset(ref.allowed_highways))
    raise TypeError(ref)


# --------------------- Routers  ---------------------


def register_router(kind: str):
    def deco(fn: RouterFactory):
        _router_registry[kind] = fn
        return fn

    return deco


def make_router(cfg: RouterUnion, *, deps: dict) -> Router:
    try:
        factory = _router_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown router kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_router("astar")
def _make_astar(cfg: RouterAStarModel, deps):
    return AStarRouter(deps["graph"])


@register_router("dijkstra")
def _make_dijkstra(cfg: RouterDijkstraModel, deps):
    return DijkstraRouter(deps["graph"])
