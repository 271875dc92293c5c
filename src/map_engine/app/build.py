# map_engine/app/build.py
import time
from collections.abc import Mapping
from dataclasses import dataclass

from map_engine.app.hooks import EngineHooks, NoopHooks
from map_engine.config.models import EngineModel
from map_engine.domain.engines.engine_core import MapEngine
from map_engine.domain.engines.engine_factory import build_engine
from map_engine.domain.state import Dataset
from map_engine.io.engine_logging import EngineLogging  # JSON logs
from map_engine.runtime.registries import resolve_dataset


@dataclass
class App:
    config: EngineModel
    dataset: Dataset
    engine: MapEngine
    hooks: EngineHooks


def build(
    cfg: EngineModel | Mapping, *, dataset: Dataset | None = None, use_logging: bool = True
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, EngineModel) else EngineModel.model_validate(cfg)

    # 1) Hooks
    hooks = (
        EngineLogging(name=model.name, level=model.log.level, debug=model.log.debug)
        if use_logging
        else NoopHooks()
    )

    # 2) Load phase: graph + name index, single-threaded, frozen on exit
    t0 = time.perf_counter()
    source = model.dataset.file if model.dataset else (dataset.source if dataset else "<empty>")
    hooks.load_start(source=source)
    ds = resolve_dataset(model.dataset, deps={"dataset": dataset} if dataset else {})
    ds.freeze()
    stats = ds.stats()
    hooks.load_end(
        vertices=stats["vertices"],
        edges=stats["edges"],
        names=stats["names"],
        ms=(time.perf_counter() - t0) * 1000,
    )

    # 3) Engines (quadtree built here, router bound to the frozen graph)
    engine = build_engine(model.router, model.quadtree, ds, hooks=hooks)

    return App(model, ds, engine, hooks)
