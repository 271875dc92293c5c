# map_engine/io/config.py
from pathlib import Path

import yaml

from map_engine.config.models import EngineModel


def load_config(path: str | Path) -> EngineModel:
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return EngineModel.model_validate(raw)
