# map_engine/runtime/resources.py
from functools import lru_cache
from pathlib import Path

from map_engine.domain.state import Dataset
from map_engine.io.osm_loader import load_osm


@lru_cache(maxsize=8)
def load_dataset_from_path(file: str, fmt: str, allowed_highways: frozenset[str]) -> Dataset:
    if fmt == "osm":
        return load_osm(file, allowed_highways)
    raise ValueError(f"Unsupported dataset fmt {fmt!r}")


def dataset_exists(file: str) -> bool:
    return Path(file).is_file()
