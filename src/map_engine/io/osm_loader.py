# map_engine/io/osm_loader.py
import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path

from map_engine.config.models import DEFAULT_HIGHWAYS
from map_engine.domain.entities.geography import LocationRecord, Vertex
from map_engine.domain.state import Dataset

log = logging.getLogger("map_engine.osm")


def load_osm(path: str | Path, allowed_highways: Iterable[str] = DEFAULT_HIGHWAYS) -> Dataset:
    """
    Parse an OSM XML extract into a frozen road graph and a name index.

    Only ways tagged with an allowed ``highway`` value contribute vertices and edges;
    every named node contributes a location record, road or not.
    """
    allowed = frozenset(allowed_highways)
    ds = Dataset(source=str(path))
    nodes: dict[int, Vertex] = {}
    way_refs: list[int] = []
    way_is_road = False
    in_way = False
    missing = 0

    for event, el in ET.iterparse(str(path), events=("start", "end")):
        tag = el.tag
        if event == "start":
            if tag == "way":
                in_way, way_is_road, way_refs = True, False, []
            continue

        if tag == "node":
            v = Vertex(float(el.get("lat")), float(el.get("lon")), int(el.get("id")))
            nodes[v.id] = v
            for t in el.iter("tag"):
                if t.get("k") == "name" and t.get("v"):
                    name = t.get("v")
                    ds.index.insert(name, LocationRecord(name, v.lat, v.lon, v.id))
            el.clear()
        elif tag == "nd" and in_way:
            way_refs.append(int(el.get("ref")))
        elif tag == "tag" and in_way:
            if el.get("k") == "highway" and el.get("v") in allowed:
                way_is_road = True
        elif tag == "way":
            if way_is_road:
                missing += _add_way(ds, nodes, way_refs)
            in_way = False
            el.clear()

    if missing:
        log.warning("skipped %d way refs to unknown nodes", missing)
    ds.freeze()
    return ds


def _add_way(ds: Dataset, nodes: dict[int, Vertex], refs: list[int]) -> int:
    prev, missing = None, 0
    for ref in refs:
        v = nodes.get(ref)
        if v is None:
            missing += 1
            continue
        ds.graph.add_vertex(v)
        if prev is not None and prev != v:
            ds.graph.add_edge(prev, v)
        prev = v
    return missing
