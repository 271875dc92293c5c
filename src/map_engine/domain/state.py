# map_engine/domain/state.py
from dataclasses import dataclass, field

from map_engine.domain.engines.engine_graph import SpatialGraph
from map_engine.domain.engines.engine_trie import PrefixIndex


@dataclass
class Dataset:
    """Load-phase output: the road graph plus the name index, both read-only afterwards."""

    graph: SpatialGraph = field(default_factory=SpatialGraph)
    index: PrefixIndex = field(default_factory=PrefixIndex)
    source: str = ""

    def freeze(self) -> "Dataset":
        """End the load phase for both the graph and the name index."""
        self.graph.freeze()
        self.index.freeze()
        return self

    def stats(self) -> dict[str, int]:
        return {
            "vertices": len(self.graph),
            "edges": self.graph.edge_count,
            "names": self.index.key_count,
            "locations": self.index.record_count,
        }
