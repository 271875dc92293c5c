# map_engine/domain/errors.py


class MapEngineError(Exception):
    """Base class for recoverable query/build failures."""


class VertexNotFound(MapEngineError, KeyError):
    """Lookup of a point that was never registered with the graph."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else "vertex not found"


class NoRouteFound(MapEngineError):
    """Search frontier exhausted before the goal was reached."""

    def __init__(self, start, goal):
        super().__init__(f"no route from {start} to {goal}")
        self.start, self.goal = start, goal


class GraphFrozenError(MapEngineError, RuntimeError):
    """Graph mutation attempted after the load phase ended."""


class IndexFrozenError(MapEngineError, RuntimeError):
    """Name index mutation attempted after the load phase ended."""
