import math
from dataclasses import dataclass, field


# Core geometry types used by the engines.
# Coordinates are plain degrees; distances are Euclidean in (lat, lon) space.
@dataclass(frozen=True)
class Vertex:
    lat: float
    lon: float
    id: int = field(default=0, compare=False)  # equality is by coordinate only

    def distance_to(self, other: "Vertex") -> float:
        return math.hypot(other.lat - self.lat, other.lon - self.lon)


@dataclass(frozen=True)
class Edge:
    start: Vertex
    end: Vertex
    weight: float


@dataclass(frozen=True)
class BoundingBox:
    ul_lat: float
    ul_lon: float
    lr_lat: float
    lr_lon: float

    @classmethod
    def from_corners(cls, lat1, lon1, lat2, lon2) -> "BoundingBox":
        """Build a box from any two opposite corners."""
        return cls(max(lat1, lat2), min(lon1, lon2), min(lat1, lat2), max(lon1, lon2))

    @property
    def width(self) -> float:
        return self.lr_lon - self.ul_lon

    @property
    def height(self) -> float:
        return self.ul_lat - self.lr_lat

    @property
    def center(self) -> tuple[float, float]:
        return (0.5 * (self.ul_lat + self.lr_lat), 0.5 * (self.ul_lon + self.lr_lon))

    def contains(self, lat: float, lon: float) -> bool:
        # closed on all sides
        return self.ul_lon <= lon <= self.lr_lon and self.lr_lat <= lat <= self.ul_lat

    def clamp(self, lat: float, lon: float) -> tuple[float, float]:
        return (
            min(max(lat, self.lr_lat), self.ul_lat),
            min(max(lon, self.ul_lon), self.lr_lon),
        )

    def quadrants(self) -> tuple["BoundingBox", "BoundingBox", "BoundingBox", "BoundingBox"]:
        """UL, UR, LL, LR children splitting this box into four equal parts."""
        mid_lat, mid_lon = self.center
        return (
            BoundingBox(self.ul_lat, self.ul_lon, mid_lat, mid_lon),
            BoundingBox(self.ul_lat, mid_lon, mid_lat, self.lr_lon),
            BoundingBox(mid_lat, self.ul_lon, self.lr_lat, mid_lon),
            BoundingBox(mid_lat, mid_lon, self.lr_lat, self.lr_lon),
        )


@dataclass
class RoutePath:
    vertices: list[Vertex]
    cost: float

    @property
    def ids(self) -> list[int]:
        return [v.id for v in self.vertices]

    def __len__(self) -> int:
        return len(self.vertices)


@dataclass(frozen=True)
class LocationRecord:
    name: str
    lat: float | None = None
    lon: float | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lon": self.lon, "name": self.name, "id": self.id}
