import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Berkeley root tile, as scraped for the bundled img/ tiles
ROOT_ULLAT, ROOT_ULLON = 37.892195547244356, -122.2998046875
ROOT_LRLAT, ROOT_LRLON = 37.82280243352756, -122.2119140625

DEFAULT_HIGHWAYS = frozenset(
    {
        "motorway",
        "trunk",
        "primary",
        "secondary",
        "tertiary",
        "unclassified",
        "residential",
        "living_street",
        "motorway_link",
        "trunk_link",
        "primary_link",
        "secondary_link",
        "tertiary_link",
    }
)


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- TILES ---------------------


class BoxModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    ul_lat: float = ROOT_ULLAT
    ul_lon: float = ROOT_ULLON
    lr_lat: float = ROOT_LRLAT
    lr_lon: float = ROOT_LRLON

    @model_validator(mode="after")
    def _check_orientation(self):
        if self.ul_lat <= self.lr_lat:
            raise ValueError("ul_lat must be north of lr_lat")
        if self.ul_lon >= self.lr_lon:
            raise ValueError("ul_lon must be west of lr_lon")
        return self


class QuadTreeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    root: BoxModel = Field(default_factory=BoxModel)
    max_depth: int = Field(default=7, ge=0, le=10)
    tile_size: int = Field(default=256, gt=0)
    tile_suffix: str = ".png"


# ----------------- ROUTERS ---------------------


class RouterAStarModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["astar"] = "astar"


class RouterDijkstraModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["dijkstra"] = "dijkstra"


RouterUnion = Annotated[RouterAStarModel | RouterDijkstraModel, Field(discriminator="kind")]

# ----------------- DATASET ---------------------


class DatasetByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["osm"] = "osm"
    must_exist: bool = True
    allowed_highways: frozenset[str] = DEFAULT_HIGHWAYS

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))

    @field_validator("allowed_highways", mode="before")
    @classmethod
    def _empty_to_default(cls, v):
        # YAML [] or null should mean "the standard road set"
        if v is None or (isinstance(v, (list, tuple, set, frozenset)) and len(v) == 0):
            return DEFAULT_HIGHWAYS
        return v


class ServerModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    host: str = "127.0.0.1"
    port: int = Field(default=4567, gt=0, lt=65536)


# ------------------------------------------------------------------


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "map_engine"
    dataset: DatasetByPath | None = None
    quadtree: QuadTreeModel = Field(default_factory=QuadTreeModel)
    router: RouterUnion = Field(default_factory=RouterAStarModel)
    log: LogModel = LogModel()
    server: ServerModel = ServerModel()
