# map_engine/domain/engines/engine_quadtree.py
import math
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

from map_engine.domain.entities.geography import BoundingBox

ROOT_NAME = "root"
QUADRANT_DIGITS = ("1", "2", "3", "4")  # UL, UR, LL, LR


class QuadNode:
    __slots__ = ("name", "box", "depth", "children")

    def __init__(self, name: str, box: BoundingBox, depth: int):
        self.name, self.box, self.depth = name, box, depth
        self.children: tuple[QuadNode, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child_name(self, digit: str) -> str:
        return digit if self.name == ROOT_NAME else self.name + digit

    def __repr__(self) -> str:
        return f"QuadNode({self.name!r}, depth={self.depth})"


@dataclass
class TileQuery:
    grid: list[list[str]]
    bbox: BoundingBox
    depth: int

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def names(self) -> list[str]:
        """Row-major flattening of the grid."""
        return [n for row in self.grid for n in row]

    def raster_params(self, tile_size: int = 256, suffix: str = ".png") -> dict:
        return {
            "render_grid": [[n + suffix for n in row] for row in self.grid],
            "raster_ul_lon": self.bbox.ul_lon,
            "raster_ul_lat": self.bbox.ul_lat,
            "raster_lr_lon": self.bbox.lr_lon,
            "raster_lr_lat": self.bbox.lr_lat,
            "raster_width": self.cols * tile_size,
            "raster_height": self.rows * tile_size,
            "depth": self.depth,
            "query_success": self.rows > 0 and self.cols > 0,
        }


class QuadTree:
    """
    Fixed-depth quadtree over the dataset's root box. Every non-leaf node has exactly
    four children (UL, UR, LL, LR); leaves sit at ``max_depth``.
    """

    def __init__(self, root_box: BoundingBox, max_depth: int = 7, tile_size: int = 256):
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        if root_box.width <= 0 or root_box.height <= 0:
            raise ValueError(f"root box must have positive area: {root_box}")
        self.max_depth, self.tile_size = max_depth, tile_size
        self.root = QuadNode(ROOT_NAME, root_box, 0)
        self._build()

    def _build(self) -> None:
        q = deque([self.root])
        while q:
            node = q.popleft()
            if node.depth >= self.max_depth:
                continue
            node.children = tuple(
                QuadNode(node.child_name(digit), box, node.depth + 1)
                for digit, box in zip(QUADRANT_DIGITS, node.box.quadrants())
            )
            q.extend(node.children)

    @property
    def box(self) -> BoundingBox:
        return self.root.box

    # ----------------- resolution -----------------

    def depth_for(self, ppd: float) -> int:
        """Shallowest depth whose tiles give at least ``ppd`` pixels per degree of longitude."""
        if math.isnan(ppd) or ppd <= 0:
            return 0
        tile_ppd = self.tile_size / self.box.width
        depth = 0
        while depth < self.max_depth and tile_ppd < ppd:
            depth += 1
            tile_ppd *= 2
        return depth

    # ----------------- lookup -----------------

    def locate(self, lat: float, lon: float, depth: int) -> QuadNode:
        """Descend ``depth`` levels, taking the first child (UL, UR, LL, LR) containing the point."""
        depth = min(max(depth, 0), self.max_depth)
        node = self.root
        lat, lon = node.box.clamp(lat, lon)
        while node.depth < depth:
            lat, lon = node.box.clamp(lat, lon)
            node = next(
                (c for c in node.children if c.box.contains(lat, lon)), node.children[-1]
            )
        return node

    def tile(self, name: str) -> QuadNode:
        if name == ROOT_NAME:
            return self.root
        node = self.root
        for digit in name:
            if digit not in QUADRANT_DIGITS or node.is_leaf:
                raise KeyError(name)
            node = node.children[QUADRANT_DIGITS.index(digit)]
        return node

    def level(self, depth: int) -> Iterator[QuadNode]:
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.depth == depth:
                yield node
            elif node.depth < depth:
                stack.extend(reversed(node.children))

    # ----------------- tile selection -----------------

    def resolve_tiles(self, query: BoundingBox, ppd: float) -> TileQuery:
        depth = self.depth_for(ppd)
        if depth == 0:
            return TileQuery([[ROOT_NAME]], self.box, 0)

        q = BoundingBox.from_corners(query.ul_lat, query.ul_lon, query.lr_lat, query.lr_lon)
        ul_lat, ul_lon = self.box.clamp(q.ul_lat, q.ul_lon)
        lr_lat, lr_lon = self.box.clamp(q.lr_lat, q.lr_lon)

        ul_tile = self.locate(ul_lat, ul_lon, depth)
        lr_tile = self.locate(lr_lat, lr_lon, depth)
        tile_w, tile_h = ul_tile.box.width, ul_tile.box.height
        cols = max(1, round((lr_tile.box.lr_lon - ul_tile.box.ul_lon) / tile_w))
        rows = max(1, round((ul_tile.box.ul_lat - lr_tile.box.lr_lat) / tile_h))

        grid: list[list[QuadNode]] = []
        for i in range(rows):
            # sample each cell at its center
            lat = ul_tile.box.ul_lat - tile_h * (i + 0.5)
            row = []
            for j in range(cols):
                lon = ul_tile.box.ul_lon + tile_w * (j + 0.5)
                row.append(self.locate(lat, lon, depth))
            grid.append(row)

        first, last = grid[0][0].box, grid[-1][-1].box
        bbox = BoundingBox(first.ul_lat, first.ul_lon, last.lr_lat, last.lr_lon)
        return TileQuery([[n.name for n in row] for row in grid], bbox, depth)

    def resolve_viewport(self, query: BoundingBox, width_px: float) -> TileQuery:
        span = abs(query.lr_lon - query.ul_lon)
        ppd = math.inf if span == 0 else width_px / span
        return self.resolve_tiles(query, ppd)
