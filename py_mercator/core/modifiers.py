"""
Shaped regions that act on terrain.

Terrain modifiers reshape heights inside their footprint; areas tag
terrain with a material layer. Both expose ``bbox()`` and
``check_intersects(segment)``, which is all the region index needs.
"""

import numpy as np


class TerrainMod:
    """Base modifier: a shape plus a height operation applied inside it."""

    def __init__(self, shape):
        self.shape = shape

    def bbox(self):
        return self.shape.bbox()

    def check_intersects(self, segment) -> bool:
        return self.shape.intersects_rect(segment.rect())

    def apply(self, heights: np.ndarray, xs: np.ndarray, zs: np.ndarray) -> None:
        """Modify ``heights`` in place; ``xs``/``zs`` hold world coordinates."""
        raise NotImplementedError


class LevelTerrainMod(TerrainMod):
    """Flattens terrain inside the shape to a fixed level."""

    def __init__(self, shape, level: float):
        super().__init__(shape)
        self.level = level

    def apply(self, heights, xs, zs):
        heights[self.shape.contains(xs, zs)] = self.level


class AdjustTerrainMod(TerrainMod):
    """Raises or lowers terrain inside the shape by a constant."""

    def __init__(self, shape, dist: float):
        super().__init__(shape)
        self.dist = dist

    def apply(self, heights, xs, zs):
        heights[self.shape.contains(xs, zs)] += self.dist


class SlopeTerrainMod(TerrainMod):
    """Replaces terrain inside the shape with an inclined plane."""

    def __init__(self, shape, level: float, dx: float, dz: float):
        super().__init__(shape)
        self.level = level
        self.dx = dx
        self.dz = dz

    def apply(self, heights, xs, zs):
        mask = self.shape.contains(xs, zs)
        cx, cz = self.shape.center()
        plane = self.level + self.dx * (xs - cx) + self.dz * (zs - cz)
        heights[mask] = plane[mask]


class Area:
    """
    Region tagging terrain with a material layer.

    Areas are compared by identity: two areas with the same shape and
    layer are still distinct regions.
    """

    def __init__(self, layer: int, shape):
        self.layer = layer
        self.shape = shape
        self.shader = None

    def __repr__(self) -> str:
        return f"Area(layer={self.layer}, shape={self.shape!r})"

    def get_layer(self) -> int:
        return self.layer

    def set_shader(self, shader) -> None:
        self.shader = shader

    def set_shape(self, shape) -> None:
        """Replace the footprint; the terrain must be told via ``update_area``."""
        self.shape = shape

    def bbox(self):
        return self.shape.bbox()

    def check_intersects(self, segment) -> bool:
        return self.shape.intersects_rect(segment.rect())
