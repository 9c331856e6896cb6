"""
Terrain segment: one square patch of the heightfield.

A segment is anchored at world position (xref, zref) and covers
``resolution`` world units along each axis. Its heights are sampled on a
``(resolution + 1) x (resolution + 1)`` lattice, stored as ``heights[z, x]``.
"""

import math
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple

import numpy as np
import structlog

from .base_points import BasePoint
from .geometry import Rect

logger = structlog.get_logger()


class Segment:
    """
    Square patch of terrain with lazily computed heights.

    Heights are bilinearly interpolated from the four corner control
    points, then passed through every attached terrain modifier in
    ascending id order. Anything that changes the inputs (a corner, a
    modifier) drops the cached heights and marks the surfaces stale.
    """

    def __init__(self, xref: int, zref: int, resolution: int):
        self.xref = xref
        self.zref = zref
        self.resolution = resolution

        self._control_points: List[List[Optional[BasePoint]]] = [[None, None], [None, None]]
        self._heights: Optional[np.ndarray] = None

        self._mods: Dict[int, object] = {}
        # Areas are keyed by identity; dict keeps insertion order
        self._areas: Dict[object, None] = {}

        # shader id -> Surface
        self.surfaces: Dict[int, object] = {}

    def __repr__(self) -> str:
        return f"Segment(xref={self.xref}, zref={self.zref}, resolution={self.resolution})"

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of lattice points along one edge."""
        return self.resolution + 1

    def rect(self) -> Rect:
        """Closed world-space extent of the segment."""
        return Rect(self.xref, self.zref,
                    self.xref + self.resolution, self.zref + self.resolution)

    def world_coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """World x and z of every lattice point, each shaped like ``heights``."""
        xs = self.xref + np.arange(self.size, dtype=np.float32)
        zs = self.zref + np.arange(self.size, dtype=np.float32)
        return np.meshgrid(xs, zs)

    # ------------------------------------------------------------------
    # Control points
    # ------------------------------------------------------------------

    def is_valid(self) -> bool:
        for row in self._control_points:
            for point in row:
                if point is None or not math.isfinite(point.height):
                    return False
        return True

    def set_control_points(self, corners) -> None:
        """Replace all four corners; ``corners[k][l]`` sits at lattice offset (k, l)."""
        self._control_points = [[corners[0][0], corners[0][1]],
                                [corners[1][0], corners[1][1]]]
        self.invalidate()

    def get_control_points(self) -> List[List[Optional[BasePoint]]]:
        return [list(row) for row in self._control_points]

    def set_corner_point(self, x_corner: int, z_corner: int, point: BasePoint) -> None:
        self._control_points[x_corner][z_corner] = point
        self.invalidate()

    # ------------------------------------------------------------------
    # Heights
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Drop cached heights and mark every surface stale."""
        self._heights = None
        self._invalidate_surfaces()

    def _invalidate_surfaces(self) -> None:
        for surface in self.surfaces.values():
            surface.invalidate()

    @property
    def heights(self) -> np.ndarray:
        if self._heights is None:
            self.populate()
        return self._heights

    def populate(self) -> None:
        """
        Compute the height lattice from corners and modifiers.

        Non-finite corner heights propagate into the lattice rather than
        failing; such a segment reports itself invalid.
        """
        if any(point is None for row in self._control_points for point in row):
            raise ValueError(f"Cannot populate {self!r}: corner points not set")

        (p00, p01), (p10, p11) = self._control_points
        t = np.linspace(0.0, 1.0, self.size, dtype=np.float32)
        fx = t[np.newaxis, :]
        fz = t[:, np.newaxis]

        with np.errstate(invalid="ignore"):
            heights = (p00.height * (1 - fx) * (1 - fz) +
                       p10.height * fx * (1 - fz) +
                       p01.height * (1 - fx) * fz +
                       p11.height * fx * fz).astype(np.float32)

        if self._mods:
            xs, zs = self.world_coordinates()
            for mod_id in sorted(self._mods):
                self._mods[mod_id].apply(heights, xs, zs)

        self._heights = heights
        logger.debug("Segment populated", xref=self.xref, zref=self.zref, mods=len(self._mods))

    def get(self, x: int, z: int) -> float:
        """Height of the lattice point at local integer offset (x, z)."""
        return float(self.heights[z, x])

    def _cell(self, x: float, z: float):
        res = self.resolution
        x = min(max(x, 0.0), float(res))
        z = min(max(z, 0.0), float(res))
        ix = min(int(math.floor(x)), res - 1)
        iz = min(int(math.floor(z)), res - 1)
        h = self.heights
        return (x - ix, z - iz,
                float(h[iz, ix]), float(h[iz, ix + 1]),
                float(h[iz + 1, ix]), float(h[iz + 1, ix + 1]))

    def get_height(self, x: float, z: float) -> float:
        """Bilinear height at local position (x, z)."""
        fx, fz, h00, h10, h01, h11 = self._cell(x, z)
        return ((1 - fz) * ((1 - fx) * h00 + fx * h10) +
                fz * ((1 - fx) * h01 + fx * h11))

    def get_height_and_normal(self, x: float, z: float) -> Tuple[float, np.ndarray]:
        """Bilinear height and unit surface normal (y up) at local (x, z)."""
        fx, fz, h00, h10, h01, h11 = self._cell(x, z)
        height = ((1 - fz) * ((1 - fx) * h00 + fx * h10) +
                  fz * ((1 - fx) * h01 + fx * h11))
        dhdx = (1 - fz) * (h10 - h00) + fz * (h11 - h01)
        dhdz = (1 - fx) * (h01 - h00) + fx * (h11 - h10)
        normal = np.array([-dhdx, 1.0, -dhdz], dtype=np.float64)
        return height, normal / np.linalg.norm(normal)

    def min_height(self) -> float:
        return float(self.heights.min())

    def max_height(self) -> float:
        return float(self.heights.max())

    # ------------------------------------------------------------------
    # Region membership
    # ------------------------------------------------------------------

    @property
    def mods(self):
        return MappingProxyType(self._mods)

    @property
    def areas(self) -> Tuple[object, ...]:
        return tuple(self._areas)

    def update_mod(self, mod_id: int, mod) -> None:
        """Attach ``mod`` under ``mod_id``, or detach the id when ``mod`` is None."""
        if mod is None:
            if self._mods.pop(mod_id, None) is None:
                return
        else:
            self._mods[mod_id] = mod
        self.invalidate()

    def add_area(self, area) -> None:
        self._areas[area] = None
        self._invalidate_surfaces()

    def update_area(self, area) -> bool:
        """Mark an attached area as changed; False if it was never attached."""
        if area not in self._areas:
            return False
        self._invalidate_surfaces()
        return True

    def remove_area(self, area) -> bool:
        if area not in self._areas:
            return False
        del self._areas[area]
        self._invalidate_surfaces()
        return True

    # ------------------------------------------------------------------
    # Surfaces
    # ------------------------------------------------------------------

    def populate_surfaces(self) -> None:
        for surface in self.surfaces.values():
            surface.populate()
