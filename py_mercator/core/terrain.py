"""
Terrain facade.

Owns the control points, the segment grid, the shaders and the two region
indexes (terrain modifiers and areas), and keeps them consistent with one
another as control points, shaders and regions are edited.
"""

import enum
import math
from typing import Callable, Optional, Tuple

import numpy as np
import structlog

from ..config import settings
from .base_points import BasePoint, BasePointGrid
from .geometry import Rect
from .region_index import AreaBinding, ModBinding, RegionIndex
from .segment import Segment
from .segment_grid import SegmentGrid
from .shaders import Shader, ShaderRegistry

logger = structlog.get_logger()


class TerrainOptions(enum.IntFlag):
    """Construction flags for Terrain."""

    DEFAULT = 0
    SHADED = 1  # generate shader surfaces on new segments


class Terrain:
    """
    Sparse, unbounded heightfield built from square segments.

    A segment appears at grid slot (i, j) as soon as the four control
    points at lattice (i, j), (i+1, j), (i, j+1) and (i+1, j+1) are all
    set, and stays for the lifetime of the terrain.

    Terrain modifiers, areas and shaders are owned by the caller. Remove
    a region from the terrain before discarding it.
    """

    DEFAULT = TerrainOptions.DEFAULT
    SHADED = TerrainOptions.SHADED

    def __init__(self, options: int = TerrainOptions.DEFAULT,
                 resolution: Optional[int] = None):
        """
        Initialize an empty terrain.

        Args:
            options: TerrainOptions flags
            resolution: Segment edge length, defaults to ``settings.default_resolution``
        """
        if resolution is None:
            resolution = settings.default_resolution

        self.options = TerrainOptions(options)
        self.default_level = settings.default_level

        self._base_points = BasePointGrid()
        self._segments = SegmentGrid(resolution)
        self._shaders = ShaderRegistry()
        self._mods = RegionIndex(self._segments, ModBinding, settings.region_padding)
        self._areas = RegionIndex(self._segments, AreaBinding, settings.region_padding)

        logger.debug("Terrain created", resolution=resolution, shaded=self.is_shaded)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def resolution(self) -> int:
        return self._segments.resolution

    @property
    def spacing(self) -> float:
        return float(self._segments.resolution)

    @property
    def is_shaded(self) -> bool:
        return bool(self.options & TerrainOptions.SHADED)

    @property
    def segments(self) -> SegmentGrid:
        return self._segments

    @property
    def shaders(self):
        return self._shaders.as_mapping()

    @property
    def areas(self):
        return tuple(area for area, _ in self._areas)

    def pos_to_index(self, pos: float) -> int:
        return int(math.floor(pos / self.resolution))

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def get_segment_at_index(self, i: int, j: int) -> Optional[Segment]:
        return self._segments.get(i, j)

    def get_segment_at_pos(self, x: float, z: float) -> Optional[Segment]:
        return self._segments.get(self.pos_to_index(x), self.pos_to_index(z))

    def _covering_segment(self, x: float, z: float) -> Optional[Segment]:
        segment = self.get_segment_at_pos(x, z)
        if segment is None or not segment.is_valid():
            return None
        return segment

    def get(self, x: float, z: float) -> float:
        """Height of the nearest lattice point, or ``default_level`` off the terrain."""
        segment = self._covering_segment(x, z)
        if segment is None:
            return self.default_level
        return segment.get(int(round(x)) - segment.xref, int(round(z)) - segment.zref)

    def get_height(self, x: float, z: float) -> Optional[float]:
        """Interpolated height at (x, z), or None where no segment covers it."""
        segment = self._covering_segment(x, z)
        if segment is None:
            return None
        return segment.get_height(x - segment.xref, z - segment.zref)

    def get_height_and_normal(self, x: float, z: float) -> Optional[Tuple[float, np.ndarray]]:
        segment = self._covering_segment(x, z)
        if segment is None:
            return None
        return segment.get_height_and_normal(x - segment.xref, z - segment.zref)

    def process_segments(self, rect: Rect, func: Callable[[Segment, int, int], None]) -> None:
        """Call ``func(segment, i, j)`` for every segment overlapping ``rect``."""
        for segment, i, j in self._segments.for_each_in_rect(rect):
            func(segment, i, j)

    # ------------------------------------------------------------------
    # Control points
    # ------------------------------------------------------------------

    def get_base_point(self, x: int, z: int) -> Optional[BasePoint]:
        return self._base_points.get(x, z)

    def set_base_point(self, x: int, z: int, point: BasePoint) -> None:
        """
        Set the control point at lattice (x, z).

        Each of the four segment slots sharing this vertex either gets its
        corner updated or, if it did not exist and is now complete, is
        materialized. New segments receive regions first and shader
        surfaces last, since surfaces may depend on modified heights.
        """
        self._base_points.set(x, z, point)

        for i in (x - 1, x):
            for j in (z - 1, z):
                if self._segments.update_corner(i, j, x - i, z - j, point):
                    continue

                complete, corners = self._base_points.corners_present(i, j)
                if not complete:
                    continue

                segment = self._segments.materialize(i, j, corners)
                self._mods.attach_to_new_segment(segment, i, j)
                self._areas.attach_to_new_segment(segment, i, j)

                if self.is_shaded:
                    self._shaders.attach_initial(segment)

    # ------------------------------------------------------------------
    # Shaders
    # ------------------------------------------------------------------

    def _all_segments(self):
        return (segment for segment, _, _ in self._segments)

    def add_shader(self, shader: Shader, shader_id: int) -> None:
        self._shaders.add(shader_id, shader, self._all_segments())

    def remove_shader(self, shader: Shader, shader_id: int) -> None:
        self._shaders.remove(shader_id, self._all_segments())

    def shade_surfaces(self, segment: Segment) -> None:
        segment.populate_surfaces()

    # ------------------------------------------------------------------
    # Terrain modifiers
    # ------------------------------------------------------------------

    def update_mod(self, mod_id: int, mod) -> Optional[Rect]:
        """
        Insert, replace or (with ``mod=None``) remove the modifier ``mod_id``.

        Returns:
            The bounding box the id was previously indexed under, or None
        """
        return self._mods.upsert(mod_id, mod)

    def has_mod(self, mod_id: int) -> bool:
        return self._mods.has(mod_id)

    def get_mod(self, mod_id: int):
        return self._mods.get(mod_id)

    # ------------------------------------------------------------------
    # Areas
    # ------------------------------------------------------------------

    def add_area(self, area) -> None:
        shader = self._shaders.get(area.get_layer())
        if shader is not None:
            area.set_shader(shader)
        self._areas.upsert(area, area)

    def update_area(self, area) -> Optional[Rect]:
        return self._areas.upsert(area, area)

    def remove_area(self, area) -> None:
        self._areas.upsert(area, None)

    def has_area(self, area) -> bool:
        return self._areas.has(area)
