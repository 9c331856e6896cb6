"""
Shaders and the per-segment surfaces they generate.

A shader decides whether it applies to a segment (``check_intersect``)
and fills a surface: a ``uint8`` alpha lattice the same shape as the
segment's heights, 255 where the shader's material shows and 0 elsewhere.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Optional

import numpy as np
import structlog

from .segment import Segment

logger = structlog.get_logger()


class Surface:
    """Alpha lattice produced by one shader for one segment."""

    def __init__(self, shader: "Shader", segment: Segment):
        self.shader = shader
        self.segment = segment
        self._data: Optional[np.ndarray] = None

    def is_valid(self) -> bool:
        return self._data is not None

    def invalidate(self) -> None:
        self._data = None

    @property
    def data(self) -> np.ndarray:
        if self._data is None:
            self.populate()
        return self._data

    def populate(self) -> None:
        size = self.segment.size
        self._data = np.zeros((size, size), dtype=np.uint8)
        self.shader.shade(self)


class Shader:
    """Base shader; applies to every segment and paints nothing.

    Subclasses override ``shade`` to fill the surface alpha.
    """

    def check_intersect(self, segment: Segment) -> bool:
        return True

    def new_surface(self, segment: Segment) -> Surface:
        return Surface(self, segment)

    def shade(self, surface: Surface) -> None:
        pass


class FillShader(Shader):
    """Covers the whole segment."""

    def shade(self, surface: Surface) -> None:
        surface._data[:] = 255


class HighShader(Shader):
    """Shows above a height threshold."""

    def __init__(self, threshold: float = 1.0):
        self.threshold = threshold

    def check_intersect(self, segment: Segment) -> bool:
        return segment.is_valid() and segment.max_height() > self.threshold

    def shade(self, surface: Surface) -> None:
        surface._data[surface.segment.heights > self.threshold] = 255


class LowShader(Shader):
    """Shows below a height threshold."""

    def __init__(self, threshold: float = -1.0):
        self.threshold = threshold

    def check_intersect(self, segment: Segment) -> bool:
        return segment.is_valid() and segment.min_height() < self.threshold

    def shade(self, surface: Surface) -> None:
        surface._data[surface.segment.heights < self.threshold] = 255


class AreaShader(Shader):
    """Shows inside the areas of one layer attached to the segment."""

    def __init__(self, layer: int):
        self.layer = layer

    def _layer_areas(self, segment: Segment):
        return [area for area in segment.areas if area.get_layer() == self.layer]

    def check_intersect(self, segment: Segment) -> bool:
        return bool(self._layer_areas(segment))

    def shade(self, surface: Surface) -> None:
        segment = surface.segment
        xs, zs = segment.world_coordinates()
        for area in self._layer_areas(segment):
            surface._data[area.shape.contains(xs, zs)] = 255


class ShaderRegistry:
    """
    Shaders keyed by integer id.

    Adding a shader gives every existing segment a surface from it,
    without consulting ``check_intersect``. Newly materialized segments
    only get surfaces from shaders whose ``check_intersect`` passes.
    """

    def __init__(self):
        self._shaders: Dict[int, Shader] = {}

    def add(self, shader_id: int, shader: Shader, segments: Iterable[Segment]) -> None:
        if shader_id in self._shaders:
            logger.warning("Duplicate shader id, overwriting", shader_id=shader_id)
        self._shaders[shader_id] = shader

        count = 0
        for segment in segments:
            segment.surfaces[shader_id] = shader.new_surface(segment)
            count += 1
        logger.debug("Shader added", shader_id=shader_id, segments=count)

    def remove(self, shader_id: int, segments: Iterable[Segment]) -> None:
        self._shaders.pop(shader_id, None)
        for segment in segments:
            segment.surfaces.pop(shader_id, None)

    def attach_initial(self, segment: Segment) -> None:
        """Give a fresh segment surfaces from every shader that touches it."""
        if segment.surfaces:
            logger.warning("Adding surfaces to a segment which already has surfaces",
                           xref=segment.xref, zref=segment.zref)
            segment.surfaces.clear()

        for shader_id, shader in self._shaders.items():
            if not shader.check_intersect(segment):
                continue
            segment.surfaces[shader_id] = shader.new_surface(segment)

    def get(self, shader_id: int) -> Optional[Shader]:
        return self._shaders.get(shader_id)

    def as_mapping(self):
        return MappingProxyType(self._shaders)

    def __contains__(self, shader_id: int) -> bool:
        return shader_id in self._shaders

    def __len__(self) -> int:
        return len(self._shaders)
