"""Sparse grid of materialized terrain segments."""

from typing import Dict, Iterator, Optional, Tuple

import structlog

from .base_points import BasePoint
from .geometry import Rect, grid_range
from .segment import Segment

logger = structlog.get_logger()


class SegmentGrid:
    """
    Segments keyed by integer grid index.

    Slot (i, j) covers world extent [i*S, (i+1)*S) x [j*S, (j+1)*S) for
    edge length S. A slot holds at most one segment and, once filled, is
    never emptied.
    """

    def __init__(self, resolution: int):
        if resolution <= 0:
            raise ValueError(f"Segment resolution must be positive, got {resolution}")
        self.resolution = resolution
        self._segments: Dict[int, Dict[int, Segment]] = {}
        self._count = 0

    def get(self, i: int, j: int) -> Optional[Segment]:
        column = self._segments.get(i)
        if column is None:
            return None
        return column.get(j)

    def materialize(self, i: int, j: int, corners) -> Segment:
        """
        Create the segment for slot (i, j) from its four corner points.

        The caller has already checked that all four corners exist.
        """
        segment = Segment(i * self.resolution, j * self.resolution, self.resolution)
        segment.set_control_points(corners)
        column = self._segments.setdefault(i, {})
        if j not in column:
            self._count += 1
        column[j] = segment
        logger.debug("Segment materialized", i=i, j=j)
        return segment

    def update_corner(self, i: int, j: int, x_corner: int, z_corner: int,
                      point: BasePoint) -> bool:
        """Overwrite one corner of an existing segment; False if the slot is empty."""
        segment = self.get(i, j)
        if segment is None:
            return False
        segment.set_corner_point(x_corner, z_corner, point)
        return True

    def for_each_in_rect(self, rect: Rect) -> Iterator[Tuple[Segment, int, int]]:
        """Yield ``(segment, i, j)`` for existing segments overlapping ``rect``."""
        lx, lz, hx, hz = grid_range(rect, self.resolution)
        for i in range(lx, hx):
            column = self._segments.get(i)
            if column is None:
                continue
            for j in range(lz, hz):
                segment = column.get(j)
                if segment is not None:
                    yield segment, i, j

    def __iter__(self) -> Iterator[Tuple[Segment, int, int]]:
        for i, column in self._segments.items():
            for j, segment in column.items():
                yield segment, i, j

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return self.get(*key) is not None
