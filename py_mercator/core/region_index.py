"""
Incremental index of shaped regions over the segment grid.

Every region (terrain modifier or area) is stored with the bounding box
it was last indexed under. When a region moves, changes shape or goes
away, the old and new boxes are rasterised to grid cells and only the
difference is touched:

* cells only under the old box lose the region outright,
* cells only under the new box gain it if the exact test passes,
* cells under both are re-tested and gain or lose it accordingly.

Boxes are padded before rasterising because neighbouring segments share
an edge: a region lying along that edge has to reach both of them.
"""

from typing import Dict, Hashable, Iterator, Optional, Tuple

import structlog

from .geometry import Rect, grid_range
from .segment import Segment
from .segment_grid import SegmentGrid

logger = structlog.get_logger()

Cell = Tuple[int, int]


class ModBinding:
    """Writes terrain modifier membership onto segments, keyed by modifier id."""

    kind = "mod"

    @staticmethod
    def attach(segment: Segment, key, region) -> None:
        segment.update_mod(key, region)

    @staticmethod
    def detach(segment: Segment, key, region) -> None:
        segment.update_mod(key, None)


class AreaBinding:
    """Writes area membership onto segments, keyed by the area itself."""

    kind = "area"

    @staticmethod
    def attach(segment: Segment, key, region) -> None:
        if not segment.update_area(region):
            segment.add_area(region)

    @staticmethod
    def detach(segment: Segment, key, region) -> None:
        segment.remove_area(region)


class RegionIndex:
    """
    Keeps each segment's set of regions equal to the regions that
    geometrically intersect it.

    Args:
        grid: Segment grid the regions are indexed against
        binding: ModBinding or AreaBinding, deciding how membership is written
        padding: World units added around every bounding box before rasterising
    """

    def __init__(self, grid: SegmentGrid, binding, padding: float = 1.0):
        if padding < 0:
            raise ValueError(f"Region padding must not be negative, got {padding}")
        self._grid = grid
        self._binding = binding
        self._padding = padding
        self._entries: Dict[Hashable, Tuple[object, Rect]] = {}

    def _cells(self, box: Optional[Rect]) -> Dict[Cell, Segment]:
        if box is None:
            return {}
        return {(i, j): segment
                for segment, i, j in self._grid.for_each_in_rect(box.expand(self._padding))}

    def upsert(self, key: Hashable, region) -> Optional[Rect]:
        """
        Insert, move or remove a region.

        Args:
            key: Modifier id, or the area object itself
            region: The region, or None to remove ``key``

        Returns:
            The bounding box ``key`` was previously indexed under, or None
            if it was not indexed
        """
        entry = self._entries.get(key)
        old_region, old_box = entry if entry is not None else (None, None)
        old_cells = self._cells(old_box)

        if region is None:
            if entry is None:
                return None
            del self._entries[key]
            for cell in sorted(old_cells):
                self._binding.detach(old_cells[cell], key, old_region)
            logger.debug("Region removed", kind=self._binding.kind, detached=len(old_cells))
            return old_box

        new_box = region.bbox()
        self._entries[key] = (region, new_box)
        new_cells = self._cells(new_box)

        removed = old_cells.keys() - new_cells.keys()
        added = new_cells.keys() - old_cells.keys()
        updated = old_cells.keys() & new_cells.keys()

        for cell in sorted(removed):
            self._binding.detach(old_cells[cell], key, old_region)

        for cell in sorted(added):
            segment = new_cells[cell]
            if region.check_intersects(segment):
                self._binding.attach(segment, key, region)

        for cell in sorted(updated):
            segment = new_cells[cell]
            if region.check_intersects(segment):
                self._binding.attach(segment, key, region)
            else:
                self._binding.detach(segment, key, region)

        logger.debug("Region indexed",
                     kind=self._binding.kind,
                     removed=len(removed),
                     added=len(added),
                     updated=len(updated))
        return old_box

    def attach_to_new_segment(self, segment: Segment, i: int, j: int) -> None:
        """Attach every indexed region whose padded box reaches slot (i, j)."""
        for key, (region, box) in self._entries.items():
            lx, lz, hx, hz = grid_range(box.expand(self._padding), self._grid.resolution)
            if not (lx <= i < hx and lz <= j < hz):
                continue
            if region.check_intersects(segment):
                self._binding.attach(segment, key, region)

    def has(self, key: Hashable) -> bool:
        return key in self._entries

    def get(self, key: Hashable):
        entry = self._entries.get(key)
        return entry[0] if entry is not None else None

    def cached_bbox(self, key: Hashable) -> Optional[Rect]:
        entry = self._entries.get(key)
        return entry[1] if entry is not None else None

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Tuple[Hashable, object]]:
        for key, (region, _) in self._entries.items():
            yield key, region

    def __len__(self) -> int:
        return len(self._entries)
