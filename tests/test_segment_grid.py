"""Tests for the sparse segment grid."""

import pytest
from py_mercator.core.base_points import BasePoint
from py_mercator.core.geometry import Rect
from py_mercator.core.segment_grid import SegmentGrid


def flat_corners(height=10.0):
    return [[BasePoint(height), BasePoint(height)], [BasePoint(height), BasePoint(height)]]


class TestSegmentGrid:
    """Test segment lookup, creation and range iteration."""

    @pytest.fixture
    def grid(self):
        """A 3x2 block of 2-unit segments starting at slot (0, 0)."""
        grid = SegmentGrid(2)
        for i in range(3):
            for j in range(2):
                grid.materialize(i, j, flat_corners())
        return grid

    def test_resolution_must_be_positive(self):
        with pytest.raises(ValueError):
            SegmentGrid(0)

    def test_absent_slot(self, grid):
        """Test that unmaterialized slots read back as None."""
        assert grid.get(5, 5) is None
        assert (5, 5) not in grid

    def test_materialize_anchors_segment(self, grid):
        """Test world anchoring of a new segment."""
        segment = grid.get(2, 1)
        assert (segment.xref, segment.zref) == (4, 2)
        assert segment.resolution == 2
        assert segment.is_valid()
        assert segment.surfaces == {}
        assert len(segment.mods) == 0
        assert len(grid) == 6

    def test_update_corner(self, grid):
        """Test that only the targeted corner of an existing segment changes."""
        assert grid.update_corner(0, 0, 1, 1, BasePoint(99.0))
        corners = grid.get(0, 0).get_control_points()
        assert corners[1][1].height == 99.0
        assert corners[0][0].height == 10.0
        assert grid.get(1, 0).get_control_points()[0][0].height == 10.0

    def test_update_corner_of_absent_slot(self, grid):
        assert not grid.update_corner(9, 9, 0, 0, BasePoint(1.0))
        assert grid.get(9, 9) is None

    def test_for_each_in_rect(self, grid):
        """Test that only existing overlapping segments are yielded."""
        found = {(i, j) for _, i, j in grid.for_each_in_rect(Rect(1.0, 1.0, 3.0, 5.0))}
        assert found == {(0, 0), (1, 0), (0, 1), (1, 1)}

    def test_for_each_in_rect_skips_missing(self, grid):
        found = {(i, j) for _, i, j in grid.for_each_in_rect(Rect(-10.0, -10.0, -1.0, -1.0))}
        assert found == set()

    def test_iterate_all(self, grid):
        assert {(i, j) for _, i, j in grid} == {(i, j) for i in range(3) for j in range(2)}
