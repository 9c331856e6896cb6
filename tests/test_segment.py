"""Tests for segment height computation and membership bookkeeping."""

import math

import pytest
import numpy as np
from py_mercator.core.base_points import BasePoint
from py_mercator.core.geometry import Rect
from py_mercator.core.modifiers import AdjustTerrainMod, Area, LevelTerrainMod, SlopeTerrainMod
from py_mercator.core.segment import Segment


def make_segment(heights=(1.0, 2.0, 3.0, 4.0), resolution=1, xref=0, zref=0):
    """Segment with corners (0,0), (1,0), (0,1), (1,1) at the given heights."""
    h00, h10, h01, h11 = heights
    segment = Segment(xref, zref, resolution)
    segment.set_control_points([[BasePoint(h00), BasePoint(h01)],
                                [BasePoint(h10), BasePoint(h11)]])
    return segment


class TestSegmentHeights:
    """Test interpolation from corner points."""

    def test_lattice_values(self):
        """Test that corners land at the expected lattice entries."""
        segment = make_segment()
        assert segment.get(1, 0) == 2.0
        assert segment.get(0, 1) == 3.0
        assert segment.get(1, 1) == 4.0

    def test_bilinear_height(self):
        """Test interpolation in the middle of the cell."""
        segment = make_segment()
        assert segment.get_height(0.5, 0.5) == pytest.approx(2.5)

    def test_normal(self):
        """Test the normal of a plane rising along x and z."""
        segment = make_segment()
        height, normal = segment.get_height_and_normal(0.5, 0.5)

        assert height == pytest.approx(2.5)
        np.testing.assert_allclose(normal, np.array([-1.0, 1.0, -2.0]) / math.sqrt(6.0))

    def test_larger_resolution(self):
        """Test interpolation across a 4-unit segment."""
        segment = make_segment((0.0, 4.0, 0.0, 4.0), resolution=4)
        assert segment.heights.shape == (5, 5)
        np.testing.assert_allclose(segment.heights[2], [0.0, 1.0, 2.0, 3.0, 4.0])
        assert segment.min_height() == 0.0
        assert segment.max_height() == 4.0

    def test_invalid_without_corners(self):
        """Test that a segment without corners is invalid and refuses to populate."""
        segment = Segment(0, 0, 1)
        assert not segment.is_valid()
        with pytest.raises(ValueError):
            segment.populate()

    def test_non_finite_corner_is_invalid(self):
        segment = make_segment((1.0, float("nan"), 1.0, 1.0))
        assert not segment.is_valid()

    def test_non_finite_corner_propagates(self):
        """Test that a non-finite corner still yields a lattice."""
        segment = make_segment((1.0, 1.0, 1.0, float("inf")))

        assert segment.heights.shape == (2, 2)
        assert segment.get(0, 0) == 1.0
        assert not np.isfinite(segment.max_height())

    def test_corner_update_recomputes(self):
        """Test that replacing a corner drops the cached heights."""
        segment = make_segment()
        assert segment.get(1, 1) == 4.0

        segment.set_corner_point(1, 1, BasePoint(40.0))
        assert segment.get(1, 1) == 40.0
        assert segment.get(0, 0) == 1.0

    def test_control_points_are_copied(self):
        """Test that mutating the returned corner block leaves the segment alone."""
        segment = make_segment()
        corners = segment.get_control_points()
        corners[0][0] = BasePoint(99.0)
        assert segment.get_control_points()[0][0] == BasePoint(1.0)


class TestSegmentModifiers:
    """Test modifier application during population."""

    def test_level_mod(self):
        segment = make_segment((10.0, 10.0, 10.0, 10.0), resolution=4)
        segment.update_mod(1, LevelTerrainMod(Rect(0, 0, 2, 2), 3.0))

        assert segment.get(1, 1) == 3.0
        assert segment.get(3, 3) == 10.0

    def test_mods_apply_in_id_order(self):
        """Test that a higher id adjusts the result of a lower id."""
        segment = make_segment((10.0, 10.0, 10.0, 10.0), resolution=4)
        segment.update_mod(2, AdjustTerrainMod(Rect(0, 0, 4, 4), 5.0))
        segment.update_mod(1, LevelTerrainMod(Rect(0, 0, 2, 2), 3.0))

        assert segment.get(1, 1) == 8.0
        assert segment.get(3, 3) == 15.0

    def test_slope_mod(self):
        segment = make_segment((0.0, 0.0, 0.0, 0.0), resolution=4)
        segment.update_mod(1, SlopeTerrainMod(Rect(0, 0, 4, 4), 10.0, 1.0, 0.0))

        np.testing.assert_allclose(segment.heights[0], [8.0, 9.0, 10.0, 11.0, 12.0])

    def test_detach_restores_heights(self):
        segment = make_segment((10.0, 10.0, 10.0, 10.0), resolution=4)
        segment.update_mod(1, LevelTerrainMod(Rect(0, 0, 4, 4), 3.0))
        assert segment.get(2, 2) == 3.0

        segment.update_mod(1, None)
        assert segment.get(2, 2) == 10.0
        assert 1 not in segment.mods

    def test_detach_unknown_mod_is_noop(self):
        segment = make_segment()
        segment.update_mod(42, None)
        assert len(segment.mods) == 0


class TestSegmentAreas:
    """Test area membership."""

    def test_add_update_remove(self):
        segment = make_segment()
        area = Area(1, Rect(0, 0, 1, 1))

        assert not segment.update_area(area)
        segment.add_area(area)
        assert segment.areas == (area,)
        assert segment.update_area(area)

        assert segment.remove_area(area)
        assert not segment.remove_area(area)
        assert segment.areas == ()

    def test_areas_keyed_by_identity(self):
        """Test that equal-looking areas are separate members."""
        segment = make_segment()
        first = Area(1, Rect(0, 0, 1, 1))
        second = Area(1, Rect(0, 0, 1, 1))

        segment.add_area(first)
        segment.add_area(second)
        segment.remove_area(first)

        assert segment.areas == (second,)
