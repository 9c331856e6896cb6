"""
Axis-aligned geometry used to rasterise regions onto the segment grid.

Coordinates are world-space (x, z). Rectangles are closed: a shape that
only touches a segment's edge still intersects that segment, since
neighbouring segments share their edges.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Rect:
    """Axis-aligned 2D box with a low (x, z) and a high (x, z) corner."""

    low_x: float
    low_z: float
    high_x: float
    high_z: float

    def __post_init__(self):
        if self.high_x < self.low_x or self.high_z < self.low_z:
            raise ValueError(f"Inverted rectangle: {self}")

    @classmethod
    def from_center(cls, cx: float, cz: float, half_x: float, half_z: float) -> "Rect":
        return cls(cx - half_x, cz - half_z, cx + half_x, cz + half_z)

    def center(self) -> Tuple[float, float]:
        return (0.5 * (self.low_x + self.high_x), 0.5 * (self.low_z + self.high_z))

    def bbox(self) -> "Rect":
        return self

    def expand(self, pad: float) -> "Rect":
        """Grow the rectangle by ``pad`` world units on every side."""
        return Rect(self.low_x - pad, self.low_z - pad,
                    self.high_x + pad, self.high_z + pad)

    def intersects_rect(self, other: "Rect") -> bool:
        return not (self.high_x < other.low_x or self.low_x > other.high_x or
                    self.high_z < other.low_z or self.low_z > other.high_z)

    def contains(self, xs, zs):
        """Vectorised point containment; accepts scalars or numpy arrays."""
        xs = np.asarray(xs)
        zs = np.asarray(zs)
        return ((xs >= self.low_x) & (xs <= self.high_x) &
                (zs >= self.low_z) & (zs <= self.high_z))


@dataclass(frozen=True)
class Circle:
    """Disc in the x/z plane."""

    cx: float
    cz: float
    radius: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Circle radius must be positive, got {self.radius}")

    def center(self) -> Tuple[float, float]:
        return (self.cx, self.cz)

    def bbox(self) -> Rect:
        return Rect.from_center(self.cx, self.cz, self.radius, self.radius)

    def intersects_rect(self, rect: Rect) -> bool:
        # Closest point of the rectangle to the centre
        nx = min(max(self.cx, rect.low_x), rect.high_x)
        nz = min(max(self.cz, rect.low_z), rect.high_z)
        return (nx - self.cx) ** 2 + (nz - self.cz) ** 2 <= self.radius ** 2

    def contains(self, xs, zs):
        xs = np.asarray(xs)
        zs = np.asarray(zs)
        return (xs - self.cx) ** 2 + (zs - self.cz) ** 2 <= self.radius ** 2


def grid_range(rect: Rect, spacing: float) -> Tuple[int, int, int, int]:
    """
    Convert a world rectangle into a half-open range of grid indices.

    Returns ``(lx, lz, hx, hz)`` such that every cell ``(i, j)`` with
    ``lx <= i < hx`` and ``lz <= j < hz`` overlaps the rectangle.

    Args:
        rect: World-space rectangle
        spacing: Segment edge length

    Returns:
        Tuple of low and (exclusive) high indices along x and z
    """
    lx = int(math.floor(rect.low_x / spacing))
    lz = int(math.floor(rect.low_z / spacing))
    hx = int(math.ceil(rect.high_x / spacing))
    hz = int(math.ceil(rect.high_z / spacing))
    return lx, lz, hx, hz
