#!/usr/bin/env python3
"""
Simple demo script showing lazy segments and incremental region indexing.
"""

from py_mercator.core import (
    Area, AreaShader, BasePoint, Circle, FillShader, LevelTerrainMod, Rect, Terrain
)
from py_mercator.logging_config import configure_logging


def describe(terrain, mod_id):
    attached = sorted((i, j) for segment, i, j in terrain.segments if mod_id in segment.mods)
    print(f"  Modifier {mod_id} attached to: {attached}")


def main():
    """Demonstrate terrain construction and editing."""
    configure_logging()

    print("Py-Mercator Terrain Demo")
    print("=" * 40)

    terrain = Terrain(Terrain.SHADED, resolution=8)
    terrain.add_shader(FillShader(), 0)
    terrain.add_shader(AreaShader(1), 1)

    # Areas present before a segment appears decide which area surfaces it gets
    grass = Area(1, Rect(0.0, 0.0, 6.0, 6.0))
    terrain.add_area(grass)

    # A 4x4 lattice gives a 3x3 block of segments
    print("\nSetting control points...")
    for x in range(4):
        for z in range(4):
            terrain.set_base_point(x, z, BasePoint(height=10.0 + 2.0 * x))
    print(f"  Segments: {len(terrain.segments)}")
    print(f"  Height at (12, 12): {terrain.get_height(12.0, 12.0):.2f}")
    print(f"  Height at (100, 100): {terrain.get(100.0, 100.0)} (default level)")

    print("\nAdding a plateau modifier...")
    plateau = LevelTerrainMod(Circle(12.0, 12.0, 5.0), 30.0)
    terrain.update_mod(1, plateau)
    describe(terrain, 1)
    print(f"  Height at (12, 12): {terrain.get(12.0, 12.0):.2f}")

    print("\nMoving the plateau...")
    plateau.shape = Circle(20.0, 4.0, 2.0)
    old_box = terrain.update_mod(1, plateau)
    print(f"  Previous bbox: {old_box}")
    describe(terrain, 1)

    print("\nShading the grass area...")
    segment = terrain.get_segment_at_index(0, 0)
    terrain.shade_surfaces(segment)
    coverage = (segment.surfaces[1].data > 0).mean() * 100
    print(f"  Grass coverage of segment (0, 0): {coverage:.1f}%")

    terrain.remove_area(grass)
    terrain.update_mod(1, None)
    print("\nRegions removed; terrain back to its control points.")


if __name__ == "__main__":
    main()
