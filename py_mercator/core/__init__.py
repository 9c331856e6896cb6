"""
Core terrain functionality.
"""

from .geometry import Rect, Circle, grid_range
from .base_points import BasePoint, BasePointGrid
from .segment import Segment
from .segment_grid import SegmentGrid
from .shaders import Surface, Shader, FillShader, HighShader, LowShader, AreaShader, ShaderRegistry
from .modifiers import TerrainMod, LevelTerrainMod, AdjustTerrainMod, SlopeTerrainMod, Area
from .region_index import RegionIndex, ModBinding, AreaBinding
from .terrain import Terrain, TerrainOptions

__all__ = ['Rect', 'Circle', 'grid_range', 'BasePoint', 'BasePointGrid',
           'Segment', 'SegmentGrid',
           'Surface', 'Shader', 'FillShader', 'HighShader', 'LowShader', 'AreaShader',
           'ShaderRegistry',
           'TerrainMod', 'LevelTerrainMod', 'AdjustTerrainMod', 'SlopeTerrainMod', 'Area',
           'RegionIndex', 'ModBinding', 'AreaBinding',
           'Terrain', 'TerrainOptions']
