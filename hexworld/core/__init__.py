"""
Core world generation functionality.
"""

from .exceptions import ConfigurationError, InvariantViolation, WorldGenerationError
from .hex_grid import HEX_DIRECTIONS, HexCoordinate, cell_count, hex_range, opposite_direction
from .tiles import BIOME_NAMES, BiomeType, GeologyType, ResourceType, StrategicFeature, Tile, WorldTile
from .world_generator import (
    GenerationOptions,
    GenerationResult,
    WorldGenerator,
    WorldStatistics,
    generate_world,
)

__all__ = ['ConfigurationError', 'InvariantViolation', 'WorldGenerationError',
           'HEX_DIRECTIONS', 'HexCoordinate', 'cell_count', 'hex_range', 'opposite_direction',
           'BIOME_NAMES', 'BiomeType', 'GeologyType', 'ResourceType', 'StrategicFeature', 'Tile', 'WorldTile',
           'GenerationOptions', 'GenerationResult', 'WorldGenerator', 'WorldStatistics',
           'generate_world']
