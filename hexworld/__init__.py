"""
hexworld: procedural hex-grid world generation.
"""

from .config import WorldShapeConfig, get_preset, list_presets
from .core import (
    BiomeType,
    ConfigurationError,
    GenerationResult,
    GeologyType,
    HexCoordinate,
    InvariantViolation,
    ResourceType,
    Tile,
    WorldTile,
    WorldGenerationError,
    WorldGenerator,
    generate_world,
)
from .log_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "WorldShapeConfig",
    "get_preset",
    "list_presets",
    "BiomeType",
    "ConfigurationError",
    "GenerationResult",
    "GeologyType",
    "HexCoordinate",
    "InvariantViolation",
    "ResourceType",
    "Tile",
    "WorldTile",
    "WorldGenerationError",
    "WorldGenerator",
    "generate_world",
    "configure_logging",
]
