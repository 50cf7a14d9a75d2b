"""
Strategic attributes derived from terrain.

Only defensibility is computed here. Trade value, flood risk, naval access
and named strategic features are left at their neutral values for the
gameplay systems that own them.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

import structlog

from .hex_grid import HexCoordinate
from .tiles import BiomeType, Tile, clamp

logger = structlog.get_logger()


@dataclass
class StrategicOptions:
    base_defensibility: float = 0.3
    elevation_factor: float = 0.5
    max_elevation_bonus: float = 0.4
    river_bonus: float = 0.2
    coastal_penalty: float = 0.1
    cover_bonus: float = 0.2
    cover_biomes: FrozenSet[BiomeType] = field(
        default_factory=lambda: frozenset(
            {BiomeType.TROPICAL_RAINFOREST, BiomeType.TEMPERATE_DECIDUOUS_FOREST}
        )
    )


def tile_defensibility(tile: Tile, options: Optional[StrategicOptions] = None) -> float:
    opts = options or StrategicOptions()
    value = opts.base_defensibility
    value += min(tile.elevation * opts.elevation_factor, opts.max_elevation_bonus)
    if tile.has_river:
        value += opts.river_bonus
    if tile.is_coastal:
        value -= opts.coastal_penalty
    if tile.biome in opts.cover_biomes:
        value += opts.cover_bonus
    return clamp(value)


def calculate_defensibility(
    tiles: Dict[HexCoordinate, Tile], options: Optional[StrategicOptions] = None
) -> None:
    logger.info("Calculating defensibility")
    opts = options or StrategicOptions()
    for tile in tiles.values():
        tile.defensibility = tile_defensibility(tile, opts)
