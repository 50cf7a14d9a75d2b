"""
Biome classification system based on temperature and precipitation.

This module implements:
- Ocean assignment from sea level
- High-altitude overrides (alpine tundra, montane forest)
- Wetland overrides (mangrove, salt marsh, inland wetland)
- A temperature-banded then precipitation-banded decision table

The classifier is total: every (temperature, precipitation, drainage,
elevation above sea level, coastal) combination maps to exactly one biome.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from .exceptions import InvariantViolation
from .hex_grid import HexCoordinate
from .tiles import BIOME_NAMES, BiomeType, Tile

logger = structlog.get_logger()


# (upper temperature bound, [(precipitation above, biome), ...], fallback)
# Bands are checked in order; the last band catches everything left.
BiomeBand = Tuple[float, Sequence[Tuple[float, BiomeType]], BiomeType]

DEFAULT_BIOME_BANDS: List[BiomeBand] = [
    (
        0.2,
        [(0.4, BiomeType.TUNDRA_WET)],
        BiomeType.TUNDRA_BARREN,
    ),
    (
        0.4,
        [(0.2, BiomeType.TAIGA_BOREAL_FOREST)],
        BiomeType.COLD_DESERT,
    ),
    (
        0.6,
        [
            (0.7, BiomeType.TEMPERATE_RAINFOREST),
            (0.5, BiomeType.TEMPERATE_DECIDUOUS_FOREST),
            (0.3, BiomeType.TEMPERATE_CONIFER_FOREST),
            (0.15, BiomeType.TEMPERATE_GRASSLAND),
        ],
        BiomeType.COLD_DESERT,
    ),
    (
        0.8,
        [
            (0.7, BiomeType.TROPICAL_SEASONAL_FOREST),
            (0.5, BiomeType.TEMPERATE_DECIDUOUS_FOREST),
            (0.3, BiomeType.TEMPERATE_GRASSLAND),
            (0.15, BiomeType.SHRUBLAND),
        ],
        BiomeType.HOT_DESERT,
    ),
    (
        float("inf"),
        [
            (0.7, BiomeType.TROPICAL_RAINFOREST),
            (0.4, BiomeType.TROPICAL_SEASONAL_FOREST),
            (0.2, BiomeType.TROPICAL_GRASSLAND_SAVANNA),
            (0.1, BiomeType.SHRUBLAND),
        ],
        BiomeType.HOT_DESERT,
    ),
]


@dataclass
class BiomeOptions:
    """Biome classification thresholds."""

    alpine_height: float = 0.6  # Above sea level
    montane_height: float = 0.4
    montane_max_temperature: float = 0.6

    coastal_wetland_drainage: float = 0.3
    coastal_wetland_precipitation: float = 0.6
    mangrove_min_temperature: float = 0.7
    wetland_drainage: float = 0.4
    wetland_precipitation: float = 0.7

    bands: List[BiomeBand] = field(default_factory=lambda: list(DEFAULT_BIOME_BANDS))


class BiomeClassifier:
    """Assigns a biome to every tile."""

    def __init__(
        self,
        tiles: Dict[HexCoordinate, Tile],
        sea_level: float,
        options: Optional[BiomeOptions] = None,
    ):
        self.tiles = tiles
        self.sea_level = sea_level
        self.options = options or BiomeOptions()

    def classify_land_biome(
        self,
        temperature: float,
        precipitation: float,
        drainage: float,
        elevation_above_sea: float,
        is_coastal: bool,
    ) -> BiomeType:
        """
        Classify a land cell. Checks, in order: altitude overrides,
        wetland overrides, then the temperature/precipitation table.
        """
        opts = self.options

        if elevation_above_sea > opts.alpine_height:
            return BiomeType.ALPINE_TUNDRA
        if elevation_above_sea > opts.montane_height and temperature < opts.montane_max_temperature:
            return BiomeType.MONTANE_FOREST

        if (
            drainage < opts.coastal_wetland_drainage
            and precipitation > opts.coastal_wetland_precipitation
            and is_coastal
        ):
            if temperature > opts.mangrove_min_temperature:
                return BiomeType.MANGROVE
            return BiomeType.SALT_MARSH
        if drainage < opts.wetland_drainage and precipitation > opts.wetland_precipitation:
            return BiomeType.WETLAND

        return self._classify_by_climate(temperature, precipitation)

    def _classify_by_climate(self, temperature: float, precipitation: float) -> BiomeType:
        bands = self.options.bands
        for upper, thresholds, fallback in bands:
            if temperature < upper:
                return self._classify_precipitation(precipitation, thresholds, fallback)

        # Temperatures at or above every bound land in the last band
        _, thresholds, fallback = bands[-1]
        return self._classify_precipitation(precipitation, thresholds, fallback)

    @staticmethod
    def _classify_precipitation(
        precipitation: float,
        thresholds: Sequence[Tuple[float, BiomeType]],
        fallback: BiomeType,
    ) -> BiomeType:
        for minimum, biome in thresholds:
            if precipitation > minimum:
                return biome
        return fallback

    def assign_biomes(self) -> None:
        """
        Ocean for cells at or below sea level, table classification for
        land. Cells that already carry a biome (lakes) are left alone.
        """
        logger.info("Classifying biomes")

        for coord, tile in self.tiles.items():
            if tile.biome is not None:
                continue
            if tile.elevation <= self.sea_level:
                tile.biome = BiomeType.OCEAN
                continue
            tile.biome = self.classify_land_biome(
                tile.temperature,
                tile.precipitation,
                tile.drainage,
                tile.elevation - self.sea_level,
                tile.is_coastal,
            )

        stats = self.get_biome_statistics()
        logger.info("Biome classification completed", biome_types=len(stats))

    def get_biome_statistics(self) -> Dict[str, int]:
        """Cell count per biome name, for classified tiles."""
        stats: Dict[str, int] = {}
        for tile in self.tiles.values():
            if tile.biome is None:
                continue
            name = BIOME_NAMES[tile.biome]
            stats[name] = stats.get(name, 0) + 1
        return stats

    def validate(self) -> None:
        """
        Raises:
            InvariantViolation: if a tile is unclassified, or the ocean
                biome disagrees with sea level
        """
        for coord, tile in self.tiles.items():
            if tile.biome is None:
                raise InvariantViolation(f"Tile {coord} has no biome")
            is_ocean = tile.elevation <= self.sea_level
            if is_ocean != (tile.biome == BiomeType.OCEAN):
                raise InvariantViolation(
                    f"Tile {coord} biome {tile.biome.name} disagrees with sea level"
                )
