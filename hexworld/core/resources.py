"""
Soil fertility and resource placement.

Resources are gated by a noise mask so that only a minority of cells carry
one; the resource itself is then picked from the biome's list by a hash of
the absolute coordinate values. The same coordinate in the same biome
always yields the same resource, whatever order the cells are visited in.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import HexCoordinate
from .noise import PerlinSource
from .tiles import BiomeType, GeologyType, ResourceType, Tile

logger = structlog.get_logger()


BIOME_FERTILITY = {
    BiomeType.TROPICAL_RAINFOREST: 0.6,
    BiomeType.TROPICAL_SEASONAL_FOREST: 0.8,
    BiomeType.TROPICAL_GRASSLAND_SAVANNA: 0.9,
    BiomeType.TEMPERATE_GRASSLAND: 1.0,
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: 0.7,
    BiomeType.TEMPERATE_CONIFER_FOREST: 0.4,
    BiomeType.TAIGA_BOREAL_FOREST: 0.3,
    BiomeType.WETLAND: 0.8,
}

GEOLOGY_FERTILITY = {
    GeologyType.SEDIMENTARY: 0.2,
    GeologyType.LIMESTONE: 0.1,
    GeologyType.VOLCANIC: 0.3,
}

_FOREST_RESOURCES = (ResourceType.WOOD, ResourceType.SPICES, ResourceType.SILK)

BIOME_RESOURCES: Dict[BiomeType, Sequence[ResourceType]] = {
    BiomeType.OCEAN: (ResourceType.FISH,),
    BiomeType.LAKE: (ResourceType.FISH,),
    BiomeType.RIVER: (ResourceType.FISH,),
    BiomeType.TEMPERATE_GRASSLAND: (ResourceType.WHEAT, ResourceType.HORSES, ResourceType.CATTLE),
    BiomeType.TROPICAL_GRASSLAND_SAVANNA: (ResourceType.WHEAT, ResourceType.HORSES, ResourceType.CATTLE),
    BiomeType.ALPINE_TUNDRA: (ResourceType.IRON, ResourceType.STONE, ResourceType.COPPER, ResourceType.COAL),
    BiomeType.MONTANE_FOREST: (ResourceType.IRON, ResourceType.STONE, ResourceType.COPPER, ResourceType.COAL),
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: _FOREST_RESOURCES,
    BiomeType.TEMPERATE_CONIFER_FOREST: _FOREST_RESOURCES,
    BiomeType.TAIGA_BOREAL_FOREST: _FOREST_RESOURCES,
    BiomeType.TROPICAL_RAINFOREST: _FOREST_RESOURCES,
    BiomeType.TROPICAL_SEASONAL_FOREST: _FOREST_RESOURCES,
    BiomeType.HOT_DESERT: (ResourceType.OIL, ResourceType.GOLD, ResourceType.GEMS),
    BiomeType.COLD_DESERT: (ResourceType.OIL, ResourceType.GOLD, ResourceType.GEMS),
    BiomeType.TUNDRA_BARREN: (ResourceType.OIL, ResourceType.IRON),
    BiomeType.TUNDRA_WET: (ResourceType.OIL, ResourceType.IRON),
    BiomeType.MANGROVE: (ResourceType.FISH, ResourceType.SALT),
    BiomeType.SALT_MARSH: (ResourceType.FISH, ResourceType.SALT),
}

DEFAULT_RESOURCES = (ResourceType.STONE,)


@dataclass
class ResourceOptions:
    """Fertility and resource placement options."""

    default_fertility: float = 0.2  # Deserts, tundra, mountains
    river_fertility_bonus: float = 0.3
    biome_fertility: Dict[BiomeType, float] = field(default_factory=lambda: dict(BIOME_FERTILITY))
    geology_fertility: Dict[GeologyType, float] = field(default_factory=lambda: dict(GEOLOGY_FERTILITY))

    resource_noise_scale: float = 0.3
    resource_threshold: float = 0.43  # Admits roughly one cell in six


def select_resource(coord: HexCoordinate, biome: Optional[BiomeType]) -> ResourceType:
    """Deterministic pick from the biome's resource list."""
    candidates = BIOME_RESOURCES.get(biome, DEFAULT_RESOURCES)
    index = (abs(coord.q) + abs(coord.r) * 3) % len(candidates)
    return candidates[index]


class Resources:
    """Places soil fertility and map resources."""

    def __init__(
        self,
        tiles: Dict[HexCoordinate, Tile],
        prng: AleaPRNG,
        options: Optional[ResourceOptions] = None,
    ):
        self.tiles = tiles
        self.prng = prng
        self.options = options or ResourceOptions()

    def calculate_soil_fertility(self) -> None:
        logger.info("Calculating soil fertility")
        opts = self.options

        for tile in self.tiles.values():
            fertility = opts.biome_fertility.get(tile.biome, opts.default_fertility)
            if tile.has_river:
                fertility += opts.river_fertility_bonus
            fertility += opts.geology_fertility.get(tile.geology, 0.0)
            tile.soil_fertility = min(fertility, 1.0)

    def place_resources(self) -> int:
        """
        Returns:
            Number of cells that received a resource
        """
        logger.info("Placing resources")
        opts = self.options
        noise = PerlinSource(self.prng.next_seed())

        placed = 0
        for coord, tile in self.tiles.items():
            chance = noise.get(coord.q * opts.resource_noise_scale, coord.r * opts.resource_noise_scale)
            if chance > opts.resource_threshold:
                tile.resource = select_resource(coord, tile.biome)
                placed += 1
            else:
                tile.resource = ResourceType.NONE

        logger.info("Resources placed", count=placed, total=len(self.tiles))
        return placed

    def run_full_placement(self) -> int:
        self.calculate_soil_fertility()
        return self.place_resources()
