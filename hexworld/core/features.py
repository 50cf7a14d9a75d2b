"""
Terrain features derived once sea level is fixed.

This module handles:
- Drainage (permeability from geology plus a slope bonus)
- Coastline detection
- Distance-to-ocean field (one multi-source BFS, shared by the climate
  stage for both temperature and precipitation)
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Dict

import structlog

from .hex_grid import HexCoordinate
from .tiles import GeologyType, Tile

logger = structlog.get_logger()


GEOLOGY_DRAINAGE = {
    GeologyType.LIMESTONE: 0.9,
    GeologyType.SANDSTONE: 0.7,
    GeologyType.SEDIMENTARY: 0.5,
    GeologyType.IGNEOUS: 0.3,
    GeologyType.GRANITE: 0.3,
    GeologyType.METAMORPHIC: 0.4,
    GeologyType.VOLCANIC: 0.8,
    GeologyType.BASALT: 0.6,
}


@dataclass
class FeatureOptions:
    default_drainage: float = 0.5
    slope_drainage_factor: float = 2.0
    max_slope_bonus: float = 0.3
    geology_drainage: Dict[GeologyType, float] = field(default_factory=lambda: dict(GEOLOGY_DRAINAGE))


class Features:
    """Handles coastline, drainage and ocean distance markup."""

    def __init__(self, tiles: Dict[HexCoordinate, Tile], sea_level: float, options: FeatureOptions = None):
        self.tiles = tiles
        self.sea_level = sea_level
        self.options = options or FeatureOptions()

    def is_ocean(self, coord: HexCoordinate) -> bool:
        return self.tiles[coord].elevation <= self.sea_level

    def calculate_drainage(self) -> None:
        """
        Steeper cells drain better: the mean absolute height difference to
        existing neighbors, doubled and capped, is added to the geology base.
        """
        logger.info("Calculating drainage")
        opts = self.options

        drainage = {}
        for coord, tile in self.tiles.items():
            base = opts.geology_drainage.get(tile.geology, opts.default_drainage)

            slopes = [
                abs(tile.elevation - self.tiles[n].elevation)
                for n in coord.neighbors()
                if n in self.tiles
            ]
            avg_slope = sum(slopes) / len(slopes) if slopes else 0.0
            bonus = min(avg_slope * opts.slope_drainage_factor, opts.max_slope_bonus)
            drainage[coord] = min(base + bonus, 1.0)

        for coord, value in drainage.items():
            self.tiles[coord].drainage = value

    def mark_coastal(self) -> int:
        """
        Flag land cells with at least one ocean neighbor.

        Returns:
            Number of coastal cells
        """
        logger.info("Marking coastline")
        coastal = 0
        for coord, tile in self.tiles.items():
            if tile.elevation <= self.sea_level:
                tile.is_coastal = False
                continue
            tile.is_coastal = any(
                n in self.tiles and self.is_ocean(n) for n in coord.neighbors()
            )
            coastal += tile.is_coastal

        logger.info("Coastline marked", coastal_tiles=coastal)
        return coastal

    def ocean_distance_field(self) -> Dict[HexCoordinate, float]:
        """
        Hex-step distance from every cell to the nearest ocean cell.

        Breadth-first expansion seeded with all ocean cells at once. Ocean
        cells get 0; cells that no ocean can reach (an all-land map) get
        ``math.inf``.
        """
        logger.info("Calculating ocean distance field")

        distance: Dict[HexCoordinate, float] = {}
        queue = deque()
        for coord in self.tiles:
            if self.is_ocean(coord):
                distance[coord] = 0
                queue.append(coord)

        while queue:
            coord = queue.popleft()
            next_distance = distance[coord] + 1
            for neighbor in coord.neighbors():
                if neighbor in self.tiles and neighbor not in distance:
                    distance[neighbor] = next_distance
                    queue.append(neighbor)

        unreachable = 0
        for coord in self.tiles:
            if coord not in distance:
                distance[coord] = math.inf
                unreachable += 1

        if unreachable:
            logger.warning("No ocean reachable from some cells", cells=unreachable)
        return distance
