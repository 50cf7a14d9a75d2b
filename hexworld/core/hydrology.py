"""
Hydrology system for river generation and lake placement.

This module implements:
- Downhill flow direction per land cell
- Flow accumulation in a single topological pass
- River promotion from accumulated flow, flow normalization, river edges
- Biome-aware river refinement
- Lake placement at convergent depressions

Each land cell drains to at most one strictly lower neighbor, so the flow
graph is a forest of downhill trees. Processing cells from highest to
lowest therefore visits every cell after all of its upstream cells and a
single pass accumulates flow exactly.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import structlog

from .exceptions import InvariantViolation
from .hex_grid import HexCoordinate, opposite_direction
from .tiles import BiomeType, Tile

logger = structlog.get_logger()


BIOME_RIVER_THRESHOLDS = {
    BiomeType.TROPICAL_RAINFOREST: 2.0,
    BiomeType.TEMPERATE_RAINFOREST: 2.5,
    BiomeType.TROPICAL_SEASONAL_FOREST: 3.0,
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: 3.0,
    BiomeType.TUNDRA_WET: 3.0,
    BiomeType.WETLAND: 3.0,
    BiomeType.TEMPERATE_GRASSLAND: 3.5,
    BiomeType.TAIGA_BOREAL_FOREST: 3.5,
    BiomeType.TEMPERATE_CONIFER_FOREST: 4.0,
    BiomeType.SHRUBLAND: 6.0,
    BiomeType.TUNDRA_BARREN: 8.0,
    BiomeType.HOT_DESERT: 12.0,
    BiomeType.COLD_DESERT: 12.0,
}


@dataclass
class HydrologyOptions:
    """Hydrology calculation options."""

    base_river_threshold: float = 4.0  # Accumulation needed for a river
    precipitation_bonus_factor: float = 0.5  # Share of a cell's precipitation passed downstream
    precipitation_threshold_factor: float = 0.5  # Wetter cells need less flow
    min_precipitation_factor: float = 0.3
    mountain_height: float = 0.3  # Above sea level
    mountain_threshold_factor: float = 0.8  # Steep cells need less flow
    min_river_flow: float = 0.1  # Floor of normalized river flow
    default_biome_threshold: float = 5.0
    biome_river_thresholds: Dict[BiomeType, float] = field(
        default_factory=lambda: dict(BIOME_RIVER_THRESHOLDS)
    )

    # Lakes
    lake_max_height: float = 0.3  # Above sea level
    lake_min_higher_neighbors: int = 4
    lake_min_depth: float = 0.05
    lake_min_inflows: int = 2
    lake_inflow_bonus: float = 0.1
    max_lakes: int = 25
    lake_min_spacing: int = 6


@dataclass(frozen=True)
class LakeCandidate:
    coord: HexCoordinate
    depth: float
    inflows: int
    score: float


class Hydrology:
    """Handles water flow simulation, river generation and lakes."""

    def __init__(
        self,
        tiles: Dict[HexCoordinate, Tile],
        sea_level: float,
        options: Optional[HydrologyOptions] = None,
    ):
        """
        Initialize hydrology system.

        Args:
            tiles: Coordinate to tile map with final elevations
            sea_level: Calibrated sea level
            options: Hydrology calculation options
        """
        self.tiles = tiles
        self.sea_level = sea_level
        self.options = options or HydrologyOptions()

        # Working maps, only meaningful until lakes are placed
        self.flow_directions: Dict[HexCoordinate, Tuple[int, HexCoordinate]] = {}
        self.flow_accumulation: Dict[HexCoordinate, float] = {}
        self.precipitation_bonus_total = 0.0

        self.lakes: List[HexCoordinate] = []
        self.primary_river_tiles = 0
        self.refined_river_tiles = 0

    def _is_land(self, coord: HexCoordinate) -> bool:
        return self.tiles[coord].elevation > self.sea_level

    def calculate_flow_directions(self) -> None:
        """
        Each land cell flows to its lowest neighbor if that neighbor is
        strictly lower; otherwise it has no direction (basin candidate).
        """
        logger.info("Calculating flow directions")

        self.flow_directions = {}
        for coord, tile in self.tiles.items():
            if tile.elevation <= self.sea_level:
                continue

            lowest: Optional[Tuple[int, HexCoordinate]] = None
            lowest_elevation = tile.elevation
            for direction, neighbor in enumerate(coord.neighbors()):
                neighbor_tile = self.tiles.get(neighbor)
                if neighbor_tile is not None and neighbor_tile.elevation < lowest_elevation:
                    lowest_elevation = neighbor_tile.elevation
                    lowest = (direction, neighbor)

            if lowest is not None:
                self.flow_directions[coord] = lowest

        basins = sum(
            1 for c in self.tiles if self._is_land(c) and c not in self.flow_directions
        )
        logger.info(
            "Flow directions calculated",
            land_cells_with_flow=len(self.flow_directions),
            basins=basins,
        )

    def calculate_flow_accumulation(self) -> None:
        """
        Accumulate flow from high to low.

        Every land cell starts with 1.0. A cell with a direction passes its
        running total plus a precipitation bonus to its target; the target
        may be an ocean cell, which then only receives.
        """
        logger.info("Simulating flow accumulation")

        opts = self.options
        accumulation: Dict[HexCoordinate, float] = {}
        land = [c for c in self.tiles if self._is_land(c)]
        for coord in land:
            accumulation[coord] = 1.0

        land.sort(key=lambda c: (-self.tiles[c].elevation, c.q, c.r))

        bonus_total = 0.0
        for coord in land:
            link = self.flow_directions.get(coord)
            if link is None:
                continue
            _, target = link
            self._check_flow_link(coord, target)

            bonus = self.tiles[coord].precipitation * opts.precipitation_bonus_factor
            accumulation[target] = accumulation.get(target, 0.0) + accumulation[coord] + bonus
            bonus_total += bonus

        self.flow_accumulation = accumulation
        self.precipitation_bonus_total = bonus_total

        max_flow = max(accumulation.values(), default=0.0)
        logger.info(
            "Flow accumulation completed",
            cells_with_flow=len(accumulation),
            max_flow=round(max_flow, 2),
        )

    def _check_flow_link(self, source: HexCoordinate, target: HexCoordinate) -> None:
        target_tile = self.tiles.get(target)
        if target_tile is None:
            raise InvariantViolation(f"Flow from {source} points to missing tile {target}")
        if target_tile.elevation >= self.tiles[source].elevation:
            raise InvariantViolation(f"Flow from {source} to {target} is not downhill")

    def terminal_flow(self) -> float:
        """
        Total flow held by cells that pass nothing on (basins and the ocean
        cells that receive rivers). Equals the land cell count plus
        ``precipitation_bonus_total``.
        """
        return sum(
            value
            for coord, value in self.flow_accumulation.items()
            if coord not in self.flow_directions
        )

    def trace_flow_path(self, start: HexCoordinate) -> List[HexCoordinate]:
        """
        Follow flow directions from ``start`` until a cell without one.

        Raises:
            InvariantViolation: if the walk exceeds the tile count (a cycle)
        """
        path = [start]
        current = start
        limit = len(self.tiles)
        while current in self.flow_directions:
            current = self.flow_directions[current][1]
            path.append(current)
            if len(path) > limit + 1:
                raise InvariantViolation(f"Flow path from {start} does not terminate")
        return path

    def river_threshold(self, tile: Tile) -> float:
        opts = self.options
        precip_factor = max(
            1.0 - tile.precipitation * opts.precipitation_threshold_factor,
            opts.min_precipitation_factor,
        )
        elevation_factor = (
            opts.mountain_threshold_factor
            if tile.elevation > self.sea_level + opts.mountain_height
            else 1.0
        )
        return opts.base_river_threshold * precip_factor * elevation_factor

    def generate_river_network(self) -> int:
        """
        Promote land cells whose accumulation reaches their river threshold.

        Returns:
            Number of river cells
        """
        logger.info("Generating river network")

        for tile in self.tiles.values():
            tile.clear_river()

        river_tiles = 0
        for coord, flow in self.flow_accumulation.items():
            tile = self.tiles[coord]
            if tile.elevation <= self.sea_level:
                continue
            if flow >= self.river_threshold(tile):
                tile.has_river = True
                river_tiles += 1

        self.primary_river_tiles = river_tiles
        logger.info("Rivers generated", river_tiles=river_tiles)
        if river_tiles == 0:
            logger.warning("No rivers formed", land_cells=sum(1 for c in self.tiles if self._is_land(c)))
        return river_tiles

    def calculate_river_flow_rates(self) -> None:
        """
        Normalize river flow to accumulation / run maximum, floored and capped
        to [min_river_flow, 1.0], then rebuild river edges.
        """
        max_flow = max(self.flow_accumulation.values(), default=0.0)

        for coord, tile in self.tiles.items():
            if not tile.has_river:
                tile.river_flow = 0.0
                continue
            flow = self.flow_accumulation.get(coord, 0.0)
            ratio = flow / max_flow if max_flow > 0 else 0.0
            tile.river_flow = min(max(ratio, self.options.min_river_flow), 1.0)

        self.set_river_edges()

    def set_river_edges(self) -> None:
        """
        Mark river edges along flow links touching a river cell.

        A link is drawn on the source side in its flow direction and on the
        target side in the opposite direction; only sides that are river
        cells carry the flag, so a cell without a river has no edges.
        """
        for tile in self.tiles.values():
            tile.river_edges = [False] * 6

        for source, (direction, target) in self.flow_directions.items():
            source_tile = self.tiles[source]
            target_tile = self.tiles.get(target)
            if target_tile is None:
                raise InvariantViolation(f"Flow from {source} points to missing tile {target}")

            if not (source_tile.has_river or target_tile.has_river):
                continue
            if source_tile.has_river:
                source_tile.river_edges[direction] = True
            if target_tile.has_river:
                target_tile.river_edges[opposite_direction(direction)] = True

    def run_primary_simulation(self) -> int:
        """
        Flow directions, accumulation, rivers, flow rates and edges.

        Returns:
            Number of river cells
        """
        logger.info("Starting hydrology simulation")

        self.calculate_flow_directions()
        self.calculate_flow_accumulation()
        rivers = self.generate_river_network()
        self.calculate_river_flow_rates()

        logger.info("Hydrology simulation completed", river_tiles=rivers)
        return rivers

    def refine_river_network(self) -> int:
        """
        Promote extra river cells using per-biome thresholds, far lower in
        rainforest than in desert. Requires biomes to be assigned.

        Returns:
            Number of cells newly promoted
        """
        logger.info("Refining river network by biome")

        opts = self.options
        added = 0
        for coord, flow in self.flow_accumulation.items():
            tile = self.tiles[coord]
            if tile.has_river or tile.elevation <= self.sea_level:
                continue
            if tile.biome is None:
                raise InvariantViolation(
                    f"River refinement reached unclassified tile {coord}; biomes must be assigned first"
                )

            threshold = opts.biome_river_thresholds.get(tile.biome, opts.default_biome_threshold)
            if flow >= threshold:
                tile.has_river = True
                added += 1

        if added:
            self.calculate_river_flow_rates()

        self.refined_river_tiles = sum(1 for t in self.tiles.values() if t.has_river)
        logger.info("River network refined", added=added, river_tiles=self.refined_river_tiles)
        return added

    def evaluate_lake_candidate(self, coord: HexCoordinate) -> Optional[LakeCandidate]:
        """
        Check whether a cell is a convergent depression.

        The cell must be land just above sea level, have at least four
        higher neighbors, sit more than ``lake_min_depth`` below the mean of
        its neighbors, and receive flow from at least two of them.
        """
        opts = self.options
        tile = self.tiles[coord]
        if not (self.sea_level < tile.elevation < self.sea_level + opts.lake_max_height):
            return None

        neighbors = [n for n in coord.neighbors() if n in self.tiles]
        if not neighbors:
            return None

        higher = sum(1 for n in neighbors if self.tiles[n].elevation > tile.elevation)
        mean_neighbor = sum(self.tiles[n].elevation for n in neighbors) / len(neighbors)
        depth = mean_neighbor - tile.elevation

        inflows = sum(
            1
            for n in neighbors
            if n in self.flow_directions and self.flow_directions[n][1] == coord
        )

        if (
            higher >= opts.lake_min_higher_neighbors
            and depth > opts.lake_min_depth
            and inflows >= opts.lake_min_inflows
        ):
            return LakeCandidate(
                coord=coord,
                depth=depth,
                inflows=inflows,
                score=depth + inflows * opts.lake_inflow_bonus,
            )
        return None

    def find_lake_candidates(self) -> List[LakeCandidate]:
        """All lake candidates, best score first."""
        candidates = []
        for coord in self.tiles:
            candidate = self.evaluate_lake_candidate(coord)
            if candidate is not None:
                candidates.append(candidate)

        candidates.sort(key=lambda c: (-c.score, c.coord.q, c.coord.r))
        return candidates

    def place_lakes(self) -> List[HexCoordinate]:
        """
        Commit ranked candidates as lakes, skipping any within the minimum
        spacing of an already placed lake, up to ``max_lakes``.

        Returns:
            Coordinates turned into lakes
        """
        logger.info("Placing lakes")

        opts = self.options
        lakes: List[HexCoordinate] = []
        for candidate in self.find_lake_candidates():
            if len(lakes) >= opts.max_lakes:
                break
            if any(candidate.coord.distance(lake) < opts.lake_min_spacing for lake in lakes):
                continue
            self.tiles[candidate.coord].biome = BiomeType.LAKE
            lakes.append(candidate.coord)

        self.lakes = lakes
        logger.info("Lakes placed", count=len(lakes))
        return lakes

    def discard_working_state(self) -> None:
        """Drop flow maps once no later stage needs them."""
        self.flow_directions = {}
        self.flow_accumulation = {}
