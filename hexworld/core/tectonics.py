"""
Tectonic structure and geology classification.

This module implements:
- Continental seed placement (supercontinent, twin continents, rings of
  continents with clustering, archipelago clusters)
- Exponential-decay continental influence
- Plate-boundary noise and volcanic island formation
- Geology classification and provisional elevation
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import structlog

from ..config.world_shape import WorldShapeConfig
from .alea_prng import AleaPRNG
from .hex_grid import HexCoordinate, hex_range
from .noise import RidgedMultiSource
from .tiles import GeologyType, Tile

logger = structlog.get_logger()


@dataclass
class TectonicOptions:
    """Tectonic stage constants."""

    influence_radius: float = 40.0  # Hexes, scaled by continent_size
    plate_frequency: float = 0.02  # Scaled by tectonic_activity
    influence_weight: float = 0.7
    plate_weight: float = 0.3

    # Volcanic islands
    volcanic_threshold_base: float = 0.8  # Multiplied by (2 - volcanic_activity)
    volcanic_base_ceiling: float = 0.2  # Only where the base value is still oceanic
    volcanic_strength: float = 0.4  # Multiplied by volcanic_activity

    # Continent placement
    pair_spacing_factor: float = 0.6
    min_pair_separation: int = 20
    ring_radius_factor: float = 0.4
    min_ring_radius: float = 20.0
    seed_jitter: int = 10
    seed_margin: int = 20

    # Archipelago clusters
    archipelago_radius_factor: float = 0.7
    archipelago_cluster_size: int = 3
    archipelago_spread: float = 15.0
    archipelago_margin: int = 10

    # Geology thresholds on the combined value
    land_threshold: float = 0.3
    shelf_threshold: float = 0.1
    granite_plate_threshold: float = 0.6
    metamorphic_plate_threshold: float = 0.3


class Tectonics:
    """Places continents and lays down the geology of every cell."""

    def __init__(
        self,
        map_radius: int,
        config: WorldShapeConfig,
        prng: AleaPRNG,
        options: TectonicOptions = None,
    ):
        """
        Initialize the tectonic stage.

        Args:
            map_radius: Grid radius in cells
            config: World shape configuration
            prng: Run PRNG; seed jitter and the plate noise seed are drawn from it
            options: Tectonic constants
        """
        self.map_radius = map_radius
        self.config = config
        self.prng = prng
        self.options = options or TectonicOptions()

        self.continent_centers: List[HexCoordinate] = []

    def generate_continent_centers(self) -> List[HexCoordinate]:
        """
        Place continental seeds according to the configured continent count.

        One seed sits at the origin; two seeds straddle it at the configured
        separation; three or more are spread evenly on a circle, scaled by
        the clustering factor, jittered and clamped inside the map margin.
        Each archipelago zone then adds a small cluster of seeds near the rim.
        """
        opts = self.options
        cfg = self.config
        radius = self.map_radius
        centers: List[HexCoordinate] = []

        base_spacing = int(radius * opts.pair_spacing_factor * cfg.continent_separation)
        count = cfg.continent_count

        if count == 1:
            centers.append(HexCoordinate(0, 0))
        elif count == 2:
            separation = max(base_spacing, opts.min_pair_separation)
            centers.append(HexCoordinate(int(-separation / 2), 0))
            centers.append(HexCoordinate(int(separation / 2), 0))
        else:
            margin = min(opts.seed_margin, radius // 2)
            ring_radius = max(
                radius * opts.ring_radius_factor * cfg.continent_separation,
                opts.min_ring_radius,
            )
            scale = self._clustering_scale(cfg.continent_clustering)

            for i in range(count):
                angle = (i / count) * 2.0 * math.pi
                q = int(ring_radius * math.cos(angle))
                r = int(ring_radius * math.sin(angle))

                q = int(q * scale)
                r = int(r * scale)

                q += self.prng.randint(-opts.seed_jitter, opts.seed_jitter)
                r += self.prng.randint(-opts.seed_jitter, opts.seed_jitter)

                q = _clamp_int(q, -radius + margin, radius - margin)
                r = _clamp_int(r, -radius + margin, radius - margin)
                centers.append(HexCoordinate(q, r))

        for _ in range(cfg.archipelago_zones):
            centers.extend(self._archipelago_cluster())

        self.continent_centers = centers
        logger.info("Continental centers generated", count=len(centers))
        return centers

    def _clustering_scale(self, clustering: float) -> float:
        if clustering > 0.5:
            cluster_offset = (clustering - 0.5) * 2.0
            return 1.0 - cluster_offset * 0.5
        spread_factor = (0.5 - clustering) * 2.0
        return 1.0 + spread_factor

    def _archipelago_cluster(self) -> List[HexCoordinate]:
        opts = self.options
        angle = self.prng.random() * 2.0 * math.pi
        zone_radius = self.map_radius * opts.archipelago_radius_factor
        q = int(zone_radius * math.cos(angle))
        r = int(zone_radius * math.sin(angle))

        limit = self.map_radius - opts.archipelago_margin
        cluster = []
        for j in range(opts.archipelago_cluster_size):
            sub_angle = (j / opts.archipelago_cluster_size) * 2.0 * math.pi
            sub_q = q + int(opts.archipelago_spread * math.cos(sub_angle))
            sub_r = r + int(opts.archipelago_spread * math.sin(sub_angle))
            if abs(sub_q) < limit and abs(sub_r) < limit:
                cluster.append(HexCoordinate(sub_q, sub_r))
        return cluster

    def generate_tectonic_structure(self) -> Dict[HexCoordinate, Tile]:
        """
        Create one placeholder tile per coordinate with geology and a
        provisional elevation equal to the combined continental value.
        """
        logger.info("Generating tectonic structure", radius=self.map_radius)

        opts = self.options
        cfg = self.config
        plate_noise = RidgedMultiSource(self.prng.next_seed())
        centers = self.generate_continent_centers()

        influence_radius = opts.influence_radius * cfg.continent_size
        plate_scale = opts.plate_frequency * cfg.tectonic_activity

        tiles: Dict[HexCoordinate, Tile] = {}
        for coord in hex_range(self.map_radius):
            nearest = min(coord.distance(center) for center in centers)
            influence = math.exp(-nearest / influence_radius)
            plate_value = plate_noise.get(coord.q * plate_scale, coord.r * plate_scale)

            combined, volcanic = self.combine_fields(influence, plate_value)
            geology = self.classify_geology(combined, plate_value, volcanic)

            tiles[coord] = Tile(coord=coord, elevation=combined, geology=geology)

        counts = _geology_counts(tiles)
        logger.info("Tectonic structure generated", tiles=len(tiles), geology=counts)
        return tiles

    def combine_fields(self, influence: float, plate_value: float) -> Tuple[float, float]:
        """
        Blend continental influence and plate noise.

        Returns:
            (combined value, volcanic term); the volcanic term is 0.0 unless
            boundary noise is above the volcanic threshold while the base
            value is still oceanic.
        """
        opts = self.options
        base = influence * opts.influence_weight + plate_value * opts.plate_weight

        threshold = opts.volcanic_threshold_base * (2.0 - self.config.volcanic_activity)
        volcanic = 0.0
        if plate_value > threshold and base < opts.volcanic_base_ceiling:
            volcanic = opts.volcanic_strength * self.config.volcanic_activity

        return base + volcanic, volcanic

    def classify_geology(self, combined: float, plate_value: float, volcanic: float) -> GeologyType:
        opts = self.options
        if combined > opts.land_threshold:
            if plate_value > opts.granite_plate_threshold:
                return GeologyType.GRANITE
            if plate_value > opts.metamorphic_plate_threshold:
                return GeologyType.METAMORPHIC
            return GeologyType.SEDIMENTARY
        if combined > opts.shelf_threshold:
            return GeologyType.CONTINENTAL_SHELF
        if volcanic > 0.0:
            return GeologyType.VOLCANIC
        return GeologyType.OCEANIC_CRUST


def _clamp_int(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _geology_counts(tiles: Dict[HexCoordinate, Tile]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for tile in tiles.values():
        counts[tile.geology.name] = counts.get(tile.geology.name, 0) + 1
    return counts
