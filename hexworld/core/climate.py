"""
Climate calculation system for temperature and precipitation.

This module implements:
- Latitude-based temperature with altitude cooling and continental effect
- Latitude-banded precipitation with coastal and orographic bonuses
- Rain shadows cast from high ground
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

import structlog

from ..config.world_shape import WorldShapeConfig
from .alea_prng import AleaPRNG
from .hex_grid import HEX_DIRECTIONS, HexCoordinate
from .noise import PerlinSource
from .tiles import Tile, clamp

logger = structlog.get_logger()


@dataclass
class ClimateOptions:
    """Climate calculation options."""

    # Latitude reached at the map's top and bottom rows. Kept low so a
    # wide equatorial band stays warm.
    latitude_span: float = 0.4

    # Temperature settings
    latitude_cooling: float = 0.8
    min_base_temperature: float = 0.2
    lapse_rate: float = 1.5  # Cooling per unit of elevation above sea level
    continental_distance: float = 20.0  # Hexes
    max_continental_effect: float = 0.3
    continental_weight: float = 0.1
    temperature_noise_scale: float = 0.05
    temperature_noise_amplitude: float = 0.1

    # Precipitation settings
    min_latitude_precipitation: float = 0.1
    max_latitude_precipitation: float = 0.9
    coastal_distance: float = 20.0
    coastal_bonus: float = 0.2
    orographic_height: float = 0.3  # Above sea level
    orographic_bonus: float = 0.2
    precipitation_noise_scale: float = 0.04
    precipitation_noise_amplitude: float = 0.4  # Scaled by climate_extremeness

    # Rain shadows
    shadow_height: float = 0.3  # Above sea level
    shadow_margin: float = 0.1
    shadow_steps: int = 7
    shadow_strength: float = 0.3
    shadow_decay: float = 0.7


class Climate:
    """Handles temperature and precipitation calculations."""

    def __init__(
        self,
        tiles: Dict[HexCoordinate, Tile],
        sea_level: float,
        map_radius: int,
        config: WorldShapeConfig,
        prng: AleaPRNG,
        ocean_distance: Dict[HexCoordinate, float],
        options: Optional[ClimateOptions] = None,
    ):
        """
        Initialize climate calculator.

        Args:
            tiles: Coordinate to tile map with final elevations
            sea_level: Calibrated sea level
            map_radius: Grid radius, defines the pole-to-pole axis
            config: World shape configuration (climate modifiers)
            prng: Run PRNG for the noise seeds
            ocean_distance: Hex-step distance to nearest ocean per cell
            options: Climate options
        """
        self.tiles = tiles
        self.sea_level = sea_level
        self.map_radius = map_radius
        self.config = config
        self.prng = prng
        self.ocean_distance = ocean_distance
        self.options = options or ClimateOptions()

        self.shadowed_tiles = 0

    def latitude(self, coord: HexCoordinate) -> float:
        """0 on the equator row, ``latitude_span`` at the top and bottom rows."""
        if self.map_radius <= 0:
            return 0.0
        return abs(coord.r) / self.map_radius * self.options.latitude_span

    def calculate_temperatures(self) -> None:
        logger.info("Calculating temperatures")

        opts = self.options
        noise = PerlinSource(self.prng.next_seed())

        for coord, tile in self.tiles.items():
            lat = self.latitude(coord)
            base = max(1.0 - lat * opts.latitude_cooling, opts.min_base_temperature)

            cooling = 0.0
            if tile.elevation > self.sea_level:
                cooling = (tile.elevation - self.sea_level) * opts.lapse_rate

            distance = self.ocean_distance.get(coord, math.inf)
            continental = min(distance / opts.continental_distance, opts.max_continental_effect)

            variation = (
                noise.get(coord.q * opts.temperature_noise_scale, coord.r * opts.temperature_noise_scale)
                * opts.temperature_noise_amplitude
            )

            temperature = clamp(base - cooling + variation + continental * opts.continental_weight)
            tile.temperature = clamp(temperature * self.config.global_temperature)

        temps = [t.temperature for t in self.tiles.values()]
        logger.info(
            "Temperatures calculated",
            min_temp=round(min(temps), 3),
            max_temp=round(max(temps), 3),
        )

    def latitude_precipitation(self, lat: float) -> float:
        """
        Base precipitation curve: wet tropics, a subtropical dry belt,
        temperate recovery and drier poles.
        """
        if lat < 0.15:
            value = 0.8 - lat * 0.3
        elif lat < 0.3:
            value = 0.3 + (lat - 0.15) * 0.8
        elif lat < 0.5:
            value = 0.5 + (lat - 0.3) * 0.6
        else:
            value = 0.4 - (lat - 0.5) * 0.6
        return clamp(value, self.options.min_latitude_precipitation, self.options.max_latitude_precipitation)

    def generate_precipitation(self) -> None:
        logger.info("Generating precipitation")

        opts = self.options
        noise = PerlinSource(self.prng.next_seed())
        amplitude = opts.precipitation_noise_amplitude * self.config.climate_extremeness

        for coord, tile in self.tiles.items():
            base = self.latitude_precipitation(self.latitude(coord))

            distance = self.ocean_distance.get(coord, math.inf)
            coastal = (1.0 - min(distance / opts.coastal_distance, 1.0)) * opts.coastal_bonus

            variation = (
                noise.get(coord.q * opts.precipitation_noise_scale, coord.r * opts.precipitation_noise_scale)
                * amplitude
            )

            orographic = 0.0
            if tile.elevation > self.sea_level + opts.orographic_height:
                orographic = opts.orographic_bonus

            precipitation = clamp(base + coastal + orographic + variation)
            tile.precipitation = clamp(precipitation * self.config.rainfall_multiplier)

        precs = [t.precipitation for t in self.tiles.values()]
        logger.info(
            "Precipitation generated",
            min_prec=round(min(precs), 3),
            max_prec=round(max(precs), 3),
        )

    def apply_rain_shadows(self) -> int:
        """
        Cast a shadow ray in every direction from each high cell.

        A ray walks up to ``shadow_steps`` cells; every cell lower than the
        source by more than ``shadow_margin`` is shadowed with a strength
        that decays geometrically per step. The ray stops at the first cell
        that is not lower, or at the map edge. Each cell keeps the strongest
        shadow it received.

        Returns:
            Number of shadowed cells
        """
        logger.info("Applying rain shadows")

        opts = self.options
        shadows: Dict[HexCoordinate, float] = {}

        for coord, tile in self.tiles.items():
            if tile.elevation <= self.sea_level + opts.shadow_height:
                continue

            for dq, dr in HEX_DIRECTIONS:
                current = coord
                strength = opts.shadow_strength
                for _ in range(opts.shadow_steps):
                    current = HexCoordinate(current.q + dq, current.r + dr)
                    shadow_tile = self.tiles.get(current)
                    if shadow_tile is None:
                        break
                    if shadow_tile.elevation >= tile.elevation - opts.shadow_margin:
                        break
                    shadows[current] = max(shadows.get(current, 0.0), strength)
                    strength *= opts.shadow_decay

        for coord, reduction in shadows.items():
            tile = self.tiles[coord]
            tile.precipitation = clamp(tile.precipitation * (1.0 - reduction))

        self.shadowed_tiles = len(shadows)
        logger.info("Rain shadows applied", shadowed_tiles=len(shadows))
        return len(shadows)

    def run_full_simulation(self) -> None:
        """Temperature, precipitation and rain shadows, in that order."""
        self.calculate_temperatures()
        self.generate_precipitation()
        self.apply_rain_shadows()
