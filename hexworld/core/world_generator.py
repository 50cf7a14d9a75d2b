"""
World generation pipeline.

Runs every stage over one hex grid in a fixed order:

1. tectonic structure (continent seeds, geology, provisional elevation)
2. base elevation and a single erosion pass
3. sea-level calibration
4. drainage
5. primary hydrology (flow, accumulation, rivers, flow rates, edges)
6. coastline
7. climate (ocean distance, temperature, precipitation, rain shadows)
8. biomes, then biome-aware river refinement
9. lakes; hydrology working maps are discarded afterwards
10. soil fertility, resources, defensibility

Every random draw comes from one Alea PRNG seeded with the run seed, so a
(radius, config, seed) triple always produces the same tiles.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

import structlog

from ..config.config import settings
from ..config.world_shape import WorldShapeConfig, get_preset
from ..utils.random import Seed, create_prng, resolve_seed
from .biomes import BiomeClassifier, BiomeOptions
from .climate import Climate, ClimateOptions
from .exceptions import ConfigurationError
from .features import FeatureOptions, Features
from .heightmap_generator import HeightmapGenerator, HeightmapOptions
from .hex_grid import HexCoordinate, cell_count
from .hydrology import Hydrology, HydrologyOptions
from .resources import ResourceOptions, Resources
from .sea_level import SeaLevelCalibrator
from .strategic import StrategicOptions, calculate_defensibility
from .tectonics import TectonicOptions, Tectonics
from .tiles import BIOME_NAMES, BiomeType, ResourceType, Tile, WorldTile

logger = structlog.get_logger()


@dataclass
class GenerationOptions:
    """Per-stage options; defaults reproduce the standard worlds."""

    tectonics: TectonicOptions = field(default_factory=TectonicOptions)
    heightmap: HeightmapOptions = field(default_factory=HeightmapOptions)
    features: FeatureOptions = field(default_factory=FeatureOptions)
    hydrology: HydrologyOptions = field(default_factory=HydrologyOptions)
    climate: ClimateOptions = field(default_factory=ClimateOptions)
    biomes: BiomeOptions = field(default_factory=BiomeOptions)
    resources: ResourceOptions = field(default_factory=ResourceOptions)
    strategic: StrategicOptions = field(default_factory=StrategicOptions)


@dataclass(frozen=True)
class WorldStatistics:
    """Counts and ranges describing a generated world."""

    total_tiles: int
    land_tiles: int
    ocean_tiles: int
    target_land_fraction: float
    actual_land_fraction: float
    primary_river_tiles: int
    river_tiles: int
    lake_count: int
    coastal_tiles: int
    resource_tiles: int
    biome_counts: Dict[str, int]
    temperature_range: Tuple[float, float]
    precipitation_range: Tuple[float, float]


@dataclass(frozen=True)
class GenerationResult:
    """A finished world: read-only tiles plus everything needed to reproduce it."""

    seed: str
    map_radius: int
    config: WorldShapeConfig
    sea_level: float
    tiles: Mapping[HexCoordinate, WorldTile]
    statistics: WorldStatistics

    def land_tiles(self) -> List[WorldTile]:
        return [t for t in self.tiles.values() if t.is_land(self.sea_level)]

    def tiles_with_biome(self, biome: BiomeType) -> List[WorldTile]:
        return [t for t in self.tiles.values() if t.biome == biome]


class WorldGenerator:
    """Generates one hex world from a radius, a shape config and a seed."""

    def __init__(
        self,
        map_radius: int,
        config: Optional[WorldShapeConfig] = None,
        seed: Optional[Seed] = None,
        options: Optional[GenerationOptions] = None,
    ):
        """
        Args:
            map_radius: Grid radius in cells, at least 1
            config: World shape; the configured default preset when omitted
            seed: Run seed; falls back to the settings seed, then a fresh one
            options: Stage options

        Raises:
            ConfigurationError: if the radius cannot produce a calibratable map,
                or the configured default preset does not exist
        """
        if isinstance(map_radius, bool) or not isinstance(map_radius, int):
            raise ConfigurationError(f"Map radius must be an integer, got {map_radius!r}")
        if map_radius < 1:
            raise ConfigurationError(
                f"Map radius must be at least 1, got {map_radius} ({cell_count(max(map_radius, 0))} tiles)"
            )

        self.map_radius = map_radius
        if config is None:
            try:
                config = get_preset(settings.default_preset)
            except KeyError as e:
                raise ConfigurationError(e.args[0]) from e
        self.config = config
        self.seed = resolve_seed(seed if seed is not None else settings.seed)
        self.options = options or GenerationOptions()

        self.tiles: Dict[HexCoordinate, Tile] = {}
        self.sea_level: Optional[float] = None

    def generate(self) -> GenerationResult:
        logger.info(
            "Starting world generation",
            radius=self.map_radius,
            seed=self.seed,
            expected_tiles=cell_count(self.map_radius),
        )

        opts = self.options
        prng = create_prng(self.seed)

        tectonics = Tectonics(self.map_radius, self.config, prng, opts.tectonics)
        self.tiles = tectonics.generate_tectonic_structure()

        heightmap = HeightmapGenerator(self.tiles, prng, opts.heightmap)
        heightmap.generate_base_elevation()
        heightmap.apply_erosion()

        calibration = SeaLevelCalibrator(self.tiles, prng).calibrate(
            self.config.target_land_fraction, self.config.sea_level_variance
        )
        self.sea_level = calibration.sea_level

        features = Features(self.tiles, self.sea_level, opts.features)
        features.calculate_drainage()

        hydrology = Hydrology(self.tiles, self.sea_level, opts.hydrology)
        hydrology.run_primary_simulation()

        coastal_tiles = features.mark_coastal()

        climate = Climate(
            self.tiles,
            self.sea_level,
            self.map_radius,
            self.config,
            prng,
            features.ocean_distance_field(),
            opts.climate,
        )
        climate.run_full_simulation()

        BiomeClassifier(self.tiles, self.sea_level, opts.biomes).assign_biomes()
        hydrology.refine_river_network()

        lakes = hydrology.place_lakes()
        hydrology.discard_working_state()

        resources = Resources(self.tiles, prng, opts.resources)
        resources.run_full_placement()
        calculate_defensibility(self.tiles, opts.strategic)

        BiomeClassifier(self.tiles, self.sea_level, opts.biomes).validate()

        frozen = self._finalize_tiles()
        statistics = self._collect_statistics(
            calibration.target_land_fraction,
            hydrology.primary_river_tiles,
            len(lakes),
            coastal_tiles,
        )

        logger.info(
            "World generation completed",
            seed=self.seed,
            tiles=statistics.total_tiles,
            land=statistics.land_tiles,
            rivers=statistics.river_tiles,
            lakes=statistics.lake_count,
        )

        return GenerationResult(
            seed=self.seed,
            map_radius=self.map_radius,
            config=self.config,
            sea_level=self.sea_level,
            tiles=frozen,
            statistics=statistics,
        )

    def _finalize_tiles(self) -> Mapping[HexCoordinate, WorldTile]:
        return MappingProxyType({coord: tile.freeze() for coord, tile in self.tiles.items()})

    def _collect_statistics(
        self,
        target_land_fraction: float,
        primary_river_tiles: int,
        lake_count: int,
        coastal_tiles: int,
    ) -> WorldStatistics:
        tiles = list(self.tiles.values())
        total = len(tiles)
        land = sum(1 for t in tiles if t.elevation > self.sea_level)

        biome_counts: Dict[str, int] = {}
        for tile in tiles:
            name = BIOME_NAMES[tile.biome]
            biome_counts[name] = biome_counts.get(name, 0) + 1

        temps = [t.temperature for t in tiles]
        precs = [t.precipitation for t in tiles]

        stats = WorldStatistics(
            total_tiles=total,
            land_tiles=land,
            ocean_tiles=total - land,
            target_land_fraction=target_land_fraction,
            actual_land_fraction=land / total,
            primary_river_tiles=primary_river_tiles,
            river_tiles=sum(1 for t in tiles if t.has_river),
            lake_count=lake_count,
            coastal_tiles=coastal_tiles,
            resource_tiles=sum(1 for t in tiles if t.resource != ResourceType.NONE),
            biome_counts=biome_counts,
            temperature_range=(min(temps), max(temps)),
            precipitation_range=(min(precs), max(precs)),
        )

        if land == 0:
            logger.warning("Generated world has no land", tiles=total)
        elif land == total:
            logger.warning("Generated world has no ocean", tiles=total)
        return stats


def generate_world(
    map_radius: Optional[int] = None,
    config: Union[WorldShapeConfig, str, None] = None,
    seed: Optional[Seed] = None,
) -> GenerationResult:
    """
    Generate a world in one call.

    Args:
        map_radius: Grid radius; the settings default when omitted
        config: A WorldShapeConfig or the name of a preset
        seed: Run seed

    Raises:
        ConfigurationError: for an unusable radius or an unknown preset name
    """
    if map_radius is None:
        map_radius = settings.default_radius

    if isinstance(config, str):
        try:
            config = get_preset(config)
        except KeyError as e:
            raise ConfigurationError(e.args[0]) from e

    return WorldGenerator(map_radius, config, seed).generate()
