"""
Elevation generation from geology and noise, followed by erosion.

Base elevation comes from the cell's rock type. Ridged mountain noise is
only added on rock that builds mountains (granite, igneous, metamorphic),
so ranges never rise out of sedimentary plains or ocean floor. Hill and
detail noise apply everywhere. Erosion is a single slope-proportional
relaxation pass; it is not iterated to convergence.
"""

from dataclasses import dataclass, field
from typing import Dict

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import HexCoordinate
from .noise import PerlinSource, RidgedMultiSource
from .tiles import GeologyType, Tile, clamp

logger = structlog.get_logger()


BASE_ELEVATION = {
    GeologyType.OCEANIC_CRUST: -0.6,
    GeologyType.CONTINENTAL_SHELF: -0.2,
    GeologyType.SEDIMENTARY: 0.1,
    GeologyType.LIMESTONE: 0.15,
    GeologyType.SANDSTONE: 0.2,
    GeologyType.IGNEOUS: 0.4,
    GeologyType.GRANITE: 0.4,
    GeologyType.METAMORPHIC: 0.6,
    GeologyType.VOLCANIC: 0.7,
    GeologyType.BASALT: 0.3,
}

MOUNTAIN_BUILDING_ROCK = frozenset(
    {GeologyType.GRANITE, GeologyType.IGNEOUS, GeologyType.METAMORPHIC}
)


@dataclass
class HeightmapOptions:
    """Noise band frequencies and amplitudes."""

    mountain_scale: float = 0.03
    mountain_amplitude: float = 0.4
    hill_scale: float = 0.08
    hill_amplitude: float = 0.2
    detail_scale: float = 0.2
    detail_amplitude: float = 0.1
    erosion_rate: float = 0.02  # Fraction of the excess over mean neighbor height
    base_elevation: Dict[GeologyType, float] = field(default_factory=lambda: dict(BASE_ELEVATION))


class HeightmapGenerator:
    """
    Refines the provisional tectonic elevation into the final heightmap.
    """

    def __init__(
        self,
        tiles: Dict[HexCoordinate, Tile],
        prng: AleaPRNG,
        options: HeightmapOptions = None,
    ):
        self.tiles = tiles
        self.prng = prng
        self.options = options or HeightmapOptions()

    def generate_base_elevation(self) -> None:
        """
        Replace every tile's elevation with geology base + noise bands,
        clamped to [-1, 1].
        """
        logger.info("Generating base elevation")
        opts = self.options

        mountain_noise = RidgedMultiSource(self.prng.next_seed())
        hill_noise = PerlinSource(self.prng.next_seed())
        detail_noise = PerlinSource(self.prng.next_seed())

        for coord, tile in self.tiles.items():
            elevation = opts.base_elevation[tile.geology]

            if tile.geology in MOUNTAIN_BUILDING_ROCK:
                ridge = mountain_noise.get(coord.q * opts.mountain_scale, coord.r * opts.mountain_scale)
                elevation += ridge * opts.mountain_amplitude

            hill = hill_noise.get(coord.q * opts.hill_scale, coord.r * opts.hill_scale)
            elevation += hill * opts.hill_amplitude

            detail = detail_noise.get(coord.q * opts.detail_scale, coord.r * opts.detail_scale)
            elevation += detail * opts.detail_amplitude

            tile.elevation = clamp(elevation, -1.0, 1.0)

        elevations = [t.elevation for t in self.tiles.values()]
        logger.info(
            "Base elevation generated",
            min_elevation=round(min(elevations), 3),
            max_elevation=round(max(elevations), 3),
        )

    def apply_erosion(self) -> int:
        """
        One erosion relaxation pass.

        Sea level is not known yet, so "land" here is elevation above 0.
        A land cell higher than the mean of its existing neighbors loses
        ``erosion_rate`` times the excess. All reductions are computed from
        the pre-pass heights and applied together.

        Returns:
            Number of cells lowered
        """
        logger.info("Applying erosion")
        rate = self.options.erosion_rate

        erosion: Dict[HexCoordinate, float] = {}
        for coord, tile in self.tiles.items():
            if tile.elevation <= 0.0:
                continue

            neighbor_heights = [
                self.tiles[n].elevation for n in coord.neighbors() if n in self.tiles
            ]
            if not neighbor_heights:
                continue

            mean_neighbor = sum(neighbor_heights) / len(neighbor_heights)
            slope = tile.elevation - mean_neighbor
            if slope > 0.0:
                erosion[coord] = slope * rate

        for coord, amount in erosion.items():
            tile = self.tiles[coord]
            tile.elevation = max(tile.elevation - amount, -1.0)

        logger.info("Erosion applied", cells_eroded=len(erosion))
        return len(erosion)
