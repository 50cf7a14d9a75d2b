"""
Sea-level calibration against a target land fraction.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .exceptions import ConfigurationError
from .hex_grid import HexCoordinate
from .tiles import Tile

logger = structlog.get_logger()


@dataclass(frozen=True)
class SeaLevelResult:
    """Outcome of calibration. ``actual_land_fraction`` includes any jitter."""

    sea_level: float
    base_sea_level: float
    jitter: float
    target_land_fraction: float
    actual_land_fraction: float
    land_tiles: int
    total_tiles: int


class SeaLevelCalibrator:
    """
    Picks the elevation percentile that leaves the target share of cells
    strictly above sea level.

    With N cells and target fraction f, the lowest round(N * (1 - f)) cells
    are meant to be ocean: the base sea level is the highest of those, so
    exactly that many cells sit at or below it when elevations are distinct.
    With no ocean cells requested the base sea level is placed just below
    the lowest elevation. Jitter in [-variance, variance] is added afterwards
    except at the absolute targets f = 0 and f = 1.
    """

    def __init__(self, tiles: Dict[HexCoordinate, Tile], prng: Optional[AleaPRNG] = None):
        self.tiles = tiles
        self.prng = prng

    def calibrate(self, target_land_fraction: float, variance: float = 0.0) -> SeaLevelResult:
        """
        Raises:
            ConfigurationError: if the map has fewer than 2 tiles
        """
        total = len(self.tiles)
        if total < 2:
            raise ConfigurationError(
                f"Sea level needs at least 2 tiles to calibrate, got {total}"
            )

        elevations = np.sort(np.fromiter((t.elevation for t in self.tiles.values()), dtype=np.float64))

        ocean_count = int(round(total * (1.0 - target_land_fraction)))
        ocean_count = min(max(ocean_count, 0), total)

        if ocean_count == 0:
            base = float(np.nextafter(elevations[0], -np.inf))
        else:
            base = float(elevations[ocean_count - 1])

        jitter = 0.0
        absolute_target = target_land_fraction in (0.0, 1.0)
        if variance > 0.0 and not absolute_target:
            if self.prng is None:
                raise ConfigurationError("Sea level variance requires a seeded PRNG")
            jitter = self.prng.uniform(-variance, variance)

        sea_level = base + jitter
        land_tiles = int(np.count_nonzero(elevations > sea_level))
        actual = land_tiles / total

        logger.info(
            "Sea level calibrated",
            sea_level=round(sea_level, 4),
            target_land=round(target_land_fraction, 3),
            actual_land=round(actual, 3),
        )
        if abs(actual - target_land_fraction) > 0.1:
            logger.warning(
                "Realized land fraction diverges from target",
                target_land=round(target_land_fraction, 3),
                actual_land=round(actual, 3),
                jitter=round(jitter, 4),
            )

        return SeaLevelResult(
            sea_level=sea_level,
            base_sea_level=base,
            jitter=jitter,
            target_land_fraction=target_land_fraction,
            actual_land_fraction=actual,
            land_tiles=land_tiles,
            total_tiles=total,
        )
