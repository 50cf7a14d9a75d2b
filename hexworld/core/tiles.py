"""
Per-cell world record and the category enumerations stored on it.

Enumeration values are the stable integer codes used when tiles are
serialized by downstream consumers.
"""

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Optional, Sequence, Tuple

from .hex_grid import HexCoordinate


class GeologyType(IntEnum):
    """Rock/crust category of a cell."""

    OCEANIC_CRUST = 0
    CONTINENTAL_SHELF = 1
    SEDIMENTARY = 2
    IGNEOUS = 3
    METAMORPHIC = 4
    VOLCANIC = 5
    LIMESTONE = 6
    SANDSTONE = 7
    GRANITE = 8
    BASALT = 9


class BiomeType(IntEnum):
    """Biome categories, grouped by decade of their code."""

    # Aquatic
    OCEAN = 0
    LAKE = 1
    RIVER = 2

    # Cold
    TUNDRA_BARREN = 10
    TUNDRA_WET = 11
    TAIGA_BOREAL_FOREST = 12

    # Temperate
    TEMPERATE_GRASSLAND = 20
    TEMPERATE_DECIDUOUS_FOREST = 21
    TEMPERATE_CONIFER_FOREST = 22
    TEMPERATE_RAINFOREST = 23

    # Warm/hot
    TROPICAL_GRASSLAND_SAVANNA = 30
    TROPICAL_SEASONAL_FOREST = 31
    TROPICAL_RAINFOREST = 32

    # Dry
    COLD_DESERT = 40
    HOT_DESERT = 41
    SHRUBLAND = 42

    # High altitude
    ALPINE_TUNDRA = 50
    MONTANE_FOREST = 51

    # Coastal/wetland
    MANGROVE = 60
    SALT_MARSH = 61
    WETLAND = 62


BIOME_NAMES = {
    BiomeType.OCEAN: "Ocean",
    BiomeType.LAKE: "Lake",
    BiomeType.RIVER: "River",
    BiomeType.TUNDRA_BARREN: "Barren Tundra",
    BiomeType.TUNDRA_WET: "Wet Tundra",
    BiomeType.TAIGA_BOREAL_FOREST: "Taiga",
    BiomeType.TEMPERATE_GRASSLAND: "Temperate Grassland",
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: "Temperate Deciduous Forest",
    BiomeType.TEMPERATE_CONIFER_FOREST: "Temperate Conifer Forest",
    BiomeType.TEMPERATE_RAINFOREST: "Temperate Rainforest",
    BiomeType.TROPICAL_GRASSLAND_SAVANNA: "Savanna",
    BiomeType.TROPICAL_SEASONAL_FOREST: "Tropical Seasonal Forest",
    BiomeType.TROPICAL_RAINFOREST: "Tropical Rainforest",
    BiomeType.COLD_DESERT: "Cold Desert",
    BiomeType.HOT_DESERT: "Hot Desert",
    BiomeType.SHRUBLAND: "Shrubland",
    BiomeType.ALPINE_TUNDRA: "Alpine Tundra",
    BiomeType.MONTANE_FOREST: "Montane Forest",
    BiomeType.MANGROVE: "Mangrove",
    BiomeType.SALT_MARSH: "Salt Marsh",
    BiomeType.WETLAND: "Wetland",
}


class ResourceType(IntEnum):
    """Map resources; NONE marks a cell without one."""

    NONE = 0
    GOLD = 1
    IRON = 2
    WHEAT = 3
    FISH = 4
    STONE = 5
    WOOD = 6
    OIL = 7
    HORSES = 8
    GEMS = 9
    COPPER = 10
    COAL = 11
    CATTLE = 12
    SPICES = 13
    SILK = 14
    WINE = 15
    SALT = 16


class StrategicFeature(IntEnum):
    """Named formations scored by gameplay systems downstream."""

    NONE = 0
    RIVER_DELTA = 1
    PENINSULA = 2
    CAPE = 3
    STRAIT = 4
    NATURAL_HARBOR = 5
    MOUNTAIN_PASS = 6
    CANYON = 7
    ISLAND_CHAIN = 8
    PLATEAU = 9
    ISTHMUS = 10
    BAY = 11
    FJORD = 12
    DESERT_OASIS = 13
    RIVER_FORD = 14
    HIGHLAND_FORTRESS = 15


@dataclass
class Tile:
    """
    One generated hex cell.

    Created with placeholder values by the tectonic stage; each later stage
    writes only the fields it owns. ``biome`` stays None until biome
    classification runs. ``river_edges`` is indexed by hex direction.
    """

    coord: HexCoordinate
    elevation: float
    geology: GeologyType
    biome: Optional[BiomeType] = None
    has_river: bool = False
    river_flow: float = 0.0
    river_edges: Sequence[bool] = field(default_factory=lambda: [False] * 6)
    is_coastal: bool = False
    resource: ResourceType = ResourceType.NONE
    temperature: float = 0.0
    precipitation: float = 0.0
    drainage: float = 0.5
    soil_fertility: float = 0.0

    # Strategic attributes, partially populated here
    strategic_feature: StrategicFeature = StrategicFeature.NONE
    defensibility: float = 0.0
    trade_value: float = 0.0
    flood_risk: float = 0.0
    naval_access: float = 0.0

    def clear_river(self) -> None:
        self.has_river = False
        self.river_flow = 0.0
        self.river_edges = [False] * 6

    def freeze(self) -> "WorldTile":
        """Read-only copy of this cell for the finished world."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["river_edges"] = tuple(bool(edge) for edge in self.river_edges)
        return WorldTile(**values)


@dataclass(frozen=True)
class WorldTile:
    """
    One cell of a finished world.

    Same fields as :class:`Tile`; assigning to any of them raises
    ``dataclasses.FrozenInstanceError``.
    """

    coord: HexCoordinate
    elevation: float
    geology: GeologyType
    biome: Optional[BiomeType]
    has_river: bool
    river_flow: float
    river_edges: Tuple[bool, ...]
    is_coastal: bool
    resource: ResourceType
    temperature: float
    precipitation: float
    drainage: float
    soil_fertility: float
    strategic_feature: StrategicFeature
    defensibility: float
    trade_value: float
    flood_risk: float
    naval_access: float

    def is_land(self, sea_level: float) -> bool:
        return self.elevation > sea_level


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(max(value, low), high)
