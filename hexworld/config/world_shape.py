"""
World shape descriptor and named presets.

A ``WorldShapeConfig`` is validated once at construction and never
mutated. Out-of-range values are rejected rather than clamped: the
generator only clamps interior continuous fields.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class WorldShapeConfig(BaseModel):
    """Immutable description of one generation run's world shape."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Continental configuration
    continent_count: int = Field(4, ge=1, le=8, description="Number of major landmasses")
    continent_size: float = Field(1.0, ge=0.1, le=3.0, description="Scales continental influence radius")
    continent_separation: float = Field(1.0, ge=0.1, le=3.0, description="Spacing between continents")
    continent_clustering: float = Field(
        0.5, ge=0.0, le=1.0, description="Above 0.5 pulls continents together, below pushes apart"
    )

    # Ocean/land balance
    target_land_fraction: float = Field(0.35, ge=0.0, le=1.0, description="Desired share of land cells")
    sea_level_variance: float = Field(0.1, ge=0.0, le=0.5, description="Uniform jitter applied to sea level")

    # Geological activity
    tectonic_activity: float = Field(1.0, ge=0.1, le=3.0, description="Plate-boundary noise frequency")
    volcanic_activity: float = Field(1.0, ge=0.0, le=2.0, description="Volcanic island formation")

    # Climate modifiers
    global_temperature: float = Field(1.0, ge=0.1, le=2.0, description="Global temperature multiplier")
    rainfall_multiplier: float = Field(0.9, ge=0.0, le=2.0, description="Global precipitation multiplier")
    climate_extremeness: float = Field(1.0, ge=0.0, le=3.0, description="Amplitude of precipitation noise")

    # Special features
    island_frequency: float = Field(1.0, ge=0.0, le=3.0, description="Volcanic/isolated island frequency")
    archipelago_zones: int = Field(1, ge=0, le=8, description="Number of island chain regions")
    inland_seas: bool = Field(False, description="Large enclosed water bodies")

    def with_overrides(self, **overrides) -> "WorldShapeConfig":
        """Validated copy with some fields replaced."""
        return WorldShapeConfig(**{**self.model_dump(), **overrides})


PRESETS: Dict[str, WorldShapeConfig] = {
    "default": WorldShapeConfig(),
    "pangaea": WorldShapeConfig(
        continent_count=1,
        continent_size=2.5,
        continent_separation=1.0,
        continent_clustering=0.0,
        target_land_fraction=0.45,
        island_frequency=0.3,
    ),
    "archipelago": WorldShapeConfig(
        continent_count=2,
        continent_size=0.6,
        continent_separation=2.0,
        continent_clustering=0.2,
        target_land_fraction=0.25,
        island_frequency=2.5,
        archipelago_zones=4,
        volcanic_activity=1.8,
    ),
    "fragmented": WorldShapeConfig(
        continent_count=7,
        continent_size=0.7,
        continent_separation=1.5,
        continent_clustering=0.8,
        target_land_fraction=0.32,
        island_frequency=1.4,
    ),
    "dual_supercontinents": WorldShapeConfig(
        continent_count=2,
        continent_size=1.8,
        continent_separation=2.5,
        continent_clustering=0.1,
        target_land_fraction=0.40,
        inland_seas=True,
    ),
    "mediterranean": WorldShapeConfig(
        continent_count=4,
        continent_size=1.2,
        continent_separation=0.8,
        continent_clustering=0.9,
        target_land_fraction=0.42,
        inland_seas=True,
        tectonic_activity=1.3,
    ),
}


def get_preset(name: str) -> WorldShapeConfig:
    """
    Look up a named preset.

    Raises:
        KeyError: if no preset has that name
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown world preset '{name}'. Available: {', '.join(list_presets())}"
        ) from None


def list_presets() -> List[str]:
    return sorted(PRESETS)
