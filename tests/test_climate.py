"""Tests for climate calculations."""

import math

import pytest

from hexworld.config import WorldShapeConfig
from hexworld.core.alea_prng import AleaPRNG
from hexworld.core.climate import Climate, ClimateOptions
from hexworld.core.hex_grid import HexCoordinate, hex_range


def make_climate(tiles, radius=10, distance=None, options=None, **config):
    if distance is None:
        distance = {coord: 0 for coord in tiles}
    return Climate(
        tiles,
        sea_level=0.0,
        map_radius=radius,
        config=WorldShapeConfig(**config),
        prng=AleaPRNG("climate"),
        ocean_distance=distance,
        options=options,
    )


class TestTemperature:
    """Test temperature calculation."""

    def test_latitude(self, make_tiles):
        climate = make_climate(make_tiles({(0, 0): 0.0}), radius=10)
        assert climate.latitude(HexCoordinate(3, 0)) == 0.0
        assert climate.latitude(HexCoordinate(0, -10)) == pytest.approx(0.4)
        assert climate.latitude(HexCoordinate(0, 5)) == pytest.approx(0.2)

    def test_noiseless_values(self, make_tiles):
        tiles = make_tiles({(0, 0): 0.2, (0, 10): -0.5})
        options = ClimateOptions(temperature_noise_amplitude=0.0)
        distance = {HexCoordinate(0, 0): 1, HexCoordinate(0, 10): 0}
        make_climate(tiles, radius=10, distance=distance, options=options).calculate_temperatures()

        # Equator land: 1.0 - 0.2 * 1.5 cooling + (1 / 20) * 0.1 continental
        assert tiles[HexCoordinate(0, 0)].temperature == pytest.approx(0.705)
        # Polar ocean: 1.0 - 0.4 * 0.8
        assert tiles[HexCoordinate(0, 10)].temperature == pytest.approx(0.68)

    def test_elevation_cools(self, make_tiles):
        tiles = make_tiles({(0, 0): 0.1, (1, 0): 0.7})
        options = ClimateOptions(temperature_noise_amplitude=0.0)
        make_climate(tiles, options=options).calculate_temperatures()

        assert tiles[HexCoordinate(1, 0)].temperature < tiles[HexCoordinate(0, 0)].temperature

    def test_unreachable_ocean_capped(self, make_tiles):
        tiles = make_tiles({(0, 0): 0.1})
        options = ClimateOptions(temperature_noise_amplitude=0.0)
        distance = {HexCoordinate(0, 0): math.inf}
        make_climate(tiles, distance=distance, options=options).calculate_temperatures()

        assert tiles[HexCoordinate(0, 0)].temperature == pytest.approx(1.0 - 0.15 + 0.03)

    def test_global_multiplier_clamped(self, make_tiles):
        tiles = make_tiles({(c.q, c.r): -0.2 for c in hex_range(5)})
        make_climate(tiles, radius=5, global_temperature=2.0).calculate_temperatures()

        assert all(0.0 <= t.temperature <= 1.0 for t in tiles.values())
        assert max(t.temperature for t in tiles.values()) == 1.0


class TestPrecipitation:
    """Test precipitation calculation."""

    @pytest.mark.parametrize(
        "lat,expected",
        [(0.0, 0.8), (0.1, 0.77), (0.2, 0.34), (0.4, 0.56), (0.6, 0.34), (1.2, 0.1)],
    )
    def test_latitude_curve(self, make_tiles, lat, expected):
        climate = make_climate(make_tiles({(0, 0): 0.0}))
        assert climate.latitude_precipitation(lat) == pytest.approx(expected)

    def test_subtropical_dip(self, make_tiles):
        climate = make_climate(make_tiles({(0, 0): 0.0}))
        assert climate.latitude_precipitation(0.2) < climate.latitude_precipitation(0.0)
        assert climate.latitude_precipitation(0.2) < climate.latitude_precipitation(0.4)

    def test_noiseless_values(self, make_tiles):
        tiles = make_tiles({(0, 0): 0.5, (1, 0): 0.1})
        distance = {HexCoordinate(0, 0): 0, HexCoordinate(1, 0): 10}
        make_climate(
            tiles, distance=distance, climate_extremeness=0.0, rainfall_multiplier=1.0
        ).generate_precipitation()

        # 0.8 base + 0.2 coastal + 0.2 orographic, clamped
        assert tiles[HexCoordinate(0, 0)].precipitation == pytest.approx(1.0)
        # 0.8 base + 0.1 coastal at half the coastal distance
        assert tiles[HexCoordinate(1, 0)].precipitation == pytest.approx(0.9)

    def test_no_rain(self, make_tiles):
        tiles = make_tiles({(c.q, c.r): 0.3 for c in hex_range(4)})
        make_climate(tiles, radius=4, rainfall_multiplier=0.0).generate_precipitation()

        assert all(t.precipitation == 0.0 for t in tiles.values())

    def test_range(self, make_tiles):
        tiles = make_tiles({(c.q, c.r): 0.05 * c.q for c in hex_range(8)})
        make_climate(tiles, radius=8, climate_extremeness=3.0, rainfall_multiplier=2.0).generate_precipitation()

        assert all(0.0 <= t.precipitation <= 1.0 for t in tiles.values())


class TestRainShadows:
    """Test orographic rain shadows."""

    @pytest.fixture
    def ridge_tiles(self, make_tiles):
        elevations = {(q, 0): 0.2 for q in range(10)}
        elevations[(0, 0)] = 0.9
        tiles = make_tiles(elevations)
        for tile in tiles.values():
            tile.precipitation = 0.5
        return tiles

    def test_decaying_shadow(self, ridge_tiles):
        shadowed = make_climate(ridge_tiles).apply_rain_shadows()

        assert shadowed == 7
        assert ridge_tiles[HexCoordinate(1, 0)].precipitation == pytest.approx(0.5 * 0.7)
        assert ridge_tiles[HexCoordinate(2, 0)].precipitation == pytest.approx(0.5 * (1 - 0.21))
        assert ridge_tiles[HexCoordinate(8, 0)].precipitation == pytest.approx(0.5)
        assert ridge_tiles[HexCoordinate(0, 0)].precipitation == pytest.approx(0.5)

    def test_blocked_by_high_ground(self, ridge_tiles):
        ridge_tiles[HexCoordinate(2, 0)].elevation = 0.85
        make_climate(ridge_tiles).apply_rain_shadows()

        # (1, 0) gets 0.3 from both peaks; the strongest wins, not the sum
        assert ridge_tiles[HexCoordinate(1, 0)].precipitation == pytest.approx(0.35)
        assert ridge_tiles[HexCoordinate(2, 0)].precipitation == pytest.approx(0.5)
        assert ridge_tiles[HexCoordinate(3, 0)].precipitation == pytest.approx(0.35)

    def test_low_land_casts_nothing(self, make_tiles):
        tiles = make_tiles({(q, 0): 0.25 - 0.01 * q for q in range(5)})
        assert make_climate(tiles).apply_rain_shadows() == 0
