"""Tests for hydrology module."""

import pytest

from hexworld.core.exceptions import InvariantViolation
from hexworld.core.hex_grid import HexCoordinate, hex_range
from hexworld.core.hydrology import Hydrology, HydrologyOptions
from hexworld.core.tiles import BiomeType


@pytest.fixture
def chain_tiles(make_tiles):
    """Ten land cells stepping down along q into one ocean cell."""
    elevations = {(q, 0): 0.95 - 0.1 * q for q in range(10)}
    elevations[(10, 0)] = -0.5
    return make_tiles(elevations)


class TestFlowDirections:
    """Test downhill flow assignment."""

    def test_chain_flows_downhill(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()

        for q in range(10):
            direction, target = hydrology.flow_directions[HexCoordinate(q, 0)]
            assert direction == 0
            assert target == HexCoordinate(q + 1, 0)

    def test_ocean_has_no_direction(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()
        assert HexCoordinate(10, 0) not in hydrology.flow_directions

    def test_basin_has_no_direction(self, lake_fixture):
        hydrology = Hydrology(lake_fixture, sea_level=0.0)
        hydrology.calculate_flow_directions()

        assert HexCoordinate(0, 0) not in hydrology.flow_directions
        assert hydrology.flow_directions[HexCoordinate(1, 0)] == (3, HexCoordinate(0, 0))
        assert hydrology.flow_directions[HexCoordinate(-1, 0)] == (0, HexCoordinate(0, 0))

    def test_targets_strictly_lower(self, cone_tiles):
        hydrology = Hydrology(cone_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()

        for source, (_, target) in hydrology.flow_directions.items():
            assert cone_tiles[target].elevation < cone_tiles[source].elevation

    def test_flow_paths_terminate(self, cone_tiles):
        """Following flow directions from any cell ends within N steps."""
        hydrology = Hydrology(cone_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()

        for coord in cone_tiles:
            path = hydrology.trace_flow_path(coord)
            assert len(path) <= len(cone_tiles)
            assert path[-1] not in hydrology.flow_directions


class TestFlowAccumulation:
    """Test flow accumulation."""

    def test_chain_accumulation(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()
        hydrology.calculate_flow_accumulation()

        for q in range(10):
            assert hydrology.flow_accumulation[HexCoordinate(q, 0)] == pytest.approx(q + 1)
        assert hydrology.flow_accumulation[HexCoordinate(10, 0)] == pytest.approx(10)

    def test_conservation_with_precipitation(self, chain_tiles):
        for tile in chain_tiles.values():
            tile.precipitation = 0.4

        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()
        hydrology.calculate_flow_accumulation()

        assert hydrology.precipitation_bonus_total == pytest.approx(10 * 0.2)
        assert hydrology.terminal_flow() == pytest.approx(10 + hydrology.precipitation_bonus_total)

    def test_conservation_on_cone(self, cone_tiles):
        for tile in cone_tiles.values():
            tile.precipitation = 0.3

        hydrology = Hydrology(cone_tiles, sea_level=0.0)
        hydrology.calculate_flow_directions()
        hydrology.calculate_flow_accumulation()

        land = sum(1 for t in cone_tiles.values() if t.elevation > 0.0)
        assert hydrology.terminal_flow() == pytest.approx(land + hydrology.precipitation_bonus_total)

    def test_uphill_link_rejected(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.flow_directions = {HexCoordinate(5, 0): (3, HexCoordinate(4, 0))}

        with pytest.raises(InvariantViolation):
            hydrology.calculate_flow_accumulation()

    def test_missing_target_rejected(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.flow_directions = {HexCoordinate(5, 0): (1, HexCoordinate(6, -1))}

        with pytest.raises(InvariantViolation):
            hydrology.calculate_flow_accumulation()


class TestRivers:
    """Test river promotion, flow rates and edges."""

    def test_primary_rivers(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        rivers = hydrology.run_primary_simulation()

        # Accumulation q + 1 against a threshold of 3.2 above 0.3, else 4.0
        assert rivers == 7
        for q in range(10):
            assert chain_tiles[HexCoordinate(q, 0)].has_river == (q >= 3)
        assert not chain_tiles[HexCoordinate(10, 0)].has_river

    def test_flow_rates_normalized(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.run_primary_simulation()

        assert chain_tiles[HexCoordinate(9, 0)].river_flow == pytest.approx(1.0)
        assert chain_tiles[HexCoordinate(3, 0)].river_flow == pytest.approx(0.4)

    def test_min_flow_floor(self, chain_tiles):
        options = HydrologyOptions(base_river_threshold=0.5)
        hydrology = Hydrology(chain_tiles, sea_level=0.0, options=options)
        hydrology.run_primary_simulation()

        assert chain_tiles[HexCoordinate(0, 0)].has_river
        assert chain_tiles[HexCoordinate(0, 0)].river_flow == pytest.approx(0.1)

    def test_river_edges(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.run_primary_simulation()

        first = chain_tiles[HexCoordinate(3, 0)]
        assert first.river_edges[0]
        assert first.river_edges[3]

        last = chain_tiles[HexCoordinate(9, 0)]
        assert last.river_edges[0] and last.river_edges[3]

        assert not any(chain_tiles[HexCoordinate(2, 0)].river_edges)
        assert not any(chain_tiles[HexCoordinate(10, 0)].river_edges)

    def test_river_invariants(self, cone_tiles):
        for tile in cone_tiles.values():
            tile.precipitation = 0.8

        options = HydrologyOptions(base_river_threshold=2.0)
        hydrology = Hydrology(cone_tiles, sea_level=0.0, options=options)
        hydrology.run_primary_simulation()

        assert any(t.has_river for t in cone_tiles.values())
        for tile in cone_tiles.values():
            if tile.has_river:
                assert 0.0 < tile.river_flow <= 1.0
            else:
                assert tile.river_flow == 0.0
                assert not any(tile.river_edges)

    def test_no_rivers_is_not_an_error(self, make_tiles):
        tiles = make_tiles({(c.q, c.r): 0.5 for c in hex_range(2)})
        hydrology = Hydrology(tiles, sea_level=0.0)

        assert hydrology.run_primary_simulation() == 0
        assert hydrology.flow_directions == {}


class TestRiverRefinement:
    """Test biome-aware river refinement."""

    def test_rainforest_adds_rivers(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.run_primary_simulation()
        for tile in chain_tiles.values():
            tile.biome = BiomeType.TROPICAL_RAINFOREST
        chain_tiles[HexCoordinate(10, 0)].biome = BiomeType.OCEAN

        added = hydrology.refine_river_network()

        assert added == 2
        assert chain_tiles[HexCoordinate(1, 0)].has_river
        assert not chain_tiles[HexCoordinate(0, 0)].has_river
        assert hydrology.refined_river_tiles == 9
        assert chain_tiles[HexCoordinate(1, 0)].river_edges[0]

    def test_desert_adds_nothing(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.run_primary_simulation()
        for tile in chain_tiles.values():
            tile.biome = BiomeType.HOT_DESERT

        assert hydrology.refine_river_network() == 0

    def test_requires_biomes(self, chain_tiles):
        hydrology = Hydrology(chain_tiles, sea_level=0.0)
        hydrology.run_primary_simulation()

        with pytest.raises(InvariantViolation):
            hydrology.refine_river_network()


class TestLakes:
    """Test lake candidate detection and placement."""

    def test_fixture_is_candidate(self, lake_fixture):
        hydrology = Hydrology(lake_fixture, sea_level=0.0)
        hydrology.calculate_flow_directions()

        candidate = hydrology.evaluate_lake_candidate(HexCoordinate(0, 0))

        assert candidate is not None
        assert candidate.inflows == 2
        assert candidate.depth == pytest.approx(0.3)
        assert candidate.score == pytest.approx(0.5)

    def test_single_inflow_rejected(self, lake_fixture):
        lake_fixture[HexCoordinate(-2, 0)].elevation = 0.05
        hydrology = Hydrology(lake_fixture, sea_level=0.0)
        hydrology.calculate_flow_directions()

        assert hydrology.evaluate_lake_candidate(HexCoordinate(0, 0)) is None

    def test_too_high_rejected(self, lake_fixture):
        hydrology = Hydrology(lake_fixture, sea_level=-0.25)
        hydrology.calculate_flow_directions()

        assert hydrology.evaluate_lake_candidate(HexCoordinate(0, 0)) is None

    def test_place_lakes(self, lake_fixture):
        hydrology = Hydrology(lake_fixture, sea_level=0.0)
        hydrology.calculate_flow_directions()

        lakes = hydrology.place_lakes()

        assert lakes == [HexCoordinate(0, 0)]
        assert lake_fixture[HexCoordinate(0, 0)].biome == BiomeType.LAKE

    def test_lake_cap(self, lake_fixture):
        hydrology = Hydrology(lake_fixture, sea_level=0.0, options=HydrologyOptions(max_lakes=0))
        hydrology.calculate_flow_directions()

        assert hydrology.place_lakes() == []

    def test_discard_working_state(self, lake_fixture):
        hydrology = Hydrology(lake_fixture, sea_level=0.0)
        hydrology.run_primary_simulation()
        hydrology.place_lakes()
        hydrology.discard_working_state()

        assert hydrology.flow_directions == {}
        assert hydrology.flow_accumulation == {}
