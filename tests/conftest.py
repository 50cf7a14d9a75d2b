"""Shared fixtures for hexworld tests."""

import pytest

from hexworld.core.hex_grid import HexCoordinate, hex_range
from hexworld.core.tiles import GeologyType, Tile


def build_tiles(elevations, geology=GeologyType.SEDIMENTARY):
    """Tile map from a {(q, r): elevation} dict."""
    tiles = {}
    for (q, r), elevation in elevations.items():
        coord = HexCoordinate(q, r)
        tiles[coord] = Tile(coord=coord, elevation=elevation, geology=geology)
    return tiles


@pytest.fixture
def make_tiles():
    return build_tiles


@pytest.fixture
def cone_tiles():
    """Radius-4 cone: elevation falls with distance from the origin."""
    origin = HexCoordinate(0, 0)
    return build_tiles({(c.q, c.r): 0.9 - 0.2 * c.distance(origin) for c in hex_range(4)})


@pytest.fixture
def lake_fixture():
    """
    Radius-2 patch with a center cell surrounded by six higher cells.

    The outer ring is low except behind (1, 0) and (-1, 0), so those two
    drain into the center and the other four drain outward.
    """
    origin = HexCoordinate(0, 0)
    walls = {(2, 0), (2, -1), (1, 1), (-1, -1), (-2, 0), (-2, 1)}
    elevations = {}
    for coord in hex_range(2):
        distance = coord.distance(origin)
        if distance == 0:
            elevations[(coord.q, coord.r)] = 0.1
        elif distance == 1:
            elevations[(coord.q, coord.r)] = 0.4
        elif (coord.q, coord.r) in walls:
            elevations[(coord.q, coord.r)] = 0.6
        else:
            elevations[(coord.q, coord.r)] = 0.05
    return build_tiles(elevations)
