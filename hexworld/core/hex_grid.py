"""Axial-coordinate hex grid addressing."""

from typing import Iterator, List, NamedTuple, Optional

# Neighbor offsets in fixed direction order. Direction d and (d + 3) % 6
# are opposite sides of the same edge.
HEX_DIRECTIONS = ((1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1))


class HexCoordinate(NamedTuple):
    """Axial (q, r) hex coordinate with implied cube coordinate s = -q - r."""

    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    def neighbor(self, direction: int) -> "HexCoordinate":
        dq, dr = HEX_DIRECTIONS[direction % 6]
        return HexCoordinate(self.q + dq, self.r + dr)

    def neighbors(self) -> List["HexCoordinate"]:
        """The six adjacent coordinates, in direction order."""
        return [HexCoordinate(self.q + dq, self.r + dr) for dq, dr in HEX_DIRECTIONS]

    def distance(self, other: "HexCoordinate") -> int:
        return max(
            abs(self.q - other.q),
            abs(self.r - other.r),
            abs(self.s - other.s),
        )

    def direction_to(self, other: "HexCoordinate") -> Optional[int]:
        """Direction index of an adjacent coordinate, or None if not adjacent."""
        dq, dr = other.q - self.q, other.r - self.r
        try:
            return HEX_DIRECTIONS.index((dq, dr))
        except ValueError:
            return None


def opposite_direction(direction: int) -> int:
    return (direction + 3) % 6


def hex_range(radius: int) -> Iterator[HexCoordinate]:
    """
    Yield every coordinate within ``radius`` of the origin.

    Produces exactly 3 * radius**2 + 3 * radius + 1 coordinates.
    """
    for q in range(-radius, radius + 1):
        r1 = max(-radius, -q - radius)
        r2 = min(radius, -q + radius)
        for r in range(r1, r2 + 1):
            yield HexCoordinate(q, r)


def cell_count(radius: int) -> int:
    return 3 * radius * radius + 3 * radius + 1
