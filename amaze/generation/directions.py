"""Cardinal directions and the wallboard value type.

Screen orientation: (0,0) is the top-left cell, x grows to the east (right)
and y grows to the south (down).
"""
from __future__ import annotations

import random
from enum import Enum
from typing import NamedTuple, Tuple


class CardinalDirection(Enum):
    NORTH = "North"
    EAST = "East"
    SOUTH = "South"
    WEST = "West"

    @property
    def dx_dy(self) -> Tuple[int, int]:
        return _DELTAS[self]

    def rotate_clockwise(self) -> "CardinalDirection":
        return _CLOCKWISE[self]

    def opposite(self) -> "CardinalDirection":
        return _OPPOSITE[self]

    @staticmethod
    def random(rng: random.Random) -> "CardinalDirection":
        return ORDERED[rng.randint(0, 3)]


ORDERED = (
    CardinalDirection.NORTH,
    CardinalDirection.EAST,
    CardinalDirection.SOUTH,
    CardinalDirection.WEST,
)

_DELTAS = {
    CardinalDirection.NORTH: (0, -1),
    CardinalDirection.EAST: (1, 0),
    CardinalDirection.SOUTH: (0, 1),
    CardinalDirection.WEST: (-1, 0),
}
_CLOCKWISE = {ORDERED[i]: ORDERED[(i + 1) % 4] for i in range(4)}
_OPPOSITE = {ORDERED[i]: ORDERED[(i + 2) % 4] for i in range(4)}


class Wallboard(NamedTuple):
    """One unit edge of one cell, named by the cell and the side it sits on."""

    x: int
    y: int
    direction: CardinalDirection

    @property
    def neighbor_x(self) -> int:
        return self.x + self.direction.dx_dy[0]

    @property
    def neighbor_y(self) -> int:
        return self.y + self.direction.dx_dy[1]

    def mirror(self) -> "Wallboard":
        """Same physical edge seen from the neighboring cell."""
        return Wallboard(self.neighbor_x, self.neighbor_y, self.direction.opposite())

    def edge_key(self) -> Tuple[int, int, int, int]:
        """Direction independent key for the physical edge."""
        a = (self.x, self.y)
        b = (self.neighbor_x, self.neighbor_y)
        return (*min(a, b), *max(a, b))


__all__ = ["CardinalDirection", "ORDERED", "Wallboard"]
