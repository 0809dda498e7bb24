"""Floorplan: the mutable cell grid a maze is carved into.

Each cell is a single int bitset:

    TOP/BOTTOM/LEFT/RIGHT   wallboard present on that side
    border bits (<< 5)      wallboard is load bearing and must stay
    VISITED                 set while a cell is still unvisited by the generator
    IN_ROOM                 cell belongs to a room

The outer perimeter is always border protected. Rooms receive a border
protected enclosure except for a handful of door candidates whose border
sticker is peeled off so the generator may open them.
"""
from __future__ import annotations

import random
from typing import Iterator, List, Tuple

from .config import DOOR_CANDIDATES
from .directions import CardinalDirection, Wallboard
from .errors import WallboardError

CW_TOP = 1
CW_BOT = 2
CW_LEFT = 4
CW_RIGHT = 8
CW_VISITED = 16
CW_ALL = CW_TOP | CW_BOT | CW_LEFT | CW_RIGHT
CW_BOUND_SHIFT = 5
CW_IN_ROOM = 512

_BITS = {
    CardinalDirection.NORTH: CW_TOP,
    CardinalDirection.EAST: CW_RIGHT,
    CardinalDirection.SOUTH: CW_BOT,
    CardinalDirection.WEST: CW_LEFT,
}


def wall_bit(direction: CardinalDirection) -> int:
    return _BITS[direction]


def border_bit(direction: CardinalDirection) -> int:
    return _BITS[direction] << CW_BOUND_SHIFT


class Floorplan:
    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"floorplan dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        # column-major: cells[x][y]
        self._cells: List[List[int]] = [[0 for _ in range(height)] for _ in range(width)]
        self.torn_down = 0

    @classmethod
    def from_cells(cls, cells: List[List[int]]) -> "Floorplan":
        fp = cls(len(cells), len(cells[0]))
        fp._cells = [list(col) for col in cells]
        return fp

    def copy(self) -> "Floorplan":
        return Floorplan.from_cells(self._cells)

    def cells(self) -> List[List[int]]:
        return [list(col) for col in self._cells]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Floorplan):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self._cells == other._cells

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"<Floorplan {self.width}x{self.height}>"

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        """All wallboards up, every cell unvisited, perimeter marked as border."""
        for x in range(self.width):
            for y in range(self.height):
                self._cells[x][y] = CW_VISITED | CW_ALL
        for x in range(self.width):
            self._set(x, 0, border_bit(CardinalDirection.NORTH))
            self._set(x, self.height - 1, border_bit(CardinalDirection.SOUTH))
        for y in range(self.height):
            self._set(0, y, border_bit(CardinalDirection.WEST))
            self._set(self.width - 1, y, border_bit(CardinalDirection.EAST))
        self.torn_down = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def value_of_cell(self, x: int, y: int) -> int:
        return self._cells[x][y]

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def has_wall(self, x: int, y: int, direction: CardinalDirection) -> bool:
        return bool(self._cells[x][y] & _BITS[direction])

    def has_no_wall(self, x: int, y: int, direction: CardinalDirection) -> bool:
        return not self._cells[x][y] & _BITS[direction]

    def has_border(self, x: int, y: int, direction: CardinalDirection) -> bool:
        return bool(self._cells[x][y] & border_bit(direction))

    def is_part_of_border(self, wallboard: Wallboard) -> bool:
        return self.has_border(wallboard.x, wallboard.y, wallboard.direction)

    def is_unvisited(self, x: int, y: int) -> bool:
        return bool(self._cells[x][y] & CW_VISITED)

    def is_visited(self, x: int, y: int) -> bool:
        return not self._cells[x][y] & CW_VISITED

    def is_in_room(self, x: int, y: int) -> bool:
        return bool(self._cells[x][y] & CW_IN_ROOM)

    def can_tear_down(self, wallboard: Wallboard) -> bool:
        """True if the edge is removable and leads into a cell not yet visited."""
        if self.is_part_of_border(wallboard):
            return False
        nx, ny = wallboard.neighbor_x, wallboard.neighbor_y
        if not self.is_valid_position(nx, ny):
            return False
        return self.is_unvisited(nx, ny)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set_cell_as_visited(self, x: int, y: int) -> None:
        self._clear(x, y, CW_VISITED)

    def delete_wallboard(self, wallboard: Wallboard) -> None:
        """Remove the wallboard from both adjacent cells."""
        if self.is_part_of_border(wallboard):
            raise WallboardError(f"wallboard {wallboard} is border protected")
        m = wallboard.mirror()
        if not self.is_valid_position(m.x, m.y):
            raise WallboardError(f"wallboard {wallboard} lies on the outer perimeter")
        present = self.has_wall(wallboard.x, wallboard.y, wallboard.direction)
        self._clear(wallboard.x, wallboard.y, _BITS[wallboard.direction])
        self._clear(m.x, m.y, _BITS[m.direction])
        if present:
            self.torn_down += 1

    def set_exit_position(self, x: int, y: int) -> None:
        """Open the perimeter wallboard of border cell (x,y)."""
        if x == 0:
            bit = CW_LEFT
        elif x == self.width - 1:
            bit = CW_RIGHT
        elif y == 0:
            bit = CW_TOP
        elif y == self.height - 1:
            bit = CW_BOT
        else:
            raise WallboardError(f"exit position ({x},{y}) is not on the border")
        self._clear(x, y, bit)

    def is_exit_position(self, x: int, y: int) -> bool:
        sides = []
        if x == 0:
            sides.append(CW_LEFT)
        if x == self.width - 1:
            sides.append(CW_RIGHT)
        if y == 0:
            sides.append(CW_TOP)
        if y == self.height - 1:
            sides.append(CW_BOT)
        return any(not self._cells[x][y] & bit for bit in sides)

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------
    def area_overlaps_with_room(self, rx: int, ry: int, rxl: int, ryl: int) -> bool:
        """Check the area plus a one cell buffer; touching the outer border counts as overlap."""
        start_x, start_y = rx - 1, ry - 1
        stop_x, stop_y = rxl + 1, ryl + 1
        if start_x < 0 or start_y < 0 or stop_x >= self.width or stop_y >= self.height:
            return True
        for x in range(start_x, stop_x + 1):
            for y in range(start_y, stop_y + 1):
                if self.is_in_room(x, y):
                    return True
        return False

    def mark_area_as_room(self, rw: int, rh: int, rx: int, ry: int, rxl: int, ryl: int, rng: random.Random) -> List[Wallboard]:
        """Clear the area, enclose it with border walls and open door candidates.

        Returns the door candidate wallboards (duplicates collapsed), seen from
        inside the room.
        """
        for x in range(rx, rxl + 1):
            for y in range(ry, ryl + 1):
                self._clear(x, y, CW_ALL)
                self._set(x, y, CW_IN_ROOM)
        self._enclose_area(rx, ry, rxl, ryl)
        boards = (rw + rh) * 2
        doors: List[Wallboard] = []
        for _ in range(DOOR_CANDIDATES):
            door = rng.randint(0, boards - 1)
            if door < rw * 2:
                y = 0 if door < rw else rh - 1
                direction = CardinalDirection.NORTH if door < rw else CardinalDirection.SOUTH
                x = door % rw
            else:
                door -= rw * 2
                x = 0 if door < rh else rw - 1
                direction = CardinalDirection.WEST if door < rh else CardinalDirection.EAST
                y = door % rh
            wb = Wallboard(x + rx, y + ry, direction)
            self._delete_border(wb)
            if wb not in doors:
                doors.append(wb)
        return doors

    def _enclose_area(self, rx: int, ry: int, rxl: int, ryl: int) -> None:
        for x in range(rx, rxl + 1):
            self._add_border_wallboard(Wallboard(x, ry, CardinalDirection.NORTH))
            self._add_border_wallboard(Wallboard(x, ryl, CardinalDirection.SOUTH))
        for y in range(ry, ryl + 1):
            self._add_border_wallboard(Wallboard(rx, y, CardinalDirection.WEST))
            self._add_border_wallboard(Wallboard(rxl, y, CardinalDirection.EAST))

    def _add_border_wallboard(self, wb: Wallboard) -> None:
        for side in (wb, wb.mirror()):
            bit = _BITS[side.direction]
            self._set(side.x, side.y, bit | (bit << CW_BOUND_SHIFT))

    def _delete_border(self, wb: Wallboard) -> None:
        for side in (wb, wb.mirror()):
            self._clear(side.x, side.y, border_bit(side.direction))

    # ------------------------------------------------------------------
    # Wallboard sequences
    # ------------------------------------------------------------------
    def iter_sequences(self, x: int, y: int, direction: CardinalDirection) -> Iterator[Tuple[int, int]]:
        """Yield (begin, end) runs of contiguous wallboards facing `direction`.

        North/South runs scan row `y` starting at column `x`; East/West runs
        scan column `x` starting at row `y`. `end` is exclusive. A run stops
        early where a crossing wall (West for rows, North for columns) meets
        the next cell. Each call returns a fresh iterator.
        """
        if direction in (CardinalDirection.NORTH, CardinalDirection.SOUTH):
            return self._horizontal_runs(x, y, direction)
        return self._vertical_runs(x, y, direction)

    def _horizontal_runs(self, x: int, y: int, direction: CardinalDirection) -> Iterator[Tuple[int, int]]:
        while True:
            while x < self.width and self.has_no_wall(x, y, direction):
                x += 1
            if x == self.width:
                return
            begin = x
            while self.has_wall(x, y, direction):
                x += 1
                if x == self.width or self.has_wall(x, y, CardinalDirection.WEST):
                    break
            yield begin, x

    def _vertical_runs(self, x: int, y: int, direction: CardinalDirection) -> Iterator[Tuple[int, int]]:
        while True:
            while y < self.height and self.has_no_wall(x, y, direction):
                y += 1
            if y == self.height:
                return
            begin = y
            while self.has_wall(x, y, direction):
                y += 1
                if y == self.height or self.has_wall(x, y, CardinalDirection.NORTH):
                    break
            yield begin, y

    # ------------------------------------------------------------------
    # Bit helpers
    # ------------------------------------------------------------------
    def _set(self, x: int, y: int, mask: int) -> None:
        self._cells[x][y] |= mask

    def _clear(self, x: int, y: int, mask: int) -> None:
        self._cells[x][y] &= ~mask


__all__ = [
    "Floorplan",
    "CW_TOP",
    "CW_BOT",
    "CW_LEFT",
    "CW_RIGHT",
    "CW_VISITED",
    "CW_ALL",
    "CW_BOUND_SHIFT",
    "CW_IN_ROOM",
    "wall_bit",
    "border_bit",
]
