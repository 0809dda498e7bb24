"""Wall segments: straight runs of wallboards in map coordinates.

A wall starts at (x, y) and extends by (dx, dy); exactly one extension is
nonzero. Walls are the polygons the BSP builder partitions: each candidate
splitter classifies the others by the sign of a perpendicular dot product.
"""
from __future__ import annotations

from typing import List, Tuple

from .config import SPLIT_PENALTY

RGB_DEF = 20


def wall_color(distance: int, color_seed: int, dx: int) -> int:
    """Packed 0xRRGGBB wall color, banded by distance and the per-maze seed."""
    d = distance // 4
    value = (((d & 7) + 2 + (1 if dx != 0 else 0)) * 70) // 8 + 80
    band = ((d >> 3) ^ color_seed) % 6
    r, g, b = {
        0: (value, RGB_DEF, RGB_DEF),
        1: (RGB_DEF, value, RGB_DEF),
        2: (RGB_DEF, RGB_DEF, value),
        3: (value, value, RGB_DEF),
        4: (RGB_DEF, value, value),
        5: (value, RGB_DEF, value),
    }[band]
    return (r << 16) | (g << 8) | b


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


class Wall:
    __slots__ = ("x", "y", "dx", "dy", "distance", "color", "partition", "seen")

    def __init__(self, x: int, y: int, dx: int, dy: int, distance: int, color_seed: int = 0, color: int | None = None):
        if (dx == 0) == (dy == 0):
            raise ValueError(f"wall must extend in exactly one direction, got ({dx},{dy})")
        if x < 0 or y < 0 or x + dx < 0 or y + dy < 0:
            raise ValueError(f"wall ({x},{y})+({dx},{dy}) leaves the map")
        self.x = x
        self.y = y
        self.dx = dx
        self.dy = dy
        self.distance = distance
        self.color = wall_color(distance, color_seed, dx) if color is None else color
        self.partition = False
        self.seen = False

    def __repr__(self) -> str:
        flag = " P" if self.partition else ""
        return f"<Wall ({self.x},{self.y})+({self.dx},{self.dy}) d={self.distance}{flag}>"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Wall):
            return NotImplemented
        return self.key() == other.key()

    __hash__ = None  # flags are mutable

    def key(self) -> Tuple[int, int, int, int, int, int, bool, bool]:
        return (self.x, self.y, self.dx, self.dy, self.distance, self.color, self.partition, self.seen)

    @property
    def end_x(self) -> int:
        return self.x + self.dx

    @property
    def end_y(self) -> int:
        return self.y + self.dy

    @property
    def length(self) -> int:
        return abs(self.dx + self.dy)

    def _dir(self) -> int:
        if self.dx != 0:
            return 1 if self.dx < 0 else -1
        return 2 if self.dy < 0 else -2

    def has_same_direction(self, other: "Wall") -> bool:
        return self._dir() == other._dir()

    def has_opposite_direction(self, other: "Wall") -> bool:
        return self._dir() == -other._dir()

    def update_partition_if_border_case(self, width: int, height: int) -> None:
        """Walls on the outer boundary can never usefully split anything."""
        if ((self.x == 0 or self.x == width) and self.dx == 0) or ((self.y == 0 or self.y == height) and self.dy == 0):
            self.partition = True

    # ------------------------------------------------------------------
    # Partitioning
    # ------------------------------------------------------------------
    def _dot(self, px: int, py: int) -> int:
        return (px - self.x) * self.dy - (py - self.y) * self.dx

    def _dots(self, wall: "Wall") -> Tuple[int, int]:
        return self._dot(wall.x, wall.y), self._dot(wall.end_x, wall.end_y)

    def grade(self, walls: List["Wall"]) -> int:
        """|left - right| + 3 * splits over a strided sample of `walls`."""
        inc = len(walls) // 50 if len(walls) >= 100 else 1
        lcount = rcount = splits = 0
        for i in range(0, len(walls), inc):
            wall = walls[i]
            d_start, d_end = self._dots(wall)
            if _sign(d_start) != _sign(d_end):
                if d_start == 0:
                    d_start = d_end
                elif d_end != 0:
                    splits += 1
                    continue
            if d_start > 0 or (d_start == 0 and self.has_same_direction(wall)):
                rcount += 1
            elif d_start < 0 or (d_start == 0 and self.has_opposite_direction(wall)):
                lcount += 1
        return abs(lcount - rcount) + splits * SPLIT_PENALTY

    def split_walls(self, walls: List["Wall"]) -> Tuple[List["Wall"], List["Wall"], int]:
        """Distribute `walls` to the left and right of this splitter.

        Walls on the splitter line join the side matching their direction and
        are flagged as partitions. Straddling walls are cut at the line.
        Returns (left, right, number_of_cuts).
        """
        left: List[Wall] = []
        right: List[Wall] = []
        cuts = 0
        for wall in walls:
            d_start, d_end = self._dots(wall)
            if _sign(d_start) != _sign(d_end):
                if d_start == 0:
                    d_start = d_end
                elif d_end != 0:
                    first, second = wall.cut_at(self)
                    cuts += 1
                    if d_start > 0:
                        right.append(first)
                        left.append(second)
                    else:
                        right.append(second)
                        left.append(first)
                    continue
            if d_start > 0 or (d_start == 0 and self.has_same_direction(wall)):
                right.append(wall)
            else:
                left.append(wall)
            if d_start == 0:
                wall.partition = True
        return left, right, cuts

    def cut_at(self, splitter: "Wall") -> Tuple["Wall", "Wall"]:
        """Cut this wall where it crosses the splitter's line."""
        spx, spy = self.x, self.y
        if splitter.dx == 0:
            spx = splitter.x
        else:
            spy = splitter.y
        first = Wall(self.x, self.y, spx - self.x, spy - self.y, self.distance, color=self.color)
        second = Wall(spx, spy, self.end_x - spx, self.end_y - spy, self.distance, color=self.color)
        first.partition = second.partition = self.partition
        return first, second


__all__ = ["Wall", "wall_color"]
