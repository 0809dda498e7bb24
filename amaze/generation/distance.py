"""Distance field: step distance from every cell to the exit.

The exit has distance 1. Distances are computed by relaxation over open
wallboards: a chained depth-first push from every finite cell until no cell
is left at infinity, followed by a saturation sweep that keeps relaxing
until nothing improves, which leaves the exact shortest-path length.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from .directions import ORDERED, CardinalDirection
from .errors import CancellationToken, InvariantViolation
from .floorplan import Floorplan

INFINITY = 2**31 - 1

Position = Tuple[int, int]


class Distance:
    def __init__(self, width: int, height: int):
        self._set_all(width, height, [[0] * height for _ in range(width)])

    @classmethod
    def from_values(cls, values: List[List[int]]) -> "Distance":
        d = cls.__new__(cls)
        d._set_all(len(values), len(values[0]), [list(col) for col in values])
        return d

    def _set_all(self, width: int, height: int, values: List[List[int]]) -> None:
        self.width = width
        self.height = height
        self._dists = values
        self._exit: Optional[Position] = None
        self._start: Optional[Position] = None
        self._cancel: Optional[CancellationToken] = None

    def values(self) -> List[List[int]]:
        return [list(col) for col in self._dists]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Distance):
            return NotImplemented
        return self._dists == other._dists

    __hash__ = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def distance_at(self, x: int, y: int) -> int:
        return self._dists[x][y]

    def exit_position(self) -> Position:
        if self._exit is None:
            self._exit = self._position_with_min_distance()
        return self._exit

    def start_position(self) -> Position:
        if self._start is None:
            self._start = self._position_with_max_distance()
        return self._start

    def is_exit_position(self, x: int, y: int) -> bool:
        return (x, y) == self.exit_position()

    def max_distance(self) -> int:
        sx, sy = self.start_position()
        return self._dists[sx][sy]

    def min_distance(self) -> int:
        ex, ey = self.exit_position()
        return self._dists[ex][ey]

    def neighbor_closer_to_exit(self, floorplan: Floorplan, x: int, y: int) -> Optional[Position]:
        """Return the open neighbor with the smallest distance below ours, None at the exit."""
        if self.is_exit_position(x, y):
            return None
        current = self._dists[x][y]
        best = current
        result = None
        for cd in ORDERED:
            if floorplan.has_wall(x, y, cd):
                continue
            nx, ny = x + cd.dx_dy[0], y + cd.dx_dy[1]
            if not (0 <= nx < self.width and 0 <= ny < self.height):
                continue
            dn = self._dists[nx][ny]
            if dn < best:
                best = dn
                result = (nx, ny)
        if result is None:
            raise InvariantViolation(f"no neighbor closer to exit from ({x},{y})", phase="distance")
        return result

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------
    def compute_distances(self, floorplan: Floorplan, cancel_token: Optional[CancellationToken] = None) -> Position:
        """Compute the field and return the exit position (a border cell).

        `cancel_token` is checked once per relaxation sweep.
        """
        self._cancel = cancel_token
        try:
            self._compute(floorplan, self.width // 2, self.height // 2)
            exit_pos = self._position_with_max_distance_on_border()
            self._compute(floorplan, *exit_pos)
        finally:
            self._cancel = None
        self._exit = exit_pos
        self._start = None
        return exit_pos

    def _compute(self, floorplan: Floorplan, ax: int, ay: int) -> None:
        dists = self._dists
        for x in range(self.width):
            for y in range(self.height):
                dists[x][y] = INFINITY
        dists[ax][ay] = 1
        self._push_chain(floorplan, ax, ay)
        todo = self._count_infinity()
        while True:
            self._check_cancelled()
            for x in range(self.width):
                for y in range(self.height):
                    if dists[x][y] != INFINITY:
                        self._push_chain(floorplan, x, y)
            remaining = self._count_infinity()
            progress = todo - remaining
            todo = remaining
            if progress <= 0:
                break
        if todo:
            raise InvariantViolation(f"{todo} cells have no finite distance to ({ax},{ay})", phase="distance")
        self._saturate(floorplan)

    def _push_chain(self, floorplan: Floorplan, x: int, y: int) -> None:
        while True:
            step = self._relax_neighbors(floorplan, x, y)
            if step is None:
                return
            x += step.dx_dy[0]
            y += step.dx_dy[1]

    def _relax_neighbors(self, floorplan: Floorplan, x: int, y: int) -> Optional[CardinalDirection]:
        """Lower neighbor distances through open wallboards; return the last direction improved."""
        current = self._dists[x][y]
        if current == INFINITY:
            return None
        nxt = current + 1
        result = None
        for cd in ORDERED:
            if floorplan.has_wall(x, y, cd):
                continue
            nx, ny = x + cd.dx_dy[0], y + cd.dx_dy[1]
            if 0 <= nx < self.width and 0 <= ny < self.height and self._dists[nx][ny] > nxt:
                self._dists[nx][ny] = nxt
                result = cd
        return result

    def _saturate(self, floorplan: Floorplan) -> None:
        progress = True
        while progress:
            self._check_cancelled()
            progress = False
            for x in range(self.width):
                for y in range(self.height):
                    step = self._relax_neighbors(floorplan, x, y)
                    if step is not None:
                        progress = True
                        self._push_chain(floorplan, x + step.dx_dy[0], y + step.dx_dy[1])

    def _check_cancelled(self) -> None:
        if self._cancel is not None:
            self._cancel.raise_if_cancelled()

    def _count_infinity(self) -> int:
        return sum(1 for col in self._dists for v in col if v == INFINITY)

    # ------------------------------------------------------------------
    # Extremes
    # ------------------------------------------------------------------
    def _position_with_max_distance_on_border(self) -> Position:
        best = 0
        result = (0, 0)
        candidates = []
        for x in range(self.width):
            candidates.append((x, 0))
            candidates.append((x, self.height - 1))
        for y in range(self.height):
            candidates.append((0, y))
            candidates.append((self.width - 1, y))
        for x, y in candidates:
            if self._dists[x][y] > best:
                best = self._dists[x][y]
                result = (x, y)
        return result

    def _position_with_max_distance(self) -> Position:
        best = 0
        result = (0, 0)
        for x in range(self.width):
            for y in range(self.height):
                if self._dists[x][y] > best:
                    best = self._dists[x][y]
                    result = (x, y)
        return result

    def _position_with_min_distance(self) -> Position:
        best = INFINITY
        result = (0, 0)
        for x in range(self.width):
            for y in range(self.height):
                if self._dists[x][y] < best:
                    best = self._dists[x][y]
                    result = (x, y)
        return result


__all__ = ["Distance", "INFINITY"]
