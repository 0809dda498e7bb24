"""The delivered maze aggregate.

A Maze bundles the carved floorplan, its distance field and the BSP tree over
its walls. It is assembled once at the end of a generation run (or decoded
from a stored payload) and only read afterwards, so renderer-style consumers
on other threads can share it without locking.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .bsp import BSPNode
from .directions import CardinalDirection
from .distance import Distance
from .floorplan import Floorplan

Position = Tuple[int, int]


class Maze:
    def __init__(
        self,
        floorplan: Floorplan,
        distance: Distance,
        bsp_root: BSPNode,
        start: Optional[Position] = None,
        metrics: Optional[Dict[str, Any]] = None,
    ):
        if (floorplan.width, floorplan.height) != (distance.width, distance.height):
            raise ValueError("floorplan and distance field dimensions differ")
        self._floorplan = floorplan.copy()
        self._distance = distance
        self._bsp_root = bsp_root
        self._start = start if start is not None else distance.start_position()
        self.metrics: Dict[str, Any] = dict(metrics or {})

    def __repr__(self) -> str:
        return f"<Maze {self.width}x{self.height} start={self._start} exit={self.exit_position()}>"

    @property
    def width(self) -> int:
        return self._floorplan.width

    @property
    def height(self) -> int:
        return self._floorplan.height

    @property
    def floorplan(self) -> Floorplan:
        """A copy; the aggregate's own floorplan is never handed out."""
        return self._floorplan.copy()

    @property
    def distance(self) -> Distance:
        return Distance.from_values(self._distance.values())

    def bsp_root(self) -> BSPNode:
        return self._bsp_root

    # ------------------------------------------------------------------
    # Cell queries
    # ------------------------------------------------------------------
    def is_valid_position(self, x: int, y: int) -> bool:
        return self._floorplan.is_valid_position(x, y)

    def has_wall(self, x: int, y: int, direction: CardinalDirection) -> bool:
        return self._floorplan.has_wall(x, y, direction)

    def is_in_room(self, x: int, y: int) -> bool:
        return self._floorplan.is_in_room(x, y)

    def value_of_cell(self, x: int, y: int) -> int:
        return self._floorplan.value_of_cell(x, y)

    def is_facing_dead_end(self, x: int, y: int, direction: CardinalDirection) -> bool:
        """Walls ahead and on both sides when looking in `direction` from (x,y)."""
        if not self.is_valid_position(x, y):
            return False
        return (
            self.has_wall(x, y, direction)
            and self.has_wall(x, y, direction.opposite().rotate_clockwise())
            and self.has_wall(x, y, direction.rotate_clockwise())
        )

    # ------------------------------------------------------------------
    # Distance queries
    # ------------------------------------------------------------------
    def distance_to_exit(self, x: int, y: int) -> int:
        return self._distance.distance_at(x, y)

    def neighbor_closer_to_exit(self, x: int, y: int) -> Optional[Position]:
        return self._distance.neighbor_closer_to_exit(self._floorplan, x, y)

    def start_position(self) -> Position:
        return self._start

    def exit_position(self) -> Position:
        return self._distance.exit_position()

    def is_exit_position(self, x: int, y: int) -> bool:
        return self._distance.is_exit_position(x, y)

    def max_distance(self) -> int:
        return self._distance.max_distance()

    def percentage_for_distance_to_exit(self, x: int, y: int) -> float:
        return self._distance.distance_at(x, y) / self._distance.max_distance()

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def same_content(self, other: "Maze") -> bool:
        return (
            self._floorplan == other._floorplan
            and self._distance == other._distance
            and self._start == other._start
            and self._bsp_root.same_structure(other._bsp_root)
        )

    def summary(self) -> Dict[str, Any]:
        root = self._bsp_root
        return {
            "width": self.width,
            "height": self.height,
            "start": list(self._start),
            "exit": list(self.exit_position()),
            "max_distance": self.max_distance(),
            "walls": len(root.walls()),
            "leaves": sum(1 for _ in root.iter_leaves()),
            "bsp_depth": root.depth(),
        }


__all__ = ["Maze"]
