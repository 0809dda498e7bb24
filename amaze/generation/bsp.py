"""Binary space partitioning over the maze's wall segments.

The builder repeatedly picks the wall with the lowest grade (balance between
the two sides plus a penalty for every wall it would cut) and uses its line
as a splitter. Walls that lie on a chosen line are flagged as partitions and
never considered again; once a wall list has no unflagged wall left it
becomes a leaf.

Nodes are built bottom-up and not modified afterwards. Every node carries the
bounding box of the walls below it.
"""
from __future__ import annotations

from typing import Callable, Iterator, List, Optional

from ..logging_utils import get_logger
from .config import MAP_UNIT, PROGRESS_CADENCE, SPLITTER_SAMPLES
from .distance import Distance
from .errors import CancellationToken
from .floorplan import Floorplan
from .wall_extractor import extract_walls, mark_border_walls
from .walls import Wall

_log = get_logger("bsp")

INITIAL_BEST_GRADE = 5000


class BSPNode:
    __slots__ = ("low_x", "low_y", "high_x", "high_y")

    is_leaf = False

    def bounds(self):
        return (self.low_x, self.low_y, self.high_x, self.high_y)

    def iter_nodes(self) -> Iterator["BSPNode"]:
        """Pre-order traversal without recursion."""
        stack: List[BSPNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)

    def iter_leaves(self) -> Iterator["BSPLeaf"]:
        for node in self.iter_nodes():
            if node.is_leaf:
                yield node

    def walls(self) -> List[Wall]:
        result: List[Wall] = []
        for leaf in self.iter_leaves():
            result.extend(leaf.wall_list)
        return result

    def depth(self) -> int:
        best = 0
        stack = [(self, 1)]
        while stack:
            node, d = stack.pop()
            best = max(best, d)
            if not node.is_leaf:
                stack.append((node.left, d + 1))
                stack.append((node.right, d + 1))
        return best

    def same_structure(self, other: "BSPNode") -> bool:
        """Structural equality: node kinds, splitter lines, bounds and leaf walls."""
        a_nodes = list(self.iter_nodes())
        b_nodes = list(other.iter_nodes())
        if len(a_nodes) != len(b_nodes):
            return False
        for a, b in zip(a_nodes, b_nodes):
            if a.is_leaf != b.is_leaf or a.bounds() != b.bounds():
                return False
            if a.is_leaf:
                if a.wall_list != b.wall_list:
                    return False
            elif (a.x, a.y, a.dx, a.dy) != (b.x, b.y, b.dx, b.dy):
                return False
        return True


class BSPLeaf(BSPNode):
    __slots__ = ("wall_list",)

    is_leaf = True

    def __init__(self, walls: List[Wall]):
        if not walls:
            raise ValueError("BSP leaf needs at least one wall")
        self.wall_list = walls
        self.low_x = min(min(w.x, w.end_x) for w in walls)
        self.low_y = min(min(w.y, w.end_y) for w in walls)
        self.high_x = max(max(w.x, w.end_x) for w in walls)
        self.high_y = max(max(w.y, w.end_y) for w in walls)

    def __repr__(self) -> str:
        return f"<BSPLeaf walls={len(self.wall_list)} bounds={self.bounds()}>"


class BSPBranch(BSPNode):
    __slots__ = ("x", "y", "dx", "dy", "left", "right")

    def __init__(self, x: int, y: int, dx: int, dy: int, left: BSPNode, right: BSPNode):
        self.x = x
        self.y = y
        self.dx = dx
        self.dy = dy
        self.left = left
        self.right = right
        self.low_x = min(left.low_x, right.low_x)
        self.low_y = min(left.low_y, right.low_y)
        self.high_x = max(left.high_x, right.high_x)
        self.high_y = max(left.high_y, right.high_y)

    def __repr__(self) -> str:
        return f"<BSPBranch ({self.x},{self.y})+({self.dx},{self.dy}) bounds={self.bounds()}>"


class BSPBuilder:
    def __init__(
        self,
        distance: Distance,
        floorplan: Floorplan,
        width: int,
        height: int,
        color_seed: int,
        expected_iterations: int,
        progress: Optional[Callable[[int], None]] = None,
        cancel_token: Optional[CancellationToken] = None,
        map_unit: int = MAP_UNIT,
    ):
        self.distance = distance
        self.floorplan = floorplan
        self.width = width
        self.height = height
        self.color_seed = color_seed
        self.expected_iterations = max(1, expected_iterations)
        self.map_unit = map_unit
        self._progress = progress
        self._cancel = cancel_token
        self.iterations = 0
        self.splits = 0
        self.walls_extracted = 0

    def build(self) -> BSPNode:
        walls = extract_walls(self.floorplan, self.distance, self.color_seed, self.map_unit)
        mark_border_walls(walls, self.width, self.height, self.map_unit)
        self.walls_extracted = len(walls)
        root = self.build_from_walls(walls)
        _log.debug(
            event="bsp_built",
            walls=self.walls_extracted,
            iterations=self.iterations,
            splits=self.splits,
            depth=root.depth(),
        )
        return root

    def build_from_walls(self, walls: List[Wall]) -> BSPNode:
        if not any(not w.partition for w in walls):
            return BSPLeaf(walls)
        splitter = self._find_splitter(walls)
        splitter.partition = True
        left, right, cuts = splitter.split_walls(walls)
        self.splits += cuts
        # one-sided partition
        if not left:
            return BSPLeaf(right)
        if not right:
            return BSPLeaf(left)
        return BSPBranch(
            splitter.x,
            splitter.y,
            splitter.dx,
            splitter.dy,
            self.build_from_walls(left),
            self.build_from_walls(right),
        )

    def _find_splitter(self, walls: List[Wall]) -> Wall:
        skip = max(1, len(walls) // SPLITTER_SAMPLES)
        result = self._best_of(walls, skip)
        if result is None:
            # every sampled wall was already a partition
            result = self._best_of(walls, 1)
        return result

    def _best_of(self, walls: List[Wall], skip: int) -> Optional[Wall]:
        result = None
        best_grade = INITIAL_BEST_GRADE
        fallback = None
        for i in range(0, len(walls), skip):
            wall = walls[i]
            if wall.partition:
                continue
            if fallback is None:
                fallback = wall
            self.iterations += 1
            if self.iterations % PROGRESS_CADENCE == 0:
                self._tick()
            grade = wall.grade(walls)
            if grade < best_grade:
                best_grade = grade
                result = wall
        return result if result is not None else fallback

    def _tick(self) -> None:
        if self._cancel is not None:
            self._cancel.raise_if_cancelled()
        if self._progress is None:
            return
        percentage = self.iterations * 100 // self.expected_iterations
        if percentage > 100:
            _log.warn(event="progress_estimate_exceeded", iterations=self.iterations, expected=self.expected_iterations)
            percentage = 100
        self._progress(percentage)


__all__ = ["BSPNode", "BSPLeaf", "BSPBranch", "BSPBuilder", "INITIAL_BEST_GRADE"]
