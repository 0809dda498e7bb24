"""Maze carving strategies.

Every carver implements ``carve(floorplan, rng)`` and must leave every cell
of the floorplan reachable. Carvers only tear down wallboards that are not
border protected; rooms (already cleared inside) are entered through their
door candidates. With no rooms each carver produces a spanning tree.
"""
from __future__ import annotations

import random
from typing import Dict, List, Protocol, Tuple

from ..logging_utils import get_logger
from .directions import ORDERED, CardinalDirection, Wallboard
from .errors import InvariantViolation
from .floorplan import Floorplan
from .order import Builder

_log = get_logger("carvers")


class MazeCarver(Protocol):
    name: str

    def carve(self, floorplan: Floorplan, rng: random.Random) -> None: ...


class BacktrackCarver:
    """Randomized depth-first walk with an arrival-direction table for backtracking."""

    name = "dfs"

    def carve(self, floorplan: Floorplan, rng: random.Random) -> None:
        width, height = floorplan.width, floorplan.height
        x = rng.randint(0, width - 1)
        y = 0
        first = (x, y)
        arrival: List[List[CardinalDirection | None]] = [[None] * height for _ in range(width)]
        cd = CardinalDirection.EAST
        orig = cd
        floorplan.set_cell_as_visited(x, y)
        while True:
            wb = Wallboard(x, y, cd)
            if not floorplan.can_tear_down(wb):
                cd = cd.rotate_clockwise()
                if cd is not orig:
                    continue
                if (x, y) == first:
                    break
                dx, dy = arrival[x][y].dx_dy
                x -= dx
                y -= dy
                cd = CardinalDirection.random(rng)
                orig = cd
            else:
                floorplan.delete_wallboard(wb)
                dx, dy = cd.dx_dy
                x += dx
                y += dy
                floorplan.set_cell_as_visited(x, y)
                arrival[x][y] = cd
                cd = CardinalDirection.random(rng)
                orig = cd


class PrimCarver:
    """Randomized Prim: grow a tree from a frontier of candidate wallboards."""

    name = "prim"

    def carve(self, floorplan: Floorplan, rng: random.Random) -> None:
        width, height = floorplan.width, floorplan.height
        x = rng.randint(0, width - 1)
        y = rng.randint(0, height - 1)
        while floorplan.is_in_room(x, y):
            x = rng.randint(0, width - 1)
            y = rng.randint(0, height - 1)
        candidates: List[Wallboard] = []
        queued = set()
        self._add_cell(floorplan, x, y, candidates, queued)
        while candidates:
            wb = candidates.pop(rng.randint(0, len(candidates) - 1))
            if floorplan.can_tear_down(wb):
                floorplan.delete_wallboard(wb)
                self._add_cell(floorplan, wb.neighbor_x, wb.neighbor_y, candidates, queued)

    @staticmethod
    def _add_cell(floorplan: Floorplan, x: int, y: int, candidates: List[Wallboard], queued: set) -> None:
        floorplan.set_cell_as_visited(x, y)
        for cd in ORDERED:
            wb = Wallboard(x, y, cd)
            key = wb.edge_key()
            if key in queued:
                continue
            if floorplan.can_tear_down(wb):
                queued.add(key)
                candidates.append(wb)


class BoruvkaCarver:
    """Boruvka-style merge of clusters along their cheapest outgoing edge.

    Weights are drawn once per physical edge from a 62 bit space and cached,
    so both sides of an edge agree. Equal weights are resolved by discovery
    order instead of redrawing.
    """

    name = "boruvka"
    WEIGHT_BITS = 62

    def carve(self, floorplan: Floorplan, rng: random.Random) -> None:
        width, height = floorplan.width, floorplan.height
        parent = list(range(width * height))
        weights: Dict[Tuple[int, int, int, int], int] = {}

        def find(i: int) -> int:
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        def union(a: int, b: int) -> bool:
            ra, rb = find(a), find(b)
            if ra == rb:
                return False
            parent[rb] = ra
            return True

        def weight(wb: Wallboard) -> int:
            key = wb.edge_key()
            w = weights.get(key)
            if w is None:
                w = rng.getrandbits(self.WEIGHT_BITS)
                weights[key] = w
            return w

        clusters = width * height
        # Cells already joined without walls (room interiors) start merged
        for x in range(width):
            for y in range(height):
                for cd in (CardinalDirection.EAST, CardinalDirection.SOUTH):
                    nx, ny = x + cd.dx_dy[0], y + cd.dx_dy[1]
                    if nx < width and ny < height and floorplan.has_no_wall(x, y, cd):
                        if union(x * height + y, nx * height + ny):
                            clusters -= 1

        rounds = 0
        while clusters > 1:
            rounds += 1
            cheapest: Dict[int, Tuple[int, Wallboard]] = {}
            for x in range(width):
                for y in range(height):
                    root = find(x * height + y)
                    for cd in ORDERED:
                        wb = Wallboard(x, y, cd)
                        if not self._tearable(floorplan, wb):
                            continue
                        other = find(wb.neighbor_x * height + wb.neighbor_y)
                        if other == root:
                            continue
                        w = weight(wb)
                        best = cheapest.get(root)
                        if best is None or w < best[0]:
                            cheapest[root] = (w, wb)
            if not cheapest:
                raise InvariantViolation(f"{clusters} clusters left without outgoing edges", phase="carve")
            for _w, wb in cheapest.values():
                a = wb.x * height + wb.y
                b = wb.neighbor_x * height + wb.neighbor_y
                if union(a, b):
                    floorplan.delete_wallboard(wb)
                    clusters -= 1
        for x in range(width):
            for y in range(height):
                floorplan.set_cell_as_visited(x, y)
        _log.debug(event="boruvka_done", rounds=rounds, edges_weighted=len(weights))

    @staticmethod
    def _tearable(floorplan: Floorplan, wb: Wallboard) -> bool:
        if not floorplan.is_valid_position(wb.neighbor_x, wb.neighbor_y):
            return False
        if floorplan.is_part_of_border(wb):
            return False
        return floorplan.has_wall(wb.x, wb.y, wb.direction)


_CARVERS = {
    Builder.DFS: BacktrackCarver,
    Builder.PRIM: PrimCarver,
    Builder.BORUVKA: BoruvkaCarver,
}


def carver_for(builder: Builder) -> MazeCarver:
    try:
        carver = _CARVERS[builder]()
    except KeyError:
        raise ValueError(f"no carver for builder {builder!r}") from None
    _log.debug(event="carver_selected", builder=builder.value, carver=carver.name)
    return carver


__all__ = ["MazeCarver", "BacktrackCarver", "PrimCarver", "BoruvkaCarver", "carver_for"]
