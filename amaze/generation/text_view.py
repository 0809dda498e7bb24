"""ASCII rendering of a floorplan for logs, scripts and failing tests.

Each cell is drawn as a 3x2 block of characters; rooms are shaded with '.'
and the start/exit cells can be marked with 'S' and 'E'.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from .directions import CardinalDirection
from .floorplan import Floorplan

N = CardinalDirection.NORTH
S = CardinalDirection.SOUTH
W = CardinalDirection.WEST
E = CardinalDirection.EAST


def render(floorplan: Floorplan, start: Optional[Tuple[int, int]] = None, exit: Optional[Tuple[int, int]] = None) -> str:
    lines: List[str] = []
    for y in range(floorplan.height):
        top = []
        mid = []
        for x in range(floorplan.width):
            top.append("+" + ("--" if floorplan.has_wall(x, y, N) else "  "))
            mid.append(("|" if floorplan.has_wall(x, y, W) else " ") + _fill(floorplan, x, y, start, exit))
        top.append("+")
        last = floorplan.width - 1
        mid.append("|" if floorplan.has_wall(last, y, E) else " ")
        lines.append("".join(top))
        lines.append("".join(mid))
    bottom = ["+" + ("--" if floorplan.has_wall(x, floorplan.height - 1, S) else "  ") for x in range(floorplan.width)]
    bottom.append("+")
    lines.append("".join(bottom))
    return "\n".join(lines)


def _fill(floorplan: Floorplan, x: int, y: int, start, exit) -> str:
    if (x, y) == start:
        return "S "
    if (x, y) == exit:
        return "E "
    return ".." if floorplan.is_in_room(x, y) else "  "


def dump_cells(floorplan: Floorplan) -> str:
    """Raw cell values, one line per column, as `x:y=value` pairs."""
    rows = []
    for x in range(floorplan.width):
        rows.append(" ".join(f"{x}:{y}={floorplan.value_of_cell(x, y)}" for y in range(floorplan.height)))
    return "\n".join(rows)


__all__ = ["render", "dump_cells"]
