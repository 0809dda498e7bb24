"""Turn the wallboards of a carved floorplan into wall segments.

Rows are scanned for North and South runs, columns for West and East runs.
North runs are emitted right-to-left and East runs bottom-to-top so that
every wall's direction says which side of it is open; the BSP builder relies
on that orientation when it classifies collinear walls.
"""
from __future__ import annotations

from typing import List

from .config import MAP_UNIT
from .directions import CardinalDirection
from .distance import Distance
from .floorplan import Floorplan
from .walls import Wall


def extract_walls(floorplan: Floorplan, distance: Distance, color_seed: int, map_unit: int = MAP_UNIT) -> List[Wall]:
    walls: List[Wall] = []
    _horizontal_walls(floorplan, distance, color_seed, map_unit, walls)
    _vertical_walls(floorplan, distance, color_seed, map_unit, walls)
    return walls


def _horizontal_walls(floorplan: Floorplan, distance: Distance, cc: int, unit: int, out: List[Wall]) -> None:
    for y in range(floorplan.height):
        for start, end in floorplan.iter_sequences(0, y, CardinalDirection.NORTH):
            out.append(Wall(end * unit, y * unit, (start - end) * unit, 0, distance.distance_at(start, y), cc))
        for start, end in floorplan.iter_sequences(0, y, CardinalDirection.SOUTH):
            out.append(Wall(start * unit, (y + 1) * unit, (end - start) * unit, 0, distance.distance_at(start, y), cc))


def _vertical_walls(floorplan: Floorplan, distance: Distance, cc: int, unit: int, out: List[Wall]) -> None:
    for x in range(floorplan.width):
        for start, end in floorplan.iter_sequences(x, 0, CardinalDirection.WEST):
            out.append(Wall(x * unit, start * unit, 0, (end - start) * unit, distance.distance_at(x, start), cc))
        for start, end in floorplan.iter_sequences(x, 0, CardinalDirection.EAST):
            out.append(Wall((x + 1) * unit, end * unit, 0, (start - end) * unit, distance.distance_at(x, start), cc))


def mark_border_walls(walls: List[Wall], width: int, height: int, map_unit: int = MAP_UNIT) -> None:
    for wall in walls:
        wall.update_partition_if_border_case(width * map_unit, height * map_unit)


__all__ = ["extract_walls", "mark_border_walls"]
