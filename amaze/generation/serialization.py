"""Flat key/value form of a maze.

Layout::

    width, height                       grid size
    cell_{x}_{y}, dists_{x}_{y}         cell bitsets and distances
    startX, startY                      start position
    xlBSPNode_n .. isleafBSPNode_n      bounds and kind of node n
    xBSPNode_n .. dyBSPNode_n           splitter line of branch n
    numSeg_n, *Seg_n_i                  walls of leaf n

Nodes are numbered in pre-order. The node index is passed into and returned
from every recursive call, so a subtree reports the last number it used and
the sibling continues after it.
"""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .bsp import BSPBranch, BSPLeaf, BSPNode
from .distance import Distance
from .errors import DecodeError
from .floorplan import Floorplan
from .maze import Maze
from .walls import Wall

Payload = Dict[str, Any]


def encode(maze: Maze) -> Payload:
    data: Payload = {"width": maze.width, "height": maze.height}
    floorplan = maze.floorplan
    distance = maze.distance
    for x in range(maze.width):
        for y in range(maze.height):
            data[f"cell_{x}_{y}"] = floorplan.value_of_cell(x, y)
            data[f"dists_{x}_{y}"] = distance.distance_at(x, y)
    sx, sy = maze.start_position()
    data["startX"] = sx
    data["startY"] = sy
    _encode_node(maze.bsp_root(), data, 0)
    return data


def _encode_node(node: BSPNode, data: Payload, number: int) -> int:
    data[f"xlBSPNode_{number}"] = node.low_x
    data[f"ylBSPNode_{number}"] = node.low_y
    data[f"xuBSPNode_{number}"] = node.high_x
    data[f"yuBSPNode_{number}"] = node.high_y
    data[f"isleafBSPNode_{number}"] = node.is_leaf
    if node.is_leaf:
        data[f"numSeg_{number}"] = len(node.wall_list)
        for i, wall in enumerate(node.wall_list):
            _encode_wall(wall, data, number, i)
        return number
    data[f"xBSPNode_{number}"] = node.x
    data[f"yBSPNode_{number}"] = node.y
    data[f"dxBSPNode_{number}"] = node.dx
    data[f"dyBSPNode_{number}"] = node.dy
    number = _encode_node(node.left, data, number + 1)
    return _encode_node(node.right, data, number + 1)


def _encode_wall(wall: Wall, data: Payload, number: int, i: int) -> None:
    suffix = f"{number}_{i}"
    data[f"distSeg_{suffix}"] = wall.distance
    data[f"dxSeg_{suffix}"] = wall.dx
    data[f"dySeg_{suffix}"] = wall.dy
    data[f"partitionSeg_{suffix}"] = wall.partition
    data[f"seenSeg_{suffix}"] = wall.seen
    data[f"xSeg_{suffix}"] = wall.x
    data[f"ySeg_{suffix}"] = wall.y
    data[f"colSeg_{suffix}"] = wall.color


def decode(data: Payload) -> Maze:
    width = _int(data, "width")
    height = _int(data, "height")
    if width <= 0 or height <= 0:
        raise DecodeError("width", f"invalid dimensions {width}x{height}")
    cells: List[List[int]] = []
    dists: List[List[int]] = []
    for x in range(width):
        cells.append([_int(data, f"cell_{x}_{y}") for y in range(height)])
        dists.append([_int(data, f"dists_{x}_{y}") for y in range(height)])
    start = (_int(data, "startX"), _int(data, "startY"))
    root, _last = _decode_node(data, 0)
    return Maze(Floorplan.from_cells(cells), Distance.from_values(dists), root, start)


def _decode_node(data: Payload, number: int) -> Tuple[BSPNode, int]:
    bounds = tuple(_int(data, f"{k}BSPNode_{number}") for k in ("xl", "yl", "xu", "yu"))
    last = number
    if _bool(data, f"isleafBSPNode_{number}"):
        count = _int(data, f"numSeg_{number}")
        if count <= 0:
            raise DecodeError(f"numSeg_{number}", "leaf without walls")
        node: BSPNode = BSPLeaf([_decode_wall(data, number, i) for i in range(count)])
    else:
        x = _int(data, f"xBSPNode_{number}")
        y = _int(data, f"yBSPNode_{number}")
        dx = _int(data, f"dxBSPNode_{number}")
        dy = _int(data, f"dyBSPNode_{number}")
        left, last = _decode_node(data, last + 1)
        right, last = _decode_node(data, last + 1)
        node = BSPBranch(x, y, dx, dy, left, right)
    if node.bounds() != bounds:
        raise DecodeError(f"xlBSPNode_{number}", "bounds do not match stored walls")
    return node, last


def _decode_wall(data: Payload, number: int, i: int) -> Wall:
    suffix = f"{number}_{i}"
    try:
        wall = Wall(
            _int(data, f"xSeg_{suffix}"),
            _int(data, f"ySeg_{suffix}"),
            _int(data, f"dxSeg_{suffix}"),
            _int(data, f"dySeg_{suffix}"),
            _int(data, f"distSeg_{suffix}"),
            color=_int(data, f"colSeg_{suffix}"),
        )
    except ValueError as exc:
        if isinstance(exc, DecodeError):
            raise
        raise DecodeError(f"xSeg_{suffix}", str(exc)) from exc
    wall.partition = _bool(data, f"partitionSeg_{suffix}")
    wall.seen = _bool(data, f"seenSeg_{suffix}")
    return wall


def _int(data: Payload, key: str) -> int:
    try:
        value = data[key]
    except KeyError:
        raise DecodeError(key) from None
    if isinstance(value, bool) or not isinstance(value, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise DecodeError(key, f"not an integer ({value!r})") from None
    return value


def _bool(data: Payload, key: str) -> bool:
    try:
        value = data[key]
    except KeyError:
        raise DecodeError(key) from None
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


__all__ = ["encode", "decode"]
