#!/usr/bin/env python3
"""Structural diagnostics for generated mazes.

Usage:
  python scripts/diagnose_mazes.py --skill 3 --imperfect 13 99 2024

If no seeds are provided as CLI args, a default list is used. Every builder
is run for every seed. Exits with non-zero status if structural issues are
detected.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections import deque
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from amaze.generation import ORDERED, Builder, Order, generate  # noqa: E402 import after path fix
from amaze.generation.text_view import dump_cells  # noqa: E402

DEFAULT_SEEDS = [13, 292372, 730727]


def _bfs_steps(maze, origin):
    steps = {origin: 0}
    q = deque([origin])
    while q:
        x, y = q.popleft()
        for cd in ORDERED:
            if maze.has_wall(x, y, cd):
                continue
            dx, dy = cd.dx_dy
            nx, ny = x + dx, y + dy
            if maze.is_valid_position(nx, ny) and (nx, ny) not in steps:
                steps[(nx, ny)] = steps[(x, y)] + 1
                q.append((nx, ny))
    return steps


def run_for_seed(seed: int, builder: Builder, skill: int, perfect: bool) -> dict:
    maze = generate(Order(skill_level=skill, builder=builder, perfect=perfect, seed=seed))
    steps = _bfs_steps(maze, maze.exit_position())
    cells = maze.width * maze.height
    wrong = sum(
        1
        for x in range(maze.width)
        for y in range(maze.height)
        if steps.get((x, y), -2) + 1 != maze.distance_to_exit(x, y)
    )
    issues = {
        "unreachable_cells": cells - len(steps),
        "distance_mismatches": wrong,
        "start_not_farthest": int(maze.distance_to_exit(*maze.start_position()) != maze.max_distance()),
    }
    result = {
        "seed": seed,
        "builder": builder.value,
        "issues": issues,
        "metrics": {k: maze.metrics[k] for k in ("walls_extracted", "bsp_splits", "bsp_leaves", "runtime_ms")},
        "ok": all(v == 0 for v in issues.values()),
    }
    if not result["ok"]:
        # raw bitsets for reproducing the failure
        result["cells"] = dump_cells(maze.floorplan).splitlines()
    return result


def main(argv: List[str]) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument("seeds", nargs="*", type=int)
    parser.add_argument("--skill", type=int, default=2)
    parser.add_argument("--imperfect", action="store_true")
    args = parser.parse_args(argv)
    seeds = args.seeds or DEFAULT_SEEDS
    results = [run_for_seed(s, b, args.skill, not args.imperfect) for s in seeds for b in Builder]
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
