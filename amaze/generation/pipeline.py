"""Phase sequencing for a single generation run.

`generate` turns an Order into a Maze: floorplan init, room placement,
carving, distance field and exit, wall extraction plus BSP build, assembly.
Each phase is timed into ``metrics['phase_ms']``. The cancellation token is
checked between the coarse phases and inside the relaxation and BSP loops; a cancelled run
raises GenerationCancelled and nothing built so far escapes.

`run` additionally reports the final progress and hands the maze to the
order.
"""
from __future__ import annotations

import random
import time
from typing import Optional

from ..logging_utils import get_logger
from .bsp import BSPBuilder
from .carvers import carver_for
from .distance import Distance
from .errors import CancellationToken
from .floorplan import Floorplan
from .maze import Maze
from .metrics import init_metrics
from .order import Order
from .rooms import place_rooms

_log = get_logger("pipeline")


def generate(order: Order, cancel_token: Optional[CancellationToken] = None) -> Maze:
    token = cancel_token or CancellationToken()
    settings = order.settings
    rng = random.Random(order.seed)
    metrics = init_metrics()
    phase_times = {}
    start = time.perf_counter()

    def _phase(label, fn, *a, **k):
        ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
        phase_times[label] = int((pe - ps) * 1000)
        return r

    floorplan = Floorplan(settings.width, settings.height)
    _phase('init', floorplan.initialize)
    rooms = _phase('rooms', place_rooms, floorplan, settings.rooms, rng)
    metrics['rooms_requested'] = settings.rooms
    metrics['rooms_placed'] = len(rooms)
    if len(rooms) < settings.rooms:
        _log.debug(event="rooms_dropped", order_id=order.order_id, requested=settings.rooms, placed=len(rooms))
    token.raise_if_cancelled()

    carver = carver_for(order.builder)
    _phase('carve', carver.carve, floorplan, rng)
    metrics['walls_torn_down'] = floorplan.torn_down
    token.raise_if_cancelled()

    distance = Distance(settings.width, settings.height)
    exit_x, exit_y = _phase('distance', distance.compute_distances, floorplan, token)
    token.raise_if_cancelled()
    floorplan.set_exit_position(exit_x, exit_y)
    metrics['max_distance'] = distance.max_distance()

    # drawn after carving so the color seed does not shift the carve sequence
    color_seed = rng.randint(0, 255)
    builder = BSPBuilder(
        distance,
        floorplan,
        settings.width,
        settings.height,
        color_seed,
        settings.expected_partiters,
        progress=order.update_progress,
        cancel_token=token,
    )
    root = _phase('bsp', builder.build)
    metrics['walls_extracted'] = builder.walls_extracted
    metrics['bsp_iterations'] = builder.iterations
    metrics['bsp_splits'] = builder.splits
    metrics['bsp_leaves'] = sum(1 for _ in root.iter_leaves())
    token.raise_if_cancelled()

    metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
    metrics['phase_ms'] = phase_times
    maze = Maze(floorplan, distance, root, distance.start_position(), metrics)
    _log.info(
        event="maze_generated",
        order_id=order.order_id,
        width=maze.width,
        height=maze.height,
        builder=order.builder.value,
        seed=order.seed,
        runtime_ms=metrics['runtime_ms'],
    )
    return maze


def run(order: Order, cancel_token: Optional[CancellationToken] = None) -> Maze:
    maze = generate(order, cancel_token)
    order.update_progress(100)
    order.deliver(maze)
    return maze


__all__ = ["generate", "run"]
