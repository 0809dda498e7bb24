import itertools
import random

from amaze.generation import Floorplan
from amaze.generation.config import MAX_ROOM_DIMENSION, MIN_ROOM_DIMENSION
from amaze.generation.rooms import Room, place_rooms, rooms_overlap


def _rooms(w, h, requested, seed):
    fp = Floorplan(w, h)
    fp.initialize()
    return fp, place_rooms(fp, requested, random.Random(seed))


def test_rooms_do_not_touch_each_other_or_the_border():
    for seed in (1, 2, 3, 13):
        fp, rooms = _rooms(40, 40, 20, seed)
        assert 0 < len(rooms) <= 20
        for r in rooms:
            assert MIN_ROOM_DIMENSION <= r.w <= MAX_ROOM_DIMENSION
            assert MIN_ROOM_DIMENSION <= r.h <= MAX_ROOM_DIMENSION
            assert r.x >= 1 and r.y >= 1
            assert r.x_last <= fp.width - 2 and r.y_last <= fp.height - 2
            assert 1 <= len(r.doors) <= 5
        for a, b in itertools.combinations(rooms, 2):
            assert not rooms_overlap(a, b), f"{a} overlaps {b} (seed {seed})"


def test_room_cells_marked():
    fp, rooms = _rooms(25, 20, 4, 7)
    marked = {(x, y) for x in range(25) for y in range(20) if fp.is_in_room(x, y)}
    expected = {c for r in rooms for c in r.cells()}
    assert marked == expected


def test_small_floorplan_gets_no_rooms():
    # every candidate size is rejected on a 4x4 grid
    fp, rooms = _rooms(4, 4, 3, 13)
    assert rooms == []
    assert not any(fp.is_in_room(x, y) for x in range(4) for y in range(4))


def test_room_geometry_helpers():
    r = Room(2, 3, 4, 5)
    assert (r.x_last, r.y_last) == (5, 7)
    assert len(list(r.cells())) == 20
    assert rooms_overlap(r, Room(6, 3, 3, 3))  # adjacent
    assert not rooms_overlap(r, Room(7, 3, 3, 3))  # one cell gap
