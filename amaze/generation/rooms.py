import random
from dataclasses import dataclass, field
from typing import List

from .config import MAX_ROOM_DIMENSION, MAX_TRIES, MIN_ROOM_DIMENSION
from .directions import Wallboard
from .floorplan import Floorplan


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int
    doors: List[Wallboard] = field(default_factory=list)

    @property
    def x_last(self) -> int:
        return self.x + self.w - 1

    @property
    def y_last(self) -> int:
        return self.y + self.h - 1

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy


def place_rooms(floorplan: Floorplan, requested: int, rng: random.Random) -> List[Room]:
    """Place up to `requested` non-overlapping rooms onto the floorplan.

    Consecutive failures are not reset by a success; after MAX_TRIES failed
    attempts the remaining rooms are dropped.
    """
    rooms: List[Room] = []
    tries = 0
    while tries < MAX_TRIES and len(rooms) < requested:
        room = _try_place_room(floorplan, rng)
        if room is None:
            tries += 1
        else:
            rooms.append(room)
    return rooms


def _try_place_room(floorplan: Floorplan, rng: random.Random):
    width, height = floorplan.width, floorplan.height
    rw = rng.randint(MIN_ROOM_DIMENSION, MAX_ROOM_DIMENSION)
    if rw >= width - 4:
        return None
    rh = rng.randint(MIN_ROOM_DIMENSION, MAX_ROOM_DIMENSION)
    if rh >= height - 4:
        return None
    rx = rng.randint(1, width - rw - 1)
    ry = rng.randint(1, height - rh - 1)
    room = Room(rx, ry, rw, rh)
    if floorplan.area_overlaps_with_room(rx, ry, room.x_last, room.y_last):
        return None
    room.doors = floorplan.mark_area_as_room(rw, rh, rx, ry, room.x_last, room.y_last, rng)
    return room


def rooms_overlap(a: Room, b: Room, pad: int = 1) -> bool:
    """Rectangles intersect once grown by `pad` cells on every side."""
    return (
        a.x - pad <= b.x_last
        and a.x_last + pad >= b.x
        and a.y - pad <= b.y_last
        and a.y_last + pad >= b.y
    )


__all__ = ["Room", "place_rooms", "rooms_overlap"]
