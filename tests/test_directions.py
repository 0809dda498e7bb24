import random

from amaze.generation import ORDERED, CardinalDirection, Wallboard


def test_rotation_and_opposite_cycle():
    for cd in ORDERED:
        r = cd
        for _ in range(4):
            r = r.rotate_clockwise()
        assert r is cd
        assert cd.opposite().opposite() is cd
    assert CardinalDirection.NORTH.rotate_clockwise() is CardinalDirection.EAST
    assert CardinalDirection.WEST.opposite() is CardinalDirection.EAST


def test_deltas_cancel_out_with_opposite():
    assert CardinalDirection.NORTH.dx_dy == (0, -1)
    assert CardinalDirection.SOUTH.dx_dy == (0, 1)
    for cd in ORDERED:
        dx, dy = cd.dx_dy
        ox, oy = cd.opposite().dx_dy
        assert (dx + ox, dy + oy) == (0, 0)


def test_random_direction_uses_given_rng():
    a = [CardinalDirection.random(random.Random(7)) for _ in range(3)]
    b = [CardinalDirection.random(random.Random(7)) for _ in range(3)]
    assert a == b


def test_wallboard_mirror_names_same_edge():
    wb = Wallboard(2, 3, CardinalDirection.EAST)
    m = wb.mirror()
    assert m == Wallboard(3, 3, CardinalDirection.WEST)
    assert m.mirror() == wb
    assert wb.edge_key() == m.edge_key()
