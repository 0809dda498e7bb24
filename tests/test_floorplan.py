import random

import pytest

from amaze.generation import CardinalDirection, Floorplan, Wallboard, WallboardError
from amaze.generation.floorplan import CW_IN_ROOM, CW_VISITED

N, E, S, W = (
    CardinalDirection.NORTH,
    CardinalDirection.EAST,
    CardinalDirection.SOUTH,
    CardinalDirection.WEST,
)


def _fresh(w=4, h=4):
    fp = Floorplan(w, h)
    fp.initialize()
    return fp


def test_initialize_sets_all_walls_and_perimeter_border():
    fp = _fresh()
    for x in range(4):
        for y in range(4):
            for cd in (N, E, S, W):
                assert fp.has_wall(x, y, cd)
            assert fp.value_of_cell(x, y) & CW_VISITED
            assert fp.is_unvisited(x, y)
    for i in range(4):
        assert fp.has_border(i, 0, N)
        assert fp.has_border(i, 3, S)
        assert fp.has_border(0, i, W)
        assert fp.has_border(3, i, E)
    # interior edges are not border protected
    assert not fp.has_border(1, 1, N)
    assert fp.can_tear_down(Wallboard(1, 1, E))


def test_non_positive_dimensions_rejected():
    with pytest.raises(ValueError):
        Floorplan(0, 4)
    with pytest.raises(ValueError):
        Floorplan(4, -1)


def test_delete_wallboard_clears_both_sides_and_counts():
    fp = _fresh()
    fp.delete_wallboard(Wallboard(1, 1, E))
    assert fp.has_no_wall(1, 1, E)
    assert fp.has_no_wall(2, 1, W)
    assert fp.torn_down == 1
    # deleting an already open edge does not count twice
    fp.delete_wallboard(Wallboard(2, 1, W))
    assert fp.torn_down == 1


def test_border_wallboards_cannot_be_removed():
    fp = _fresh()
    with pytest.raises(WallboardError):
        fp.delete_wallboard(Wallboard(0, 0, N))
    with pytest.raises(WallboardError):
        fp.delete_wallboard(Wallboard(3, 2, E))
    assert not fp.can_tear_down(Wallboard(0, 0, W))


def test_can_tear_down_requires_unvisited_neighbor():
    fp = _fresh()
    fp.set_cell_as_visited(2, 1)
    assert fp.is_visited(2, 1)
    assert not fp.can_tear_down(Wallboard(1, 1, E))
    assert fp.can_tear_down(Wallboard(1, 1, S))


def test_exit_position_opens_one_perimeter_side():
    fp = _fresh()
    fp.set_exit_position(0, 0)
    assert fp.has_no_wall(0, 0, W)
    assert fp.has_wall(0, 0, N)
    assert fp.is_exit_position(0, 0)
    assert not fp.is_exit_position(3, 3)
    with pytest.raises(WallboardError):
        fp.set_exit_position(1, 1)


def test_corner_exit_accepts_either_side():
    fp = _fresh()
    fp.set_exit_position(3, 0)
    # x == width-1 takes precedence over y == 0
    assert fp.has_no_wall(3, 0, E)
    assert fp.is_exit_position(3, 0)


def test_copy_equality_and_independence():
    fp = _fresh()
    clone = fp.copy()
    assert clone == fp
    clone.delete_wallboard(Wallboard(1, 1, S))
    assert clone != fp
    assert Floorplan.from_cells(fp.cells()) == fp


def test_horizontal_sequences_stop_at_crossing_walls():
    fp = _fresh()
    # every cell still has its West wall, so runs are one cell long
    assert list(fp.iter_sequences(0, 0, N)) == [(0, 1), (1, 2), (2, 3), (3, 4)]
    fp.delete_wallboard(Wallboard(0, 0, E))
    assert list(fp.iter_sequences(0, 0, N)) == [(0, 2), (2, 3), (3, 4)]
    # fresh generator per call
    assert list(fp.iter_sequences(0, 0, N)) == list(fp.iter_sequences(0, 0, N))


def test_vertical_sequences_skip_gaps():
    fp = _fresh()
    fp.delete_wallboard(Wallboard(1, 1, W))
    # column 1 has no West wallboard in row 1
    assert list(fp.iter_sequences(1, 0, W)) == [(0, 1), (2, 3), (3, 4)]
    # opening the edge above (1,3) lets the run continue past row 2
    fp.delete_wallboard(Wallboard(1, 3, N))
    assert list(fp.iter_sequences(1, 0, W)) == [(0, 1), (2, 4)]


def test_mark_area_as_room_encloses_and_opens_doors():
    fp = _fresh(12, 12)
    rng = random.Random(3)
    doors = fp.mark_area_as_room(4, 3, 2, 2, 5, 4, rng)
    assert 1 <= len(doors) <= 5
    for x in range(2, 6):
        for y in range(2, 5):
            assert fp.value_of_cell(x, y) & CW_IN_ROOM
    # interior open, enclosure closed
    assert fp.has_no_wall(3, 3, E)
    assert fp.has_wall(2, 3, W) and fp.has_wall(1, 3, E)
    for door in doors:
        assert fp.has_wall(door.x, door.y, door.direction)
        assert not fp.is_part_of_border(door)
        assert not fp.is_part_of_border(door.mirror())
    perimeter = [Wallboard(x, 2, N) for x in range(2, 6)] + [Wallboard(2, y, W) for y in range(2, 5)]
    for wb in perimeter:
        if wb not in doors:
            assert fp.is_part_of_border(wb)


def test_area_overlap_includes_buffer_and_outer_border():
    fp = _fresh(12, 12)
    fp.mark_area_as_room(3, 3, 2, 2, 4, 4, random.Random(1))
    assert fp.area_overlaps_with_room(6, 6, 8, 8) is False
    assert fp.area_overlaps_with_room(5, 2, 7, 4) is True  # adjacent, inside buffer
    assert fp.area_overlaps_with_room(0, 7, 2, 9) is True  # touches the outer border
