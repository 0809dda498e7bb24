import pytest

from amaze.generation import Builder, Distance, Floorplan, Order, Wall, generate
from amaze.generation.config import MAP_UNIT
from amaze.generation.wall_extractor import extract_walls, mark_border_walls
from amaze.generation.walls import wall_color

from tests.maze_test_utils import wallboard_bits


def test_wall_requires_one_axis_and_stays_on_map():
    with pytest.raises(ValueError):
        Wall(0, 0, 0, 0, 1)
    with pytest.raises(ValueError):
        Wall(0, 0, 128, 128, 1)
    with pytest.raises(ValueError):
        Wall(0, 0, -128, 0, 1)
    w = Wall(256, 0, -128, 0, 4)
    assert (w.end_x, w.end_y, w.length) == (128, 0, 128)


def test_basic_theme_color():
    assert wall_color(0, 0, 0) == 0x611414
    # horizontal walls are one step brighter
    assert wall_color(0, 0, 128) != wall_color(0, 0, 0)
    # the per-maze seed rotates the channel band
    assert wall_color(0, 1, 0) == 0x146114


def _cross():
    splitter = Wall(128, 0, 0, 256, 1)
    straddler = Wall(0, 128, 256, 0, 1)
    right = Wall(256, 0, 0, 128, 1)
    left = Wall(0, 0, 0, 128, 1)
    return splitter, straddler, right, left


def test_grade_counts_sides_and_splits():
    splitter, straddler, right, left = _cross()
    # right: splitter itself and `right`; left: `left`; one split
    assert splitter.grade([splitter, straddler, right, left]) == 1 + 3


def test_split_walls_cuts_straddlers_at_the_line():
    splitter, straddler, right, left = _cross()
    same = Wall(128, 256, 0, 128, 1)
    opposite = Wall(128, 384, 0, -128, 1)
    lhs, rhs, cuts = splitter.split_walls([splitter, straddler, right, left, same, opposite])
    assert cuts == 1
    assert right in rhs and left in lhs
    assert same in rhs and same.partition
    assert opposite in lhs and opposite.partition
    rhs_pieces = [w for w in rhs if w.dy == 0]
    lhs_pieces = [w for w in lhs if w.dy == 0]
    assert [(w.x, w.y, w.dx) for w in rhs_pieces] == [(128, 128, 128)]
    assert [(w.x, w.y, w.dx) for w in lhs_pieces] == [(0, 128, 128)]
    assert rhs_pieces[0].color == straddler.color


def test_border_walls_flagged_as_partitions():
    walls = [Wall(0, 0, 0, 128, 1), Wall(128, 512, 128, 0, 1), Wall(128, 128, 0, 128, 1)]
    mark_border_walls(walls, 4, 4)
    assert [w.partition for w in walls] == [True, True, False]


def test_extraction_covers_every_wallboard_once():
    maze = generate(Order(skill_level=1, builder=Builder.DFS, perfect=True, seed=13))
    fp = maze.floorplan
    walls = extract_walls(fp, maze.distance, 0)
    assert sum(w.length for w in walls) == MAP_UNIT * wallboard_bits(fp)
    for w in walls:
        assert w.length % MAP_UNIT == 0
        assert 0 <= min(w.x, w.end_x) and max(w.x, w.end_x) <= fp.width * MAP_UNIT
        assert 0 <= min(w.y, w.end_y) and max(w.y, w.end_y) <= fp.height * MAP_UNIT


def test_extraction_orientation_on_single_cell():
    fp = Floorplan(1, 1)
    fp.initialize()
    d = Distance.from_values([[1]])
    walls = extract_walls(fp, d, 0)
    # north runs right-to-left, south left-to-right, west top-down, east bottom-up
    assert [(w.x, w.y, w.dx, w.dy) for w in walls] == [
        (128, 0, -128, 0),
        (0, 128, 128, 0),
        (0, 0, 0, 128),
        (128, 128, 0, -128),
    ]
