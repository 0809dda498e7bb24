import pytest

from amaze.generation import BSPBranch, BSPBuilder, BSPLeaf, Builder, CancellationToken, GenerationCancelled, Order, Wall, generate
from amaze.generation.config import MAP_UNIT
from amaze.generation.wall_extractor import extract_walls

from tests.maze_test_utils import dot, wallboard_bits


def _carved(skill=1, builder=Builder.DFS, seed=13, perfect=True):
    maze = generate(Order(skill_level=skill, builder=builder, perfect=perfect, seed=seed))
    return maze, maze.floorplan, maze.distance


def _bsp(maze, fp, dist, progress=None, token=None, expected=600):
    builder = BSPBuilder(dist, fp, maze.width, maze.height, 0, expected, progress=progress, cancel_token=token)
    return builder, builder.build()


def test_leaf_requires_walls():
    with pytest.raises(ValueError):
        BSPLeaf([])


def test_branch_bounds_are_union_of_children():
    left = BSPLeaf([Wall(0, 0, 0, 128, 1)])
    right = BSPLeaf([Wall(256, 128, 128, 0, 1)])
    node = BSPBranch(128, 0, 0, 256, left, right)
    assert node.bounds() == (0, 0, 384, 128)
    assert [n for n in node.iter_nodes()] == [node, left, right]
    assert node.depth() == 2


@pytest.mark.parametrize("builder", list(Builder))
def test_wall_length_preserved_across_leaves(builder):
    maze, fp, dist = _carved(builder=builder)
    b, root = _bsp(maze, fp, dist)
    assert sum(w.length for w in root.walls()) == MAP_UNIT * wallboard_bits(fp)
    assert len(root.walls()) == b.walls_extracted + b.splits
    assert b.walls_extracted == len(extract_walls(fp, dist, 0))


def test_walls_lie_on_the_correct_side_of_each_splitter():
    maze, fp, dist = _carved(skill=2, perfect=False, seed=8)
    _b, root = _bsp(maze, fp, dist)
    for node in root.iter_nodes():
        if node.is_leaf:
            continue
        for w in node.right.walls():
            assert dot(node, w.x, w.y) >= 0 and dot(node, w.end_x, w.end_y) >= 0
        for w in node.left.walls():
            assert dot(node, w.x, w.y) <= 0 and dot(node, w.end_x, w.end_y) <= 0


def test_bounds_contain_every_wall_below():
    maze, fp, dist = _carved(skill=1, builder=Builder.PRIM)
    _b, root = _bsp(maze, fp, dist)
    for node in root.iter_nodes():
        xl, yl, xu, yu = node.bounds()
        for w in node.walls():
            assert xl <= min(w.x, w.end_x) and max(w.x, w.end_x) <= xu
            assert yl <= min(w.y, w.end_y) and max(w.y, w.end_y) <= yu


def test_one_sided_partition_becomes_a_leaf():
    # the only candidate splitter has every other wall on its right
    walls = [Wall(0, 0, 0, 128, 1), Wall(128, 0, 0, 128, 1), Wall(256, 0, 0, 128, 1)]
    walls[1].partition = walls[2].partition = True
    builder = BSPBuilder(None, None, 4, 4, 0, 10)
    root = builder.build_from_walls(walls)
    assert root.is_leaf
    assert len(root.wall_list) == 3


def test_progress_reported_at_cadence_and_clamped():
    maze, fp, dist = _carved()
    seen = []
    # deliberately small estimate so the builder overshoots it
    b, _root = _bsp(maze, fp, dist, progress=seen.append, expected=10)
    assert b.iterations >= 32
    assert len(seen) == b.iterations // 32
    assert all(0 <= p <= 100 for p in seen)
    assert seen[-1] == 100


def test_cancelled_token_stops_build():
    maze, fp, dist = _carved()
    token = CancellationToken()
    token.cancel()
    with pytest.raises(GenerationCancelled):
        _bsp(maze, fp, dist, token=token)


def test_same_structure_detects_differences():
    maze, fp, dist = _carved()
    _b, a = _bsp(maze, fp, dist)
    _b, b = _bsp(maze, fp, dist)
    assert a.same_structure(b)
    leaf = next(b.iter_leaves())
    leaf.wall_list[0].seen = True
    assert not a.same_structure(b)
