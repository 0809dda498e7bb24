import pytest

from amaze.generation import Builder, DecodeError, Order, decode, encode, generate


@pytest.fixture(scope="module")
def maze():
    return generate(Order(skill_level=2, builder=Builder.BORUVKA, perfect=False, seed=31))


def test_round_trip_keeps_content(maze):
    data = encode(maze)
    back = decode(data)
    assert back.same_content(maze)
    assert back.start_position() == maze.start_position()
    assert back.exit_position() == maze.exit_position()
    assert encode(back) == data


def test_payload_layout(maze):
    data = encode(maze)
    assert data["width"] == maze.width and data["height"] == maze.height
    assert data["cell_0_0"] == maze.value_of_cell(0, 0)
    assert data["dists_0_0"] == maze.distance_to_exit(0, 0)
    assert data["isleafBSPNode_0"] is maze.bsp_root().is_leaf
    leaves = sum(1 for _ in maze.bsp_root().iter_leaves())
    assert sum(1 for k in data if k.startswith("numSeg_")) == leaves


def test_string_values_are_accepted(maze):
    data = {k: (str(v).lower() if isinstance(v, bool) else str(v)) for k, v in encode(maze).items()}
    assert decode(data).same_content(maze)


def test_missing_key_is_reported(maze):
    data = encode(maze)
    del data["startY"]
    with pytest.raises(DecodeError) as exc:
        decode(data)
    assert exc.value.key == "startY"


def test_tampered_bounds_rejected(maze):
    data = encode(maze)
    data["xuBSPNode_0"] += 1
    with pytest.raises(DecodeError):
        decode(data)


def test_invalid_wall_rejected(maze):
    data = encode(maze)
    key = next(k for k in data if k.startswith("dxSeg_"))
    data[key] = 0
    data[key.replace("dxSeg_", "dySeg_")] = 0
    with pytest.raises(DecodeError):
        decode(data)
