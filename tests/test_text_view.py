from amaze.generation import CardinalDirection, Floorplan, Wallboard
from amaze.generation.text_view import dump_cells, render


def test_single_cell():
    fp = Floorplan(1, 1)
    fp.initialize()
    assert render(fp).splitlines() == ["+--+", "|  |", "+--+"]
    assert render(fp, start=(0, 0)).splitlines()[1] == "|S |"


def test_open_wallboard_and_markers():
    fp = Floorplan(2, 1)
    fp.initialize()
    fp.delete_wallboard(Wallboard(0, 0, CardinalDirection.EAST))
    lines = render(fp, start=(0, 0), exit=(1, 0)).splitlines()
    assert lines == ["+--+--+", "|S  E |", "+--+--+"]


def test_dump_cells_lists_every_cell():
    fp = Floorplan(2, 3)
    fp.initialize()
    out = dump_cells(fp).splitlines()
    assert len(out) == 2
    assert out[0].startswith("0:0=")
    assert len(out[1].split()) == 3
