import math

import pytest

from aeroplan import cell as cell_module
from aeroplan.cell import Cell
from aeroplan.node import Node


def test_str_format():
    node = Node(Cell(1, 2, 3), Cell(0, 2, 3))
    assert str(node) == "((1,2,3) , (0,2,3))"


def test_next_node_links_parent():
    node = Node(Cell(1, 0, 0), Cell(0, 0, 0))
    nxt = node.next_node(Cell(2, 0, 0))
    assert nxt.parent == node.cell
    assert nxt.cell == Cell(2, 0, 0)


def test_neighbors_follow_cell_neighbors():
    node = Node(Cell(1, 1, 1), Cell(0, 1, 1))
    neighbors = node.neighbors()
    assert [n.cell for n in neighbors] == node.cell.neighbors()
    assert all(n.parent == node.cell for n in neighbors)


def test_length_of_axis_step_is_cell_scale():
    node = Node(Cell(1, 0, 0), Cell(0, 0, 0))
    assert node.length() == pytest.approx(cell_module.CELL_SCALE)


def test_length_is_symmetric():
    a, b = Cell(3, -1, 2), Cell(0, 4, 0)
    assert Node(a, b).length() == pytest.approx(Node(b, a).length())


@pytest.mark.parametrize(
    "cell,parent",
    [
        (Cell(1, 0, 0), Cell(0, 0, 0)),
        (Cell(1, 1, 0), Cell(0, 0, 0)),
        (Cell(0, 0, 1), Cell(0, 0, 0)),
        (Cell(-3, 2, 4), Cell(0, 0, 1)),
    ],
)
def test_cells_cover_segment(cell, parent):
    cells = Node(cell, parent).cells()
    assert cell in cells
    lo = [min(a, b) - 1 for a, b in zip((cell.x, cell.y, cell.z), (parent.x, parent.y, parent.z))]
    hi = [max(a, b) + 1 for a, b in zip((cell.x, cell.y, cell.z), (parent.x, parent.y, parent.z))]
    for c in cells:
        assert lo[0] <= c.x <= hi[0]
        assert lo[1] <= c.y <= hi[1]
        assert lo[2] <= c.z <= hi[2]


def test_cells_of_zero_length_node_is_empty():
    assert Node(Cell(2, 2, 2), Cell(2, 2, 2)).cells() == set()


def test_straight_continuation_needs_no_rotation():
    u = Node(Cell(1, 0, 0), Cell(0, 0, 0))
    v = Node(Cell(2, 0, 0), Cell(1, 0, 0))
    assert u.rotation(v) == 0.0
    assert u.xy_rotation(v) == 0.0


def test_switch_to_vertical_costs_half_turn():
    u = Node(Cell(1, 0, 0), Cell(0, 0, 0))
    v = Node(Cell(1, 0, 1), Cell(1, 0, 0))
    assert u.rotation(v) == pytest.approx(0.5)


def test_forty_five_degree_turn():
    u = Node(Cell(1, 0, 0), Cell(0, 0, 0))
    v = Node(Cell(2, 1, 0), Cell(1, 0, 0))
    assert u.xy_rotation(v) == pytest.approx(1.0)
    assert u.rotation(v) == pytest.approx(u.xy_rotation(v))


def test_xy_rotation_is_symmetric_for_turns():
    u = Node(Cell(1, 1, 0), Cell(0, 0, 0))
    v = Node(Cell(0, 2, 0), Cell(1, 1, 0))
    assert u.xy_rotation(v) == pytest.approx(v.xy_rotation(u))
    assert 0.0 <= u.xy_rotation(v) <= math.pi / (math.pi / 4)


def test_ordering_and_equality():
    a, b, c = Cell(0, 0, 0), Cell(0, 0, 1), Cell(0, 1, 0)
    assert Node(a, b) < Node(a, c)
    assert Node(a, c) < Node(b, a)
    assert Node(a, b) == Node(a, b)
    assert len({Node(a, b), Node(a, b), Node(b, a)}) == 2