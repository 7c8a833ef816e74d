import math

import pytest

from aeroplan import cell as cell_module
from aeroplan.cell import Cell, angle_to_range

SAMPLE_INDICES = [(0, 0, 0), (3, -2, 5), (-7, 4, 1), (10, 10, -3)]


@pytest.mark.parametrize("idx", SAMPLE_INDICES)
def test_point_round_trip(idx):
    c = Cell(*idx)
    assert Cell.from_point(c.to_point()) == c


@pytest.mark.parametrize("idx", SAMPLE_INDICES)
def test_position_round_trip(idx):
    c = Cell(*idx)
    assert Cell.from_position(c.x_pos, c.y_pos, c.z_pos) == c


def test_from_position_without_z_is_ground_layer():
    c = Cell.from_position(2.2, 3.7)
    assert c.z == Cell.from_position(0.0, 0.0, 0.0).z
    assert Cell.from_position(2.2, 3.7, 0.0) == c


@pytest.mark.parametrize("idx", SAMPLE_INDICES)
def test_manhattan_dist_to_own_center_is_zero(idx):
    c = Cell(*idx)
    assert c.manhattan_dist(*c.to_point()) == 0.0


@pytest.mark.parametrize("idx_a", SAMPLE_INDICES)
@pytest.mark.parametrize("idx_b", SAMPLE_INDICES)
def test_distance_invariants(idx_a, idx_b):
    a = Cell(*idx_a)
    b = Cell(*idx_b)
    assert a.distance_3d(b) == pytest.approx(b.distance_3d(a))
    assert a.distance_3d(b) >= a.distance_2d(b) - 1e-9
    assert a.diag_distance_2d(b) >= a.distance_2d(b) - 1e-9
    assert a.diag_distance_3d(b) >= a.diag_distance_2d(b)


def test_same_cell_distances_are_zero():
    c = Cell(4, 5, 6)
    assert c.distance_2d(c) == 0.0
    assert c.distance_3d(c) == 0.0
    assert c.diag_distance_3d(c) == 0.0


def test_angle_of_cell_on_y_axis():
    assert Cell(0, 1, 1).angle() == pytest.approx(math.pi / 2)


def test_neighbor_from_yaw_diagonal():
    c = Cell(2, 3, 1)
    assert c.neighbor_from_yaw(math.pi / 4) == Cell(3, 4, 1)


def test_neighbors_are_distinct_and_adjacent():
    c = Cell(1, 2, 3)
    neighbors = c.neighbors()
    assert len(set(neighbors)) == len(neighbors) == 10
    assert c not in neighbors
    for n in neighbors:
        d = n - c
        assert max(abs(d.x), abs(d.y), abs(d.z)) == 1
    assert neighbors[6:] == c.diagonal_neighbors()


def test_diagonal_neighbors_stay_in_layer():
    c = Cell(0, 0, 4)
    diagonals = c.diagonal_neighbors()
    assert len(set(diagonals)) == 4
    assert all(n.z == c.z and abs(n.x - c.x) == 1 and abs(n.y - c.y) == 1 for n in diagonals)


def test_flow_neighbors_radius_zero_is_self():
    c = Cell(5, -1, 2)
    assert c.flow_neighbors(0) == [c]


def test_flow_neighbors_radius_one_are_face_neighbors():
    c = Cell(5, -1, 2)
    flow = c.flow_neighbors(1)
    assert len(flow) == len(set(flow))
    assert set(flow) == {c, *c.neighbors()[:6]}


def test_flow_neighbors_grow_with_radius():
    c = Cell(0, 0, 0)
    small = set(c.flow_neighbors(1))
    large = set(c.flow_neighbors(2))
    assert small < large
    assert all(abs((n - c).x) <= 2 for n in large)


def test_subtraction_and_ordering():
    a = Cell(3, 4, 5)
    assert a - a == Cell(0, 0, 0)
    assert a - Cell(1, 1, 1) == Cell(2, 3, 4)
    assert Cell(0, 0, 0) < Cell(0, 0, 1) < Cell(0, 1, 0) < Cell(1, 0, 0)


def test_str_format():
    assert str(Cell(1, -2, 3)) == "(1,-2,3)"


@pytest.mark.parametrize("angle", [0.0, 1.0, -2.5, 7.0, -10.0, 100.0])
def test_angle_to_range_bounds_and_periodicity(angle):
    wrapped = angle_to_range(angle)
    assert -math.pi <= wrapped < math.pi
    assert angle_to_range(angle + 2 * math.pi) == pytest.approx(wrapped)
    assert math.cos(wrapped) == pytest.approx(math.cos(angle))
    assert math.sin(wrapped) == pytest.approx(math.sin(angle))


def test_default_scale_is_one_metre():
    assert Cell(0, 0, 0).x_pos == cell_module.CELL_SCALE / 2