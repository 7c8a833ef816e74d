import numpy as np
import pytest

from aeroplan.grid import Grid


@pytest.mark.parametrize("grid_size,cell_size", [(10.0, 1.0), (10.0, 3.0), (7.5, 0.5)])
def test_shape_covers_grid(grid_size, cell_size):
    g = Grid(grid_size, cell_size)
    n = g.row_col_size
    assert g.mean.shape == g.variance.shape == g.counter.shape == g.land.shape == (n, n)
    assert n * cell_size >= grid_size
    assert (n - 1) * cell_size < grid_size


def test_new_grid_is_zero():
    g = Grid(10.0, 1.0)
    assert not g.mean.any()
    assert not g.variance.any()
    assert not g.counter.any()
    assert not g.land.any()


def test_set_and_get_round_trip():
    g = Grid(10.0, 1.0)
    g.set_mean((2, 3), 1.5)
    g.set_variance((4, 1), 0.25)
    g.set_counter((0, 9), 7)
    assert g.mean_at((2, 3)) == pytest.approx(1.5)
    assert g.variance_at((4, 1)) == pytest.approx(0.25)
    assert g.counter_at((0, 9)) == 7
    assert g.mean_at((3, 2)) == 0.0


def test_increase_counter():
    g = Grid(10.0, 1.0)
    g.increase_counter((1, 1))
    g.increase_counter((1, 1))
    assert g.counter_at((1, 1)) == 2
    assert int(g.counter.sum()) == 2


def test_reset_clears_values():
    g = Grid(10.0, 1.0)
    g.set_mean((1, 1), 3.0)
    g.set_counter((1, 1), 4)
    g.land[1, 1] = 1
    g.reset()
    assert not g.mean.any()
    assert not g.counter.any()
    assert not g.land.any()


def test_resize_changes_shape_and_clears():
    g = Grid(10.0, 1.0)
    g.set_mean((1, 1), 3.0)
    g.resize(4.0, 0.5)
    assert g.grid_size == 4.0
    assert g.cell_size == 0.5
    assert g.mean.shape == (g.row_col_size, g.row_col_size)
    assert g.row_col_size * 0.5 >= 4.0
    assert not g.mean.any()


def test_filter_limits_centred_on_position():
    g = Grid(10.0, 1.0)
    g.set_filter_limits((3.0, -4.0, 2.0))
    (min_x, min_y), (max_x, max_y) = g.grid_limits()
    assert max_x - min_x == pytest.approx(g.grid_size)
    assert max_y - min_y == pytest.approx(g.grid_size)
    assert (max_x + min_x) / 2 == pytest.approx(3.0)
    assert (max_y + min_y) / 2 == pytest.approx(-4.0)


def test_combine_weights():
    prev = Grid(10.0, 1.0)
    prev.set_mean((0, 0), 2.0)
    prev.set_variance((0, 0), 4.0)

    keep = Grid(10.0, 1.0)
    keep.set_mean((0, 0), 6.0)
    keep.combine(prev, 0.0)
    assert keep.mean_at((0, 0)) == pytest.approx(6.0)

    take = Grid(10.0, 1.0)
    take.set_mean((0, 0), 6.0)
    take.combine(prev, 1.0)
    assert take.mean_at((0, 0)) == pytest.approx(2.0)
    assert take.variance_at((0, 0)) == pytest.approx(4.0)

    blend = Grid(10.0, 1.0)
    blend.set_mean((0, 0), 6.0)
    blend.combine(prev, 0.5)
    assert min(2.0, 6.0) <= blend.mean_at((0, 0)) <= max(2.0, 6.0)
    assert np.isclose(blend.mean_at((0, 0)), (2.0 + 6.0) / 2)


def test_combine_mismatched_shapes_raises():
    g = Grid(10.0, 1.0)
    with pytest.raises(ValueError):
        g.combine(Grid(5.0, 1.0), 0.5)


@pytest.mark.parametrize("idx", [(10, 0), (0, 10), (-1, 0), (0, -1)])
def test_out_of_range_index_raises(idx):
    g = Grid(10.0, 1.0)
    with pytest.raises(IndexError):
        g.mean_at(idx)
    with pytest.raises(IndexError):
        g.increase_counter(idx)