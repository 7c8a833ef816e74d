"""Square 2D grid of height statistics for landing-site detection."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Index = Sequence[int]


class Grid:
    """Per-cell mean, variance, point count and landability of a square grid."""

    def __init__(self, grid_size: float, cell_size: float) -> None:
        self._corner_min = (0.0, 0.0)
        self._corner_max = (0.0, 0.0)
        self.resize(grid_size, cell_size)

    @property
    def grid_size(self) -> float:
        return self._grid_size

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def row_col_size(self) -> int:
        return self._row_col_size

    def reset(self) -> None:
        """Zero every statistic."""
        self.mean.fill(0.0)
        self.variance.fill(0.0)
        self.counter.fill(0)
        self.land.fill(0)

    def resize(self, grid_size: float, cell_size: float) -> None:
        """Change the grid dimensions; all statistics are cleared."""
        self._grid_size = grid_size
        self._cell_size = cell_size
        self._row_col_size = int(math.ceil(grid_size / cell_size))
        shape = (self._row_col_size, self._row_col_size)
        self.mean = np.zeros(shape, dtype=np.float32)
        self.variance = np.zeros(shape, dtype=np.float32)
        self.counter = np.zeros(shape, dtype=np.int64)
        self.land = np.zeros(shape, dtype=np.int64)

    def _index(self, idx: Index) -> tuple[int, int]:
        row, col = idx
        if not (0 <= row < self._row_col_size and 0 <= col < self._row_col_size):
            raise IndexError(f"grid index {tuple(idx)} outside {self._row_col_size}x{self._row_col_size}")
        return int(row), int(col)

    def set_mean(self, idx: Index, value: float) -> None:
        self.mean[self._index(idx)] = value

    def set_variance(self, idx: Index, value: float) -> None:
        self.variance[self._index(idx)] = value

    def increase_counter(self, idx: Index) -> None:
        self.counter[self._index(idx)] += 1

    def set_counter(self, idx: Index, value: int) -> None:
        self.counter[self._index(idx)] = value

    def mean_at(self, idx: Index) -> float:
        return float(self.mean[self._index(idx)])

    def variance_at(self, idx: Index) -> float:
        return float(self.variance[self._index(idx)])

    def counter_at(self, idx: Index) -> int:
        return int(self.counter[self._index(idx)])

    def set_filter_limits(self, pos: Sequence[float]) -> None:
        """Centre the grid's XY extent on ``pos``."""
        half = self._grid_size / 2.0
        x, y = pos[0], pos[1]
        self._corner_min = (x - half, y - half)
        self._corner_max = (x + half, y + half)

    def grid_limits(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Return the (min, max) XY corners of the grid."""
        return self._corner_min, self._corner_max

    def combine(self, prev_grid: Grid, alpha: float) -> None:
        """Blend mean and variance with ``prev_grid``, weighting it by ``alpha``."""
        if prev_grid.mean.shape != self.mean.shape:
            raise ValueError(
                f"cannot combine grids of shape {prev_grid.mean.shape} and {self.mean.shape}"
            )
        self.mean = (alpha * prev_grid.mean + (1.0 - alpha) * self.mean).astype(np.float32)
        self.variance = (alpha * prev_grid.variance + (1.0 - alpha) * self.variance).astype(np.float32)