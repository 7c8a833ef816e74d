"""Search nodes: a cell together with the cell it was reached from."""

from __future__ import annotations

import math
from dataclasses import dataclass

from aeroplan.cell import Cell, angle_to_range


@dataclass(frozen=True, order=True)
class Node:
    """A search state: the current cell and its parent cell."""

    cell: Cell
    parent: Cell

    def next_node(self, next_cell: Cell) -> Node:
        """Return the node reached by moving from this cell to ``next_cell``."""
        return type(self)(next_cell, self.cell)

    def neighbors(self) -> list[Node]:
        """Nodes for every neighbouring cell of the current cell."""
        return [self.next_node(c) for c in self.cell.neighbors()]

    def cells(self) -> set[Cell]:
        """Cells touched by the straight segment from the parent to the cell."""
        cell, parent = self.cell, self.parent
        diff = cell - parent
        steps = 2 * max(abs(diff.x), abs(diff.y), abs(diff.z))
        if steps == 0:
            return set()
        x_step = (cell.x_pos - parent.x_pos) / steps
        y_step = (cell.y_pos - parent.y_pos) / steps
        z_step = (cell.z_pos - parent.z_pos) / steps
        cells = set()
        for i in range(1, steps + 1):
            x = parent.x_pos + x_step * i
            y = parent.y_pos + y_step * i
            z = parent.z_pos + z_step * i
            for ox, oy in ((0.1, 0.1), (0.1, -0.1), (-0.1, 0.1), (-0.1, -0.1)):
                cells.add(Cell.from_position(x + ox, y + oy, z))
        return cells

    def length(self) -> float:
        """Distance between the parent and the cell centres."""
        return self.parent.distance_3d(self.cell)

    def rotation(self, other: Node) -> float:
        """Number of 45-degree turns needed to continue as ``other``.

        A switch between horizontal and vertical movement adds half a turn.
        """
        this_z_diff = self.cell.z - self.parent.z
        other_z_diff = other.cell.z - other.parent.z
        alt_diff = 0.5 if (this_z_diff == 0) != (other_z_diff == 0) else 0.0
        return alt_diff + self.xy_rotation(other)

    def xy_rotation(self, other: Node) -> float:
        """Number of 45-degree turns in the XY plane needed to continue as ``other``."""
        this_diff = self.cell - self.parent
        other_diff = other.cell - other.parent
        if (this_diff.x == 0 and this_diff.y == 0) or (other_diff.x == 0 and this_diff.y == 0):
            return 0.0
        ang_diff = abs(angle_to_range(other_diff.angle() - this_diff.angle()))
        return ang_diff / (math.pi / 4)

    def __str__(self) -> str:
        return f"({self.cell} , {self.parent})"