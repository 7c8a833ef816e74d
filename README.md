# aeroplan

Building blocks for risk-aware global path planning for aerial vehicles on a
discretised 3D grid.

The world is split into cubic cells of edge `CELL_SCALE` (1 metre). Each cell
gets a risk estimate built from occupancy log-odds, a prior that depends on
altitude, and a penalty for space that has not been measured. The planner
scores moves by distance, risk, altitude change and how sharply they turn, and
provides heuristics for a best-first search over the grid.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `aeroplan.cell`: the frozen, ordered `Cell` dataclass of integer indices
  `x`, `y`, `z`. `Cell.from_position` and `Cell.from_point` find the cell that
  contains a metric position; `x_pos`, `y_pos`, `z_pos` and `to_point()` give
  its centre. Distances: `manhattan_dist`, `distance_2d`, `distance_3d`,
  `diag_distance_2d`, `diag_distance_3d`. Neighbours: `neighbors` (six face
  neighbours, then the four XY diagonals), `diagonal_neighbors`,
  `flow_neighbors(radius)` and `neighbor_from_yaw`. Cells can be subtracted,
  and `str(cell)` gives `(x,y,z)`. `angle_to_range` wraps an angle in radians
  into `[-pi, pi)`.
- `aeroplan.node`: the search `Node`, a cell together with the cell it was
  reached from. `length()` is the distance between the two centres, `cells()`
  the set of cells swept by the move, `rotation` and `xy_rotation` the number
  of 45-degree turns needed to continue into another node, and `neighbors()`
  the nodes reachable in one step.
- `aeroplan.grid`: a square `Grid` of per-cell `mean`, `variance`, `counter`
  and `land` arrays (numpy), used for landing-site evaluation. It can be
  `reset`, `resize`d, centred with `set_filter_limits` and read back with
  `grid_limits`, and blended with an earlier grid by `combine(prev_grid,
  alpha)`. Indices outside the grid raise `IndexError`; combining grids of
  different shapes raises `ValueError`.
- `aeroplan.planner`: `GlobalPlanner` holds the tuning parameters, the
  vehicle state, the occupancy map (`update_occupancy`, from a mapping of cells
  to log-odds), the set of `occupied` cells and the current path. It computes
  `single_cell_risk`, `cell_risk` (cached, including risk flowing in from
  nearby cells), `node_risk`, `edge_dist`, `edge_cost`, `turn_smoothness`, the
  heuristics (`heuristic`, `risk_heuristic`, `risk_heuristic_reverse_cache`,
  `smoothness_heuristic`, `altitude_heuristic`), `open_neighbors`, and
  `path_info`, `path_poses` and `path_with_risk` for a path. `set_pose`
  records the way back, which `go_back` retraces; `stop` makes the current
  position the goal and the path. Also here: `Goal` (cell, radius, temporary
  flag, `within_position_radius`), `PathInfo`, `PathPose`, `next_yaw`,
  `posterior` and `DEFAULT_ALT_PRIOR`.
- `aeroplan.controller`: `PlannerController` feeds vehicle updates into a
  planner (`on_position`, `on_velocity`, `on_clicked_point`,
  `on_move_base_goal`, `on_fcu_goal`, `on_obstacle_points`), keeps a queue of
  `waypoints` (`set_new_goal`, `pop_next_goal`, `set_intermediate_goal`),
  follows a list of poses (`set_current_path`) and produces a `Setpoint` a
  speed-dependent step towards the current goal (`compute_setpoint`). The
  speed grows as the risk at the vehicle's cell falls, up to the planner's
  `max_speed`.
- `aeroplan.mock_data`: synthetic obstacles for trying things out:
  `create_wall(dist, width, height)`, `default_points()`, the fixed
  `VEHICLE_POSITION` and `CLICKED_GOAL`, and `format_path` to render a path
  as text.

## Example

```python
from aeroplan.cell import Cell
from aeroplan.node import Node

start = Cell.from_position(0.5, 0.5, 3.5)
nxt = Cell.from_position(1.5, 1.5, 3.5)

print(start, nxt)                     # (0,0,3) (1,1,3)
print(start.distance_2d(nxt))         # about 1.414
print(start.diag_distance_2d(nxt))    # cost of moving diagonally on the grid

node = Node(nxt, start)
print(node.length())
print(sorted(str(c) for c in node.cells()))
```

```python
from aeroplan.cell import Cell
from aeroplan.node import Node
from aeroplan.planner import GlobalPlanner, Goal

planner = GlobalPlanner()
planner.update_occupancy({Cell(3, 0, 3): 2.0}, resolution=1.0)
planner.set_pose((0.5, 0.5, 3.5), yaw=0.0)
planner.set_goal(Goal(Cell(6, 0, 3)))

path = [Cell(x, 0, 3) for x in range(7)]
info = planner.path_info(path)
print(info.cost, info.risk, info.is_blocked)

print(planner.heuristic(Node(Cell(1, 0, 3), Cell(0, 0, 3)), planner.goal.cell))
```

```python
from aeroplan.grid import Grid

grid = Grid(10.0, 1.0)
grid.set_mean((2, 3), 1.5)
grid.increase_counter((2, 3))
print(grid.mean_at((2, 3)), grid.counter_at((2, 3)))
```

## What the package does not do

- It has no path search of its own. `GlobalPlanner` supplies the costs,
  heuristics, neighbours and legality checks a search needs, and takes a
  finished path through `set_path`; the search itself is left to the caller.
- It does not read maps, sensor data or messages from a vehicle, and sends
  nothing to one. Occupancy arrives as a mapping of cells to log-odds,
  obstacles as plain point tuples, and `PlannerController` returns
  `Setpoint` objects rather than transmitting them.
- It has no command-line program and no landing-site decision logic beyond
  the `Grid` data structure.