"""Risk-aware global path planning over a 3D cell grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import pairwise
from typing import Iterable, Mapping, Sequence

from aeroplan.cell import Cell, Point, angle_to_range
from aeroplan.node import Node

DEFAULT_ALT_PRIOR: tuple[float, ...] = (
    1.0,
    0.2,
    0.1333,
    0.1,
    0.0833,
    0.05,
    0.0333,
    0.025,
    0.0166,
    0.0125,
    0.01,
    0.008,
    0.007,
    0.006,
    0.005,
    0.004,
    0.003,
    0.002,
    0.001,
)
"""Prior probability of an obstacle, indexed by rounded altitude in metres."""


def next_yaw(u: Cell, v: Cell, last_yaw: float) -> float:
    """XY heading from ``u`` to ``v``, or ``last_yaw`` for purely vertical moves."""
    dx = v.x - u.x
    dy = v.y - u.y
    if dx == 0 and dy == 0:
        return last_yaw
    return math.atan2(dy, dx)


def posterior(prior: float, likelihood: float) -> float:
    """Bayesian posterior of a binary event given a prior and a measurement likelihood."""
    occupied = prior * likelihood
    free = (1.0 - prior) * (1.0 - likelihood)
    total = occupied + free
    if total == 0.0:
        return prior
    return occupied / total


def _probability(log_odds: float) -> float:
    return 1.0 - 1.0 / (1.0 + math.exp(log_odds))


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Goal:
    """A goal cell with an acceptance radius."""

    cell: Cell
    radius: float = 1.0
    is_temporary: bool = False

    @classmethod
    def from_position(cls, x: float, y: float, z: float, radius: float = 1.0) -> Goal:
        return cls(Cell.from_position(x, y, z), radius)

    @property
    def x_pos(self) -> float:
        return self.cell.x_pos

    @property
    def y_pos(self) -> float:
        return self.cell.y_pos

    @property
    def z_pos(self) -> float:
        return self.cell.z_pos

    def to_point(self) -> Point:
        return self.cell.to_point()

    def within_position_radius(self, position: Sequence[float]) -> bool:
        """True if ``position`` lies within the radius of the goal cell's centre."""
        return math.dist(self.cell.to_point(), tuple(position)) <= self.radius

    def __str__(self) -> str:
        return str(self.cell)


@dataclass
class PathInfo:
    """Breakdown of the cost of a path."""

    cost: float = 0.0
    dist: float = 0.0
    risk: float = 0.0
    smoothness: float = 0.0
    is_blocked: bool = False


@dataclass(frozen=True)
class PathPose:
    """A position along a path with the heading to hold there."""

    position: Point
    yaw: float
    frame_id: str


class GlobalPlanner:
    """Cost model, heuristics and path bookkeeping of the global planner."""

    def __init__(
        self,
        *,
        alt_prior: Sequence[float] = DEFAULT_ALT_PRIOR,
        frame_id: str = "/local_origin",
    ) -> None:
        if not alt_prior:
            raise ValueError("alt_prior must not be empty")
        self.alt_prior_values = list(alt_prior)
        self.accumulated_alt_prior: list[float] = []
        total = 0.0
        for p in self.alt_prior_values:
            total += p
            self.accumulated_alt_prior.append(total)
        self.frame_id = frame_id

        self.min_altitude = 1
        self.max_altitude = 10
        self.max_cell_risk = 0.2
        self.smooth_factor = 10.0
        self.vert_to_hor_cost = 1.0
        self.risk_factor = 500.0
        self.neighbor_risk_flow = 1.0
        self.explore_penalty = 0.005
        self.up_cost = 3.0
        self.down_cost = 1.0
        self.search_time = 0.5
        self.min_overestimate_factor = 1.03
        self.max_overestimate_factor = 2.0
        self.overestimate_factor = 2.0
        self.risk_threshold_risk_based_speedup = 0.5
        self.default_speed = 1.0
        self.max_speed = 3.0
        self.max_iterations = 2000
        self.goal_must_be_free = True
        self.use_current_yaw = True
        self.use_risk_heuristics = True
        self.use_speedup_heuristics = True
        self.use_risk_based_speedup = True
        self.bubble_radius = 20.0
        self.bubble_cost = 0.0
        self.robot_radius = 0.5
        self.default_node_type = "SpeedNode"

        self.curr_pos: Point = (0.0, 0.0, 0.0)
        self.curr_yaw = 0.0
        self.curr_vel: Point = (0.0, 0.0, 0.0)
        self.goal = Goal(Cell(0, 0, 0))
        self.going_back = False
        self.goal_is_blocked = False
        self.current_cell_blocked = False

        self.path_back: list[Cell] = []
        self.curr_path: list[Cell] = []
        self.curr_path_info = PathInfo()
        self.path_cells: set[Cell] = set()

        self.occupancy: dict[Cell, float] | None = None
        self.octree_resolution = 1.0
        self.occupied: set[Cell] = set()
        self.seen_count: dict[Cell, float] = {}

        self.risk_cache: dict[Cell, float] = {}
        self.heuristic_cache: dict[Node, float] = {}
        self.bubble_risk_cache: dict[Cell, float] = {}

    # State updates

    def set_pose(self, position: Sequence[float], yaw: float) -> None:
        """Update the vehicle pose and record the way back."""
        self.curr_pos = (float(position[0]), float(position[1]), float(position[2]))
        self.curr_yaw = yaw
        curr_cell = Cell.from_point(self.curr_pos)
        if not self.going_back and (not self.path_back or curr_cell != self.path_back[-1]):
            self.path_back.append(curr_cell)

    def set_goal(self, goal: Goal) -> None:
        """Set a new mission goal and drop goal-dependent caches."""
        self.goal = goal
        self.going_back = False
        self.goal_is_blocked = False
        self.heuristic_cache.clear()
        self.bubble_risk_cache.clear()

    def set_path(self, path: Sequence[Cell]) -> None:
        """Make ``path`` the current path."""
        path = list(path)
        self.curr_path_info = self.path_info(path)
        self.curr_path = path
        self.path_cells = set()
        for parent, cell in pairwise(path[1:]):
            self.path_cells |= Node(cell, parent).cells()

    def update_occupancy(self, log_odds: Mapping[Cell, float], resolution: float) -> None:
        """Replace the occupancy map with per-cell log-odds at the given resolution."""
        if resolution <= 0:
            raise ValueError("resolution must be positive")
        self.risk_cache.clear()
        self.occupancy = dict(log_odds)
        self.octree_resolution = resolution

    # Graph structure and costs

    def open_neighbors(self, cell: Cell, is_3d: bool) -> list[tuple[Cell, float]]:
        """The 8 horizontal and, in 3D, up to 2 vertical neighbours with their move costs."""
        x, y, z = cell.x, cell.y, cell.z
        neighbors = [
            (Cell(x + 1, y, z), 1.0),
            (Cell(x + 1, y - 1, z), 1.41),
            (Cell(x + 1, y + 1, z), 1.41),
            (Cell(x - 1, y, z), 1.0),
            (Cell(x - 1, y - 1, z), 1.41),
            (Cell(x - 1, y + 1, z), 1.41),
            (Cell(x, y - 1, z), 1.0),
            (Cell(x, y + 1, z), 1.0),
        ]
        if is_3d and z < self.max_altitude:
            neighbors.append((Cell(x, y, z + 1), self.up_cost))
        if is_3d and z > self.min_altitude:
            neighbors.append((Cell(x, y, z - 1), self.down_cost))
        return neighbors

    def is_near_wall(self, cell: Cell) -> bool:
        """True if a diagonal neighbour of ``cell`` is occupied."""
        return any(self.is_occupied(n) for n in cell.diagonal_neighbors())

    def edge_dist(self, u: Cell, v: Cell) -> float:
        """Travel distance between adjacent cells, weighting climbs and descents."""
        z_diff = v.z_pos - u.z_pos
        return u.distance_2d(v) + self.up_cost * max(z_diff, 0.0) + self.down_cost * max(-z_diff, 0.0)

    def single_cell_risk(self, cell: Cell) -> float:
        """Risk of a cell on its own, ignoring its neighbours."""
        if cell.z < 1 or self.occupancy is None:
            return 1.0
        log_odds = self.occupancy.get(cell)
        if log_odds is not None:
            post_prob = posterior(self.alt_prior(cell), _probability(log_odds))
            if cell in self.occupied or log_odds > 0:
                return post_prob
            return self.explore_penalty * post_prob
        return self.explore_penalty * self.alt_prior(cell)

    def alt_prior(self, cell: Cell) -> float:
        """Prior obstacle probability at the altitude of ``cell``."""
        index = _round_half_away(cell.z_pos)
        # Negative altitudes fall through to the last entry.
        if index < 0 or index > len(self.alt_prior_values) - 1:
            return self.alt_prior_values[-1]
        return self.alt_prior_values[index]

    def is_occupied(self, cell: Cell) -> bool:
        return self.single_cell_risk(cell) > 0.5

    def is_legal(self, node: Node) -> bool:
        return node.cell.z_pos < self.max_altitude and self.node_risk(node) < self.max_cell_risk

    def cell_risk(self, cell: Cell) -> float:
        """Risk of a cell including the risk flowing in from nearby cells."""
        cached = self.risk_cache.get(cell)
        if cached is not None:
            return cached
        risk = self.single_cell_risk(cell)
        radius = math.ceil(self.robot_radius / self.octree_resolution)
        risk += sum(self.neighbor_risk_flow * self.single_cell_risk(n) for n in cell.flow_neighbors(radius))
        self.risk_cache[cell] = risk
        return risk

    def node_risk(self, node: Node) -> float:
        """Mean risk of the cells a move passes through, scaled by its length."""
        cells = node.cells()
        if not cells:
            return 0.0
        risk = sum(self.cell_risk(c) for c in cells)
        return risk / len(cells) * node.length()

    def turn_smoothness(self, u: Node, v: Node) -> float:
        """Squared number of 45-degree turns from ``u`` to ``v``."""
        turn = u.rotation(v)
        return turn * turn

    def edge_cost(self, u: Node, v: Node) -> float:
        """Total cost of moving from ``u`` to ``v``."""
        dist_cost = self.edge_dist(u.cell, v.cell)
        risk_cost = self.risk_factor * self.node_risk(v)
        smooth_cost = self.smooth_factor * self.turn_smoothness(u, v)
        near_start = u.cell.distance_3d(Cell.from_point(self.curr_pos)) < 3
        if near_start and math.hypot(*self.curr_vel) > 1:
            smooth_cost *= 2
        return dist_cost + risk_cost + smooth_cost

    # Heuristics

    def _accumulated_prior(self, z: int) -> float:
        index = min(max(z, 0), len(self.accumulated_alt_prior) - 1)
        return self.accumulated_alt_prior[index]

    def _unexplored_risk(self) -> float:
        return (1.0 + 6.0 * self.neighbor_risk_flow) * self.explore_penalty * self.risk_factor

    def risk_heuristic(self, u: Cell, goal: Cell) -> float:
        """Risk of a straight path through unexplored space from ``u`` to ``goal``."""
        if u == goal:
            return 0.0
        unexplored_risk = self._unexplored_risk()
        xy_dist = u.diag_distance_2d(goal) - 1.0
        xy_risk = xy_dist * unexplored_risk * self.alt_prior(u)
        z_risk = unexplored_risk * abs(self._accumulated_prior(u.z) - self._accumulated_prior(goal.z))
        goal_risk = self.cell_risk(goal) * self.risk_factor
        return xy_risk + z_risk + goal_risk

    def risk_heuristic_reverse_cache(self, u: Cell, goal: Cell) -> float:
        """Risk estimate to reach a bubble of known cost around ``goal``."""
        cached = self.bubble_risk_cache.get(u)
        if cached is not None:
            return cached
        if u == goal:
            return 0.0
        dist_to_bubble = max(0.0, u.diag_distance_3d(goal) - self.bubble_radius)
        return self.bubble_cost + dist_to_bubble * self._unexplored_risk() * self.alt_prior(u)

    def smoothness_heuristic(self, u: Node, goal: Cell) -> float:
        """Lower bound on the turning cost from ``u`` to ``goal``."""
        cell, parent = u.cell, u.parent
        if cell.x == goal.x and cell.y == goal.y:
            return 0.0
        if cell.x == parent.x and cell.y == parent.y:
            return self.smooth_factor * self.vert_to_hor_cost
        u_ang = (cell - parent).angle()
        goal_ang = (goal - cell).angle()
        num_45_deg_turns = abs(angle_to_range(goal_ang - u_ang)) / (math.pi / 4)
        altitude_change = 0 if cell.z == goal.z else 1
        return self.smooth_factor * (num_45_deg_turns + altitude_change)

    def altitude_heuristic(self, u: Cell, goal: Cell) -> float:
        """Cost of climbing or descending to the goal altitude."""
        diff = goal.z - u.z
        return self.up_cost * abs(diff) if diff > 0 else self.down_cost * abs(diff)

    def heuristic(self, u: Node, goal: Cell) -> float:
        """Estimated cost from ``u`` to ``goal``."""
        value = self.overestimate_factor * u.cell.diag_distance_2d(goal)
        value += self.altitude_heuristic(u.cell, goal)
        value += self.smoothness_heuristic(u, goal)
        if self.use_risk_heuristics:
            value += self.risk_heuristic(u.cell, goal)
        if self.use_speedup_heuristics:
            value += self.seen_count.get(u.cell, 0.0)
        self.heuristic_cache[u] = value
        return value

    # Path output

    def _pose(self, cell: Cell, yaw: float) -> PathPose:
        return PathPose(cell.to_point(), yaw, self.frame_id)

    def path_poses(self, path: Iterable[Cell] | None = None) -> list[PathPose]:
        """Poses along ``path`` (the current path by default), each facing the next cell."""
        cells = self.curr_path if path is None else list(path)
        if not cells:
            return []
        poses = []
        last_yaw = self.curr_yaw
        for cell, following in pairwise(cells):
            yaw = next_yaw(cell, following, last_yaw)
            poses.append(self._pose(cell, yaw))
            last_yaw = yaw
        poses.append(self._pose(cells[-1], last_yaw))
        return poses

    def path_with_risk(self) -> list[tuple[PathPose, float]]:
        """Poses of the current path paired with the risk at each of them."""
        return [(pose, self.cell_risk(Cell.from_point(pose.position))) for pose in self.path_poses()]

    def path_info(self, path: Sequence[Cell]) -> PathInfo:
        """Distance, risk, smoothness and total cost of ``path``."""
        info = PathInfo()
        for a, b, c in zip(path, path[1:], path[2:]):
            curr_node = Node(c, b)
            last_node = Node(b, a)
            risk = self.node_risk(curr_node)
            info.dist += self.edge_dist(last_node.cell, curr_node.cell)
            info.risk += self.risk_factor * risk
            info.cost += self.edge_cost(last_node, curr_node)
            info.is_blocked |= risk > self.max_cell_risk
            info.smoothness += self.smooth_factor * self.turn_smoothness(last_node, curr_node)
        return info

    # Mission control

    def go_back(self) -> None:
        """Retrace the recorded way back until a safe cell is reached."""
        if not self.path_back:
            raise ValueError("no recorded path to go back along")
        self.going_back = True
        new_path = list(reversed(self.path_back))
        for i in range(1, len(new_path) - 1):
            if i > 5 and self.cell_risk(new_path[i]) < 0.5:
                new_path = new_path[: i + 1]
                self.path_back = self.path_back[: len(self.path_back) - i - 2]
                break
        self.curr_path = new_path
        self.goal = Goal(new_path[-1], 1.0)

    def stop(self) -> None:
        """Make the current position both the goal and the whole path."""
        here = Cell.from_point(self.curr_pos)
        self.set_goal(Goal(here))
        self.set_path([here])

    def set_robot_radius(self, radius: float) -> None:
        self.robot_radius = radius