"""Mission control around the global planner: goals, waypoints and setpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from aeroplan.cell import Cell, Point
from aeroplan.planner import Goal, GlobalPlanner, PathPose


@dataclass(frozen=True)
class Setpoint:
    """A position setpoint for the flight controller."""

    position: Point
    yaw: float
    frame_id: str
    velocity: Point = (math.nan, math.nan, math.nan)


@dataclass(frozen=True)
class ClickedPoint:
    """A point picked by the operator, placed at the vehicle's altitude."""

    position: Point
    frame_id: str


@dataclass
class _PublishedGoal:
    point: Point
    is_temporary: bool


class PlannerController:
    """Feeds vehicle state into a planner and turns its path into setpoints."""

    def __init__(
        self,
        planner: GlobalPlanner | None = None,
        *,
        start_pos: Sequence[float] = (0.5, 0.5, 3.5),
        start_yaw: float = 0.0,
        frame_id: str = "/local_origin",
        robot_radius: float = 0.5,
        clicked_goal_alt: float = 3.5,
        clicked_goal_radius: float = 1.0,
    ) -> None:
        self.planner = planner if planner is not None else GlobalPlanner(frame_id=frame_id)
        self.frame_id = frame_id
        self.clicked_goal_alt = clicked_goal_alt
        self.clicked_goal_radius = clicked_goal_radius

        start: Point = (float(start_pos[0]), float(start_pos[1]), float(start_pos[2]))
        self.planner.goal = Goal.from_position(*start)
        self.planner.frame_id = frame_id
        self.planner.set_robot_radius(robot_radius)

        self.waypoints: list[Goal] = []
        self.path: list[PathPose] = []
        self.actual_path: list[PathPose] = []
        self.clicked_points: list[ClickedPoint] = []
        self.published_goals: list[_PublishedGoal] = []

        self.current_goal = PathPose(start, start_yaw, frame_id)
        self.last_goal = self.current_goal
        self.last_pos: Point = (0.0, 0.0, 0.0)
        self.last_yaw = 0.0
        self.position_received = False
        self._num_pos_msg = 0
        self.speed = self.planner.default_speed

    # Goals

    def set_new_goal(self, goal: Goal) -> None:
        """Hand a new goal to the planner and record it as published."""
        self.planner.set_goal(goal)
        self.published_goals.append(_PublishedGoal(goal.to_point(), goal.is_temporary))

    def pop_next_goal(self) -> None:
        """Advance to the next waypoint, or stop if the goal is blocked and none is left."""
        if self.waypoints:
            self.set_new_goal(self.waypoints.pop(0))
        elif self.planner.goal_is_blocked:
            self.planner.stop()

    def set_intermediate_goal(self) -> None:
        """Put a temporary goal half way along a long current path."""
        path = self.planner.curr_path
        length = len(path)
        if length > 10:
            self.waypoints.insert(0, self.planner.goal)
            middle = path[length // 2]
            self.set_new_goal(Goal(middle, length // 4, True))

    # Incoming vehicle data

    def on_velocity(self, velocity: Sequence[float]) -> None:
        self.planner.curr_vel = (float(velocity[0]), float(velocity[1]), float(velocity[2]))

    def on_position(self, position: Sequence[float], yaw: float) -> None:
        """Update the pose and advance along the path once the current goal is reached."""
        self.last_pos = (float(position[0]), float(position[1]), float(position[2]))
        self.last_yaw = yaw
        self.planner.set_pose(self.last_pos, yaw)

        if self._num_pos_msg % 10 == 0:
            self.actual_path.append(PathPose(self.last_pos, yaw, self.frame_id))
        self._num_pos_msg += 1
        self.position_received = True

        if self.path and self.is_close_to_goal():
            yaw_diff = abs(yaw - self.current_goal.yaw)
            yaw_diff -= math.floor(yaw_diff / (2 * math.pi)) * (2 * math.pi)
            max_yaw_diff = math.pi
            if yaw_diff < max_yaw_diff or yaw_diff > 2 * math.pi - max_yaw_diff:
                self.last_goal = self.current_goal
                self.current_goal = self.path.pop(0)

    def on_clicked_point(self, x: float, y: float, z: float) -> None:
        """Record an operator-picked point at the vehicle's current altitude."""
        position: Point = (float(x), float(y), self.planner.curr_pos[2])
        self.clicked_points.append(ClickedPoint(position, self.frame_id))

    def on_move_base_goal(self, x: float, y: float) -> None:
        """Set a goal at (x, y) with the configured altitude and radius."""
        self.set_new_goal(
            Goal.from_position(x, y, self.clicked_goal_alt, self.clicked_goal_radius)
        )

    def on_fcu_goal(self, x: float, y: float, z: float, valid: bool) -> None:
        """Accept a goal from the flight controller if it is valid and new in XY."""
        new_goal = Goal.from_position(x, y, z, 1.0)
        current = self.planner.goal
        moved = (
            abs(current.x_pos - new_goal.x_pos) > 0.001
            or abs(current.y_pos - new_goal.y_pos) > 0.001
        )
        if valid and moved:
            self.set_new_goal(new_goal)

    def on_obstacle_points(self, points: Iterable[Sequence[float]]) -> None:
        """Mark the cells of world-frame obstacle points as occupied."""
        for x, y, z in points:
            if not math.isnan(x):
                self.planner.occupied.add(Cell.from_position(x, y, z))

    # Outgoing commands

    def set_current_path(self, poses: Sequence[PathPose]) -> None:
        """Follow ``poses``: the second one becomes the current goal."""
        self.path = []
        if len(poses) < 2:
            return
        self.last_goal = poses[0]
        self.current_goal = poses[1]
        self.path = list(poses[2:])

    def compute_setpoint(self) -> Setpoint:
        """Setpoint a speed-dependent step from the vehicle towards the current goal."""
        planner = self.planner
        vec = [g - p for g, p in zip(self.current_goal.position, self.last_pos)]

        if planner.use_speedup_heuristics:
            cur_risk = math.sqrt(planner.cell_risk(Cell.from_point(self.last_pos)))
            if cur_risk >= planner.risk_threshold_risk_based_speedup:
                self.speed = planner.default_speed
            else:
                self.speed = planner.default_speed + (
                    planner.max_speed - planner.default_speed
                ) * (1 - cur_risk)
        else:
            self.speed = planner.default_speed

        length = math.sqrt(sum(c * c for c in vec))
        new_len = length if length < 1.0 else self.speed
        scale = new_len / length if length > 0 else 0.0
        position: Point = tuple(p + c * scale for p, c in zip(self.last_pos, vec))  # type: ignore[assignment]
        return Setpoint(position, self.current_goal.yaw, self.current_goal.frame_id)

    def is_close_to_goal(self) -> bool:
        return math.dist(self.current_goal.position, self.last_pos) < self.speed