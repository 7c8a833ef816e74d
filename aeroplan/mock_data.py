"""Synthetic obstacle data for exercising the planner without sensors."""

from __future__ import annotations

from typing import Iterable, Sequence

Point = tuple[float, float, float]

CLICKED_GOAL: Point = (8.5, 4.5, 1.5)
"""Goal the mock data source sends once it has run for a while."""

VEHICLE_POSITION: Point = (0.5, 2.5, 1.5)
"""Fixed vehicle position reported by the mock data source."""

POINT_COLOR = (40, 200, 120)
"""RGB colour attached to every mock obstacle point."""

FRAME_ID = "/world"

_DEFAULT_POINTS: tuple[Point, ...] = (
    (5.5, -0.5, 0.5),
    (5.5, 0.5, 0.5),
    (5.5, 1.5, 0.5),
    (5.5, -0.5, 1.5),
    (5.5, 0.5, 1.5),
    (5.5, 1.5, 1.5),
    (5.5, -0.5, 2.5),
    (5.5, 0.5, 2.5),
    (5.5, 1.5, 2.5),
)


def default_points() -> list[Point]:
    """The small obstacle patch used before any wall is built."""
    return list(_DEFAULT_POINTS)


def create_wall(dist: int, width: int, height: int) -> list[Point]:
    """Obstacle points of a wall at x = ``dist``, spanning y in [-width, width] and z in [0, height]."""
    return [
        (dist + 0.5, i + 0.5, j + 0.5)
        for i in range(-width, width + 1)
        for j in range(height + 1)
    ]


def format_path(points: Iterable[Sequence[float]]) -> str:
    """Render a path as an arrow-separated list of positions."""
    parts = [f"({x:.2f}, {y:.2f}, {z:.2f}) -> " for x, y, z in points]
    return "".join(parts) + "\n\n"