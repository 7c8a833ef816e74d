"""Cells, nodes, risk model, mission control and landing grid for 3D aerial path planning."""

__version__ = "0.1.0"
__all__ = ["cell", "node", "grid", "mock_data", "planner", "controller"]