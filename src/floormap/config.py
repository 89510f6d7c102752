# src/floormap/config.py
"""Tunable tolerances for wall matching, connectivity and logical walls.

All distances are in millimetres and are converted to world units with the
caller's ``units_per_mm`` scale at the point of use.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Heuristic thresholds used by the room and wall analysis functions."""

    # Room segmentation
    wall_match_tolerance_mm: float = 200
    opening_match_tolerance_mm: float = 150
    angle_match_tolerance_rad: float = 0.2
    min_edge_length_mm: float = 10
    default_wall_height_mm: float = 2400
    default_wall_thickness_mm: float = 150

    # Connected shapes (grouping)
    connection_tolerance_mm: float = 150
    min_zoom_level: float = 0.3

    # Same-line tests and logical walls
    collinear_dot_tolerance: float = 0.01
    line_distance_tolerance_mm: float = 5
    min_overlap_mm: float = 1
    logical_wall_max_gap_mm: float = 1000


DEFAULT_CONFIG = EngineConfig()
