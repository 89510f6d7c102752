# src/floormap/geometry.py
from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np

from floormap.models import Point, Shape

# Walls shorter than this (in world units) are degenerate.
MIN_WALL_LENGTH = 1.0


def is_number(value: Any) -> bool:
    """True for finite real numbers (bools excluded)."""
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class WallGeometry:
    """Canonical frame of a wall segment.

    The normal is the tangent rotated 90 degrees counter-clockwise and points
    into the room by convention.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    length: float
    angle: float
    unit_x: float
    unit_y: float
    normal_x: float
    normal_y: float

    @classmethod
    def from_points(
        cls, x1: float, y1: float, x2: float, y2: float
    ) -> Optional[WallGeometry]:
        if not all(is_number(v) for v in (x1, y1, x2, y2)):
            return None
        start = np.array([x1, y1], dtype=float)
        end = np.array([x2, y2], dtype=float)
        wall_vec = end - start
        length = float(np.linalg.norm(wall_vec))
        if not math.isfinite(length) or length < MIN_WALL_LENGTH:
            return None
        wall_dir = wall_vec / length
        normal = np.array([-wall_dir[1], wall_dir[0]])
        return cls(
            x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2),
            length=length,
            angle=float(np.arctan2(wall_vec[1], wall_vec[0])),
            unit_x=float(wall_dir[0]), unit_y=float(wall_dir[1]),
            normal_x=float(normal[0]), normal_y=float(normal[1]),
        )

    @property
    def midpoint(self) -> tuple[float, float]:
        return (self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2

    def project(self, x: float, y: float) -> tuple[float, float]:
        """Return (distance along tangent, distance along normal) of a point."""
        dx = x - self.x1
        dy = y - self.y1
        return (
            dx * self.unit_x + dy * self.unit_y,
            dx * self.normal_x + dy * self.normal_y,
        )

    def point_at(self, along: float, perpendicular: float = 0.0) -> tuple[float, float]:
        return (
            self.x1 + along * self.unit_x + perpendicular * self.normal_x,
            self.y1 + along * self.unit_y + perpendicular * self.normal_y,
        )


def line_endpoints(
    coords: Optional[Mapping[str, Any]],
) -> Optional[tuple[float, float, float, float]]:
    """Numeric (x1, y1, x2, y2) from line coordinates, or None."""
    if not isinstance(coords, Mapping):
        return None
    values = tuple(coords.get(k) for k in ("x1", "y1", "x2", "y2"))
    if not all(is_number(v) for v in values):
        return None
    return tuple(float(v) for v in values)  # type: ignore[return-value]


def get_wall_geometry(
    wall: Union[Shape, Mapping[str, Any], None],
) -> Optional[WallGeometry]:
    """Extract the geometric frame of a wall shape (or raw line coordinates).

    Returns None when the wall is missing, its endpoints are not finite
    numbers, or it is shorter than ``MIN_WALL_LENGTH``.
    """
    if wall is None:
        return None
    coords = wall if isinstance(wall, Mapping) else getattr(wall, "coordinates", None)
    endpoints = line_endpoints(coords)
    if endpoints is None:
        return None
    return WallGeometry.from_points(*endpoints)


def segment_length(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def point_to_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> tuple[float, float]:
    """Distance from a point to a segment and the clamped parameter t of the closest point."""
    dx = x2 - x1
    dy = y2 - y1
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return math.hypot(px - x1, py - y1), 0.0
    t = ((px - x1) * dx + (py - y1) * dy) / len_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (x1 + t * dx), py - (y1 + t * dy)), t


def angles_match(angle1: float, angle2: float, tolerance: float) -> bool:
    """True if two line angles (radians) are parallel or anti-parallel within tolerance."""
    diff = abs(angle1 - angle2) % math.pi
    return min(diff, math.pi - diff) < tolerance


def polygon_center(points: Sequence[Point]) -> Point:
    """Arithmetic mean of the vertices (not the area centroid)."""
    if not points:
        return Point(x=0.0, y=0.0)
    return Point(
        x=sum(p.x for p in points) / len(points),
        y=sum(p.y for p in points) / len(points),
    )


def room_points(room: Optional[Shape]) -> Optional[list[Point]]:
    """Vertices of a room/polygon shape, or None if fewer than 3 valid points."""
    if room is None:
        return None
    raw = room.coordinates.get("points")
    if not isinstance(raw, Sequence) or len(raw) < 3:
        return None
    points: list[Point] = []
    for p in raw:
        if not isinstance(p, Mapping) or not (is_number(p.get("x")) and is_number(p.get("y"))):
            return None
        points.append(Point(x=float(p["x"]), y=float(p["y"])))
    return points


def snap_to_grid(
    coords: list[tuple[float, float]], grid_size: float
) -> list[tuple[float, float]]:
    """Snap coordinates to nearest grid point."""
    return [
        (snap_value(x, grid_size), snap_value(y, grid_size))
        for x, y in coords
    ]


def round_half_up(value: float) -> float:
    """Round to the nearest integer, ties towards positive infinity."""
    return float(math.floor(value + 0.5))


def snap_value(value: float, grid_size: float, enabled: bool = True) -> float:
    if not enabled or grid_size <= 0:
        return value
    return round_half_up(value / grid_size) * grid_size


def constrain_angle(angle: float) -> float:
    """Round an angle (radians) to the nearest 45 degree increment."""
    increment = math.pi / 4
    return round_half_up(angle / increment) * increment
