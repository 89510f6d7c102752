# src/floormap/transforms.py
"""Conversions between world, wall-relative and elevation-view coordinates.

* World: floorplan coordinates.
* Wall-relative: distance along the wall tangent from its first endpoint and
  offset along its normal, both measured to the object's leading edge.
* Elevation: screen pixels of a single wall's front view; X grows along the
  wall from ``wall_x_offset``, Y grows downward with the floor at
  ``wall_y_offset + wall_height_mm * effective_scale``.

Every function takes the target wall explicitly and returns None when the
transform is undefined (degenerate wall, non-positive scale, non-finite input).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from floormap.geometry import get_wall_geometry, is_number
from floormap.models import Shape, WallRelativePosition


@dataclass(frozen=True)
class WorldPlacement:
    x: float
    y: float
    rotation: float  # degrees


@dataclass(frozen=True)
class ElevationRect:
    x: float
    y: float
    width: float
    height: float


def _valid_scale(effective_scale: float) -> bool:
    return is_number(effective_scale) and effective_scale > 0


def world_to_wall_relative(
    world_x: float,
    world_y: float,
    wall: Shape,
    width: float,
    depth: float,
    height: float = 0.0,
    elevation_bottom: float = 0.0,
) -> Optional[WallRelativePosition]:
    """Project an object centre in world space onto a wall's frame.

    Args:
        world_x, world_y: Object centre in world coordinates.
        wall: The wall to measure against.
        width: Object size along the wall.
        depth: Object size perpendicular to the wall.
        height: Object height (mm).
        elevation_bottom: Height of the object's bottom above the floor (mm).

    Returns:
        The wall-relative position (leading-edge convention), or None.
    """
    geom = get_wall_geometry(wall)
    if geom is None:
        return None
    if not all(is_number(v) for v in (world_x, world_y, width, depth, height, elevation_bottom)):
        return None
    if min(width, depth, height, elevation_bottom) < 0:
        return None

    along, perpendicular = geom.project(world_x, world_y)
    return WallRelativePosition(
        wall_id=wall.id,
        distance_from_wall_start=along - width / 2,
        perpendicular_offset=perpendicular - depth / 2,
        elevation_bottom=elevation_bottom,
        width=width,
        height=height,
        depth=depth,
    )


def wall_relative_to_world(
    wall_relative: WallRelativePosition, wall: Shape
) -> Optional[WorldPlacement]:
    """Rebuild an object's world-space centre and rotation from its wall-relative position."""
    geom = get_wall_geometry(wall)
    if geom is None:
        return None

    center_along = wall_relative.distance_from_wall_start + wall_relative.width / 2
    center_perpendicular = wall_relative.perpendicular_offset + wall_relative.depth / 2
    x, y = geom.point_at(center_along, center_perpendicular)
    if not (is_number(x) and is_number(y)):
        return None
    return WorldPlacement(x=x, y=y, rotation=math.degrees(geom.angle))


def wall_relative_to_elevation(
    wall_relative: WallRelativePosition,
    wall: Shape,
    wall_height_mm: float,
    effective_scale: float,
    wall_x_offset: float,
    wall_y_offset: float,
) -> Optional[ElevationRect]:
    """Screen rectangle of a wall-attached object in the wall's elevation view."""
    if get_wall_geometry(wall) is None or not _valid_scale(effective_scale):
        return None
    if not all(is_number(v) for v in (wall_height_mm, wall_x_offset, wall_y_offset)):
        return None

    wall_bottom_y = wall_y_offset + wall_height_mm * effective_scale
    top_from_floor = wall_relative.elevation_bottom + wall_relative.height
    return ElevationRect(
        x=wall_x_offset + wall_relative.distance_from_wall_start * effective_scale,
        y=wall_bottom_y - top_from_floor * effective_scale,
        width=wall_relative.width * effective_scale,
        height=wall_relative.height * effective_scale,
    )


def elevation_to_wall_relative(
    elevation_x: float,
    elevation_y: float,
    width: float,
    height: float,
    wall: Shape,
    wall_height_mm: float,
    effective_scale: float,
    wall_x_offset: float,
    wall_y_offset: float,
) -> Optional[WallRelativePosition]:
    """Inverse of :func:`wall_relative_to_elevation`.

    Objects edited in elevation sit on the wall surface, so the perpendicular
    offset and depth are zero; the bottom is clamped to the floor.
    """
    if get_wall_geometry(wall) is None or not _valid_scale(effective_scale):
        return None
    values = (elevation_x, elevation_y, width, height, wall_height_mm, wall_x_offset, wall_y_offset)
    if not all(is_number(v) for v in values) or width < 0 or height < 0:
        return None

    wall_bottom_y = wall_y_offset + wall_height_mm * effective_scale
    height_mm = height / effective_scale
    top_from_floor = (wall_bottom_y - elevation_y) / effective_scale
    return WallRelativePosition(
        wall_id=wall.id,
        distance_from_wall_start=(elevation_x - wall_x_offset) / effective_scale,
        perpendicular_offset=0.0,
        elevation_bottom=max(0.0, top_from_floor - height_mm),
        width=width / effective_scale,
        height=height_mm,
        depth=0.0,
    )
