# src/floormap/attachment.py
"""Snapping objects to walls and keeping floorplan and elevation views in sync.

Objects store their placement relative to a wall (``WallRelativePosition``)
so that a move in either view can be replayed in the other. All functions
return a ``ShapeUpdate`` to merge into the shape, or None when nothing
applies (no wall in range, object not attached, degenerate wall).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

from floormap.categories import get_defaults_for_category, infer_category_from_symbol_type
from floormap.geometry import get_wall_geometry, is_number, point_to_segment
from floormap.models import Shape, ShapeUpdate, WallObjectCategory, WallRelativePosition
from floormap.transforms import (
    elevation_to_wall_relative,
    wall_relative_to_world,
    world_to_wall_relative,
)

logger = logging.getLogger(__name__)

DEFAULT_SNAP_THRESHOLD = 500.0
INITIALIZE_SNAP_THRESHOLD = 1000.0


@dataclass(frozen=True)
class NearestWall:
    wall: Shape
    distance: float
    t: float


@dataclass(frozen=True)
class ElevationParams:
    """Canvas parameters of the elevation view an object was edited in."""

    wall_height_mm: float
    effective_scale: float
    wall_x_offset: float
    wall_y_offset: float


class _ObjectFrame(NamedTuple):
    kind: str  # "rect" (left/top) or "symbol" (x/y)
    x: float
    y: float
    width: Optional[float]
    depth: Optional[float]


def _object_frame(shape: Shape) -> Optional[_ObjectFrame]:
    coords = shape.coordinates
    if is_number(coords.get("left")) and is_number(coords.get("top")):
        kind, x, y = "rect", coords["left"], coords["top"]
    elif is_number(coords.get("x")) and is_number(coords.get("y")):
        kind, x, y = "symbol", coords["x"], coords["y"]
    else:
        return None

    def size(key: str) -> Optional[float]:
        value = coords.get(key)
        return float(value) if is_number(value) and value >= 0 else None

    return _ObjectFrame(kind, float(x), float(y), size("width"), size("height"))


def _placed_coordinates(
    shape: Shape,
    kind: str,
    x: float,
    y: float,
    width: Optional[float] = None,
    depth: Optional[float] = None,
) -> dict:
    coords = dict(shape.coordinates)
    if kind == "rect":
        coords.update(left=x, top=y)
    else:
        coords.update(x=x, y=y)
    if width is not None:
        coords["width"] = width
    if depth is not None:
        coords["height"] = depth
    return coords


def find_nearest_wall_for_point(
    x: float,
    y: float,
    walls: Sequence[Shape],
    max_distance: float = DEFAULT_SNAP_THRESHOLD,
) -> Optional[NearestWall]:
    """Find the wall closest to a point, within ``max_distance``.

    Each wall is treated as a segment: the point is projected onto it with
    the parameter clamped to [0, 1]. Degenerate walls are ignored.
    """
    if not (is_number(x) and is_number(y)):
        return None

    nearest: Optional[NearestWall] = None
    for wall in walls:
        geom = get_wall_geometry(wall)
        if geom is None:
            continue
        distance, t = point_to_segment(x, y, geom.x1, geom.y1, geom.x2, geom.y2)
        if distance <= max_distance and (nearest is None or distance < nearest.distance):
            nearest = NearestWall(wall=wall, distance=distance, t=t)
    return nearest


def calculate_wall_attachment(
    center_x: float,
    center_y: float,
    width: float,
    depth: float,
    wall: Shape,
    existing: Optional[WallRelativePosition] = None,
    perpendicular_offset: Optional[float] = None,
) -> Optional[WallRelativePosition]:
    """Attach an object centred at (center_x, center_y) to ``wall``.

    The position along the wall is clamped so the object stays between the
    wall's endpoints. Without an explicit ``perpendicular_offset`` the
    existing offset is kept, or 0 (flush with the wall).
    """
    geom = get_wall_geometry(wall)
    if geom is None:
        return None
    if not all(is_number(v) for v in (center_x, center_y, width, depth)) or min(width, depth) < 0:
        return None

    along, _ = geom.project(center_x, center_y)
    along = max(width / 2, min(geom.length - width / 2, along))

    if perpendicular_offset is None:
        perpendicular_offset = existing.perpendicular_offset if existing else 0.0

    return WallRelativePosition(
        wall_id=wall.id,
        distance_from_wall_start=along - width / 2,
        perpendicular_offset=perpendicular_offset,
        elevation_bottom=existing.elevation_bottom if existing else 0.0,
        width=width,
        height=existing.height if existing else 0.0,
        depth=depth,
    )


def snap_object_to_wall(
    shape: Shape,
    walls: Sequence[Shape],
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD,
) -> Optional[ShapeUpdate]:
    """Snap a rectangle/symbol to the nearest wall within ``snap_threshold``.

    Missing sizes, bottom elevation and height come from the object's
    category defaults. Returns None if no wall is in range, in which case
    the object stays freestanding.
    """
    frame = _object_frame(shape)
    if frame is None:
        return None

    category = shape.object_category or infer_category_from_symbol_type(shape.symbol_type)
    defaults = get_defaults_for_category(category)
    width = frame.width if frame.width is not None else defaults.default_width
    depth = frame.depth if frame.depth is not None else defaults.default_depth
    center_x = frame.x + width / 2
    center_y = frame.y + depth / 2

    nearest = find_nearest_wall_for_point(center_x, center_y, walls, snap_threshold)
    if nearest is None:
        logger.debug("No wall within %s of shape %s", snap_threshold, shape.id)
        return None

    attachment = calculate_wall_attachment(
        center_x, center_y, width, depth, nearest.wall, shape.wall_relative
    )
    if attachment is None:
        return None

    existing = shape.wall_relative
    wall_relative = attachment.model_copy(update={
        "elevation_bottom": existing.elevation_bottom if existing else defaults.elevation_bottom,
        "height": existing.height if existing else defaults.default_height,
    })

    placement = wall_relative_to_world(wall_relative, nearest.wall)
    if placement is None:
        return None

    return ShapeUpdate(
        coordinates=_placed_coordinates(
            shape, frame.kind,
            placement.x - width / 2, placement.y - depth / 2,
            width, depth,
        ),
        rotation=placement.rotation,
        wall_relative=wall_relative,
        object_category=category,
    )


def sync_wall_relative_from_floorplan(
    shape: Shape, walls: Sequence[Shape]
) -> Optional[ShapeUpdate]:
    """Recompute wall-relative data after an attached object moved in the floorplan."""
    current = shape.wall_relative
    if current is None:
        return None
    frame = _object_frame(shape)
    if frame is None or frame.width is None or frame.depth is None:
        return None
    wall = next((w for w in walls if w.id == current.wall_id), None)
    if wall is None:
        return None

    updated = world_to_wall_relative(
        frame.x + frame.width / 2,
        frame.y + frame.depth / 2,
        wall,
        current.width,
        current.depth,
        current.height,
        current.elevation_bottom,
    )
    if updated is None:
        return None
    return ShapeUpdate(wall_relative=updated)


def sync_from_elevation(
    shape: Shape,
    wall: Shape,
    elevation_x: float,
    elevation_y: float,
    width: float,
    height: float,
    params: ElevationParams,
) -> Optional[ShapeUpdate]:
    """Apply a move/resize made in the elevation view to the shape.

    Depth and perpendicular offset are not editable in elevation and are
    carried over from the current attachment.
    """
    edited = elevation_to_wall_relative(
        elevation_x, elevation_y, width, height, wall,
        params.wall_height_mm, params.effective_scale,
        params.wall_x_offset, params.wall_y_offset,
    )
    if edited is None:
        return None

    current = shape.wall_relative
    merged = edited.model_copy(update={
        "perpendicular_offset": current.perpendicular_offset if current else 0.0,
        "depth": current.depth if current else 0.0,
    })

    placement = wall_relative_to_world(merged, wall)
    frame = _object_frame(shape)
    if placement is None or frame is None:
        return None

    return ShapeUpdate(
        coordinates=_placed_coordinates(
            shape, frame.kind,
            placement.x - merged.width / 2, placement.y - merged.depth / 2,
            merged.width, merged.depth,
        ),
        rotation=placement.rotation,
        wall_relative=merged,
    )


def detach_from_wall(shape: Shape) -> ShapeUpdate:
    return ShapeUpdate(wall_relative=None, object_category=None)


def update_object_elevation(shape: Shape, elevation_bottom: float) -> Optional[ShapeUpdate]:
    """Move an attached object vertically; it cannot go below the floor."""
    if shape.wall_relative is None or not is_number(elevation_bottom):
        return None
    return ShapeUpdate(
        wall_relative=shape.wall_relative.model_copy(
            update={"elevation_bottom": max(0.0, float(elevation_bottom))}
        )
    )


def set_object_category(shape: Shape, category: WallObjectCategory) -> ShapeUpdate:
    """Change category and reset the bottom elevation to the category default."""
    defaults = get_defaults_for_category(category)
    wall_relative = None
    if shape.wall_relative is not None:
        wall_relative = shape.wall_relative.model_copy(update={
            "elevation_bottom": defaults.elevation_bottom,
            "height": shape.wall_relative.height or defaults.default_height,
        })
    return ShapeUpdate(object_category=category, wall_relative=wall_relative)


def has_valid_wall_relative(shape: Shape) -> bool:
    wr = shape.wall_relative
    return bool(
        wr is not None
        and wr.wall_id
        and is_number(wr.distance_from_wall_start)
        and is_number(wr.width)
    )


def initialize_wall_relative(
    shape: Shape,
    walls: Sequence[Shape],
    default_category: WallObjectCategory = WallObjectCategory.CUSTOM,
) -> Optional[ShapeUpdate]:
    """Attach a legacy free-standing object to its nearest wall, if any."""
    if has_valid_wall_relative(shape):
        return None
    snapped = snap_object_to_wall(shape, walls, INITIALIZE_SNAP_THRESHOLD)
    if snapped is None:
        return None
    return snapped.model_copy(
        update={"object_category": shape.object_category or default_category}
    )
