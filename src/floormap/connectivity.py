# src/floormap/connectivity.py
"""Auto-grouping of shapes that visually connect at endpoints or vertices."""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import numpy as np

from floormap.config import DEFAULT_CONFIG, EngineConfig
from floormap.geometry import is_number
from floormap.models import LINE_TYPES, POLYGON_TYPES, Shape, ShapeType

logger = logging.getLogger(__name__)


def _xy(source: Mapping, x_key: str = "x", y_key: str = "y") -> list[tuple[float, float]]:
    x, y = source.get(x_key), source.get(y_key)
    if is_number(x) and is_number(y):
        return [(float(x), float(y))]
    return []


def _box_corners(x, y, width, height) -> list[tuple[float, float]]:
    if not all(is_number(v) for v in (x, y, width, height)):
        return []
    return [(x, y), (x + width, y), (x, y + height), (x + width, y + height)]


def get_connection_points(shape: Shape) -> list[tuple[float, float]]:
    """Points at which ``shape`` can connect to other shapes, by shape type.

    Lines: both endpoints. Rectangles and images: the four corners. Rooms,
    polygons and freehand paths: every vertex. Circles: the centre. Bezier
    curves: start, control and end. Text, symbols and objects: the anchor.
    """
    coords = shape.coordinates
    if shape.type in LINE_TYPES:
        return _xy(coords, "x1", "y1") + _xy(coords, "x2", "y2")
    if shape.type == ShapeType.RECTANGLE:
        return _box_corners(
            coords.get("left"), coords.get("top"), coords.get("width"), coords.get("height")
        )
    if shape.type == ShapeType.IMAGE:
        return _box_corners(
            coords.get("x"), coords.get("y"), coords.get("width"), coords.get("height")
        )
    if shape.type in POLYGON_TYPES:
        points = coords.get("points")
        if not isinstance(points, Sequence):
            return []
        return [xy for p in points if isinstance(p, Mapping) for xy in _xy(p)]
    if shape.type == ShapeType.CIRCLE:
        return _xy(coords, "cx", "cy")
    if shape.type == ShapeType.BEZIER:
        return [
            xy
            for key in ("start", "control", "end")
            if isinstance(coords.get(key), Mapping)
            for xy in _xy(coords[key])
        ]
    return _xy(coords)


def connection_tolerance(
    zoom_level: float, units_per_mm: float = 1.0, config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """Match distance in world units; wider when zoomed out, floored at ``min_zoom_level``."""
    return config.connection_tolerance_mm * units_per_mm / max(config.min_zoom_level, zoom_level)


def find_connected_walls(
    start_id: str,
    shapes: Sequence[Shape],
    zoom_level: float = 1.0,
    units_per_mm: float = 1.0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Ids of all shapes transitively connected to ``start_id`` (start included).

    Two shapes are connected when any of their connection points lie within
    the zoom-dependent tolerance of each other. An unknown ``start_id`` is
    returned on its own.
    """
    by_id = {s.id: s for s in shapes}
    if start_id not in by_id:
        return [start_id]

    tolerance = connection_tolerance(zoom_level, units_per_mm, config)
    points = {
        shape_id: np.asarray(get_connection_points(shape), dtype=float).reshape(-1, 2)
        for shape_id, shape in by_id.items()
    }

    visited: set[str] = set()
    connected: list[str] = []
    to_visit = [start_id]
    while to_visit:
        current = to_visit.pop()
        if current in visited:
            continue
        visited.add(current)
        connected.append(current)

        current_points = points[current]
        if len(current_points) == 0:
            continue
        for shape_id, other_points in points.items():
            if shape_id in visited or len(other_points) == 0:
                continue
            deltas = current_points[:, None, :] - other_points[None, :, :]
            if np.hypot(deltas[..., 0], deltas[..., 1]).min() <= tolerance:
                to_visit.append(shape_id)

    logger.debug("Shape %s connects to %d shapes", start_id, len(connected) - 1)
    return connected
