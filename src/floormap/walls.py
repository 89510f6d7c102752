# src/floormap/walls.py
"""Wall editing helpers: auto-merge, snapping openings into walls, import clean-up."""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np

from floormap.attachment import NearestWall, find_nearest_wall_for_point
from floormap.geometry import (
    angles_match,
    get_wall_geometry,
    line_endpoints,
    round_half_up,
    segment_length,
    snap_to_grid,
)
from floormap.models import OPENING_SHAPE_TYPES, ImportedWall, Shape, ShapeType

logger = logging.getLogger(__name__)

MERGE_ANGLE_TOLERANCE_DEG = 5.0
MERGE_ENDPOINT_TOLERANCE = 1.0
MIN_SEGMENT_LENGTH = 5.0

AXIS_SNAP_THRESHOLD = 5.0
ENDPOINT_SNAP_THRESHOLD = 10.0
COLLINEAR_MERGE_THRESHOLD = 5.0

LineCoords = dict[str, float]


@dataclass(frozen=True)
class MergeResult:
    merged_wall: Shape
    walls_to_remove: list[str]


# ------------------------------------------------------------------ #
# Auto-merge of freshly drawn walls
# ------------------------------------------------------------------ #


def _points_match(a: tuple[float, float], b: tuple[float, float]) -> bool:
    return (
        abs(a[0] - b[0]) < MERGE_ENDPOINT_TOLERANCE
        and abs(a[1] - b[1]) < MERGE_ENDPOINT_TOLERANCE
    )


def find_mergeable_walls(new_wall: Shape, walls: Sequence[Shape]) -> list[Shape]:
    """Walls of the same plan sharing an endpoint with ``new_wall`` and running the same way."""
    new_geom = get_wall_geometry(new_wall) if new_wall.is_wall else None
    if new_geom is None:
        return []
    new_ends = ((new_geom.x1, new_geom.y1), (new_geom.x2, new_geom.y2))
    tolerance = math.radians(MERGE_ANGLE_TOLERANCE_DEG)

    mergeable = []
    for wall in walls:
        if wall.id == new_wall.id or not wall.is_wall or wall.plan_id != new_wall.plan_id:
            continue
        geom = get_wall_geometry(wall)
        if geom is None:
            continue
        ends = ((geom.x1, geom.y1), (geom.x2, geom.y2))
        shares_endpoint = any(_points_match(a, b) for a in new_ends for b in ends)
        if shares_endpoint and angles_match(new_geom.angle, geom.angle, tolerance):
            mergeable.append(wall)
    return mergeable


def merge_walls(walls: Sequence[Shape]) -> Optional[Shape]:
    """One wall spanning the two furthest-apart endpoints; keeps the first wall's id and properties."""
    if not walls:
        return None
    if len(walls) == 1:
        return walls[0]

    endpoints = [line_endpoints(w.coordinates) for w in walls]
    points = np.array(
        [p for e in endpoints if e is not None for p in ((e[0], e[1]), (e[2], e[3]))],
        dtype=float,
    )
    if len(points) < 2:
        return None
    distances = np.linalg.norm(points[:, None, :] - points[None, :, :], axis=-1)
    i, j = np.unravel_index(np.argmax(distances), distances.shape)
    if distances[i, j] == 0:
        return None

    (x1, y1), (x2, y2) = points[min(i, j)], points[max(i, j)]
    base = walls[0]
    return base.model_copy(update={
        "coordinates": {**base.coordinates, "x1": float(x1), "y1": float(y1), "x2": float(x2), "y2": float(y2)}
    })


def auto_merge_walls(new_wall: Shape, existing_walls: Sequence[Shape]) -> Optional[MergeResult]:
    mergeable = find_mergeable_walls(new_wall, existing_walls)
    if not mergeable:
        return None
    merged = merge_walls([new_wall, *mergeable])
    if merged is None:
        return None
    logger.debug("Merged wall %s with %d walls", new_wall.id, len(mergeable))
    return MergeResult(merged_wall=merged, walls_to_remove=[w.id for w in mergeable])


# ------------------------------------------------------------------ #
# Openings drawn onto walls
# ------------------------------------------------------------------ #


def is_opening_type(shape_type: Union[ShapeType, str]) -> bool:
    try:
        return ShapeType(shape_type) in OPENING_SHAPE_TYPES
    except ValueError:
        return False


def find_nearest_wall_for_opening(
    opening: Mapping[str, Any], walls: Sequence[Shape], threshold: float
) -> Optional[NearestWall]:
    """Nearest wall to the midpoint of an opening line, within ``threshold``."""
    endpoints = line_endpoints(opening)
    if endpoints is None:
        return None
    x1, y1, x2, y2 = endpoints
    return find_nearest_wall_for_point((x1 + x2) / 2, (y1 + y2) / 2, walls, threshold)


def project_onto_wall(opening: Mapping[str, Any], wall: Mapping[str, Any]) -> LineCoords:
    """Lay the opening along the wall, centred on the clamped projection of its midpoint.

    The opening keeps its length and is oriented like the wall, so its first
    endpoint is the one nearer the wall's start.
    """
    endpoints = line_endpoints(opening)
    geom = get_wall_geometry(wall)
    if endpoints is None or geom is None:
        return dict(opening)

    x1, y1, x2, y2 = endpoints
    half = segment_length(x1, y1, x2, y2) / 2
    along, _ = geom.project((x1 + x2) / 2, (y1 + y2) / 2)
    along = max(0.0, min(geom.length, along))
    start = geom.point_at(along - half)
    end = geom.point_at(along + half)
    return {"x1": start[0], "y1": start[1], "x2": end[0], "y2": end[1]}


def split_wall(wall: Mapping[str, Any], opening: Mapping[str, Any]) -> list[LineCoords]:
    """Wall pieces left on either side of an opening projected onto it.

    Pieces shorter than ``MIN_SEGMENT_LENGTH`` are dropped, so an opening
    spanning the whole wall leaves nothing.
    """
    wall_ends = line_endpoints(wall)
    opening_ends = line_endpoints(opening)
    if wall_ends is None or opening_ends is None:
        return []
    wx1, wy1, wx2, wy2 = wall_ends
    ox1, oy1, ox2, oy2 = opening_ends

    pieces = [
        {"x1": wx1, "y1": wy1, "x2": ox1, "y2": oy1},
        {"x1": ox2, "y1": oy2, "x2": wx2, "y2": wy2},
    ]
    return [
        p for p in pieces
        if segment_length(p["x1"], p["y1"], p["x2"], p["y2"]) >= MIN_SEGMENT_LENGTH
    ]


# ------------------------------------------------------------------ #
# Clean-up of imported wall segments
# ------------------------------------------------------------------ #


def snap_to_axis(walls: Sequence[ImportedWall], threshold: float = AXIS_SNAP_THRESHOLD) -> list[ImportedWall]:
    """Straighten nearly horizontal/vertical walls onto their average row or column."""
    snapped = []
    for w in walls:
        dx, dy = abs(w.x2 - w.x1), abs(w.y2 - w.y1)
        if dy < threshold and dx > dy:
            y = round_half_up((w.y1 + w.y2) / 2)
            w = w.model_copy(update={"y1": y, "y2": y})
        elif dx < threshold and dy > dx:
            x = round_half_up((w.x1 + w.x2) / 2)
            w = w.model_copy(update={"x1": x, "x2": x})
        snapped.append(w)
    return snapped


def snap_endpoints(walls: Sequence[ImportedWall], threshold: float = ENDPOINT_SNAP_THRESHOLD) -> list[ImportedWall]:
    """Collapse endpoints within ``threshold`` of each other to their rounded mean.

    Clusters are greedy: each unvisited endpoint gathers all later
    unvisited endpoints within ``threshold`` of itself.
    """
    if not walls:
        return []
    points = np.array([p for w in walls for p in ((w.x1, w.y1), (w.x2, w.y2))], dtype=float)
    canonical = np.empty_like(points)
    visited = np.zeros(len(points), dtype=bool)
    for i in range(len(points)):
        if visited[i]:
            continue
        near = np.hypot(*(points - points[i]).T) <= threshold
        cluster = near & ~visited
        cluster[:i] = False
        visited |= cluster
        (mean,) = snap_to_grid([tuple(points[cluster].mean(axis=0))], 1.0)
        canonical[cluster] = mean

    return [
        w.model_copy(update={
            "x1": float(canonical[2 * k][0]), "y1": float(canonical[2 * k][1]),
            "x2": float(canonical[2 * k + 1][0]), "y2": float(canonical[2 * k + 1][1]),
        })
        for k, w in enumerate(walls)
    ]


def _try_merge(a: ImportedWall, b: ImportedWall, threshold: float) -> Optional[ImportedWall]:
    thickness = a.thickness or b.thickness
    if a.y1 == a.y2 and b.y1 == b.y2 and abs(a.y1 - b.y1) <= threshold:
        a_lo, a_hi = sorted((a.x1, a.x2))
        b_lo, b_hi = sorted((b.x1, b.x2))
        if b_lo <= a_hi + threshold and a_lo <= b_hi + threshold:
            y = round_half_up((a.y1 + b.y1) / 2)
            return ImportedWall(x1=min(a_lo, b_lo), y1=y, x2=max(a_hi, b_hi), y2=y, thickness=thickness)
    if a.x1 == a.x2 and b.x1 == b.x2 and abs(a.x1 - b.x1) <= threshold:
        a_lo, a_hi = sorted((a.y1, a.y2))
        b_lo, b_hi = sorted((b.y1, b.y2))
        if b_lo <= a_hi + threshold and a_lo <= b_hi + threshold:
            x = round_half_up((a.x1 + b.x1) / 2)
            return ImportedWall(x1=x, y1=min(a_lo, b_lo), x2=x, y2=max(a_hi, b_hi), thickness=thickness)
    return None


def merge_collinear_walls(
    walls: Sequence[ImportedWall], threshold: float = COLLINEAR_MERGE_THRESHOLD
) -> list[ImportedWall]:
    """Merge overlapping or nearly touching axis-aligned walls on the same row/column."""
    used: set[int] = set()
    result = []
    for i, wall in enumerate(walls):
        if i in used:
            continue
        used.add(i)
        merged = wall
        changed = True
        while changed:
            changed = False
            for j, other in enumerate(walls):
                if j in used:
                    continue
                candidate = _try_merge(merged, other, threshold)
                if candidate is not None:
                    merged = candidate
                    used.add(j)
                    changed = True
        result.append(merged)
    return result


def post_process_walls(walls: Sequence[ImportedWall]) -> list[ImportedWall]:
    """Axis snap, endpoint clustering, then collinear merge."""
    if not walls:
        return []
    result = merge_collinear_walls(snap_endpoints(snap_to_axis(walls)))
    logger.debug("Post-processed %d walls into %d", len(walls), len(result))
    return result
