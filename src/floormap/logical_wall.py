# src/floormap/logical_wall.py
"""Same-line tests and logical walls.

A logical wall is one straight run made of several physical wall segments,
e.g. a wall split in two by a door. The elevation view shows it as a single
strip of wall / opening / gap spans.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import NamedTuple, Optional, Union

from floormap.categories import get_opening_defaults
from floormap.config import DEFAULT_CONFIG, EngineConfig
from floormap.geometry import WallGeometry, angles_match, get_wall_geometry, is_number
from floormap.models import (
    OPENING_TYPE_BY_SHAPE,
    CombinedWallElevation,
    CombinedWallSegment,
    OpeningType,
    SegmentType,
    Shape,
)

logger = logging.getLogger(__name__)

LineLike = Union[Shape, Mapping, WallGeometry]

_EPS = 1e-6


class OpeningSpan(NamedTuple):
    type: OpeningType
    start: float
    end: float
    height_mm: Optional[float] = None
    elevation_bottom: Optional[float] = None


def _geometry(line: LineLike) -> Optional[WallGeometry]:
    if isinstance(line, WallGeometry):
        return line
    return get_wall_geometry(line)


def interval_on(base: WallGeometry, other: WallGeometry) -> tuple[float, float]:
    """Sorted projections of ``other``'s endpoints along ``base``'s tangent."""
    a, _ = base.project(other.x1, other.y1)
    b, _ = base.project(other.x2, other.y2)
    return min(a, b), max(a, b)


def _on_same_line(
    base: WallGeometry, other: WallGeometry, tolerance: float, dot_tolerance: float
) -> bool:
    dot = base.unit_x * other.unit_x + base.unit_y * other.unit_y
    if abs(abs(dot) - 1) > dot_tolerance:
        return False
    _, d1 = base.project(other.x1, other.y1)
    _, d2 = base.project(other.x2, other.y2)
    return abs(d1) <= tolerance and abs(d2) <= tolerance


def are_collinear(
    a: LineLike,
    b: LineLike,
    tolerance: float = DEFAULT_CONFIG.line_distance_tolerance_mm,
    dot_tolerance: float = DEFAULT_CONFIG.collinear_dot_tolerance,
) -> bool:
    """True if both segments are parallel and lie on the same infinite line."""
    ga, gb = _geometry(a), _geometry(b)
    if ga is None or gb is None:
        return False
    return _on_same_line(ga, gb, tolerance, dot_tolerance)


def walls_overlap(
    a: LineLike,
    b: LineLike,
    tolerance: float = DEFAULT_CONFIG.line_distance_tolerance_mm,
    min_overlap: float = DEFAULT_CONFIG.min_overlap_mm,
    dot_tolerance: float = DEFAULT_CONFIG.collinear_dot_tolerance,
) -> bool:
    """True if two walls are duplicates: same line and overlapping by more than ``min_overlap``.

    Walls that only share a corner point (zero overlap) are not duplicates.
    """
    ga, gb = _geometry(a), _geometry(b)
    if ga is None or gb is None or not _on_same_line(ga, gb, tolerance, dot_tolerance):
        return False
    lo, hi = interval_on(ga, gb)
    overlap = min(ga.length, hi) - max(0.0, lo)
    return overlap > min_overlap


def merge_intervals(intervals: Iterable[tuple[float, float]]) -> list[tuple[float, float]]:
    """Union of closed intervals, sorted and non-overlapping."""
    merged: list[tuple[float, float]] = []
    for start, end in sorted((min(a, b), max(a, b)) for a, b in intervals):
        if merged and start <= merged[-1][1] + _EPS:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def build_combined_segments(
    total_length: float,
    wall_intervals: Iterable[tuple[float, float]],
    openings: Sequence[OpeningSpan] = (),
    wall_height_mm: Optional[float] = None,
) -> list[CombinedWallSegment]:
    """Split ``[0, total_length]`` into wall, opening and gap spans, left to right.

    Openings take precedence over walls; stretches covered by neither are gaps.
    Adjacent spans of the same kind are merged (distinct openings stay apart).
    """
    if total_length <= _EPS:
        return []
    walls = merge_intervals(wall_intervals)

    breakpoints = {0.0, total_length}
    for start, end in walls:
        breakpoints.update((start, end))
    for opening in openings:
        breakpoints.update((opening.start, opening.end))
    points = sorted(p for p in breakpoints if 0.0 <= p <= total_length)

    spans: list[tuple[object, CombinedWallSegment]] = []
    for start, end in zip(points, points[1:]):
        if end - start <= _EPS:
            continue
        mid = (start + end) / 2
        index = next(
            (i for i, o in enumerate(openings) if o.start <= mid <= o.end), None
        )
        if index is not None:
            opening = openings[index]
            key: object = ("opening", index)
            segment = CombinedWallSegment(
                type=SegmentType(opening.type.value),
                start_position_mm=start,
                length_mm=end - start,
                height_mm=opening.height_mm,
                elevation_bottom=opening.elevation_bottom,
            )
        elif any(s <= mid <= e for s, e in walls):
            key = SegmentType.WALL
            segment = CombinedWallSegment(
                type=SegmentType.WALL,
                start_position_mm=start,
                length_mm=end - start,
                height_mm=wall_height_mm,
            )
        else:
            key = SegmentType.GAP
            segment = CombinedWallSegment(
                type=SegmentType.GAP, start_position_mm=start, length_mm=end - start
            )

        if spans and spans[-1][0] == key:
            previous = spans[-1][1]
            spans[-1] = (key, previous.model_copy(
                update={"length_mm": end - previous.start_position_mm}
            ))
        else:
            spans.append((key, segment))
    return [segment for _, segment in spans]


def opening_span(
    shape: Shape, start_mm: float, end_mm: float
) -> Optional[OpeningSpan]:
    """Span for an opening shape, with heights from the shape or its type defaults."""
    opening_type = OPENING_TYPE_BY_SHAPE.get(shape.type)
    if opening_type is None:
        return None
    defaults = get_opening_defaults(opening_type)
    return OpeningSpan(
        type=opening_type,
        start=start_mm,
        end=end_mm,
        height_mm=shape.height_mm if shape.height_mm is not None else defaults.default_height,
        elevation_bottom=(
            shape.elevation_bottom_mm
            if shape.elevation_bottom_mm is not None
            else defaults.elevation_bottom
        ),
    )


def find_logical_wall(
    start_id: str,
    shapes: Sequence[Shape],
    units_per_mm: float = 1.0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Shape]:
    """Walls forming one straight run with ``start_id``, ordered along the start wall.

    Collinear walls of the same plan are chained while the gap between them
    is at most ``logical_wall_max_gap_mm``; segments that only touch at an
    endpoint are part of the same run.
    """
    if not is_number(units_per_mm) or units_per_mm <= 0:
        return []
    start = next((s for s in shapes if s.id == start_id and s.is_wall), None)
    base = get_wall_geometry(start)
    if start is None or base is None:
        return []

    tolerance = config.line_distance_tolerance_mm * units_per_mm
    max_gap = config.logical_wall_max_gap_mm * units_per_mm
    candidates: dict[str, tuple[Shape, tuple[float, float]]] = {}
    for shape in shapes:
        if not shape.is_wall or shape.plan_id != start.plan_id:
            continue
        geom = get_wall_geometry(shape)
        if geom is None:
            continue
        if shape.id == start.id or _on_same_line(base, geom, tolerance, config.collinear_dot_tolerance):
            candidates[shape.id] = (shape, interval_on(base, geom))

    run_lo, run_hi = 0.0, base.length
    chain = {start.id}
    changed = True
    while changed:
        changed = False
        for shape_id, (_, (lo, hi)) in candidates.items():
            if shape_id in chain:
                continue
            if lo <= run_hi + max_gap and hi >= run_lo - max_gap:
                chain.add(shape_id)
                run_lo, run_hi = min(run_lo, lo), max(run_hi, hi)
                changed = True

    members = [candidates[i] for i in chain]
    members.sort(key=lambda item: item[1][0])
    return [shape for shape, _ in members]


def get_combined_wall_elevation_data(
    wall_id: str,
    shapes: Sequence[Shape],
    wall_height_mm: Optional[float] = None,
    units_per_mm: float = 1.0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[CombinedWallElevation]:
    """Elevation data for the logical wall containing ``wall_id``.

    ``wall_height_mm`` is used when none of the walls has its own height.
    Returns None if the wall does not exist or is degenerate, or if
    ``units_per_mm`` is not a positive number.
    """
    if not is_number(units_per_mm) or units_per_mm <= 0:
        logger.debug("Invalid scale %r for wall %s", units_per_mm, wall_id)
        return None
    walls = find_logical_wall(wall_id, shapes, units_per_mm, config)
    if not walls:
        logger.debug("No logical wall for %s", wall_id)
        return None

    start = next(w for w in walls if w.id == wall_id)
    base = get_wall_geometry(start)
    if base is None:
        return None

    intervals = [interval_on(base, get_wall_geometry(w)) for w in walls]
    run_lo = min(lo for lo, _ in intervals)
    run_hi = max(hi for _, hi in intervals)

    def to_mm(value: float) -> float:
        return (value - run_lo) / units_per_mm

    opening_tolerance = config.opening_match_tolerance_mm * units_per_mm
    openings: list[OpeningSpan] = []
    for shape in shapes:
        if not shape.is_opening or shape.plan_id != start.plan_id:
            continue
        geom = get_wall_geometry(shape)
        if geom is None or not angles_match(geom.angle, base.angle, config.angle_match_tolerance_rad):
            continue
        _, offset = base.project(*geom.midpoint)
        if abs(offset) > opening_tolerance:
            continue
        lo, hi = interval_on(base, geom)
        lo, hi = max(lo, run_lo), min(hi, run_hi)
        if hi - lo <= _EPS:
            continue
        span = opening_span(shape, to_mm(lo), to_mm(hi))
        if span is not None:
            openings.append(span)
    openings.sort(key=lambda o: o.start)

    heights = [w.height_mm for w in walls if w.height_mm is not None]
    if heights:
        height = max(heights)
    elif wall_height_mm is not None:
        height = wall_height_mm
    else:
        height = config.default_wall_height_mm

    x1, y1 = base.point_at(run_lo)
    x2, y2 = base.point_at(run_hi)
    total_mm = to_mm(run_hi)
    return CombinedWallElevation(
        wall_ids=[w.id for w in walls],
        x1=x1, y1=y1, x2=x2, y2=y2,
        total_length_mm=total_mm,
        wall_height_mm=height,
        segments=build_combined_segments(
            total_mm,
            [(to_mm(lo), to_mm(hi)) for lo, hi in intervals],
            openings,
            wall_height_mm=height,
        ),
    )
