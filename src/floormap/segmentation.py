# src/floormap/segmentation.py
"""Room segmentation for elevation views.

Each edge of a room polygon is matched against the real walls and openings
of the plan. ``analyze_room_segments`` reports one entry per edge;
``analyze_room_directions`` aggregates edges by cardinal direction.
Both are read-only and return an empty list for anything they cannot
analyse.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Optional

from shapely.geometry import LineString
from shapely.geometry import Point as ShapelyPoint

from floormap.config import DEFAULT_CONFIG, EngineConfig
from floormap.directions import get_room_edges, sort_by_direction
from floormap.geometry import WallGeometry, angles_match, get_wall_geometry, is_number, room_points
from floormap.logical_wall import OpeningSpan, build_combined_segments, merge_intervals, opening_span
from floormap.models import (
    OPENING_TYPE_BY_SHAPE,
    DirectionData,
    EdgeOpening,
    RoomEdge,
    SegmentData,
    Shape,
    WallDirection,
)

logger = logging.getLogger(__name__)

_Candidate = tuple[Shape, WallGeometry]


def segment_label(index: int) -> str:
    """Spreadsheet-style label: 0 -> "A", 25 -> "Z", 26 -> "AA"."""
    label = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        label = chr(ord("A") + remainder) + label
    return label


def _candidates(room: Shape, shapes: Sequence[Shape]) -> tuple[list[_Candidate], list[_Candidate]]:
    """Non-degenerate walls and openings on the room's plan."""
    walls: list[_Candidate] = []
    openings: list[_Candidate] = []
    for shape in shapes:
        if shape.id == room.id or shape.plan_id != room.plan_id:
            continue
        if not (shape.is_wall or shape.is_opening):
            continue
        geom = get_wall_geometry(shape)
        if geom is None:
            continue
        (walls if shape.is_wall else openings).append((shape, geom))
    return walls, openings


class _EdgeMatcher:
    """Distance and projection tests against one room edge."""

    def __init__(self, edge: RoomEdge, angle_tolerance: float) -> None:
        self.edge = edge
        self.line = LineString([(edge.start.x, edge.start.y), (edge.end.x, edge.end.y)])
        self.angle = math.atan2(edge.end.y - edge.start.y, edge.end.x - edge.start.x)
        self.angle_tolerance = angle_tolerance

    def distance(self, geom: WallGeometry) -> Optional[float]:
        """Distance of the segment's midpoint to the edge, or None if not aligned."""
        if not angles_match(geom.angle, self.angle, self.angle_tolerance):
            return None
        return self.line.distance(ShapelyPoint(*geom.midpoint))

    def project(self, x: float, y: float) -> float:
        """Clamped parameter in [0, 1] of the closest edge point."""
        return self.line.project(ShapelyPoint(x, y), normalized=True)

    def best_wall(self, walls: Sequence[_Candidate], tolerance: float) -> Optional[Shape]:
        best: Optional[tuple[float, Shape]] = None
        for shape, geom in walls:
            d = self.distance(geom)
            if d is not None and d < tolerance and (best is None or d < best[0]):
                best = (d, shape)
        return best[1] if best else None

    def matching_walls(self, walls: Sequence[_Candidate], tolerance: float) -> list[_Candidate]:
        return [
            (shape, geom)
            for shape, geom in walls
            if (d := self.distance(geom)) is not None and d < tolerance
        ]

    def openings(self, openings: Sequence[_Candidate], tolerance: float) -> list[EdgeOpening]:
        found = []
        for shape, geom in openings:
            d = self.distance(geom)
            if d is None or d >= tolerance:
                continue
            found.append(
                EdgeOpening(
                    shape=shape,
                    position_t=self.project(*geom.midpoint),
                    width_pixels=geom.length,
                    type=OPENING_TYPE_BY_SHAPE[shape.type],
                    edge_index=self.edge.edge_index,
                )
            )
        found.sort(key=lambda o: o.position_t)
        return found


def _room_edges(room: Optional[Shape], units_per_mm: float, config: EngineConfig) -> list[RoomEdge]:
    if room is None or not room.is_room:
        return []
    if not is_number(units_per_mm) or units_per_mm <= 0:
        logger.debug("Invalid scale %r for room %s", units_per_mm, room.id)
        return []
    points = room_points(room)
    if points is None:
        logger.debug("Room %s has no valid polygon", room.id)
        return []
    min_length = config.min_edge_length_mm * units_per_mm
    return [
        edge for edge in get_room_edges(points)
        if edge.length_pixels > 0 and edge.length_pixels >= min_length
    ]


def _wall_height(walls: Sequence[Shape], config: EngineConfig) -> float:
    heights = [w.height_mm for w in walls if w.height_mm is not None]
    return max(heights) if heights else config.default_wall_height_mm


def analyze_room_segments(
    room: Optional[Shape],
    shapes: Sequence[Shape],
    units_per_mm: float = 1.0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[SegmentData]:
    """One elevation segment per room edge, with its covering wall and openings."""
    try:
        edges = _room_edges(room, units_per_mm, config)
        if not edges:
            return []
        walls, openings = _candidates(room, shapes)
        wall_tolerance = config.wall_match_tolerance_mm * units_per_mm
        opening_tolerance = config.opening_match_tolerance_mm * units_per_mm

        segments: list[SegmentData] = []
        for edge in edges:
            matcher = _EdgeMatcher(edge, config.angle_match_tolerance_rad)
            wall = matcher.best_wall(walls, wall_tolerance)
            index = len(segments)
            segments.append(
                SegmentData(
                    segment_index=index,
                    label=segment_label(index),
                    direction=edge.direction,
                    edge=edge,
                    length_pixels=edge.length_pixels,
                    length_mm=edge.length_pixels / units_per_mm,
                    has_wall=wall is not None,
                    wall=wall,
                    wall_height_mm=_wall_height([wall] if wall else [], config),
                    openings=matcher.openings(openings, opening_tolerance),
                )
            )
        return segments
    except (ValueError, TypeError, KeyError, ArithmeticError):
        logger.exception("Segment analysis failed for room %s", getattr(room, "id", None))
        return []


def analyze_room_directions(
    room: Optional[Shape],
    shapes: Sequence[Shape],
    units_per_mm: float = 1.0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[DirectionData]:
    """Per-direction wall coverage, openings and combined spans for a room.

    Edges sharing a direction are laid end to end in polygon order. Each
    matching wall covers the clamped projection of its endpoints onto its
    edge; overlapping coverage is counted once.
    """
    try:
        edges = _room_edges(room, units_per_mm, config)
        if not edges:
            return []
        walls, openings = _candidates(room, shapes)
        wall_tolerance = config.wall_match_tolerance_mm * units_per_mm
        opening_tolerance = config.opening_match_tolerance_mm * units_per_mm

        groups: dict[WallDirection, list[RoomEdge]] = {}
        for edge in sort_by_direction(edges, key=lambda e: e.direction):
            groups.setdefault(edge.direction, []).append(edge)

        results: list[DirectionData] = []
        for direction, group in groups.items():
            offset = 0.0
            intervals: list[tuple[float, float]] = []
            matched: dict[str, Shape] = {}
            edge_openings: list[EdgeOpening] = []
            spans: list[OpeningSpan] = []

            for edge in group:
                matcher = _EdgeMatcher(edge, config.angle_match_tolerance_rad)
                length = edge.length_pixels
                for shape, geom in matcher.matching_walls(walls, wall_tolerance):
                    t1 = matcher.project(geom.x1, geom.y1)
                    t2 = matcher.project(geom.x2, geom.y2)
                    intervals.append((offset + min(t1, t2) * length, offset + max(t1, t2) * length))
                    matched.setdefault(shape.id, shape)

                for opening in matcher.openings(openings, opening_tolerance):
                    edge_openings.append(opening)
                    center = offset + opening.position_t * length
                    half = opening.width_pixels / 2
                    start = max(offset, center - half)
                    end = min(offset + length, center + half)
                    span = opening_span(opening.shape, start / units_per_mm, end / units_per_mm)
                    if span is not None and end > start:
                        spans.append(span)
                offset += length

            total = offset
            covered = merge_intervals(intervals)
            covered_length = sum(end - start for start, end in covered)
            coverage = min(100.0, covered_length / total * 100.0) if total > 0 else 0.0
            wall_shapes = list(matched.values())

            results.append(
                DirectionData(
                    direction=direction,
                    edges=group,
                    total_length_pixels=total,
                    total_length_mm=total / units_per_mm,
                    walls=wall_shapes,
                    coverage_percent=coverage,
                    openings=edge_openings,
                    segments=build_combined_segments(
                        total / units_per_mm,
                        [(s / units_per_mm, e / units_per_mm) for s, e in covered],
                        sorted(spans, key=lambda o: o.start),
                        wall_height_mm=_wall_height(wall_shapes, config),
                    ),
                )
            )
        return results
    except (ValueError, TypeError, KeyError, ArithmeticError):
        logger.exception("Direction analysis failed for room %s", getattr(room, "id", None))
        return []

