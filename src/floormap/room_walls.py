# src/floormap/room_walls.py
"""Walls belonging to a room, and wall shapes generated from room outlines."""
from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from floormap.config import DEFAULT_CONFIG, EngineConfig
from floormap.directions import get_edge_direction_hybrid, get_room_edges, sort_by_direction
from floormap.geometry import angles_match, get_wall_geometry, point_to_segment, polygon_center, room_points
from floormap.logical_wall import walls_overlap
from floormap.models import Point, RoomEdge, Shape, ShapeType, WallDirection

logger = logging.getLogger(__name__)

DEFAULT_ROOM_WALL_TOLERANCE = 50.0


@dataclass(frozen=True)
class RoomWall:
    wall: Shape
    direction: WallDirection
    center: Point
    angle: float  # degrees
    length: float
    edge_index: int


def _default_id() -> str:
    return str(uuid.uuid4())


def _edge_coordinates(edge: RoomEdge) -> dict[str, float]:
    return {"x1": edge.start.x, "y1": edge.start.y, "x2": edge.end.x, "y2": edge.end.y}


def _matching_edge(wall: Shape, edges: Sequence[RoomEdge], tolerance: float, angle_tolerance: float) -> Optional[RoomEdge]:
    geom = get_wall_geometry(wall)
    if geom is None:
        return None
    mid_x, mid_y = geom.midpoint
    for edge in edges:
        if edge.length_pixels == 0:
            continue
        edge_angle = math.atan2(edge.end.y - edge.start.y, edge.end.x - edge.start.x)
        if not angles_match(geom.angle, edge_angle, angle_tolerance):
            continue
        distance, _ = point_to_segment(mid_x, mid_y, edge.start.x, edge.start.y, edge.end.x, edge.end.y)
        if distance < tolerance:
            return edge
    return None


def find_walls_for_room(
    room: Shape,
    shapes: Sequence[Shape],
    tolerance: float = DEFAULT_ROOM_WALL_TOLERANCE,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[RoomWall]:
    """Walls of the room's plan lying along one of its edges, sorted N/E/S/W.

    A wall belongs to the first edge that is parallel to it and within
    ``tolerance`` of its midpoint.
    """
    points = room_points(room) if room.is_room else None
    if points is None:
        return []
    center = polygon_center(points)
    edges = get_room_edges(points)

    found: list[RoomWall] = []
    for shape in shapes:
        if not shape.is_wall or shape.id == room.id or shape.plan_id != room.plan_id:
            continue
        edge = _matching_edge(shape, edges, tolerance, config.angle_match_tolerance_rad)
        if edge is None:
            continue
        geom = get_wall_geometry(shape)
        start, end = Point(x=geom.x1, y=geom.y1), Point(x=geom.x2, y=geom.y2)
        mid_x, mid_y = geom.midpoint
        found.append(
            RoomWall(
                wall=shape,
                direction=get_edge_direction_hybrid(start, end, center),
                center=Point(x=mid_x, y=mid_y),
                angle=math.degrees(geom.angle),
                length=geom.length,
                edge_index=edge.edge_index,
            )
        )
    return sort_by_direction(found, key=lambda w: w.direction)


def create_virtual_walls_from_room(
    room: Shape, config: EngineConfig = DEFAULT_CONFIG
) -> list[RoomWall]:
    """Stand-in walls along every edge of a room that has no real walls drawn."""
    points = room_points(room) if room.is_room else None
    if points is None:
        return []

    virtual: list[RoomWall] = []
    for edge in get_room_edges(points):
        wall = Shape(
            id=f"virtual-wall-{room.id}-{edge.edge_index}",
            type=ShapeType.WALL,
            plan_id=room.plan_id,
            coordinates=_edge_coordinates(edge),
            height_mm=config.default_wall_height_mm,
            thickness_mm=config.default_wall_thickness_mm,
        )
        virtual.append(
            RoomWall(
                wall=wall,
                direction=edge.direction,
                center=Point(
                    x=(edge.start.x + edge.end.x) / 2, y=(edge.start.y + edge.end.y) / 2
                ),
                angle=math.degrees(
                    math.atan2(edge.end.y - edge.start.y, edge.end.x - edge.start.x)
                ),
                length=edge.length_pixels,
                edge_index=edge.edge_index,
            )
        )
    return sort_by_direction(virtual, key=lambda w: w.direction)


def generate_walls_from_room(
    room: Shape,
    generate_id: Callable[[], str] = _default_id,
    height_mm: Optional[float] = None,
    thickness_mm: Optional[float] = None,
    plan_id: Optional[str] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Shape]:
    """Real wall shapes along the room outline, one per edge, in polygon order."""
    points = room_points(room) if room.is_room else None
    if points is None:
        return []

    walls = []
    for edge in get_room_edges(points):
        if get_wall_geometry(_edge_coordinates(edge)) is None:
            logger.debug("Skipping degenerate edge %d of room %s", edge.edge_index, room.id)
            continue
        walls.append(
            Shape(
                id=generate_id(),
                type=ShapeType.WALL,
                plan_id=plan_id if plan_id is not None else room.plan_id,
                coordinates=_edge_coordinates(edge),
                height_mm=height_mm if height_mm is not None else config.default_wall_height_mm,
                thickness_mm=(
                    thickness_mm if thickness_mm is not None else config.default_wall_thickness_mm
                ),
            )
        )
    return walls


def generate_walls_from_rooms(
    rooms: Iterable[Shape],
    generate_id: Callable[[], str] = _default_id,
    height_mm: Optional[float] = None,
    thickness_mm: Optional[float] = None,
    plan_id: Optional[str] = None,
    existing_walls: Sequence[Shape] = (),
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Shape]:
    """Walls for several rooms, skipping any that duplicate an existing or earlier wall.

    Two rooms sharing an edge produce that wall once. Walls that only meet
    at a corner are not duplicates.
    """
    kept: list[Shape] = []
    taken = [w for w in existing_walls if w.is_wall]
    for room in rooms:
        for wall in generate_walls_from_room(
            room, generate_id, height_mm, thickness_mm, plan_id, config
        ):
            if any(
                walls_overlap(
                    wall, other,
                    tolerance=config.line_distance_tolerance_mm,
                    min_overlap=config.min_overlap_mm,
                    dot_tolerance=config.collinear_dot_tolerance,
                )
                for other in taken
            ):
                logger.debug("Wall along room %s already exists, skipping", room.id)
                continue
            kept.append(wall)
            taken.append(wall)
    return kept
