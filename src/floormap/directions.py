# src/floormap/directions.py
"""Cardinal direction of room edges (screen coordinates: Y grows downward)."""
from __future__ import annotations

import math
from typing import Callable, Iterable, Sequence, TypeVar

from floormap.geometry import polygon_center, segment_length
from floormap.models import Point, RoomEdge, WallDirection

T = TypeVar("T")

DIRECTION_ORDER: dict[WallDirection, int] = {
    WallDirection.NORTH: 0,
    WallDirection.EAST: 1,
    WallDirection.SOUTH: 2,
    WallDirection.WEST: 3,
}

DIRECTION_LABELS: dict[WallDirection, str] = {
    WallDirection.NORTH: "North",
    WallDirection.EAST: "East",
    WallDirection.SOUTH: "South",
    WallDirection.WEST: "West",
}

DIRECTION_ICONS: dict[WallDirection, str] = {
    WallDirection.NORTH: "↑",
    WallDirection.EAST: "→",
    WallDirection.SOUTH: "↓",
    WallDirection.WEST: "←",
}


def is_horizontal(edge_start: Point, edge_end: Point) -> bool:
    """True if the edge lies within 45 degrees (inclusive) of 0 or 180 degrees."""
    angle = math.degrees(math.atan2(edge_end.y - edge_start.y, edge_end.x - edge_start.x))
    angle %= 180.0
    return min(angle, 180.0 - angle) <= 45.0


def get_edge_direction_hybrid(
    edge_start: Point, edge_end: Point, room_center: Point
) -> WallDirection:
    """Classify a room edge as north/south/east/west.

    Orientation decides the axis: horizontal edges are always north or south,
    vertical edges always east or west. The edge midpoint's position relative
    to the room centre then picks the side. Unlike classifying by the angle
    from the centre, a horizontal edge is never reported as east or west,
    even in L-shaped rooms.
    """
    mid_x = (edge_start.x + edge_end.x) / 2
    mid_y = (edge_start.y + edge_end.y) / 2
    if is_horizontal(edge_start, edge_end):
        return WallDirection.NORTH if mid_y < room_center.y else WallDirection.SOUTH
    return WallDirection.EAST if mid_x > room_center.x else WallDirection.WEST


def get_room_edges(points: Sequence[Point]) -> list[RoomEdge]:
    """All edges of a closed polygon with their classified directions."""
    if len(points) < 3:
        return []
    center = polygon_center(points)
    edges = []
    for i, start in enumerate(points):
        end = points[(i + 1) % len(points)]
        edges.append(
            RoomEdge(
                direction=get_edge_direction_hybrid(start, end, center),
                start=start,
                end=end,
                length_pixels=segment_length(start.x, start.y, end.x, end.y),
                edge_index=i,
            )
        )
    return edges


def sort_by_direction(items: Iterable[T], key: Callable[[T], WallDirection]) -> list[T]:
    """Stable sort into north, east, south, west order."""
    return sorted(items, key=lambda item: DIRECTION_ORDER[key(item)])


def get_direction_label(direction: WallDirection) -> str:
    return DIRECTION_LABELS[direction]


def get_direction_icon(direction: WallDirection) -> str:
    return DIRECTION_ICONS[direction]
