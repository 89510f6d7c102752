# src/floormap/models.py
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _alias(name: str) -> str:
    """camelCase alias matching the editor's JSON keys (``heightMM``, ``wallId``)."""
    if name.endswith("_mm"):
        return to_camel(name[: -len("_mm")]) + "MM"
    return to_camel(name)


class FloorMapModel(BaseModel):
    model_config = ConfigDict(alias_generator=_alias, populate_by_name=True)


class ShapeType(str, Enum):
    WALL = "wall"
    LINE = "line"
    MEASUREMENT = "measurement"
    DOOR_LINE = "door_line"
    WINDOW_LINE = "window_line"
    SLIDING_DOOR_LINE = "sliding_door_line"
    ROOM = "room"
    POLYGON = "polygon"
    FREEHAND = "freehand"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    BEZIER = "bezier"
    IMAGE = "image"
    TEXT = "text"
    SYMBOL = "symbol"
    OBJECT = "object"


WALL_TYPES: frozenset[ShapeType] = frozenset({ShapeType.WALL, ShapeType.LINE})

OPENING_SHAPE_TYPES: frozenset[ShapeType] = frozenset({
    ShapeType.DOOR_LINE,
    ShapeType.WINDOW_LINE,
    ShapeType.SLIDING_DOOR_LINE,
})

LINE_TYPES: frozenset[ShapeType] = (
    WALL_TYPES | OPENING_SHAPE_TYPES | {ShapeType.MEASUREMENT}
)

POLYGON_TYPES: frozenset[ShapeType] = frozenset({
    ShapeType.ROOM, ShapeType.POLYGON, ShapeType.FREEHAND,
})


class OpeningType(str, Enum):
    DOOR = "door"
    WINDOW = "window"
    SLIDING_DOOR = "sliding_door"


OPENING_TYPE_BY_SHAPE: dict[ShapeType, OpeningType] = {
    ShapeType.DOOR_LINE: OpeningType.DOOR,
    ShapeType.WINDOW_LINE: OpeningType.WINDOW,
    ShapeType.SLIDING_DOOR_LINE: OpeningType.SLIDING_DOOR,
}


class SegmentType(str, Enum):
    WALL = "wall"
    DOOR = "door"
    WINDOW = "window"
    SLIDING_DOOR = "sliding_door"
    GAP = "gap"


class WallDirection(str, Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


class WallObjectCategory(str, Enum):
    FLOOR_CABINET = "floor_cabinet"
    WALL_CABINET = "wall_cabinet"
    COUNTERTOP = "countertop"
    APPLIANCE_FLOOR = "appliance_floor"
    APPLIANCE_WALL = "appliance_wall"
    WINDOW = "window"
    DOOR = "door"
    DECORATION = "decoration"
    CUSTOM = "custom"


class Point(FloorMapModel):
    x: float
    y: float


class WallRelativePosition(FloorMapModel):
    """Placement of an object relative to the wall it is attached to.

    ``distance_from_wall_start`` and ``perpendicular_offset`` locate the
    object's leading edge, not its centre.
    """

    wall_id: str
    distance_from_wall_start: float
    perpendicular_offset: float = 0.0
    elevation_bottom: float = Field(default=0.0, ge=0.0, description="Height above floor in mm")
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)
    depth: float = Field(default=0.0, ge=0.0)


class Shape(FloorMapModel):
    id: str
    type: ShapeType
    coordinates: dict[str, Any] = Field(default_factory=dict)
    plan_id: Optional[str] = None
    name: Optional[str] = None
    height_mm: Optional[float] = Field(default=None, gt=0)
    thickness_mm: Optional[float] = Field(default=None, gt=0)
    elevation_bottom_mm: Optional[float] = Field(default=None, ge=0)
    rotation: Optional[float] = None
    wall_relative: Optional[WallRelativePosition] = None
    object_category: Optional[WallObjectCategory] = None
    symbol_type: Optional[str] = None

    @field_validator("object_category", mode="before")
    @classmethod
    def unknown_category_is_custom(cls, v):
        if isinstance(v, str) and v not in WallObjectCategory._value2member_map_:
            return WallObjectCategory.CUSTOM
        return v

    @property
    def is_wall(self) -> bool:
        return self.type in WALL_TYPES

    @property
    def is_opening(self) -> bool:
        return self.type in OPENING_SHAPE_TYPES

    @property
    def is_room(self) -> bool:
        return self.type == ShapeType.ROOM

    def apply_update(self, update: ShapeUpdate) -> Shape:
        """Return a copy with the explicitly set fields of ``update`` merged in."""
        changes = {name: getattr(update, name) for name in update.model_fields_set}
        return self.model_copy(update=changes)


class ShapeUpdate(FloorMapModel):
    """Partial shape update; only fields that were explicitly set are merged."""

    coordinates: Optional[dict[str, Any]] = None
    rotation: Optional[float] = None
    wall_relative: Optional[WallRelativePosition] = None
    object_category: Optional[WallObjectCategory] = None


class FloorPlan(FloorMapModel):
    plan_id: Optional[str] = None
    units_per_mm: float = Field(default=1.0, gt=0, description="World units per millimetre")
    shapes: list[Shape] = Field(default_factory=list)

    def walls(self) -> list[Shape]:
        return [s for s in self.shapes if s.is_wall]

    def rooms(self) -> list[Shape]:
        return [s for s in self.shapes if s.is_room]

    def get_shape(self, shape_id: str) -> Optional[Shape]:
        return next((s for s in self.shapes if s.id == shape_id), None)


class ImportedWall(FloorMapModel):
    """Raw wall segment from a traced or imported plan, before clean-up."""

    x1: float
    y1: float
    x2: float
    y2: float
    thickness: Optional[float] = None


# ------------------------------------------------------------------ #
# Derived, per-query results
# ------------------------------------------------------------------ #


class RoomEdge(FloorMapModel):
    direction: WallDirection
    start: Point
    end: Point
    length_pixels: float
    edge_index: int


class EdgeOpening(FloorMapModel):
    shape: Shape
    position_t: float = Field(ge=0.0, le=1.0)
    width_pixels: float
    type: OpeningType
    edge_index: int


class SegmentData(FloorMapModel):
    segment_index: int
    label: str
    direction: WallDirection
    edge: RoomEdge
    length_pixels: float
    length_mm: float
    has_wall: bool
    wall: Optional[Shape] = None
    wall_height_mm: float
    openings: list[EdgeOpening] = Field(default_factory=list)


class CombinedWallSegment(FloorMapModel):
    type: SegmentType
    start_position_mm: float
    length_mm: float
    height_mm: Optional[float] = None
    elevation_bottom: Optional[float] = None


class DirectionData(FloorMapModel):
    direction: WallDirection
    edges: list[RoomEdge]
    total_length_pixels: float
    total_length_mm: float
    walls: list[Shape] = Field(default_factory=list)
    coverage_percent: float = Field(ge=0.0, le=100.0)
    openings: list[EdgeOpening] = Field(default_factory=list)
    segments: list[CombinedWallSegment] = Field(default_factory=list)


class CombinedWallElevation(FloorMapModel):
    wall_ids: list[str]
    x1: float
    y1: float
    x2: float
    y2: float
    total_length_mm: float
    wall_height_mm: float
    segments: list[CombinedWallSegment]
