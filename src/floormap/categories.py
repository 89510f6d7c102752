# src/floormap/categories.py
"""Default sizes and installation heights for wall-attached objects (mm)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from floormap.models import OpeningType, WallObjectCategory


@dataclass(frozen=True)
class CategoryDefaults:
    elevation_bottom: float
    default_width: float
    default_height: float
    default_depth: float


# Base cabinets 720 on plinth, countertop at 850, wall cabinets above the
# backsplash at 1400, window sills at 900, doors from the floor at 2100.
OBJECT_CATEGORY_DEFAULTS: dict[WallObjectCategory, CategoryDefaults] = {
    WallObjectCategory.FLOOR_CABINET:   CategoryDefaults(0, 600, 720, 560),
    WallObjectCategory.WALL_CABINET:    CategoryDefaults(1400, 600, 720, 350),
    WallObjectCategory.COUNTERTOP:      CategoryDefaults(850, 600, 40, 600),
    WallObjectCategory.APPLIANCE_FLOOR: CategoryDefaults(0, 600, 850, 600),
    WallObjectCategory.APPLIANCE_WALL:  CategoryDefaults(1000, 600, 400, 400),
    WallObjectCategory.WINDOW:          CategoryDefaults(900, 1200, 1200, 200),
    WallObjectCategory.DOOR:            CategoryDefaults(0, 900, 2100, 100),
    WallObjectCategory.DECORATION:      CategoryDefaults(1200, 400, 400, 50),
    WallObjectCategory.CUSTOM:          CategoryDefaults(0, 500, 500, 500),
}

CATEGORY_LABELS: dict[WallObjectCategory, str] = {
    WallObjectCategory.FLOOR_CABINET: "Floor Cabinet",
    WallObjectCategory.WALL_CABINET: "Wall Cabinet",
    WallObjectCategory.COUNTERTOP: "Countertop",
    WallObjectCategory.APPLIANCE_FLOOR: "Floor Appliance",
    WallObjectCategory.APPLIANCE_WALL: "Wall Appliance",
    WallObjectCategory.WINDOW: "Window",
    WallObjectCategory.DOOR: "Door",
    WallObjectCategory.DECORATION: "Decoration",
    WallObjectCategory.CUSTOM: "Custom",
}

SYMBOL_CATEGORIES: dict[str, WallObjectCategory] = {
    # Kitchen
    "floor_cabinet": WallObjectCategory.FLOOR_CABINET,
    "wall_cabinet": WallObjectCategory.WALL_CABINET,
    "sink_cabinet": WallObjectCategory.FLOOR_CABINET,
    "oven": WallObjectCategory.APPLIANCE_FLOOR,
    "stove": WallObjectCategory.FLOOR_CABINET,
    "fridge": WallObjectCategory.APPLIANCE_FLOOR,
    "dishwasher": WallObjectCategory.APPLIANCE_FLOOR,
    # Bathroom
    "toilet": WallObjectCategory.FLOOR_CABINET,
    "shower": WallObjectCategory.CUSTOM,
    "bathtub": WallObjectCategory.APPLIANCE_FLOOR,
    "sink": WallObjectCategory.FLOOR_CABINET,
    "mirror": WallObjectCategory.DECORATION,
    "washing_machine": WallObjectCategory.APPLIANCE_FLOOR,
    "dryer": WallObjectCategory.APPLIANCE_FLOOR,
    # Furniture
    "wardrobe": WallObjectCategory.FLOOR_CABINET,
    "nightstand": WallObjectCategory.FLOOR_CABINET,
    "desk": WallObjectCategory.FLOOR_CABINET,
    # Structural
    "door": WallObjectCategory.DOOR,
    "door_outward": WallObjectCategory.DOOR,
    "sliding_door": WallObjectCategory.DOOR,
    "window": WallObjectCategory.WINDOW,
    "arch_window": WallObjectCategory.WINDOW,
}

OPENING_CATEGORIES: dict[OpeningType, WallObjectCategory] = {
    OpeningType.DOOR: WallObjectCategory.DOOR,
    OpeningType.SLIDING_DOOR: WallObjectCategory.DOOR,
    OpeningType.WINDOW: WallObjectCategory.WINDOW,
}


def get_defaults_for_category(category: Optional[WallObjectCategory]) -> CategoryDefaults:
    """Defaults for a category, falling back to ``custom``."""
    if category is None:
        return OBJECT_CATEGORY_DEFAULTS[WallObjectCategory.CUSTOM]
    return OBJECT_CATEGORY_DEFAULTS.get(
        category, OBJECT_CATEGORY_DEFAULTS[WallObjectCategory.CUSTOM]
    )


def get_default_elevation(category: Optional[WallObjectCategory]) -> float:
    return get_defaults_for_category(category).elevation_bottom


def get_category_label(category: WallObjectCategory) -> str:
    return CATEGORY_LABELS.get(category, category.value)


def infer_category_from_symbol_type(symbol_type: Optional[str]) -> WallObjectCategory:
    """Map a library symbol type to its object category (``custom`` if unknown)."""
    if not symbol_type:
        return WallObjectCategory.CUSTOM
    return SYMBOL_CATEGORIES.get(symbol_type, WallObjectCategory.CUSTOM)


def get_opening_defaults(opening_type: OpeningType) -> CategoryDefaults:
    return OBJECT_CATEGORY_DEFAULTS[OPENING_CATEGORIES[opening_type]]
