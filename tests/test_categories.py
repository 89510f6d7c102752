# tests/test_categories.py
from floormap.categories import (
    OBJECT_CATEGORY_DEFAULTS,
    get_category_label,
    get_default_elevation,
    get_defaults_for_category,
    get_opening_defaults,
    infer_category_from_symbol_type,
)
from floormap.models import OpeningType, WallObjectCategory


def test_every_category_has_defaults():
    assert set(OBJECT_CATEGORY_DEFAULTS) == set(WallObjectCategory)


def test_kitchen_heights():
    assert get_default_elevation(WallObjectCategory.FLOOR_CABINET) == 0
    assert get_default_elevation(WallObjectCategory.COUNTERTOP) == 850
    assert get_default_elevation(WallObjectCategory.WALL_CABINET) == 1400
    assert get_defaults_for_category(WallObjectCategory.WALL_CABINET).default_depth == 350


def test_missing_category_falls_back_to_custom():
    assert get_defaults_for_category(None) == OBJECT_CATEGORY_DEFAULTS[WallObjectCategory.CUSTOM]


def test_symbol_inference():
    assert infer_category_from_symbol_type("fridge") == WallObjectCategory.APPLIANCE_FLOOR
    assert infer_category_from_symbol_type("mirror") == WallObjectCategory.DECORATION
    assert infer_category_from_symbol_type("arch_window") == WallObjectCategory.WINDOW
    assert infer_category_from_symbol_type("spaceship") == WallObjectCategory.CUSTOM
    assert infer_category_from_symbol_type(None) == WallObjectCategory.CUSTOM


def test_opening_defaults():
    door = get_opening_defaults(OpeningType.DOOR)
    assert (door.elevation_bottom, door.default_height) == (0, 2100)
    window = get_opening_defaults(OpeningType.WINDOW)
    assert (window.elevation_bottom, window.default_height) == (900, 1200)
    assert get_opening_defaults(OpeningType.SLIDING_DOOR) == door


def test_labels():
    assert get_category_label(WallObjectCategory.APPLIANCE_WALL) == "Wall Appliance"
