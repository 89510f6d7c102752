# tests/test_attachment.py
import pytest

from floormap.attachment import (
    ElevationParams,
    calculate_wall_attachment,
    detach_from_wall,
    find_nearest_wall_for_point,
    has_valid_wall_relative,
    initialize_wall_relative,
    set_object_category,
    snap_object_to_wall,
    sync_from_elevation,
    sync_wall_relative_from_floorplan,
    update_object_elevation,
)
from floormap.models import Shape, ShapeType, WallObjectCategory, WallRelativePosition


def _wall(x1, y1, x2, y2, wall_id="w1"):
    return Shape(id=wall_id, type=ShapeType.WALL, coordinates={"x1": x1, "y1": y1, "x2": x2, "y2": y2})


def _cabinet(left, top, wall_relative=None, category=WallObjectCategory.WALL_CABINET):
    return Shape(
        id="o1", type=ShapeType.RECTANGLE,
        coordinates={"left": left, "top": top, "width": 100, "height": 60},
        object_category=category,
        wall_relative=wall_relative,
    )


WALLS = [_wall(0, 0, 1000, 0, "w1"), _wall(0, 300, 1000, 300, "w2"), _wall(50, 50, 50, 50, "dot")]


def test_nearest_wall():
    nearest = find_nearest_wall_for_point(500, 100, WALLS)
    assert nearest.wall.id == "w1"
    assert nearest.distance == pytest.approx(100)
    assert nearest.t == pytest.approx(0.5)


def test_nearest_wall_out_of_range():
    assert find_nearest_wall_for_point(500, 100, WALLS, max_distance=50) is None
    assert find_nearest_wall_for_point(float("nan"), 0, WALLS) is None


def test_attachment_clamped_to_wall():
    wall = WALLS[0]
    before = calculate_wall_attachment(-200, 10, 100, 50, wall)
    assert before.distance_from_wall_start == pytest.approx(0)
    after = calculate_wall_attachment(2000, 0, 100, 50, wall)
    assert after.distance_from_wall_start == pytest.approx(900)
    assert after.perpendicular_offset == 0


def test_attachment_keeps_existing_offset():
    existing = WallRelativePosition(
        wall_id="w1", distance_from_wall_start=0, perpendicular_offset=15, height=300, elevation_bottom=900
    )
    wr = calculate_wall_attachment(500, 0, 100, 50, WALLS[0], existing)
    assert wr.perpendicular_offset == 15
    assert wr.height == 300
    assert wr.elevation_bottom == 900


def test_snap_rectangle_to_wall():
    update = snap_object_to_wall(_cabinet(450, 50), WALLS)
    wr = update.wall_relative
    assert wr.wall_id == "w1"
    assert wr.distance_from_wall_start == pytest.approx(450)
    assert wr.perpendicular_offset == 0
    assert wr.elevation_bottom == 1400
    assert wr.height == 720
    assert update.coordinates["left"] == pytest.approx(450)
    assert update.coordinates["top"] == pytest.approx(0)
    assert update.rotation == pytest.approx(0)
    assert update.object_category == WallObjectCategory.WALL_CABINET


def test_snap_symbol_uses_symbol_defaults():
    symbol = Shape(id="s1", type=ShapeType.SYMBOL, symbol_type="fridge", coordinates={"x": 0, "y": -700})
    update = snap_object_to_wall(symbol, WALLS)
    assert update.object_category == WallObjectCategory.APPLIANCE_FLOOR
    assert update.wall_relative.width == 600
    assert update.wall_relative.depth == 600
    assert update.coordinates["x"] == pytest.approx(0)
    assert update.coordinates["y"] == pytest.approx(0)


def test_snapped_symbol_keeps_following_floorplan_moves():
    wall = _wall(0, 0, 4000, 0)
    fridge = Shape(id="s1", type=ShapeType.SYMBOL, symbol_type="fridge", coordinates={"x": 1000, "y": 100})
    snapped = fridge.apply_update(snap_object_to_wall(fridge, [wall]))
    assert snapped.coordinates["width"] == 600
    assert snapped.coordinates["height"] == 600
    assert (snapped.coordinates["x"], snapped.coordinates["y"]) == pytest.approx((1000, 0))

    moved = snapped.model_copy(update={"coordinates": {**snapped.coordinates, "x": 2000}})
    update = sync_wall_relative_from_floorplan(moved, [wall])
    assert update is not None
    assert update.wall_relative.distance_from_wall_start == pytest.approx(2000)
    assert update.wall_relative.perpendicular_offset == pytest.approx(0)


def test_snap_without_wall_in_range():
    assert snap_object_to_wall(_cabinet(5000, 5000), WALLS) is None
    assert snap_object_to_wall(_cabinet(450, 50), []) is None


def test_sync_after_floorplan_move():
    attached = WallRelativePosition(
        wall_id="w1", distance_from_wall_start=450, width=100, depth=60, height=720, elevation_bottom=1400
    )
    moved = _cabinet(650, 0, attached)
    wr = sync_wall_relative_from_floorplan(moved, WALLS).wall_relative
    assert wr.distance_from_wall_start == pytest.approx(650)
    assert wr.perpendicular_offset == pytest.approx(0)
    assert wr.height == 720
    assert wr.elevation_bottom == 1400


def test_sync_requires_attachment_and_wall():
    assert sync_wall_relative_from_floorplan(_cabinet(0, 0), WALLS) is None
    orphan = _cabinet(0, 0, WallRelativePosition(wall_id="gone", distance_from_wall_start=0, width=100, depth=60))
    assert sync_wall_relative_from_floorplan(orphan, WALLS) is None


def test_sync_from_elevation_updates_floorplan():
    attached = WallRelativePosition(
        wall_id="w1", distance_from_wall_start=450, width=100, depth=60, height=720, elevation_bottom=1400
    )
    params = ElevationParams(wall_height_mm=2400, effective_scale=0.5, wall_x_offset=0, wall_y_offset=0)
    update = sync_from_elevation(_cabinet(450, 0, attached), WALLS[0], 100, 840, 50, 360, params)
    wr = update.wall_relative
    assert wr.distance_from_wall_start == pytest.approx(200)
    assert wr.elevation_bottom == pytest.approx(0)
    assert wr.height == pytest.approx(720)
    assert wr.depth == 60
    assert update.coordinates["left"] == pytest.approx(200)
    assert update.coordinates["top"] == pytest.approx(0)
    assert update.coordinates["width"] == pytest.approx(100)


def test_detach_clears_attachment():
    shape = _cabinet(0, 0, WallRelativePosition(wall_id="w1", distance_from_wall_start=0))
    detached = shape.apply_update(detach_from_wall(shape))
    assert detached.wall_relative is None
    assert detached.object_category is None


def test_update_elevation_clamps_to_floor():
    shape = _cabinet(0, 0, WallRelativePosition(wall_id="w1", distance_from_wall_start=0))
    assert update_object_elevation(shape, -50).wall_relative.elevation_bottom == 0
    assert update_object_elevation(shape, 850).wall_relative.elevation_bottom == 850
    assert update_object_elevation(_cabinet(0, 0), 850) is None


def test_set_category_resets_elevation():
    shape = _cabinet(0, 0, WallRelativePosition(wall_id="w1", distance_from_wall_start=0, elevation_bottom=0))
    update = set_object_category(shape, WallObjectCategory.COUNTERTOP)
    assert update.object_category == WallObjectCategory.COUNTERTOP
    assert update.wall_relative.elevation_bottom == 850
    assert update.wall_relative.height == 40


def test_initialize_legacy_object():
    legacy = _cabinet(450, 400, category=None)
    update = initialize_wall_relative(legacy, WALLS[:1], WallObjectCategory.FLOOR_CABINET)
    assert update.wall_relative.wall_id == "w1"
    assert update.object_category == WallObjectCategory.FLOOR_CABINET


def test_initialize_skips_attached_objects():
    attached = _cabinet(0, 0, WallRelativePosition(wall_id="w1", distance_from_wall_start=0, width=100))
    assert has_valid_wall_relative(attached)
    assert initialize_wall_relative(attached, WALLS) is None
