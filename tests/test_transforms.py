# tests/test_transforms.py
import pytest

from floormap.models import Shape, ShapeType, WallRelativePosition
from floormap.transforms import (
    elevation_to_wall_relative,
    wall_relative_to_elevation,
    wall_relative_to_world,
    world_to_wall_relative,
)


def _wall(x1, y1, x2, y2, wall_id="w1"):
    return Shape(id=wall_id, type=ShapeType.WALL, coordinates={"x1": x1, "y1": y1, "x2": x2, "y2": y2})


def test_horizontal_wall_projection():
    wall = _wall(0, 0, 1000, 0)
    wr = world_to_wall_relative(500, 0, wall, 100, 50)
    assert wr.wall_id == "w1"
    assert wr.distance_from_wall_start == pytest.approx(450)
    assert wr.perpendicular_offset == pytest.approx(-25)
    assert wr.width == 100
    assert wr.depth == 50

    placement = wall_relative_to_world(wr, wall)
    assert placement.x == pytest.approx(500)
    assert placement.y == pytest.approx(0)
    assert placement.rotation == pytest.approx(0)


@pytest.mark.parametrize("wall_coords, point", [
    ((0, 0, 300, 400), (100, 300)),
    ((1000, 200, 0, 200), (250, 420)),
    ((-500, -500, -500, 800), (-700, 0)),
    ((10, 10, 900, 15), (-200, -200)),
])
def test_world_round_trip(wall_coords, point):
    wall = _wall(*wall_coords)
    wr = world_to_wall_relative(point[0], point[1], wall, 80, 40, 720, 100)
    placement = wall_relative_to_world(wr, wall)
    assert (placement.x, placement.y) == pytest.approx(point, abs=1e-6)
    assert wr.height == 720
    assert wr.elevation_bottom == 100


def test_rotation_follows_wall_angle():
    placement = wall_relative_to_world(
        WallRelativePosition(wall_id="w1", distance_from_wall_start=0),
        _wall(0, 0, 0, 1000),
    )
    assert placement.rotation == pytest.approx(90)


def test_degenerate_wall_returns_none():
    wall = _wall(5, 5, 5, 5)
    assert world_to_wall_relative(0, 0, wall, 10, 10) is None
    wr = WallRelativePosition(wall_id="w1", distance_from_wall_start=0)
    assert wall_relative_to_world(wr, wall) is None
    assert wall_relative_to_elevation(wr, wall, 2400, 1, 0, 0) is None


def test_out_of_range_inputs_return_none():
    wall = _wall(0, 0, 1000, 0)
    assert world_to_wall_relative(float("nan"), 0, wall, 10, 10) is None
    assert world_to_wall_relative(0, 0, wall, -10, 10) is None
    assert world_to_wall_relative(0, 0, wall, 10, 10, elevation_bottom=-1) is None


def test_elevation_rect():
    wall = _wall(0, 0, 1000, 0)
    wr = WallRelativePosition(
        wall_id="w1", distance_from_wall_start=450, width=100, height=720, elevation_bottom=0
    )
    rect = wall_relative_to_elevation(wr, wall, 2400, 0.5, 10, 20)
    assert rect.x == pytest.approx(235)
    assert rect.y == pytest.approx(860)
    assert rect.width == pytest.approx(50)
    assert rect.height == pytest.approx(360)


@pytest.mark.parametrize("scale", [0.1, 0.5, 1.0, 2.5])
def test_elevation_round_trip(scale):
    wall = _wall(0, 0, 4000, 0)
    wr = WallRelativePosition(
        wall_id="w1", distance_from_wall_start=1200, width=600, height=720, elevation_bottom=1400
    )
    rect = wall_relative_to_elevation(wr, wall, 2600, scale, 40, 30)
    back = elevation_to_wall_relative(rect.x, rect.y, rect.width, rect.height, wall, 2600, scale, 40, 30)
    assert back.distance_from_wall_start == pytest.approx(1200)
    assert back.width == pytest.approx(600)
    assert back.height == pytest.approx(720)
    assert back.elevation_bottom == pytest.approx(1400)
    assert back.perpendicular_offset == 0
    assert back.depth == 0


def test_elevation_below_floor_is_clamped():
    wall = _wall(0, 0, 1000, 0)
    # Object dragged so its bottom would sit 100 mm below the floor line.
    back = elevation_to_wall_relative(0, 2400 - 500 + 100, 100, 500, wall, 2400, 1.0, 0, 0)
    assert back.elevation_bottom == 0


@pytest.mark.parametrize("scale", [0, -1, float("inf")])
def test_invalid_scale_returns_none(scale):
    wall = _wall(0, 0, 1000, 0)
    wr = WallRelativePosition(wall_id="w1", distance_from_wall_start=0, width=10, height=10)
    assert wall_relative_to_elevation(wr, wall, 2400, scale, 0, 0) is None
    assert elevation_to_wall_relative(0, 0, 10, 10, wall, 2400, scale, 0, 0) is None
