# tests/test_room_walls.py
import itertools

import pytest

from floormap.models import Shape, ShapeType, WallDirection
from floormap.room_walls import (
    create_virtual_walls_from_room,
    find_walls_for_room,
    generate_walls_from_room,
    generate_walls_from_rooms,
)


def _wall(wall_id, x1, y1, x2, y2, plan_id="p1"):
    return Shape(id=wall_id, type=ShapeType.WALL, plan_id=plan_id,
                 coordinates={"x1": x1, "y1": y1, "x2": x2, "y2": y2})


def _room(points, room_id="r1", plan_id="p1"):
    return Shape(id=room_id, type=ShapeType.ROOM, plan_id=plan_id,
                 coordinates={"points": [{"x": x, "y": y} for x, y in points]})


def _ids(prefix="id"):
    counter = itertools.count()
    return lambda: f"{prefix}-{next(counter)}"


ROOM = _room([(0, 0), (4000, 0), (4000, 3000), (0, 3000)])


def test_find_walls_sorted_by_direction():
    shapes = [
        ROOM,
        _wall("south-b", 1500, 3000, 0, 3000),
        _wall("east", 4000, 0, 4000, 3000),
        _wall("north", 0, 0, 4000, 0),
        _wall("south-a", 4000, 3000, 2500, 3000),
        _wall("elsewhere", 0, 3000, 0, 0, plan_id="p2"),
    ]
    found = find_walls_for_room(ROOM, shapes)
    assert [w.wall.id for w in found] == ["north", "east", "south-b", "south-a"]
    assert [w.direction for w in found] == [
        WallDirection.NORTH, WallDirection.EAST, WallDirection.SOUTH, WallDirection.SOUTH,
    ]
    north = found[0]
    assert north.angle == pytest.approx(0)
    assert north.length == pytest.approx(4000)
    assert (north.center.x, north.center.y) == (2000, 0)
    assert north.edge_index == 0
    assert found[3].angle == pytest.approx(180)


def test_find_walls_tolerance():
    near = _wall("near", 0, 40, 4000, 40)
    far = _wall("far", 0, 60, 4000, 60)
    found = find_walls_for_room(ROOM, [ROOM, near, far])
    assert [w.wall.id for w in found] == ["near"]
    assert [w.wall.id for w in find_walls_for_room(ROOM, [ROOM, far], tolerance=100)] == ["far"]


def test_find_walls_ignores_crossing_walls():
    diagonal = _wall("diag", 0, 0, 4000, 3000)
    assert find_walls_for_room(ROOM, [ROOM, diagonal]) == []


def test_find_walls_requires_room():
    assert find_walls_for_room(_wall("w", 0, 0, 10, 0), [ROOM]) == []


def test_virtual_walls():
    virtual = create_virtual_walls_from_room(ROOM)
    assert [w.wall.id for w in virtual] == [
        "virtual-wall-r1-0", "virtual-wall-r1-1", "virtual-wall-r1-2", "virtual-wall-r1-3",
    ]
    assert [w.direction for w in virtual] == [
        WallDirection.NORTH, WallDirection.EAST, WallDirection.SOUTH, WallDirection.WEST,
    ]
    assert all(w.wall.height_mm == 2400 and w.wall.thickness_mm == 150 for w in virtual)
    assert all(w.wall.plan_id == "p1" for w in virtual)
    assert virtual[1].length == pytest.approx(3000)


def test_generate_walls_from_room():
    walls = generate_walls_from_room(ROOM, _ids(), height_mm=2700)
    assert [w.id for w in walls] == ["id-0", "id-1", "id-2", "id-3"]
    assert all(w.type == ShapeType.WALL and w.height_mm == 2700 for w in walls)
    assert all(w.thickness_mm == 150 for w in walls)
    assert walls[2].coordinates == {"x1": 4000, "y1": 3000, "x2": 0, "y2": 3000}


def test_generate_walls_plan_override():
    walls = generate_walls_from_room(ROOM, _ids(), plan_id="p9")
    assert {w.plan_id for w in walls} == {"p9"}


def test_generate_walls_default_ids_are_unique():
    walls = generate_walls_from_room(ROOM)
    assert len({w.id for w in walls}) == 4


def test_shared_edge_generated_once():
    left = _room([(0, 0), (1000, 0), (1000, 1000), (0, 1000)], "a")
    right = _room([(1000, 0), (2000, 0), (2000, 1000), (1000, 1000)], "b")
    walls = generate_walls_from_rooms([left, right], _ids())
    assert len(walls) == 7
    shared = [w for w in walls if w.coordinates["x1"] == 1000 and w.coordinates["x2"] == 1000]
    assert len(shared) == 1


def test_existing_walls_not_duplicated():
    left = _room([(0, 0), (1000, 0), (1000, 1000), (0, 1000)], "a")
    existing = [_wall("old", 0, 0, 1000, 0)]
    walls = generate_walls_from_rooms([left], _ids(), existing_walls=existing)
    assert len(walls) == 3
    assert all(w.coordinates != {"x1": 0, "y1": 0, "x2": 1000, "y2": 0} for w in walls)
