import math

from layoutforge.generation.random_source import RandomContext
from layoutforge.generation.rooms import (
    Bounds,
    Envelope,
    Room,
    RoomFactory,
    is_main_sized,
    random_point_in_ellipse,
    sample_room,
)

from layout_test_utils import small_config


def test_room_geometry_helpers():
    r = Room(2, 3, 10, 4)
    assert (r.x_min, r.x_max, r.y_min, r.y_max) == (2, 12, 3, 7)
    assert r.center == (7.0, 5.0)
    assert r.contains((2, 3)) and not r.contains((12, 5))
    assert r.moved(1, -1).footprint == (3, 2, 10, 4)
    assert r.with_kind("main").kind == "main"


def test_touching_rooms_do_not_overlap():
    a = Room(0, 0, 10, 10)
    assert not a.overlaps(Room(10, 0, 5, 5))
    assert not a.overlaps(Room(0, 10, 5, 5))
    assert a.overlaps(Room(9, 9, 5, 5))


def test_ellipse_points_stay_within_radii():
    rng = RandomContext(8)
    for _ in range(500):
        x, y = random_point_in_ellipse(30, 10, rng)
        assert abs(x) <= 30 and abs(y) <= 10


def test_sample_respects_dimension_ranges():
    cfg = small_config(
        min_room_width=5,
        max_room_width=9,
        min_room_height=6,
        max_room_height=8,
        min_main_room_width=5,
        min_main_room_height=6,
    )
    factory = RoomFactory(cfg, RandomContext(4))
    for _ in range(200):
        r = factory.sample()
        assert 5 <= r.w < 9
        assert 6 <= r.h < 8
        assert r.kind == "candidate"


def test_placement_centers_room_on_ellipse_point():
    cfg = small_config()
    rng = RandomContext(21)
    probe = rng.clone()
    r = RoomFactory(cfg, rng).sample()
    w = probe.randrange(cfg.min_room_width, cfg.max_room_width)
    h = probe.randrange(cfg.min_room_height, cfg.max_room_height)
    cx, cy = random_point_in_ellipse(cfg.horizontal_spread, cfg.vertical_spread, probe)
    assert r == Room(cx - w // 2, cy - h // 2, w, h)


def test_populate_backfills_main_sized_rooms():
    # no regular sample can reach the main thresholds
    cfg = small_config(
        number_of_rooms=10,
        min_main_rooms=5,
        max_room_width=13,
        max_room_height=13,
        min_main_room_width=13,
        min_main_room_height=13,
        max_main_room_width=16,
        max_main_room_height=16,
    )
    factory = RoomFactory(cfg, RandomContext(6))
    rooms = factory.populate()
    assert len(rooms) == 15
    assert factory.forced_main_rooms == 5
    assert sum(1 for r in rooms if is_main_sized(r, cfg)) >= 5
    for r in rooms[10:]:
        assert 13 <= r.w < 16 and 13 <= r.h < 16


def test_populate_without_backfill_when_enough_main_sized():
    cfg = small_config(min_room_width=14, min_room_height=14, min_main_rooms=3)
    factory = RoomFactory(cfg, RandomContext(6))
    rooms = factory.populate()
    assert len(rooms) == cfg.number_of_rooms
    assert factory.forced_main_rooms == 0
    assert factory.main_sized == cfg.number_of_rooms


def test_normal_sampling_mode():
    cfg = small_config(sampling="normal")
    rng = RandomContext(17)
    rooms = RoomFactory(cfg, rng).populate()
    assert all(cfg.min_room_width <= r.w < cfg.max_room_width for r in rooms[: cfg.number_of_rooms])
    assert sample_room(cfg, RandomContext(1)).kind == "candidate"


def test_envelope_tracks_union():
    env = Envelope()
    assert env.bounds is None
    env.include_all([Room(0, 0, 4, 4), Room(-3, 2, 2, 10)])
    assert env.bounds == Bounds(-3, 0, 4, 12)
    assert env.bounds.width == 7 and env.bounds.height == 12
    assert env.bounds.encloses(Room(-3, 0, 1, 1))
    assert not env.bounds.encloses(Room(3, 11, 2, 2))


def test_main_size_threshold():
    cfg = small_config()
    assert is_main_sized(Room(0, 0, 14, 14), cfg)
    assert not is_main_sized(Room(0, 0, 14, 13), cfg)
    assert math.isclose(Room(0, 0, 15, 15).center[0], 7.5)
