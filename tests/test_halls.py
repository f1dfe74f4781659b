from layoutforge.generation.geometry import Segment
from layoutforge.generation.halls import X, Y, HallCarver, carve, l_shape_case, l_shaped_hall, room_at, straight_hall
from layoutforge.generation.rooms import Envelope, Room

from layout_test_utils import main_room


def _edge(a, b):
    return Segment.of(a.center, b.center)


def _carve(a, b, thickness=2):
    carver = HallCarver(thickness)
    halls, connections = carver.carve([_edge(a, b)], [a, b])
    return carver, halls, connections


def test_horizontal_straight_hall():
    a, b = main_room(0, 0, 10, 10), main_room(20, 0, 10, 10)
    carver, halls, connections = _carve(a, b)
    assert halls == [Room(10, 4, 10, 2, "hall")]
    assert carver.straight == 1 and carver.l_shaped == 0
    assert len(connections) == 1
    assert {connections[0].room_a, connections[0].room_b} == {a, b}


def test_vertical_straight_hall_for_shared_column():
    a, b = main_room(0, 0, 10, 10), main_room(5, 30, 10, 10)
    assert straight_hall(a, b, 2, X) is None
    assert straight_hall(a, b, 2, Y) == Room(6, 10, 2, 20, "hall")
    _, halls, _ = _carve(a, b)
    assert halls == [Room(6, 10, 2, 20, "hall")]


def test_straight_hall_independent_of_argument_order():
    a, b = main_room(0, 0, 10, 10), main_room(20, 0, 10, 10)
    assert straight_hall(a, b, 2, X) == straight_hall(b, a, 2, X)


def test_l_shape_vertical_first():
    a, b = main_room(0, 0, 10, 10), main_room(12, 30, 10, 10)
    assert l_shape_case(a, b) == (Y, 1, 1)
    carver, halls, _ = _carve(a, b)
    assert carver.l_shaped == 1
    assert halls == [Room(4, 10, 2, 26, "hall"), Room(6, 34, 6, 2, "hall")]


def test_l_shape_horizontal_first_target_below():
    a, b = main_room(0, 0, 10, 10), main_room(30, 12, 10, 10)
    assert l_shape_case(a, b) == (X, 1, 1)
    assert l_shaped_hall(a, b, 2) == [Room(10, 4, 26, 2, "hall"), Room(34, 6, 2, 6, "hall")]


def test_l_shape_horizontal_first_target_above():
    a, b = main_room(0, 20, 10, 10), main_room(30, 0, 10, 10)
    assert l_shape_case(a, b) == (X, 1, -1)
    assert l_shaped_hall(a, b, 2) == [Room(10, 24, 26, 2, "hall"), Room(34, 10, 2, 14, "hall")]


def test_l_shape_vertical_first_target_left():
    a, b = main_room(20, 0, 10, 10), main_room(0, 30, 10, 10)
    assert l_shape_case(a, b) == (Y, -1, 1)
    assert l_shape_case(b, a) == (Y, 1, -1)
    expected = [Room(24, 10, 2, 26, "hall"), Room(10, 34, 14, 2, "hall")]
    assert l_shaped_hall(a, b, 2) == expected
    assert l_shaped_hall(b, a, 2) == expected
    _, halls, _ = _carve(a, b)
    assert halls == expected


def test_l_shape_same_for_either_direction():
    pairs = [
        (main_room(0, 0, 10, 10), main_room(12, 30, 10, 10)),
        (main_room(0, 0, 10, 10), main_room(30, 12, 10, 10)),
        (main_room(0, 20, 10, 10), main_room(30, 0, 10, 10)),
        (main_room(-40, 5, 12, 8), main_room(0, 40, 8, 12)),
    ]
    for a, b in pairs:
        assert l_shaped_hall(a, b, 2) == l_shaped_hall(b, a, 2)
        sx, sy = l_shape_case(a, b)[1:]
        assert l_shape_case(b, a)[1:] == (-sx, -sy)


def test_l_shape_legs_are_contiguous_and_touch_both_rooms():
    a, b = main_room(0, 0, 10, 10), main_room(12, 30, 10, 10)
    first, second = l_shaped_hall(a, b, 2)
    assert first.y_min == a.y_max
    assert second.x_max == b.x_min
    # second leg lies in the span the first leg reaches
    assert first.y_min <= second.y_min and second.y_max <= first.y_max
    assert second.x_min == first.x_max


def test_every_hall_has_thickness_as_one_side():
    a, b = main_room(0, 0, 10, 10), main_room(20, 0, 10, 10)
    _, halls, _ = _carve(a, b, thickness=3)
    assert halls == [Room(10, 4, 10, 3, "hall")]
    c, d = main_room(0, 0, 10, 10), main_room(12, 30, 10, 10)
    _, halls, _ = _carve(c, d, thickness=3)
    for hall in halls:
        assert 3 in (hall.w, hall.h)
        assert hall.w > 0 and hall.h > 0


def test_touching_rooms_produce_no_hall_but_stay_connected():
    a, b = main_room(0, 0, 10, 10), main_room(10, 0, 10, 10)
    carver, halls, connections = _carve(a, b)
    assert halls == []
    assert carver.degenerate_segments == 1
    assert len(connections) == 1
    assert len(connections) > len(halls)


def test_unresolved_edge_is_skipped_and_logged(capsys):
    a, b = main_room(0, 0, 10, 10), main_room(20, 0, 10, 10)
    carver = HallCarver(2)
    halls, connections = carver.carve([Segment.of((100, 100), a.center)], [a, b])
    assert halls == [] and connections == []
    assert carver.unresolved_edges == 1
    assert "event=edge_unresolved" in capsys.readouterr().out


def test_room_at_uses_half_open_bounds():
    rooms = [main_room(0, 0, 10, 10), main_room(10, 0, 10, 10)]
    assert room_at((10, 5), rooms) == rooms[1]
    assert room_at((9.5, 5), rooms) == rooms[0]
    assert room_at((30, 5), rooms) is None


def test_envelope_grows_with_halls():
    a, b = main_room(0, 0, 10, 10), main_room(12, 30, 10, 10)
    env = Envelope()
    halls, _ = carve([_edge(a, b)], [a, b], 2, env)
    assert env.bounds.x_min == 0 and env.bounds.y_min == 0
    assert env.bounds.x_max == 22 and env.bounds.y_max == 40
    assert all(env.bounds.encloses(h) for h in halls)
