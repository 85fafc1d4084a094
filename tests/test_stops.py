import math

from routegeo.models import Coordinate, StopKind, StopRole
from routegeo.stops import has_renderable_path, prepare, waypoints

from conftest import make_stop


def test_stops_are_ordered_by_sequence(bangalore_route):
    validated = prepare(bangalore_route.stops)
    assert [v.stop.stop_id for v in validated] == ["s1", "s2", "s3"]


def test_caller_list_is_not_reordered(bangalore_route):
    before = [s.stop_id for s in bangalore_route.stops]
    prepare(bangalore_route.stops)
    assert [s.stop_id for s in bangalore_route.stops] == before


def test_equal_sequences_keep_input_order():
    stops = [make_stop("b", 1, 1.0, 1.0), make_stop("a", 1, 2.0, 2.0), make_stop("c", 0, 3.0, 3.0)]
    assert [v.stop.stop_id for v in prepare(stops)] == ["c", "b", "a"]


def test_stop_without_coordinate_is_excluded():
    stops = [make_stop("s1", 1, 1.0, 1.0), make_stop("s0", 0), make_stop("s2", 2, 2.0, 2.0)]
    assert [v.stop.stop_id for v in prepare(stops)] == ["s1", "s2"]


def test_invalid_coordinates_are_excluded_not_clamped():
    stops = [
        make_stop("nan", 1, math.nan, 10.0),
        make_stop("inf", 2, 10.0, math.inf),
        make_stop("lat", 3, 91.0, 10.0),
        make_stop("lng", 4, 10.0, -180.5),
        make_stop("ok", 5, -90.0, 180.0),
    ]
    validated = prepare(stops)
    assert [v.stop.stop_id for v in validated] == ["ok"]
    assert validated[0].coordinate == Coordinate(lat=-90.0, lng=180.0)


def test_roles_follow_position_not_kind():
    stops = [
        make_stop("a", 1, 1.0, 1.0, kind=StopKind.DELIVERY),
        make_stop("b", 2, 2.0, 2.0, kind=StopKind.PICKUP),
        make_stop("c", 3, 3.0, 3.0, kind=StopKind.PICKUP),
        make_stop("d", 4, 4.0, 4.0, kind=StopKind.PICKUP),
    ]
    roles = [v.role for v in prepare(stops)]
    assert roles == [StopRole.START, StopRole.INTERMEDIATE, StopRole.INTERMEDIATE, StopRole.END]


def test_single_stop_is_not_renderable():
    validated = prepare([make_stop("only", 1, 1.0, 1.0), make_stop("none", 2)])
    assert len(validated) == 1
    assert validated[0].role == StopRole.START
    assert not has_renderable_path(validated)


def test_waypoints_in_sequence_order(bangalore_route):
    assert [w.as_tuple() for w in waypoints(prepare(bangalore_route.stops))] == [
        (12.9716, 77.5946),
        (12.9580, 77.6101),
        (12.9352, 77.6245),
    ]
