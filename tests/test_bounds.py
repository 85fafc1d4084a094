from routegeo import config
from routegeo.bounds import bounds, center, view_center
from routegeo.models import Coordinate, GeometryKind, RenderGeometry


def test_single_point_region_is_the_point():
    p = Coordinate(lat=12.5, lng=77.25)
    region = bounds([p])
    assert region.south_west == p
    assert region.north_east == p


def test_empty_set_has_no_region():
    assert bounds([]) is None


def test_region_encloses_all_points():
    points = [
        Coordinate(lat=12.9, lng=77.7),
        Coordinate(lat=13.1, lng=77.5),
        Coordinate(lat=12.8, lng=77.6),
    ]
    region = bounds(points)
    assert region.south_west == Coordinate(lat=12.8, lng=77.5)
    assert region.north_east == Coordinate(lat=13.1, lng=77.7)


def test_antimeridian_is_not_wrapped():
    region = bounds([Coordinate(lat=0.0, lng=179.5), Coordinate(lat=1.0, lng=-179.5)])
    assert region.south_west.lng == -179.5
    assert region.north_east.lng == 179.5


def test_bounds_accepts_generators():
    region = bounds(Coordinate(lat=float(i), lng=float(-i)) for i in range(3))
    assert region.south_west == Coordinate(lat=0.0, lng=-2.0)


def test_center_of_region():
    region = bounds([Coordinate(lat=10.0, lng=20.0), Coordinate(lat=12.0, lng=24.0)])
    assert center(region) == Coordinate(lat=11.0, lng=22.0)


def test_view_center_defaults_when_nothing_to_frame():
    empty = RenderGeometry(kind=GeometryKind.EMPTY)
    assert view_center(empty) == Coordinate(lat=config.DEFAULT_CENTER_LAT, lng=config.DEFAULT_CENTER_LNG)
