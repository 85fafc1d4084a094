import pytest

from routegeo.models import Coordinate, Route, Stop, StopKind


def make_stop(stop_id, sequence, lat=None, lng=None, kind=StopKind.DELIVERY):
    coordinate = None if lat is None or lng is None else Coordinate(lat=lat, lng=lng)
    return Stop(stop_id=stop_id, sequence=sequence, kind=kind, coordinate=coordinate)


@pytest.fixture
def frankfurt_points():
    # the flexible polyline reference points (precision 5)
    return [
        (50.10228, 8.69821),
        (50.10201, 8.69567),
        (50.10063, 8.69150),
        (50.09878, 8.68752),
    ]


@pytest.fixture
def frankfurt_encoded():
    return "BFoz5xJ67i1B1B7PzIhaxL7Y"


@pytest.fixture
def bangalore_route():
    return Route(
        route_id="route-1",
        name="Morning run",
        stops=[
            make_stop("s3", 3, 12.9352, 77.6245),
            make_stop("s1", 1, 12.9716, 77.5946, kind=StopKind.PICKUP),
            make_stop("s2", 2, 12.9580, 77.6101),
        ],
    )
