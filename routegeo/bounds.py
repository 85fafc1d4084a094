from typing import Iterable, Optional

from . import config
from .models import BoundingRegion, Coordinate, RenderGeometry


def bounds(points: Iterable[Coordinate]) -> Optional[BoundingRegion]:
    """
    Smallest lat/lng box around the points, or None for no points.

    Longitudes are compared as plain numbers, so a path crossing the
    antimeridian gets a box spanning the whole globe the other way round.
    """
    min_lat = min_lng = max_lat = max_lng = None
    for p in points:
        if min_lat is None:
            min_lat = max_lat = p.lat
            min_lng = max_lng = p.lng
            continue
        min_lat = min(min_lat, p.lat)
        max_lat = max(max_lat, p.lat)
        min_lng = min(min_lng, p.lng)
        max_lng = max(max_lng, p.lng)

    if min_lat is None:
        return None
    return BoundingRegion(
        south_west=Coordinate(lat=min_lat, lng=min_lng),
        north_east=Coordinate(lat=max_lat, lng=max_lng),
    )


def center(region: BoundingRegion) -> Coordinate:
    return Coordinate(
        lat=(region.south_west.lat + region.north_east.lat) / 2.0,
        lng=(region.south_west.lng + region.north_east.lng) / 2.0,
    )


def default_center() -> Coordinate:
    return Coordinate(lat=config.DEFAULT_CENTER_LAT, lng=config.DEFAULT_CENTER_LNG)


def view_center(geometry: RenderGeometry) -> Coordinate:
    """Where to centre the map for a geometry; the configured default when it has no bounds."""
    if geometry.bounds is None:
        return default_center()
    return center(geometry.bounds)
