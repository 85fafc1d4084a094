"""
Geometry resolution for a delivery route.

Road-snapped geometry is preferred:
  1. Validate and order the stops; fewer than two usable stops -> EMPTY
  2. Ask the routing collaborator once for per-leg encoded segments
  3. Decode and join the legs -> ROAD_SNAPPED when anything decoded; a
     reply may carry several alternatives, tried in order

When the collaborator fails, finds no path, or returns nothing decodable,
the validated stops are joined with straight lines -> STRAIGHT_LINE.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Union

from .assembler import assemble_with_stats
from .bounds import bounds
from .models import Coordinate, GeometryKind, RenderGeometry, Route
from .stops import has_renderable_path, prepare, waypoints

logger = logging.getLogger(__name__)

RoadGeometryResponse = Union[str, Sequence[Any], None]
FetchRoadGeometry = Callable[[List[Coordinate], Optional[datetime]], Awaitable[RoadGeometryResponse]]

EMPTY_GEOMETRY = RenderGeometry(kind=GeometryKind.EMPTY, path=(), bounds=None)


def normalize_segments(response: RoadGeometryResponse) -> List[str]:
    """A single encoded path becomes a one-leg list; blank or non-string legs are dropped."""
    if response is None:
        return []
    if isinstance(response, str):
        return [response] if response else []
    return [s for s in response if isinstance(s, str) and s]


def normalize_candidates(response: RoadGeometryResponse) -> List[List[str]]:
    """
    Ordered alternatives to try, each a list of legs.

    A flat reply (one string, or a list of strings) is a single alternative.
    A list of lists is several, best first, e.g. per-leg sections followed
    by the whole-route polyline.
    """
    if response is None or isinstance(response, str):
        flat = normalize_segments(response)
        return [flat] if flat else []

    items = list(response)
    if any(isinstance(item, (list, tuple)) for item in items):
        nested = [normalize_segments(item) for item in items if isinstance(item, (list, tuple))]
        return [c for c in nested if c]

    flat = normalize_segments(items)
    return [flat] if flat else []


def _geometry(kind: GeometryKind, path: List[Coordinate]) -> RenderGeometry:
    return RenderGeometry(kind=kind, path=tuple(path), bounds=bounds(path))


async def resolve(
    route: Route,
    fetch_road_geometry: FetchRoadGeometry,
    departure_time: Optional[datetime] = None,
) -> RenderGeometry:
    """
    Render-ready geometry for ``route``.

    Never raises for collaborator or decoding problems; those degrade to
    straight lines. Task cancellation still propagates.
    """
    validated = prepare(route.stops)
    if not has_renderable_path(validated):
        logger.info("[ROUTING] Route %s has %d usable stop(s), nothing to draw", route.route_id, len(validated))
        return EMPTY_GEOMETRY

    points = waypoints(validated)
    logger.info("[ROUTING] Route %s: requesting road geometry for %d waypoints", route.route_id, len(points))

    candidates: List[List[str]] = []
    try:
        candidates = normalize_candidates(await fetch_road_geometry(points, departure_time))
    except Exception as e:
        logger.warning("[ROUTING] Road geometry unavailable for route %s: %s", route.route_id, e)

    for segments in candidates:
        assembled = assemble_with_stats(segments)
        if assembled.skipped:
            logger.warning(
                "[ROUTING] Route %s: %d of %d segments could not be decoded",
                route.route_id,
                assembled.skipped,
                len(segments),
            )
        if assembled.points:
            return _geometry(GeometryKind.ROAD_SNAPPED, assembled.points)

    logger.info("[ROUTING] Route %s: falling back to straight lines", route.route_id)
    return _geometry(GeometryKind.STRAIGHT_LINE, points)


class GeometryResolver:
    """Binds one routing collaborator for repeated resolve calls."""

    def __init__(self, fetch_road_geometry: FetchRoadGeometry):
        self.fetch_road_geometry = fetch_road_geometry

    async def resolve(self, route: Route, departure_time: Optional[datetime] = None) -> RenderGeometry:
        return await resolve(route, self.fetch_road_geometry, departure_time)

    async def resolve_many(
        self, routes: Iterable[Route], departure_time: Optional[datetime] = None
    ) -> List[RenderGeometry]:
        """Resolve routes concurrently; results line up with the input order."""
        return list(await asyncio.gather(*(self.resolve(r, departure_time) for r in routes)))
