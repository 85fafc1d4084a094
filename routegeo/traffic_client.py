from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from . import config
from .errors import FetchError
from .models import Coordinate


def candidates_from_response(data: Dict[str, Any]) -> List[List[str]]:
    """
    Pull encoded alternatives out of a traffic service reply, best first.

    ``route.sections`` (one string per leg) comes first, then the single
    ``route.polyline`` for when none of the sections decode. No route data
    means no alternatives.
    """
    route = data.get("route") if isinstance(data, dict) else None
    if not isinstance(route, dict):
        return []

    candidates: List[List[str]] = []
    sections = route.get("sections")
    if isinstance(sections, list):
        legs = [s for s in sections if isinstance(s, str) and s]
        if legs:
            candidates.append(legs)

    polyline = route.get("polyline")
    if isinstance(polyline, str) and polyline:
        candidates.append([polyline])
    return candidates


class TrafficServiceClient:
    """
    Routing collaborator backed by the dashboard's traffic service.

    Makes exactly one POST per call; retry policy is left to the service.
    Instances are awaitable callables matching ``FetchRoadGeometry``.
    """

    def __init__(
        self,
        base_url: str = config.TRAFFIC_SERVICE_URL,
        timeout: float = config.TRAFFIC_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport  # tests pass httpx.MockTransport

    async def fetch_candidates(
        self, waypoints: List[Coordinate], departure_time: Optional[datetime] = None
    ) -> List[List[str]]:
        if departure_time is None:
            departure_time = datetime.now(timezone.utc)

        url = f"{self.base_url}{config.TRAFFIC_ROUTE_PATH}"
        body = {
            "waypoints": [{"lat": w.lat, "lng": w.lng} for w in waypoints],
            "departure_time": departure_time.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, json=body)
        except httpx.HTTPError as e:
            raise FetchError(f"Traffic service unreachable: {e}") from e

        if resp.status_code != 200:
            raise FetchError(f"Routing failed: {resp.text}", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError("Traffic service returned invalid JSON", status_code=resp.status_code) from e

        return candidates_from_response(data)

    async def __call__(
        self, waypoints: List[Coordinate], departure_time: Optional[datetime] = None
    ) -> List[List[str]]:
        return await self.fetch_candidates(waypoints, departure_time)
