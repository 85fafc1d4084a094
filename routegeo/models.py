import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Both finite, latitude within [-90, 90] and longitude within [-180, 180]."""
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


class Coordinate(BaseModel):
    # No range check on construction: out-of-range values have to be
    # representable so the pipeline can exclude them.
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    def is_valid(self) -> bool:
        return is_valid_coordinate(self.lat, self.lng)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


class StopKind(str, Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"


class StopRole(str, Enum):
    START = "START"
    INTERMEDIATE = "INTERMEDIATE"
    END = "END"


class Stop(BaseModel):
    stop_id: str
    sequence: int
    kind: StopKind = StopKind.DELIVERY
    coordinate: Optional[Coordinate] = None
    order_id: Optional[str] = None
    estimated_arrival: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Stop":
        """Build a stop from the route optimizer's ``RouteStop`` JSON."""
        lat = payload.get("latitude")
        lng = payload.get("longitude")
        coordinate = None
        if lat is not None and lng is not None:
            coordinate = Coordinate(lat=lat, lng=lng)
        return cls(
            stop_id=str(payload["stop_id"]),
            sequence=int(payload["stop_sequence"]),
            kind=StopKind(payload.get("stop_type", StopKind.DELIVERY.value)),
            coordinate=coordinate,
            order_id=payload.get("order_id") or None,
            estimated_arrival=payload.get("estimated_arrival_time") or None,
        )


class Route(BaseModel):
    route_id: str
    name: str = ""
    stops: List[Stop] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Route":
        """Build a route from the route optimizer's ``OptimizedRoute`` JSON."""
        return cls(
            route_id=str(payload["route_id"]),
            name=payload.get("route_name", ""),
            stops=[Stop.from_api(s) for s in payload.get("stops") or []],
        )


class ValidatedStop(BaseModel):
    model_config = ConfigDict(frozen=True)

    stop: Stop
    coordinate: Coordinate
    role: StopRole


class BoundingRegion(BaseModel):
    model_config = ConfigDict(frozen=True)

    south_west: Coordinate
    north_east: Coordinate


class PositionSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    captured_at: datetime
    accuracy_meters: Optional[float] = None


class GeometryKind(str, Enum):
    ROAD_SNAPPED = "ROAD_SNAPPED"
    STRAIGHT_LINE = "STRAIGHT_LINE"
    EMPTY = "EMPTY"


class RenderGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: GeometryKind
    path: Tuple[Coordinate, ...] = ()
    bounds: Optional[BoundingRegion] = None


class GeometryRequest(BaseModel):
    route: Route
    departure_time: Optional[datetime] = Field(
        default=None,
        description="Forwarded to the traffic service. Defaults to now.",
    )


class GeometryResponse(BaseModel):
    route_id: str
    geometry: RenderGeometry
    center: Coordinate
    navigation_url: str = ""
