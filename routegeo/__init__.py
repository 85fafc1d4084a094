from .assembler import assemble, assemble_with_stats
from .bounds import bounds
from .errors import CodecError, FetchError, MalformedPolylineError, TrackerError, TrackerErrorCode
from .flexpolyline import decode, encode
from .geometry import GeometryResolver, resolve
from .models import (
    BoundingRegion,
    Coordinate,
    GeometryKind,
    PositionSample,
    RenderGeometry,
    Route,
    Stop,
    StopKind,
    StopRole,
    ValidatedStop,
)
from .stops import prepare
from .tracker import LivePositionTracker, PositioningFacility, TrackerHandle, TrackerOptions

__all__ = [
    "assemble",
    "assemble_with_stats",
    "bounds",
    "decode",
    "encode",
    "prepare",
    "resolve",
    "GeometryResolver",
    "LivePositionTracker",
    "PositioningFacility",
    "TrackerHandle",
    "TrackerOptions",
    "BoundingRegion",
    "Coordinate",
    "GeometryKind",
    "PositionSample",
    "RenderGeometry",
    "Route",
    "Stop",
    "StopKind",
    "StopRole",
    "ValidatedStop",
    "CodecError",
    "FetchError",
    "MalformedPolylineError",
    "TrackerError",
    "TrackerErrorCode",
]
