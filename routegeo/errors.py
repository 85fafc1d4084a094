from enum import Enum


class RouteGeometryError(Exception):
    """Base class for route geometry pipeline errors."""


class CodecError(RouteGeometryError, ValueError):
    """Raised when a flexible polyline cannot be decoded or encoded."""


class MalformedPolylineError(CodecError):
    """Bad character, truncated token or unsupported header."""

    def __init__(self, message: str, position: int = -1):
        super().__init__(message)
        self.position = position  # index into the encoded string, -1 when unknown


class FetchError(RouteGeometryError):
    """The routing collaborator could not return road geometry."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TrackerErrorCode(str, Enum):
    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"


class TrackerError(RouteGeometryError):
    """Reported through ``on_error``; never stops the position stream."""

    def __init__(self, code: TrackerErrorCode, message: str = ""):
        super().__init__(message or code.value)
        self.code = code
