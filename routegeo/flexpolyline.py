"""
Flexible polyline codec.

Wire format (one ASCII string):

  header:  varint(version = 1), varint(precision | third_dim << 4 | third_dim_precision << 7)
  body:    zig-zag varint deltas, lat/lng (and a third value when the header
           declares one), relative to the previous point, first point
           relative to 0

Every character carries 5 data bits; 0x20 marks that another character of
the same token follows.
"""

from typing import Iterator, List, Sequence, Tuple

from .errors import CodecError, MalformedPolylineError

FORMAT_VERSION = 1

ENCODING_TABLE = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
DECODING_TABLE = {ch: i for i, ch in enumerate(ENCODING_TABLE)}

# third dimension flags
ABSENT = 0
LEVEL = 1
ALTITUDE = 2
ELEVATION = 3
# 4 and 5 are reserved by the format
CUSTOM1 = 6
CUSTOM2 = 7

SUPPORTED_THIRD_DIMENSIONS = {ABSENT, LEVEL, ALTITUDE, ELEVATION, CUSTOM1, CUSTOM2}

# longest token accepted, in bits; anything longer cannot be a scaled coordinate
MAX_TOKEN_BITS = 64

LatLng = Tuple[float, float]


def _decode_unsigned_values(encoded: str) -> Iterator[int]:
    result = 0
    shift = 0
    pending = False
    for i, char in enumerate(encoded):
        value = DECODING_TABLE.get(char)
        if value is None:
            raise MalformedPolylineError(f"Invalid character {char!r} at position {i}", position=i)
        result |= (value & 0x1F) << shift
        if value & 0x20:
            shift += 5
            pending = True
            if shift >= MAX_TOKEN_BITS:
                raise MalformedPolylineError(f"Token too long at position {i}", position=i)
        else:
            yield result
            result = 0
            shift = 0
            pending = False
    if pending:
        raise MalformedPolylineError("Truncated token at end of polyline", position=len(encoded) - 1)


def _to_signed(value: int) -> int:
    if value & 1:
        return ~(value >> 1)
    return value >> 1


def _decode_header(values: Iterator[int]) -> Tuple[int, int, int]:
    version = next(values, None)
    if version != FORMAT_VERSION:
        raise MalformedPolylineError(f"Unsupported format version: {version}")
    header = next(values, None)
    if header is None:
        raise MalformedPolylineError("Missing header")
    precision = header & 15
    third_dim = (header >> 4) & 7
    third_dim_precision = (header >> 7) & 15
    if third_dim not in SUPPORTED_THIRD_DIMENSIONS:
        raise MalformedPolylineError(f"Unsupported third dimension: {third_dim}")
    return precision, third_dim, third_dim_precision


def get_third_dimension(encoded: str) -> int:
    """Return the third dimension flag declared in the header."""
    _, third_dim, _ = _decode_header(_decode_unsigned_values(encoded))
    return third_dim


def _iter_points(encoded: str) -> Iterator[Tuple[float, float, float]]:
    values = _decode_unsigned_values(encoded)
    precision, third_dim, third_dim_precision = _decode_header(values)

    factor_degree = 10.0 ** precision
    factor_z = 10.0 ** third_dim_precision
    dims = 3 if third_dim else 2

    last = [0, 0, 0]
    while True:
        first = next(values, None)
        if first is None:
            return
        deltas = [first]
        for _ in range(dims - 1):
            v = next(values, None)
            if v is None:
                raise MalformedPolylineError("Incomplete coordinate at end of polyline")
            deltas.append(v)
        for j, v in enumerate(deltas):
            last[j] += _to_signed(v)
        z = last[2] / factor_z if dims == 3 else 0.0
        yield last[0] / factor_degree, last[1] / factor_degree, z


def decode(encoded: str) -> List[LatLng]:
    """
    Decode a flexible polyline into (lat, lng) tuples in encounter order.

    The third dimension, if present, is read and discarded. An empty string
    decodes to an empty list. Raises MalformedPolylineError on bad input.
    """
    if not encoded:
        return []
    return [(lat, lng) for lat, lng, _ in _iter_points(encoded)]


def decode3d(encoded: str) -> List[Tuple[float, float, float]]:
    """Like decode(), but keeps the third value (0.0 when the header has none)."""
    if not encoded:
        return []
    return list(_iter_points(encoded))


def _round_half_away(value: float) -> int:
    if value < 0:
        return -int(abs(value) + 0.5)
    return int(value + 0.5)


def _encode_unsigned(value: int, out: List[str]) -> None:
    while value > 0x1F:
        out.append(ENCODING_TABLE[(value & 0x1F) | 0x20])
        value >>= 5
    out.append(ENCODING_TABLE[value])


def _encode_signed(value: int, out: List[str]) -> None:
    value <<= 1
    if value < 0:
        value = ~value
    _encode_unsigned(value, out)


def encode(
    points: Sequence[Sequence[float]],
    precision: int = 5,
    third_dim: int = ABSENT,
    third_dim_precision: int = 0,
) -> str:
    """Encode (lat, lng[, z]) points. Reference encoder for fixtures and tests."""
    if not 0 <= precision <= 15 or not 0 <= third_dim_precision <= 15:
        raise CodecError("precision must be between 0 and 15")
    if third_dim not in SUPPORTED_THIRD_DIMENSIONS:
        raise CodecError(f"Unsupported third dimension: {third_dim}")

    out: List[str] = []
    _encode_unsigned(FORMAT_VERSION, out)
    _encode_unsigned(precision | (third_dim << 4) | (third_dim_precision << 7), out)

    factor_degree = 10 ** precision
    factor_z = 10 ** third_dim_precision
    last_lat = last_lng = last_z = 0
    for point in points:
        lat = _round_half_away(point[0] * factor_degree)
        lng = _round_half_away(point[1] * factor_degree)
        _encode_signed(lat - last_lat, out)
        _encode_signed(lng - last_lng, out)
        last_lat, last_lng = lat, lng
        if third_dim:
            z = _round_half_away(point[2] * factor_z)
            _encode_signed(z - last_z, out)
            last_z = z
    return "".join(out)
