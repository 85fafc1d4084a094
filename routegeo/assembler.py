import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .errors import CodecError
from .flexpolyline import decode
from .models import Coordinate, is_valid_coordinate

logger = logging.getLogger(__name__)


@dataclass
class AssembledPath:
    points: List[Coordinate] = field(default_factory=list)
    skipped: int = 0  # segments that failed to decode
    dropped_points: int = 0  # decoded points outside the coordinate range


def assemble_with_stats(segments: Iterable[Optional[str]]) -> AssembledPath:
    """
    Decode every leg on its own and join them in leg order.

    A leg that fails to decode is skipped rather than failing the route.
    """
    result = AssembledPath()
    for index, segment in enumerate(segments):
        try:
            decoded = decode(segment or "")
        except CodecError as e:
            result.skipped += 1
            logger.warning("[DECODE] Skipping segment %d: %s", index, e)
            continue

        for lat, lng in decoded:
            if not is_valid_coordinate(lat, lng):
                result.dropped_points += 1
                continue
            result.points.append(Coordinate(lat=lat, lng=lng))

    if result.dropped_points:
        logger.debug("[DECODE] Dropped %d out-of-range points", result.dropped_points)
    return result


def assemble(segments: Iterable[Optional[str]]) -> List[Coordinate]:
    """Concatenated path of all decodable segments; empty means no road data."""
    return assemble_with_stats(segments).points
