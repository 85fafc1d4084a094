import logging
from typing import Iterable, List

from .models import Coordinate, Stop, StopRole, ValidatedStop

logger = logging.getLogger(__name__)


def _role_for(index: int, count: int) -> StopRole:
    if index == 0:
        return StopRole.START
    if index == count - 1:
        return StopRole.END
    return StopRole.INTERMEDIATE


def prepare(stops: Iterable[Stop]) -> List[ValidatedStop]:
    """
    Order stops by sequence and keep only those with a usable coordinate.

    Works on a copy; the caller's list is left as it was. ``sorted`` is
    stable so stops sharing a sequence value keep their input order. Roles
    come from position in the filtered result, not from the stop kind.
    """
    ordered = sorted(stops, key=lambda s: s.sequence)
    usable = [s for s in ordered if s.coordinate is not None and s.coordinate.is_valid()]

    dropped = len(ordered) - len(usable)
    if dropped:
        logger.debug("Excluded %d stop(s) without a valid coordinate", dropped)

    return [
        ValidatedStop(stop=s, coordinate=s.coordinate, role=_role_for(i, len(usable)))
        for i, s in enumerate(usable)
    ]


def has_renderable_path(validated: List[ValidatedStop]) -> bool:
    return len(validated) >= 2


def waypoints(validated: List[ValidatedStop]) -> List[Coordinate]:
    return [v.coordinate for v in validated]
