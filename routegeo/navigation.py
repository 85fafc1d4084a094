from typing import List
from urllib.parse import urlencode

from .models import ValidatedStop

GOOGLE_MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


def _fmt(stop: ValidatedStop) -> str:
    return f"{stop.coordinate.lat},{stop.coordinate.lng}"


def directions_url(validated: List[ValidatedStop], travel_mode: str = "driving") -> str:
    """
    Google Maps turn-by-turn link for a prepared stop list.

    First stop is the origin, last the destination, the rest are passed as
    ``waypoints`` in order. Empty string when there is no path to follow.
    """
    if len(validated) < 2:
        return ""

    params = {
        "api": "1",
        "origin": _fmt(validated[0]),
        "destination": _fmt(validated[-1]),
    }
    if len(validated) > 2:
        params["waypoints"] = "|".join(_fmt(s) for s in validated[1:-1])
    params["travelmode"] = travel_mode

    return GOOGLE_MAPS_DIRECTIONS_URL + "?" + urlencode(params, safe=",|")
