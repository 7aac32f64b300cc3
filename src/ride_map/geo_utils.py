# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects, no imports from other project modules.

import math
from typing import Sequence, Tuple

from shapely.geometry import LineString


EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def polyline_bounds(points: Sequence[Tuple[float, float]]) -> Tuple[float, float, float, float]:
    """
    Bounding box of a (lat, lon) polyline.

    Args:
        points: At least two (lat, lon) pairs.

    Returns:
        (min_lat, min_lon, max_lat, max_lon)
    """
    # shapely works in x/y, i.e. lon/lat
    line = LineString([(lon, lat) for lat, lon in points])
    min_lon, min_lat, max_lon, max_lat = line.bounds
    return min_lat, min_lon, max_lat, max_lon


def polyline_length(points: Sequence[Tuple[float, float]]) -> float:
    """Sum of haversine segment lengths of a (lat, lon) polyline, in metres."""
    return sum(
        haversine_distance(a[0], a[1], b[0], b[1])
        for a, b in zip(points, points[1:])
    )
