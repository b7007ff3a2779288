"""
Geographic helpers: great-circle distance and mile/degree conversion.
"""

import math
from typing import Tuple

EARTH_RADIUS_MILES = 3958.8
MILES_PER_DEGREE = 69.0


def calculate_distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance between two coordinates.

    Args:
        lat1: Latitude of the first point (degrees)
        lon1: Longitude of the first point (degrees)
        lat2: Latitude of the second point (degrees)
        lon2: Longitude of the second point (degrees)

    Returns:
        Distance in miles
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(a))


def miles_to_degrees(miles: float) -> float:
    """Rough conversion used for map spans and placeholder offsets (1 degree ~ 69 miles)."""
    return miles / MILES_PER_DEGREE


def round_coordinate(lat: float, lng: float, places: int = 3) -> Tuple[float, float]:
    """Round a coordinate for use in cache keys (3 places is roughly 100m)."""
    return round(lat, places), round(lng, places)
