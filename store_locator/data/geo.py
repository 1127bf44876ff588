"""
Great-circle distance constants and helpers for nearby queries.
"""
import math

# Mean earth radius in miles
EARTH_RADIUS_MILES = 3963.1676
MILES_TO_KILOMETERS = 1.6093


def distance_scale(metric: bool, distance_adjustment: float) -> float:
    """
    Return the multiplier that turns a central angle (radians) into a distance.
    Kilometers when metric, miles otherwise, scaled by distance_adjustment.
    """
    return EARTH_RADIUS_MILES * (MILES_TO_KILOMETERS if metric else 1) * distance_adjustment


def great_circle_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    scale: float = EARTH_RADIUS_MILES,
) -> float:
    """
    Spherical law of cosines, the same formula the SQL statement evaluates.
    Arguments in degrees; result in the units of scale.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    cosine = (
        math.cos(lat1_rad) * math.cos(lat2_rad) * math.cos(math.radians(lng2) - math.radians(lng1))
        + math.sin(lat1_rad) * math.sin(lat2_rad)
    )
    # Rounding can push identical points just past 1.0
    return scale * safe_acos(cosine)


def safe_acos(x: float) -> float:
    return math.acos(max(-1.0, min(1.0, x)))
