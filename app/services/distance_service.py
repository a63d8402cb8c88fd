"""
Great-circle distance helpers for the "near me" filter
"""
from geopy.distance import great_circle

from app.models.issue import GeoLocation

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle (Haversine) distance between two points on a 6371 km sphere

    Args:
        lat1, lon1: first point in degrees
        lat2, lon2: second point in degrees

    Returns:
        Distance in kilometers
    """
    return great_circle((lat1, lon1), (lat2, lon2), radius=EARTH_RADIUS_KM).kilometers


def is_within_radius(origin: GeoLocation, point: GeoLocation, radius_km: float) -> bool:
    """Inclusive radius test: a point exactly radius_km away is inside"""
    distance = distance_km(origin.latitude, origin.longitude, point.latitude, point.longitude)
    return distance <= radius_km
