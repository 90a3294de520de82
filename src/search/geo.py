"""Great-circle distance and bounding boxes for radius queries."""

from math import asin, cos, degrees, radians, sin, sqrt

# Spherical earth radius in meters (same constant as 2dsphere geo-near queries)
EARTH_RADIUS_M = 6378100.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great circle distance between two points on the earth (meters)."""
    lon1, lat1, lon2, lat2 = map(radians, [lon1, lat1, lon2, lat2])
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(min(1.0, sqrt(a)))


def bounding_box(lat: float, lon: float, radius_m: float) -> tuple[float, float, float, float]:
    """Return (min_lat, max_lat, min_lon, max_lon) enclosing the circle of radius_m around the point.

    Used as a coarse SQL pre-filter; exact membership is decided by haversine_m.
    Near the poles or across the antimeridian the longitude span opens to the full range.
    """
    angular = radius_m / EARTH_RADIUS_M
    lat_delta = degrees(angular)
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)
    if min_lat <= -90.0 or max_lat >= 90.0:
        return min_lat, max_lat, -180.0, 180.0
    lon_delta = degrees(asin(min(1.0, sin(angular) / cos(radians(lat)))))
    min_lon = lon - lon_delta
    max_lon = lon + lon_delta
    if min_lon < -180.0 or max_lon > 180.0:
        return min_lat, max_lat, -180.0, 180.0
    return min_lat, max_lat, min_lon, max_lon
