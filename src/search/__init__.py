"""Availability search: hours evaluation, geo math, stock status, pipeline stages and the engine."""

from src.search.geo import EARTH_RADIUS_M, bounding_box, haversine_m
from src.search.hours import is_open
from src.search.stock import derive_status

__all__ = [
    "EARTH_RADIUS_M",
    "bounding_box",
    "derive_status",
    "haversine_m",
    "is_open",
]
