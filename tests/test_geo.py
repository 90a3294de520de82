"""Tests for great-circle distance and bounding boxes."""

import sys
import unittest
from math import pi
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

import helpers  # noqa: F401,E402  sets DATABASE_URL before src is imported

from src.search.geo import EARTH_RADIUS_M, bounding_box, haversine_m

NAIROBI = (-1.2921, 36.8219)
MOMBASA = (-4.0435, 39.6682)


class TestHaversine(unittest.TestCase):
    def test_same_point_is_zero(self):
        self.assertEqual(haversine_m(*NAIROBI, *NAIROBI), 0.0)

    def test_symmetric(self):
        self.assertAlmostEqual(haversine_m(*NAIROBI, *MOMBASA), haversine_m(*MOMBASA, *NAIROBI), places=6)

    def test_one_degree_of_latitude(self):
        expected = EARTH_RADIUS_M * pi / 180.0
        self.assertAlmostEqual(haversine_m(0.0, 0.0, 1.0, 0.0), expected, places=3)

    def test_nairobi_to_mombasa(self):
        # roughly 440 km
        self.assertTrue(430_000 < haversine_m(*NAIROBI, *MOMBASA) < 450_000)


class TestBoundingBox(unittest.TestCase):
    def test_box_contains_circle(self):
        lat, lon = NAIROBI
        min_lat, max_lat, min_lon, max_lon = bounding_box(lat, lon, 5000)
        self.assertLess(min_lat, lat)
        self.assertGreater(max_lat, lat)
        self.assertLess(min_lon, lon)
        self.assertGreater(max_lon, lon)
        self.assertAlmostEqual(haversine_m(lat, lon, max_lat, lon), 5000, places=3)
        self.assertGreaterEqual(haversine_m(lat, lon, lat, max_lon), 5000 - 1e-6)

    def test_box_excludes_far_points(self):
        min_lat, max_lat, min_lon, max_lon = bounding_box(*NAIROBI, 5000)
        self.assertFalse(min_lat <= MOMBASA[0] <= max_lat and min_lon <= MOMBASA[1] <= max_lon)

    def test_polar_box_spans_all_longitudes(self):
        box = bounding_box(89.99, 10.0, 5000)
        self.assertEqual(box[2:], (-180.0, 180.0))

    def test_antimeridian_box_spans_all_longitudes(self):
        box = bounding_box(0.0, 179.99, 5000)
        self.assertEqual(box[2:], (-180.0, 180.0))


if __name__ == "__main__":
    unittest.main()
