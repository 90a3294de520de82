"""Tests for operating-hours evaluation."""

import sys
import unittest
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

import helpers  # noqa: F401,E402  sets DATABASE_URL before src is imported

from src.search.hours import DEFAULT_OPERATING_HOURS, is_open, parse_hhmm, with_default_days

WEEKDAY_HOURS = {"monday": {"open": "08:00", "close": "18:00", "closed": False}}


def monday(hour: int, minute: int = 0) -> datetime:
    # 2024-01-15 is a Monday
    return datetime(2024, 1, 15, hour, minute)


class TestIsOpen(unittest.TestCase):
    def test_bounds_are_inclusive(self):
        self.assertTrue(is_open(WEEKDAY_HOURS, False, monday(8, 0)))
        self.assertTrue(is_open(WEEKDAY_HOURS, False, monday(18, 0)))

    def test_outside_window(self):
        self.assertFalse(is_open(WEEKDAY_HOURS, False, monday(7, 59)))
        self.assertFalse(is_open(WEEKDAY_HOURS, False, monday(18, 1)))

    def test_24_hours_ignores_schedule(self):
        self.assertTrue(is_open({}, True, monday(3, 0)))
        self.assertTrue(is_open(None, True, monday(23, 59)))

    def test_missing_day_is_closed(self):
        tuesday = datetime(2024, 1, 16, 10, 0)
        self.assertFalse(is_open(WEEKDAY_HOURS, False, tuesday))
        self.assertFalse(is_open(None, False, monday(10)))

    def test_closed_flag(self):
        hours = {"monday": {"open": "08:00", "close": "18:00", "closed": True}}
        self.assertFalse(is_open(hours, False, monday(10)))

    def test_malformed_entry_is_closed(self):
        for entry in (
            {"open": "8am", "close": "18:00"},
            {"open": "08:00"},
            {"open": "25:00", "close": "26:00"},
            "08:00-18:00",
        ):
            with self.subTest(entry=entry):
                self.assertFalse(is_open({"monday": entry}, False, monday(10)))

    def test_overnight_range_evaluates_closed(self):
        hours = {"monday": {"open": "22:00", "close": "06:00", "closed": False}}
        self.assertFalse(is_open(hours, False, monday(23, 0)))
        self.assertFalse(is_open(hours, False, monday(2, 0)))


class TestParseHHMM(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse_hhmm("00:00"), 0)
        self.assertEqual(parse_hhmm("08:30"), 510)
        self.assertEqual(parse_hhmm("23:59"), 1439)

    def test_invalid(self):
        for value in (None, "", "8", "08:60", "24:00", "ab:cd", 800):
            with self.subTest(value=value):
                self.assertIsNone(parse_hhmm(value))


class TestWithDefaultDays(unittest.TestCase):
    def test_fills_missing_days(self):
        merged = with_default_days({"Sunday": {"closed": True}})
        self.assertEqual(set(merged), set(DEFAULT_OPERATING_HOURS))
        self.assertTrue(merged["sunday"]["closed"])
        self.assertEqual(merged["sunday"]["open"], "10:00")
        self.assertEqual(merged["monday"], DEFAULT_OPERATING_HOURS["monday"])

    def test_ignores_unknown_keys(self):
        merged = with_default_days({"holiday": {"closed": True}})
        self.assertNotIn("holiday", merged)


if __name__ == "__main__":
    unittest.main()
