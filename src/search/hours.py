"""Operating-hours evaluation: is a pharmacy open at a given moment."""

from datetime import datetime
from typing import Any, Mapping

from src.models.enums import WEEKDAYS

# Defaults applied when a pharmacy record omits a weekday entry
DEFAULT_OPERATING_HOURS: dict[str, dict[str, Any]] = {
    "monday": {"open": "08:00", "close": "18:00", "closed": False},
    "tuesday": {"open": "08:00", "close": "18:00", "closed": False},
    "wednesday": {"open": "08:00", "close": "18:00", "closed": False},
    "thursday": {"open": "08:00", "close": "18:00", "closed": False},
    "friday": {"open": "08:00", "close": "18:00", "closed": False},
    "saturday": {"open": "09:00", "close": "17:00", "closed": False},
    "sunday": {"open": "10:00", "close": "16:00", "closed": False},
}


def parse_hhmm(value: Any) -> int | None:
    """Parse a 24-hour "HH:MM" string into minutes since midnight. None when malformed."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return None
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def weekday_name(now: datetime) -> str:
    return WEEKDAYS[now.weekday()]


def is_open(schedule: Mapping[str, Any] | None, is_24_hours: bool, now: datetime) -> bool:
    """Return True if the pharmacy is open at `now`.

    24-hour pharmacies are always open. Otherwise the entry for now's weekday is used and
    open <= now <= close is checked on minutes since midnight (both bounds inclusive).
    A missing or malformed entry counts as closed. Ranges crossing midnight (close < open)
    only match inside the literal numeric window, so they evaluate as closed.
    """
    if is_24_hours:
        return True
    if not schedule:
        return False
    day = schedule.get(weekday_name(now))
    if not isinstance(day, Mapping) or day.get("closed"):
        return False
    open_minutes = parse_hhmm(day.get("open"))
    close_minutes = parse_hhmm(day.get("close"))
    if open_minutes is None or close_minutes is None:
        return False
    now_minutes = now.hour * 60 + now.minute
    return open_minutes <= now_minutes <= close_minutes


def with_default_days(schedule: Mapping[str, Any] | None) -> dict[str, dict[str, Any]]:
    """Fill weekdays missing from a schedule with the default hours (used at write time)."""
    merged = {day: dict(hours) for day, hours in DEFAULT_OPERATING_HOURS.items()}
    for day, hours in (schedule or {}).items():
        key = str(day).strip().lower()
        if key in merged and isinstance(hours, Mapping):
            merged[key] = {**merged[key], **dict(hours)}
    return merged
