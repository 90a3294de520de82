"""Shared test setup: temp SQLite file DB, row factories, view builders and fixed clocks.

Import this module before anything from src so DATABASE_URL points at the temp file.
"""

import atexit
import os
import sys
import tempfile
from datetime import datetime
from itertools import count
from pathlib import Path
from typing import Any

# Use a shared file DB so every get_session() sees the same data (in-memory is per-connection).
_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
os.environ["SEED_ON_INIT"] = "false"
os.environ.setdefault("TRACING_ENABLED", "false")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.db import get_session, reset_db  # noqa: E402
from src.db.models import Medicine, Offer, Pharmacy  # noqa: E402
from src.models.catalog import MedicineView  # noqa: E402
from src.models.enums import OfferStatus  # noqa: E402
from src.models.pharmacy import GeoPoint, PharmacyView  # noqa: E402
from src.models.search import CandidateOffer, OfferRecord  # noqa: E402
from src.search.geo import EARTH_RADIUS_M  # noqa: E402
from src.search.hours import DEFAULT_OPERATING_HOURS  # noqa: E402
from src.search.stock import derive_status  # noqa: E402

# Westlands, Nairobi
ORIGIN_LAT = -1.2921
ORIGIN_LON = 36.8219

# 2024-01-15 is a Monday
MONDAY_10AM = datetime(2024, 1, 15, 10, 0)
MONDAY_7AM = datetime(2024, 1, 15, 7, 0)

METERS_PER_DEGREE_LAT = EARTH_RADIUS_M * 3.141592653589793 / 180.0

_ids = count(1)


def fixed_clock(moment: datetime = MONDAY_10AM):
    return lambda: moment


def north_of(lat: float, lon: float, meters: float) -> tuple[float, float]:
    """Point `meters` due north (great-circle distance along the meridian is exact)."""
    return lat + meters / METERS_PER_DEGREE_LAT, lon


def north_of_origin(meters: float) -> dict[str, float]:
    """latitude/longitude keyword arguments for make_pharmacy, `meters` north of the origin."""
    lat, lon = north_of(ORIGIN_LAT, ORIGIN_LON, meters)
    return {"latitude": lat, "longitude": lon}


def reset_database() -> None:
    """Drop and recreate every table (empty)."""
    reset_db()


def make_medicine(**overrides: Any) -> int:
    n = next(_ids)
    fields: dict[str, Any] = {
        "name": f"Medicine {n}",
        "generic_name": None,
        "brand": None,
        "category": "tablet",
        "therapeutic_class": "painkillers",
        "requires_prescription": False,
        "active_ingredients": [],
    }
    fields.update(overrides)
    with get_session() as session:
        row = Medicine(**fields)
        session.add(row)
        session.flush()
        return row.id


def make_pharmacy(**overrides: Any) -> int:
    n = next(_ids)
    fields: dict[str, Any] = {
        "owner_id": f"owner-{n}",
        "name": f"Pharmacy {n}",
        "license": f"PH/TEST/{n:04d}",
        "latitude": ORIGIN_LAT,
        "longitude": ORIGIN_LON,
        "address": "Waiyaki Way",
        "county": "Nairobi",
        "town": "Westlands",
        "phone": "254700000000",
        "operating_hours": {day: dict(h) for day, h in DEFAULT_OPERATING_HOURS.items()},
        "is_active": True,
        "is_verified": True,
        "is_24_hours": False,
        "services": ["prescription"],
        "specialties": ["general"],
    }
    fields.update(overrides)
    with get_session() as session:
        row = Pharmacy(**fields)
        session.add(row)
        session.flush()
        return row.id


def make_offer(pharmacy_id: int, medicine_id: int, price: float, quantity: int = 50, **overrides: Any) -> int:
    min_alert = overrides.pop("min_quantity_alert", 10)
    status = overrides.pop("status", None)
    if status is None:
        status = derive_status(quantity, min_alert)
    with get_session() as session:
        row = Offer(
            pharmacy_id=pharmacy_id,
            medicine_id=medicine_id,
            quantity=quantity,
            price=price,
            min_quantity_alert=min_alert,
            status=OfferStatus(status).value,
            **overrides,
        )
        session.add(row)
        session.flush()
        return row.id


def medicine_view(medicine_id: int, name: str = "Paracetamol", **overrides: Any) -> MedicineView:
    fields: dict[str, Any] = {
        "id": medicine_id,
        "name": name,
        "category": "tablet",
        "therapeutic_class": "painkillers",
    }
    fields.update(overrides)
    return MedicineView(**fields)


def pharmacy_view(pharmacy_id: int, lat: float = ORIGIN_LAT, lon: float = ORIGIN_LON, **overrides: Any) -> PharmacyView:
    fields: dict[str, Any] = {
        "id": pharmacy_id,
        "owner": f"owner-{pharmacy_id}",
        "name": f"Pharmacy {pharmacy_id}",
        "license": f"PH/VIEW/{pharmacy_id}",
        "location": GeoPoint(coordinates=(lon, lat)),
        "address": "Waiyaki Way",
        "county": "Nairobi",
        "town": "Westlands",
        "phone": "254700000000",
        "operating_hours": {day: dict(h) for day, h in DEFAULT_OPERATING_HOURS.items()},
        "is_active": True,
        "is_verified": True,
    }
    fields.update(overrides)
    return PharmacyView(**fields)


def candidate(
    offer_id: int,
    medicine: MedicineView,
    pharmacy: PharmacyView,
    price: float,
    quantity: int = 50,
    distance: float | None = None,
    status: OfferStatus = OfferStatus.AVAILABLE,
) -> CandidateOffer:
    offer = OfferRecord(
        id=offer_id,
        pharmacy_id=pharmacy.id,
        medicine_id=medicine.id,
        quantity=quantity,
        price=price,
        status=status,
    )
    return CandidateOffer(offer=offer, medicine=medicine, pharmacy=pharmacy, distance=distance)


@atexit.register
def _remove_db_file() -> None:
    try:
        os.unlink(_test_db_file.name)
    except OSError:
        pass
