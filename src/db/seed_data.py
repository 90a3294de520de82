"""Seed DB from CSV files when tables are first created."""

from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from src.db.models.catalog import Medicine
from src.db.models.inventory import Offer
from src.db.models.pharmacy import Pharmacy
from src.models.enums import WEEKDAYS
from src.search.hours import with_default_days
from src.search.stock import derive_status
from src.utils.csv_loader import load_inventory, load_medicines, load_pharmacies
from src.utils.logger import get_logger

logger = get_logger("medassist.db.seed_data")


def _parse_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        return (val or "").strip().lower() in ("true", "1", "yes")
    return False


def _parse_int(val: Any, default: int = 0) -> int:
    try:
        return int(val) if val is not None and str(val).strip() else default
    except (TypeError, ValueError):
        return default


def _parse_float(val: Any, default: float | None = None) -> float | None:
    try:
        return float(val) if val is not None and str(val).strip() else default
    except (TypeError, ValueError):
        return default


def _parse_date(val: Any) -> date | None:
    if val is None or not str(val).strip():
        return None
    s = str(val).strip()
    try:
        return date.fromisoformat(s[:10])
    except (TypeError, ValueError):
        return None


def _parse_list(val: Any) -> list[str]:
    """Pipe-separated cell -> list of non-empty strings."""
    return [p.strip() for p in str(val or "").split("|") if p.strip()]


def _text(val: Any) -> str | None:
    return (val or "").strip() or None


def _day_hours(cell: Any) -> dict[str, Any] | None:
    """'08:00-20:00' -> open/close; 'closed' -> closed day; blank -> None (default hours apply)."""
    s = (cell or "").strip().lower()
    if not s:
        return None
    if s == "closed":
        return {"open": "00:00", "close": "00:00", "closed": True}
    open_, _, close = s.partition("-")
    return {"open": open_.strip(), "close": close.strip(), "closed": False}


def _operating_hours(row: dict[str, Any]) -> dict[str, dict[str, Any]]:
    schedule: dict[str, dict[str, Any]] = {}
    weekday = _day_hours(row.get("weekday_hours"))
    if weekday is not None:
        for day in WEEKDAYS[:5]:
            schedule[day] = dict(weekday)
    for day in ("saturday", "sunday"):
        hours = _day_hours(row.get(f"{day}_hours"))
        if hours is not None:
            schedule[day] = hours
    return with_default_days(schedule)


def seed_demo_data(session: Session) -> None:
    """Read demo data from CSV files under data/ and insert it. Order: medicines, pharmacies, inventory."""
    # 1) Medicines, keyed by barcode for the inventory file
    barcode_to_medicine_id: dict[str, int] = {}
    med_rows = load_medicines()
    for r in med_rows:
        name = (r.get("name") or "").strip()
        if not name:
            continue
        m = Medicine(
            name=name,
            generic_name=_text(r.get("generic_name")),
            brand=_text(r.get("brand")),
            category=(r.get("category") or "other").strip(),
            therapeutic_class=(r.get("therapeutic_class") or "general").strip(),
            description=_text(r.get("description")),
            dosage=_text(r.get("dosage")),
            strength=_text(r.get("strength")),
            manufacturer=_text(r.get("manufacturer")),
            barcode=_text(r.get("barcode")),
            requires_prescription=_parse_bool(r.get("requires_prescription")),
            is_controlled=_parse_bool(r.get("is_controlled")),
            active_ingredients=_parse_list(r.get("active_ingredients")),
            indications=_parse_list(r.get("indications")),
            side_effects=_parse_list(r.get("side_effects")),
            contraindications=_parse_list(r.get("contraindications")),
            warnings=_parse_list(r.get("warnings")),
            pregnancy_category=_text(r.get("pregnancy_category")) or "N/A",
        )
        session.add(m)
        session.flush()
        if m.barcode:
            barcode_to_medicine_id[m.barcode] = m.id
    if med_rows:
        logger.info("seed_data.medicines", count=len(barcode_to_medicine_id))

    # 2) Pharmacies, keyed by license
    license_to_pharmacy_id: dict[str, int] = {}
    ph_rows = load_pharmacies()
    for r in ph_rows:
        license_ = (r.get("license") or "").strip()
        longitude = _parse_float(r.get("longitude"))
        latitude = _parse_float(r.get("latitude"))
        if not license_ or longitude is None or latitude is None:
            continue
        p = Pharmacy(
            license=license_,
            owner_id=(r.get("owner_id") or "").strip(),
            name=(r.get("name") or "").strip(),
            longitude=longitude,
            latitude=latitude,
            address=(r.get("address") or "").strip(),
            county=(r.get("county") or "").strip(),
            town=(r.get("town") or "").strip(),
            phone=(r.get("phone") or "").strip(),
            email=_text(r.get("email")),
            operating_hours=_operating_hours(r),
            is_24_hours=_parse_bool(r.get("is_24_hours")),
            rating=_parse_float(r.get("rating"), 0.0),
            total_reviews=_parse_int(r.get("total_reviews")),
            is_verified=_parse_bool(r.get("is_verified")),
            is_active=_parse_bool(r.get("is_active")),
            services=_parse_list(r.get("services")),
            specialties=_parse_list(r.get("specialties")),
        )
        session.add(p)
        session.flush()
        license_to_pharmacy_id[license_] = p.id
    if ph_rows:
        logger.info("seed_data.pharmacies", count=len(license_to_pharmacy_id))

    # 3) Inventory (status derived from quantity vs alert threshold)
    inv_rows = load_inventory()
    inserted = 0
    for r in inv_rows:
        pharmacy_id = license_to_pharmacy_id.get((r.get("pharmacy_license") or "").strip())
        medicine_id = barcode_to_medicine_id.get((r.get("medicine_barcode") or "").strip())
        price = _parse_float(r.get("price"))
        if pharmacy_id is None or medicine_id is None or price is None:
            logger.warning(
                "seed_data.inventory_row_skipped",
                pharmacy_license=r.get("pharmacy_license"),
                medicine_barcode=r.get("medicine_barcode"),
            )
            continue
        quantity = _parse_int(r.get("quantity"))
        min_alert = _parse_int(r.get("min_quantity_alert"), 10)
        session.add(
            Offer(
                pharmacy_id=pharmacy_id,
                medicine_id=medicine_id,
                quantity=quantity,
                price=price,
                discount_price=_parse_float(r.get("discount_price")),
                min_quantity_alert=min_alert,
                status=derive_status(quantity, min_alert).value,
                expiry_date=_parse_date(r.get("expiry_date")),
                batch_number=_text(r.get("batch_number")),
            )
        )
        inserted += 1
    if inv_rows:
        session.flush()
        logger.info("seed_data.inventory", count=inserted)
