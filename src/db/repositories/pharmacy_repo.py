"""Pharmacy repository: eligibility and bounding-box lookups returning PharmacyView models."""

from typing import Iterable, Optional

from sqlalchemy import select

from src.db import get_session
from src.db.models.pharmacy import Pharmacy
from src.models.pharmacy import GeoPoint, PharmacyView

BoundingBox = tuple[float, float, float, float]


def to_view(row: Pharmacy) -> PharmacyView:
    """Map an ORM row to the API view; location becomes a GeoJSON point [lon, lat]."""
    return PharmacyView(
        id=row.id,
        owner=row.owner_id,
        name=row.name,
        license=row.license,
        location=GeoPoint(coordinates=(row.longitude, row.latitude)),
        address=row.address,
        county=row.county,
        town=row.town,
        phone=row.phone,
        email=row.email,
        website=row.website,
        operating_hours=row.operating_hours or {},
        images=row.images or [],
        rating=row.rating,
        total_reviews=row.total_reviews,
        is_verified=row.is_verified,
        is_active=row.is_active,
        is_24_hours=row.is_24_hours,
        services=row.services or [],
        specialties=row.specialties or [],
        delivery_radius=row.delivery_radius,
        delivery_fee=row.delivery_fee,
    )


def _eligible():
    return select(Pharmacy).where(Pharmacy.is_active.is_(True), Pharmacy.is_verified.is_(True))


def _within_box(q, box: BoundingBox):
    min_lat, max_lat, min_lon, max_lon = box
    return q.where(
        Pharmacy.latitude >= min_lat,
        Pharmacy.latitude <= max_lat,
        Pharmacy.longitude >= min_lon,
        Pharmacy.longitude <= max_lon,
    )


def find_eligible_by_ids(
    pharmacy_ids: Iterable[int],
    box: Optional[BoundingBox] = None,
) -> dict[int, PharmacyView]:
    """Return {id: view} for the ids whose pharmacy is active and verified (and inside box, if given)."""
    ids = list(set(pharmacy_ids))
    if not ids:
        return {}
    with get_session() as session:
        q = _eligible().where(Pharmacy.id.in_(ids))
        if box is not None:
            q = _within_box(q, box)
        return {r.id: to_view(r) for r in session.scalars(q).all()}


def find_eligible_in_box(box: BoundingBox) -> list[PharmacyView]:
    """Active and verified pharmacies inside the bounding box, ordered by id."""
    with get_session() as session:
        q = _within_box(_eligible(), box).order_by(Pharmacy.id)
        return [to_view(r) for r in session.scalars(q).all()]


def get_by_id(pharmacy_id: int) -> Optional[PharmacyView]:
    with get_session() as session:
        row = session.get(Pharmacy, pharmacy_id)
        return to_view(row) if row is not None else None


def get_owner_id(pharmacy_id: int) -> Optional[str]:
    with get_session() as session:
        return session.scalar(select(Pharmacy.owner_id).where(Pharmacy.id == pharmacy_id))
