"""Inventory repository: offer reads for search/analytics and the pharmacy-side write path."""

from datetime import date
from typing import Any, Iterable, Optional

from sqlalchemy import func, or_, select

from src.db import get_session
from src.db.base import utcnow
from src.db.models.catalog import Medicine
from src.db.models.inventory import Offer
from src.db.repositories.medicine_repo import escape_like
from src.models.catalog import MedicineSummary
from src.models.enums import OfferStatus, TherapeuticClass
from src.models.search import InventoryLine, OfferRecord
from src.search.stock import derive_status


def _line(offer: Offer, medicine: Medicine) -> InventoryLine:
    return InventoryLine.model_validate(
        {
            **OfferRecord.model_validate(offer).model_dump(),
            "medicine": MedicineSummary.model_validate(medicine),
        }
    )


def find_eligible(
    medicine_ids: Iterable[int],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> list[OfferRecord]:
    """Offers for the medicines that are not out of stock, within the inclusive price bounds given."""
    ids = list(set(medicine_ids))
    if not ids:
        return []
    with get_session() as session:
        q = select(Offer).where(
            Offer.medicine_id.in_(ids),
            Offer.status != OfferStatus.OUT_OF_STOCK.value,
        )
        if min_price is not None:
            q = q.where(Offer.price >= min_price)
        if max_price is not None:
            q = q.where(Offer.price <= max_price)
        rows = session.scalars(q.order_by(Offer.id)).all()
        return [OfferRecord.model_validate(r) for r in rows]


def trending(limit: int) -> list[dict[str, Any]]:
    """Aggregate available offers per medicine; rank by pharmacy count then total quantity."""
    pharmacy_count = func.count(func.distinct(Offer.pharmacy_id)).label("pharmacy_count")
    total_quantity = func.sum(Offer.quantity).label("total_quantity")
    with get_session() as session:
        q = (
            select(
                Offer.medicine_id,
                total_quantity,
                pharmacy_count,
                func.avg(Offer.price).label("avg_price"),
            )
            .where(Offer.status == OfferStatus.AVAILABLE.value)
            .group_by(Offer.medicine_id)
            .order_by(pharmacy_count.desc(), total_quantity.desc(), Offer.medicine_id)
            .limit(limit)
        )
        rows = list(session.execute(q).all())
    return [
        {
            "medicine_id": medicine_id,
            "total_quantity": int(total or 0),
            "pharmacy_count": int(count or 0),
            "avg_price": float(avg or 0.0),
        }
        for medicine_id, total, count, avg in rows
    ]


def top_available_for_pharmacy(pharmacy_id: int, limit: int) -> list[InventoryLine]:
    """A pharmacy's available offers with the largest quantities first."""
    with get_session() as session:
        q = (
            select(Offer, Medicine)
            .join(Medicine, Offer.medicine_id == Medicine.id)
            .where(Offer.pharmacy_id == pharmacy_id, Offer.status == OfferStatus.AVAILABLE.value)
            .order_by(Offer.quantity.desc(), Offer.id)
            .limit(limit)
        )
        return [_line(o, m) for o, m in session.execute(q).all()]


def list_for_pharmacy(
    pharmacy_id: int,
    page: int,
    limit: int,
    search: Optional[str] = None,
    status: Optional[str] = None,
    therapeutic_class: Optional[TherapeuticClass] = None,
) -> tuple[list[InventoryLine], int]:
    """One page of a pharmacy's offers joined with medicine details, sorted by medicine name; plus total."""
    q = (
        select(Offer, Medicine)
        .join(Medicine, Offer.medicine_id == Medicine.id)
        .where(Offer.pharmacy_id == pharmacy_id)
    )
    if status and status != "all":
        q = q.where(Offer.status == OfferStatus(status).value)
    term = (search or "").strip()
    if term:
        pattern = f"%{escape_like(term)}%"
        q = q.where(
            or_(
                Medicine.name.ilike(pattern, escape="\\"),
                Medicine.generic_name.ilike(pattern, escape="\\"),
                Medicine.brand.ilike(pattern, escape="\\"),
            )
        )
    if therapeutic_class is not None:
        q = q.where(Medicine.therapeutic_class == TherapeuticClass(therapeutic_class).value)
    with get_session() as session:
        total = session.scalar(select(func.count()).select_from(q.subquery())) or 0
        rows = session.execute(
            q.order_by(Medicine.name, Offer.id).offset((page - 1) * limit).limit(limit)
        ).all()
        return [_line(o, m) for o, m in rows], total


def get_by_id(offer_id: int) -> Optional[OfferRecord]:
    with get_session() as session:
        row = session.get(Offer, offer_id)
        return OfferRecord.model_validate(row) if row is not None else None


def upsert(
    pharmacy_id: int,
    medicine_id: int,
    quantity: int,
    price: float,
    discount_price: Optional[float] = None,
    min_quantity_alert: Optional[int] = None,
    max_quantity_per_customer: Optional[int] = None,
    expiry_date: Optional[date] = None,
    batch_number: Optional[str] = None,
    status: Optional[OfferStatus] = None,
) -> tuple[OfferRecord, bool]:
    """Create or update the (pharmacy, medicine) offer and recompute its status. Returns (offer, created).

    An explicit status replaces the stored one before derivation, so passing "available"
    re-activates a discontinued offer and passing "discontinued" pins it.
    """
    with get_session() as session:
        row = session.scalars(
            select(Offer).where(Offer.pharmacy_id == pharmacy_id, Offer.medicine_id == medicine_id)
        ).first()
        created = row is None
        if row is None:
            row = Offer(pharmacy_id=pharmacy_id, medicine_id=medicine_id, min_quantity_alert=10, max_quantity_per_customer=100)
            session.add(row)
        row.quantity = quantity
        row.price = price
        row.discount_price = discount_price
        if min_quantity_alert is not None:
            row.min_quantity_alert = min_quantity_alert
        if max_quantity_per_customer is not None:
            row.max_quantity_per_customer = max_quantity_per_customer
        if expiry_date is not None:
            row.expiry_date = expiry_date
        if batch_number is not None:
            row.batch_number = batch_number
        previous = status if status is not None else (None if created else row.status)
        row.status = derive_status(quantity, row.min_quantity_alert, previous).value
        row.last_updated = utcnow()
        session.flush()
        session.refresh(row)
        return OfferRecord.model_validate(row), created


def delete(offer_id: int) -> bool:
    """Delete an offer. Returns True if a row was deleted."""
    with get_session() as session:
        row = session.get(Offer, offer_id)
        if row is None:
            return False
        session.delete(row)
        return True


def low_stock(pharmacy_id: int) -> list[InventoryLine]:
    """Offers of a pharmacy in low_stock or out_of_stock, lowest quantity first."""
    with get_session() as session:
        q = (
            select(Offer, Medicine)
            .join(Medicine, Offer.medicine_id == Medicine.id)
            .where(
                Offer.pharmacy_id == pharmacy_id,
                Offer.status.in_([OfferStatus.LOW_STOCK.value, OfferStatus.OUT_OF_STOCK.value]),
            )
            .order_by(Offer.quantity, Offer.id)
        )
        return [_line(o, m) for o, m in session.execute(q).all()]
