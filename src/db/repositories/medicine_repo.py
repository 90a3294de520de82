"""Medicine repository: catalog lookups returning MedicineView models."""

from typing import Iterable, Optional

from sqlalchemy import String, cast, or_, select

from src.db import get_session
from src.db.models.catalog import Medicine
from src.models.catalog import CategoriesView, MedicineView
from src.models.enums import MedicineCategory, TherapeuticClass


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally (escape char is backslash)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def matches_text(medicine: MedicineView, term: str) -> bool:
    """Case-insensitive substring match on name, generic name, brand or any active ingredient."""
    needle = term.lower()
    fields = [medicine.name, medicine.generic_name, medicine.brand, *medicine.active_ingredients]
    return any(needle in (f or "").lower() for f in fields)


def find_by_text_and_filters(
    search: str,
    category: Optional[MedicineCategory] = None,
    therapeutic_class: Optional[TherapeuticClass] = None,
    requires_prescription: Optional[bool] = None,
) -> list[MedicineView]:
    """Text-match medicines (OR across text fields) AND the exact filters that are set.

    Active ingredients are a JSON array; SQL narrows on its serialized text and matches_text
    decides membership per element.
    """
    pattern = f"%{escape_like(search.strip())}%"
    with get_session() as session:
        q = select(Medicine).where(
            or_(
                Medicine.name.ilike(pattern, escape="\\"),
                Medicine.generic_name.ilike(pattern, escape="\\"),
                Medicine.brand.ilike(pattern, escape="\\"),
                cast(Medicine.active_ingredients, String).ilike(pattern, escape="\\"),
            )
        )
        if category is not None:
            q = q.where(Medicine.category == MedicineCategory(category).value)
        if therapeutic_class is not None:
            q = q.where(Medicine.therapeutic_class == TherapeuticClass(therapeutic_class).value)
        if requires_prescription is not None:
            q = q.where(Medicine.requires_prescription == requires_prescription)
        rows = list(session.scalars(q.order_by(Medicine.id)).all())
        views = [MedicineView.model_validate(r) for r in rows]
    return [m for m in views if matches_text(m, search.strip())]


def get_by_id(medicine_id: int) -> Optional[MedicineView]:
    with get_session() as session:
        row = session.get(Medicine, medicine_id)
        return MedicineView.model_validate(row) if row is not None else None


def get_many(medicine_ids: Iterable[int]) -> dict[int, MedicineView]:
    """Return {id: MedicineView} for the given ids (missing ids are absent)."""
    ids = list(set(medicine_ids))
    if not ids:
        return {}
    with get_session() as session:
        rows = session.scalars(select(Medicine).where(Medicine.id.in_(ids))).all()
        return {r.id: MedicineView.model_validate(r) for r in rows}


def distinct_categories() -> CategoriesView:
    """Distinct category and therapeutic class values present in the catalog, sorted."""
    with get_session() as session:
        categories = session.scalars(select(Medicine.category).distinct()).all()
        classes = session.scalars(select(Medicine.therapeutic_class).distinct()).all()
    return CategoriesView(categories=sorted(categories), therapeutic_classes=sorted(classes))
