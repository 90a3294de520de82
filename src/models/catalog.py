"""Medicine views returned by the catalog repository and the search engine."""

from datetime import date
from typing import Optional

from src.models.base import ApiModel
from src.models.enums import MedicineCategory, PregnancyCategory, TherapeuticClass


class MedicineSummary(ApiModel):
    id: int
    name: str
    brand: Optional[str] = None
    category: MedicineCategory
    therapeutic_class: TherapeuticClass


class MedicineView(MedicineSummary):
    """Full catalog record."""

    generic_name: Optional[str] = None
    description: Optional[str] = None
    dosage: Optional[str] = None
    strength: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    barcode: Optional[str] = None
    image: Optional[str] = None
    requires_prescription: bool = False
    is_controlled: bool = False
    side_effects: list[str] = []
    contraindications: list[str] = []
    active_ingredients: list[str] = []
    indications: list[str] = []
    dosage_instructions: Optional[str] = None
    warnings: list[str] = []
    storage_instructions: Optional[str] = None
    pregnancy_category: PregnancyCategory = PregnancyCategory.NOT_APPLICABLE


class CategoriesView(ApiModel):
    categories: list[str]
    therapeutic_classes: list[str]


class TrendingItem(ApiModel):
    """Aggregate over available offers of one medicine."""

    medicine: MedicineView
    total_quantity: int
    pharmacy_count: int
    avg_price: float


class CategoriesResponse(CategoriesView):
    success: bool = True


class TrendingResponse(ApiModel):
    success: bool = True
    trending: list[TrendingItem]
