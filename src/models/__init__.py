"""Pydantic models for catalog, pharmacy, search, inventory and subscription data."""

from src.models.base import ApiModel, Page
from src.models.catalog import CategoriesView, MedicineSummary, MedicineView, TrendingItem
from src.models.inventory import Identity, OfferUpsert
from src.models.pharmacy import GeoPoint, PharmacySummary, PharmacyView
from src.models.search import (
    AnnotatedOffer,
    NearbyQuery,
    OfferRecord,
    SearchQuery,
    SearchResponse,
    SearchResultGroup,
)
from src.models.subscription import Plan, PlanCatalog, SubscriptionView

__all__ = [
    "ApiModel",
    "Page",
    "MedicineSummary",
    "MedicineView",
    "CategoriesView",
    "TrendingItem",
    "GeoPoint",
    "PharmacySummary",
    "PharmacyView",
    "SearchQuery",
    "NearbyQuery",
    "OfferRecord",
    "AnnotatedOffer",
    "SearchResultGroup",
    "SearchResponse",
    "Identity",
    "OfferUpsert",
    "Plan",
    "PlanCatalog",
    "SubscriptionView",
]
