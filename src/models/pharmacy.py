"""Pharmacy views: geo point, summary and full record."""

from typing import Any, Literal, Optional

from pydantic import Field

from src.models.base import ApiModel
from src.models.enums import PharmacyService, PharmacySpecialty


class GeoPoint(ApiModel):
    """GeoJSON point; coordinates are [longitude, latitude]."""

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class PharmacySummary(ApiModel):
    """Pharmacy fields joined onto each offer in search results."""

    id: int
    name: str
    address: str
    phone: str
    location: GeoPoint
    rating: float = 0.0
    # weekday -> {"open": "HH:MM", "close": "HH:MM", "closed": bool}, kept as stored
    operating_hours: dict[str, Any] = {}
    services: list[PharmacyService] = []
    is_24_hours: bool = Field(False, alias="is24Hours")
    is_currently_open: Optional[bool] = None


class PharmacyView(PharmacySummary):
    """Full pharmacy record, with distance when produced by a radius query."""

    owner: str
    license: str
    county: str
    town: str
    email: Optional[str] = None
    website: Optional[str] = None
    images: list[str] = []
    total_reviews: int = 0
    is_verified: bool = False
    is_active: bool = True
    specialties: list[PharmacySpecialty] = []
    delivery_radius: float = 5.0
    delivery_fee: float = 200.0
    distance: Optional[float] = None

    @property
    def is_eligible(self) -> bool:
        """Only active and verified pharmacies appear in search results."""
        return self.is_active and self.is_verified

    def summary(self) -> PharmacySummary:
        return PharmacySummary.model_validate(self.model_dump(include=set(PharmacySummary.model_fields)))
