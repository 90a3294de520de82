"""Search queries, pipeline rows and grouped/paginated responses."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from src.config import (
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    NEARBY_DEFAULT_RADIUS_M,
    SEARCH_DEFAULT_RADIUS_M,
)
from src.errors import ValidationError
from src.models.base import ApiModel
from src.models.catalog import MedicineSummary, MedicineView
from src.models.enums import (
    MedicineCategory,
    OfferStatus,
    PharmacyService,
    PharmacySpecialty,
    TherapeuticClass,
)
from src.models.pharmacy import PharmacySummary, PharmacyView

_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no")


def parse_bool_param(value: Any) -> Optional[bool]:
    """Parse "true"/"false" style query values; None/empty stays None, anything else is invalid."""
    if value is None or isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if not s:
        return None
    if s in _TRUE_STRINGS:
        return True
    if s in _FALSE_STRINGS:
        return False
    raise ValueError(f"expected true or false, got {value!r}")


def first_error_message(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
    msg = err.get("msg", "invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{loc}: {msg}" if loc else msg


class _GeoQueryMixin(ApiModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude")
    @classmethod
    def _check_latitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -90.0 <= v <= 90.0:
            raise ValueError("latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def _check_longitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -180.0 <= v <= 180.0:
            raise ValueError("longitude must be between -180 and 180")
        return v

    @property
    def is_geo(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class SearchQuery(_GeoQueryMixin):
    """Validated medicine search request."""

    search: str
    radius: int = Field(SEARCH_DEFAULT_RADIUS_M, gt=0)
    category: Optional[MedicineCategory] = None
    therapeutic_class: Optional[TherapeuticClass] = None
    requires_prescription: Optional[bool] = None
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)

    @field_validator("search", mode="before")
    @classmethod
    def _check_search(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise ValueError("Please provide a search term")
        return str(v).strip()

    @field_validator("requires_prescription", mode="before")
    @classmethod
    def _parse_prescription(cls, v: Any) -> Optional[bool]:
        return parse_bool_param(v)

    @field_validator("category", "therapeutic_class", mode="before")
    @classmethod
    def _blank_enum_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_pairs(self) -> "SearchQuery":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice must not exceed maxPrice")
        return self

    @classmethod
    def from_params(cls, **params: Any) -> "SearchQuery":
        """Build from raw request parameters, converting failures into ValidationError."""
        if not str(params.get("search") or "").strip():
            raise ValidationError("Please provide a search term")
        try:
            return cls.model_validate({k: v for k, v in params.items() if v is not None})
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e


class NearbyQuery(_GeoQueryMixin):
    """Validated pharmacy proximity request. latitude and longitude are required."""

    radius: int = Field(NEARBY_DEFAULT_RADIUS_M, gt=0)
    specialty: Optional[PharmacySpecialty] = None
    is_24_hours: Optional[bool] = Field(None, alias="is24Hours")
    services: list[PharmacyService] = []
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)

    @field_validator("is_24_hours", mode="before")
    @classmethod
    def _parse_24h(cls, v: Any) -> Optional[bool]:
        return parse_bool_param(v)

    @field_validator("services", mode="before")
    @classmethod
    def _split_services(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return list(v)

    @field_validator("specialty", mode="before")
    @classmethod
    def _blank_specialty_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_params(cls, **params: Any) -> "NearbyQuery":
        if params.get("latitude") is None or params.get("longitude") is None:
            raise ValidationError("Please provide latitude and longitude")
        try:
            return cls.model_validate({k: v for k, v in params.items() if v is not None})
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e


class OfferRecord(ApiModel):
    """One inventory row as read from the offer store."""

    id: int
    pharmacy_id: int
    medicine_id: int
    quantity: int
    price: float
    discount_price: Optional[float] = None
    min_quantity_alert: int = 10
    max_quantity_per_customer: int = 100
    status: OfferStatus
    last_updated: Optional[datetime] = None
    expiry_date: Optional[date] = None
    batch_number: Optional[str] = None


class CandidateOffer(ApiModel):
    """An offer moving through the search pipeline with its joined medicine and pharmacy."""

    offer: OfferRecord
    medicine: MedicineView
    pharmacy: PharmacyView
    distance: Optional[float] = None
    is_currently_open: Optional[bool] = None


class AnnotatedOffer(ApiModel):
    """One pharmacy's offer for a medicine, as shown in a result group."""

    pharmacy: PharmacySummary
    quantity: int
    price: float
    discount_price: Optional[float] = None
    status: OfferStatus
    distance: Optional[float] = None


class SearchResultGroup(ApiModel):
    medicine: MedicineView
    availability: list[AnnotatedOffer]


class SearchResponse(ApiModel):
    success: bool = True
    message: Optional[str] = None
    count: int
    total: int
    pages: int
    current_page: int
    results: list[SearchResultGroup]


class NearbyResponse(ApiModel):
    success: bool = True
    count: int
    pharmacies: list[PharmacyView]


class MedicineDetailResponse(ApiModel):
    success: bool = True
    medicine: MedicineView
    availability: list[AnnotatedOffer]


class InventoryLine(OfferRecord):
    """Offer joined with its medicine, for pharmacy-side listings."""

    medicine: MedicineSummary


class PharmacyDetailResponse(ApiModel):
    success: bool = True
    pharmacy: PharmacyView
    top_medicines: list[InventoryLine]


class PharmacyInventoryResponse(ApiModel):
    success: bool = True
    count: int
    total: int
    pages: int
    current_page: int
    inventory: list[InventoryLine]


class PharmacyInventoryQuery(ApiModel):
    """Validated filters for listing one pharmacy's inventory."""

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    search: Optional[str] = None
    status: Optional[str] = None
    therapeutic_class: Optional[TherapeuticClass] = None

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, v: Any) -> Optional[str]:
        if v is None or not str(v).strip():
            return None
        s = str(v).strip().lower()
        if s != "all":
            OfferStatus(s)
        return s

    @field_validator("therapeutic_class", mode="before")
    @classmethod
    def _blank_class_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_params(cls, **params: Any) -> "PharmacyInventoryQuery":
        try:
            return cls.model_validate({k: v for k, v in params.items() if v is not None})
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e
