"""Caller identity and pharmacy-side inventory write requests/responses."""

from datetime import date
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from src.errors import ValidationError
from src.models.base import ApiModel
from src.models.enums import OfferStatus, UserRole
from src.models.search import InventoryLine, OfferRecord, first_error_message


class Identity(ApiModel):
    """Authenticated caller as asserted by the upstream gateway."""

    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def can_manage(self, owner_id: Optional[str]) -> bool:
        """Admins manage every pharmacy; anyone else only the ones they own."""
        return self.is_admin or (owner_id is not None and owner_id == self.user_id)


class OfferUpsert(ApiModel):
    """Create-or-update body for one (pharmacy, medicine) offer."""

    pharmacy: int
    medicine: int
    quantity: int = Field(ge=0)
    price: float = Field(ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    min_quantity_alert: Optional[int] = Field(None, ge=0)
    max_quantity_per_customer: Optional[int] = Field(None, ge=1)
    expiry_date: Optional[date] = None
    batch_number: Optional[str] = None
    status: Optional[OfferStatus] = None

    @field_validator("batch_number", mode="before")
    @classmethod
    def _blank_batch_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_discount(self) -> "OfferUpsert":
        if self.discount_price is not None and self.discount_price > self.price:
            raise ValueError("discountPrice must not exceed price")
        return self

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "OfferUpsert":
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e


class OfferWriteResponse(ApiModel):
    success: bool = True
    message: str
    created: bool
    inventory: OfferRecord


class DeleteResponse(ApiModel):
    success: bool = True
    message: str


class LowStockResponse(ApiModel):
    success: bool = True
    count: int
    alerts: list[InventoryLine]
