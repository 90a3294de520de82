"""Offer status derivation applied at the inventory write boundary."""

from src.errors import ValidationError
from src.models.enums import OfferStatus


def derive_status(
    quantity: int,
    min_quantity_alert: int,
    previous_status: OfferStatus | str | None = None,
) -> OfferStatus:
    """Status as a pure function of quantity vs. zero and vs. the alert threshold.

    A previously discontinued offer stays discontinued whatever its quantity.
    """
    if quantity < 0:
        raise ValidationError(f"quantity must be >= 0, got {quantity}")
    if previous_status is not None and OfferStatus(previous_status) is OfferStatus.DISCONTINUED:
        return OfferStatus.DISCONTINUED
    if quantity == 0:
        return OfferStatus.OUT_OF_STOCK
    if quantity <= min_quantity_alert:
        return OfferStatus.LOW_STOCK
    return OfferStatus.AVAILABLE
