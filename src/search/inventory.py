"""Pharmacy-side inventory writes: upsert with status derivation, delete, low-stock alerts."""

from src.db.repositories import inventory_repo, medicine_repo, pharmacy_repo
from src.errors import AuthorizationError, NotFoundError, store_errors
from src.models.inventory import (
    DeleteResponse,
    Identity,
    LowStockResponse,
    OfferUpsert,
    OfferWriteResponse,
)
from src.utils.logger import get_logger

logger = get_logger("medassist.inventory")


class InventoryManager:
    """Every write checks that the caller owns the pharmacy or is an admin."""

    def _authorize(self, identity: Identity, pharmacy_id: int) -> None:
        owner_id = pharmacy_repo.get_owner_id(pharmacy_id)
        if owner_id is None:
            raise NotFoundError("Pharmacy not found")
        if not identity.can_manage(owner_id):
            raise AuthorizationError("Not authorized to manage this pharmacy's inventory")

    def upsert_offer(self, identity: Identity, request: OfferUpsert) -> OfferWriteResponse:
        with store_errors():
            self._authorize(identity, request.pharmacy)
            if medicine_repo.get_by_id(request.medicine) is None:
                raise NotFoundError("Medicine not found")
            offer, created = inventory_repo.upsert(
                request.pharmacy,
                request.medicine,
                quantity=request.quantity,
                price=request.price,
                discount_price=request.discount_price,
                min_quantity_alert=request.min_quantity_alert,
                max_quantity_per_customer=request.max_quantity_per_customer,
                expiry_date=request.expiry_date,
                batch_number=request.batch_number,
                status=request.status,
            )
        logger.info(
            "inventory.offer.saved",
            offer_id=offer.id,
            pharmacy_id=offer.pharmacy_id,
            medicine_id=offer.medicine_id,
            status=offer.status.value,
            created=created,
        )
        return OfferWriteResponse(
            message="Inventory item created" if created else "Inventory item updated",
            created=created,
            inventory=offer,
        )

    def delete_offer(self, identity: Identity, offer_id: int) -> DeleteResponse:
        with store_errors():
            offer = inventory_repo.get_by_id(offer_id)
            if offer is None:
                raise NotFoundError("Inventory item not found")
            self._authorize(identity, offer.pharmacy_id)
            inventory_repo.delete(offer_id)
        logger.info("inventory.offer.deleted", offer_id=offer_id, pharmacy_id=offer.pharmacy_id)
        return DeleteResponse(message="Inventory item deleted")

    def low_stock_alerts(self, identity: Identity, pharmacy_id: int) -> LowStockResponse:
        with store_errors():
            self._authorize(identity, pharmacy_id)
            alerts = inventory_repo.low_stock(pharmacy_id)
        return LowStockResponse(count=len(alerts), alerts=alerts)
