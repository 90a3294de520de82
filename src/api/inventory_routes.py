"""Inventory routes for pharmacy owners and admins."""

import asyncio
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from src.api.deps import get_identity, get_inventory_manager
from src.errors import ValidationError
from src.models.inventory import (
    DeleteResponse,
    Identity,
    LowStockResponse,
    OfferUpsert,
    OfferWriteResponse,
)
from src.search.inventory import InventoryManager

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post("", response_model=OfferWriteResponse)
async def upsert_offer(
    payload: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_identity),
    manager: InventoryManager = Depends(get_inventory_manager),
) -> OfferWriteResponse:
    """Create or update the offer for (pharmacy, medicine); status is derived from quantity."""
    request = OfferUpsert.from_payload(payload)
    return await asyncio.to_thread(manager.upsert_offer, identity, request)


@router.get("/alerts", response_model=LowStockResponse)
async def low_stock_alerts(
    pharmacy: Optional[int] = None,
    identity: Identity = Depends(get_identity),
    manager: InventoryManager = Depends(get_inventory_manager),
) -> LowStockResponse:
    if pharmacy is None:
        raise ValidationError("Please provide a pharmacy id")
    return await asyncio.to_thread(manager.low_stock_alerts, identity, pharmacy)


@router.delete("/{offer_id}", response_model=DeleteResponse)
async def delete_offer(
    offer_id: int,
    identity: Identity = Depends(get_identity),
    manager: InventoryManager = Depends(get_inventory_manager),
) -> DeleteResponse:
    return await asyncio.to_thread(manager.delete_offer, identity, offer_id)
