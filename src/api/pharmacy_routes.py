"""Pharmacy routes: nearby browse, detail, inventory listing."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.deps import get_search_engine
from src.models.search import (
    NearbyQuery,
    NearbyResponse,
    PharmacyDetailResponse,
    PharmacyInventoryQuery,
    PharmacyInventoryResponse,
)
from src.search.engine import SearchEngine

router = APIRouter(prefix="/api/pharmacies", tags=["pharmacies"])


@router.get("/nearby", response_model=NearbyResponse)
async def nearby(
    latitude: Optional[str] = None,
    longitude: Optional[str] = None,
    radius: Optional[str] = None,
    specialty: Optional[str] = None,
    is_24_hours: Optional[str] = Query(None, alias="is24Hours"),
    services: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    engine: SearchEngine = Depends(get_search_engine),
) -> NearbyResponse:
    query = NearbyQuery.from_params(
        latitude=latitude,
        longitude=longitude,
        radius=radius,
        specialty=specialty,
        is_24_hours=is_24_hours,
        services=services,
        page=page,
        limit=limit,
    )
    return await asyncio.to_thread(engine.nearby, query)


@router.get("/{pharmacy_id}", response_model=PharmacyDetailResponse)
async def get_pharmacy(
    pharmacy_id: int,
    engine: SearchEngine = Depends(get_search_engine),
) -> PharmacyDetailResponse:
    return await asyncio.to_thread(engine.get_pharmacy, pharmacy_id)


@router.get("/{pharmacy_id}/inventory", response_model=PharmacyInventoryResponse)
async def pharmacy_inventory(
    pharmacy_id: int,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    status: Optional[str] = None,
    therapeutic_class: Optional[str] = Query(None, alias="therapeuticClass"),
    engine: SearchEngine = Depends(get_search_engine),
) -> PharmacyInventoryResponse:
    query = PharmacyInventoryQuery.from_params(
        page=page,
        limit=limit,
        search=search,
        status=status,
        therapeutic_class=therapeutic_class,
    )
    return await asyncio.to_thread(engine.pharmacy_inventory, pharmacy_id, query)
