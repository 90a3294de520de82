"""Medicine routes: search, categories, trending, detail."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.deps import get_search_engine
from src.models.catalog import CategoriesResponse, TrendingResponse
from src.models.search import MedicineDetailResponse, SearchQuery, SearchResponse
from src.search.engine import SearchEngine

router = APIRouter(prefix="/api/medicines", tags=["medicines"])


@router.get("/search", response_model=SearchResponse)
async def search_medicines(
    search: Optional[str] = None,
    latitude: Optional[str] = None,
    longitude: Optional[str] = None,
    radius: Optional[str] = None,
    category: Optional[str] = None,
    therapeutic_class: Optional[str] = Query(None, alias="therapeuticClass"),
    requires_prescription: Optional[str] = Query(None, alias="requiresPrescription"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    engine: SearchEngine = Depends(get_search_engine),
) -> SearchResponse:
    """Grouped availability for a free-text medicine query, optionally around a point."""
    query = SearchQuery.from_params(
        search=search,
        latitude=latitude,
        longitude=longitude,
        radius=radius,
        category=category,
        therapeutic_class=therapeutic_class,
        requires_prescription=requires_prescription,
        min_price=min_price,
        max_price=max_price,
        page=page,
        limit=limit,
    )
    return await asyncio.to_thread(engine.search_medicines, query)


@router.get("/categories", response_model=CategoriesResponse)
async def categories(engine: SearchEngine = Depends(get_search_engine)) -> CategoriesResponse:
    view = await asyncio.to_thread(engine.categories)
    return CategoriesResponse(categories=view.categories, therapeutic_classes=view.therapeutic_classes)


@router.get("/trending", response_model=TrendingResponse)
async def trending(engine: SearchEngine = Depends(get_search_engine)) -> TrendingResponse:
    items = await asyncio.to_thread(engine.trending)
    return TrendingResponse(trending=items)


@router.get("/{medicine_id}", response_model=MedicineDetailResponse)
async def get_medicine(
    medicine_id: int,
    engine: SearchEngine = Depends(get_search_engine),
) -> MedicineDetailResponse:
    return await asyncio.to_thread(engine.get_medicine, medicine_id)
