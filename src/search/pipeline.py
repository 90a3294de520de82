"""Search pipeline stages.

Each stage has one job and a plain input/output contract; SearchEngine composes them:

    match_medicines -> fetch_eligible_offers -> join_pharmacies -> apply_geo_filter
    -> annotate_open_status -> sort_offers -> group_by_medicine -> paginate

Stages that read the store are the first three; the rest are pure.
"""

from datetime import datetime
from math import ceil
from typing import Optional, Sequence

from src.db.repositories import inventory_repo, medicine_repo, pharmacy_repo
from src.models.base import Page
from src.models.catalog import MedicineView
from src.models.search import (
    AnnotatedOffer,
    CandidateOffer,
    OfferRecord,
    SearchQuery,
    SearchResultGroup,
)
from src.search.geo import bounding_box, haversine_m
from src.search.hours import is_open
from src.utils.logger import log_search_stage


class GeoOrigin:
    """Query point and radius (meters) of a geo-aware search."""

    __slots__ = ("latitude", "longitude", "radius")

    def __init__(self, latitude: float, longitude: float, radius: float):
        self.latitude = latitude
        self.longitude = longitude
        self.radius = radius

    @classmethod
    def from_query(cls, query) -> Optional["GeoOrigin"]:
        if query.latitude is None or query.longitude is None:
            return None
        return cls(query.latitude, query.longitude, query.radius)

    def box(self) -> tuple[float, float, float, float]:
        return bounding_box(self.latitude, self.longitude, self.radius)


def match_medicines(query: SearchQuery) -> list[MedicineView]:
    """Stage 1: text match plus exact category / therapeutic class / prescription filters."""
    medicines = medicine_repo.find_by_text_and_filters(
        query.search,
        category=query.category,
        therapeutic_class=query.therapeutic_class,
        requires_prescription=query.requires_prescription,
    )
    log_search_stage("match_medicines", matched=len(medicines))
    return medicines


def fetch_eligible_offers(
    medicines: Sequence[MedicineView],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> list[OfferRecord]:
    """Stage 2: offers of the matched medicines that are not out of stock, within price bounds."""
    offers = inventory_repo.find_eligible([m.id for m in medicines], min_price, max_price)
    log_search_stage("fetch_eligible_offers", offers=len(offers))
    return offers


def join_pharmacies(
    offers: Sequence[OfferRecord],
    medicines: Sequence[MedicineView],
    origin: Optional[GeoOrigin] = None,
) -> list[CandidateOffer]:
    """Stage 3: attach medicine and pharmacy; drop offers whose pharmacy is not active and verified.

    With an origin, pharmacies outside its bounding box are dropped here too (coarse geo pre-filter).
    """
    by_medicine = {m.id: m for m in medicines}
    pharmacies = pharmacy_repo.find_eligible_by_ids(
        (o.pharmacy_id for o in offers),
        box=origin.box() if origin is not None else None,
    )
    joined = [
        CandidateOffer(offer=o, medicine=by_medicine[o.medicine_id], pharmacy=pharmacies[o.pharmacy_id])
        for o in offers
        if o.pharmacy_id in pharmacies and o.medicine_id in by_medicine
    ]
    log_search_stage("join_pharmacies", pharmacies=len(pharmacies), offers=len(joined))
    return joined


def apply_geo_filter(candidates: Sequence[CandidateOffer], origin: Optional[GeoOrigin]) -> list[CandidateOffer]:
    """Stage 4: keep offers whose eligible pharmacy is within the radius; attach distance in meters."""
    if origin is None:
        return list(candidates)
    kept: list[CandidateOffer] = []
    for c in candidates:
        if not c.pharmacy.is_eligible:
            continue
        location = c.pharmacy.location
        distance = haversine_m(origin.latitude, origin.longitude, location.latitude, location.longitude)
        if distance <= origin.radius:
            kept.append(c.model_copy(update={"distance": distance}))
    log_search_stage("apply_geo_filter", radius=origin.radius, kept=len(kept), dropped=len(candidates) - len(kept))
    return kept


def annotate_open_status(candidates: Sequence[CandidateOffer], now: datetime) -> list[CandidateOffer]:
    """Stage 5: compute is_currently_open for each offer's pharmacy at `now`."""
    return [
        c.model_copy(
            update={"is_currently_open": is_open(c.pharmacy.operating_hours, c.pharmacy.is_24_hours, now)}
        )
        for c in candidates
    ]


def sort_offers(candidates: Sequence[CandidateOffer], geo: bool) -> list[CandidateOffer]:
    """Stage 6: distance then price when geo-aware, otherwise price. Stable for equal keys."""
    if geo:
        return sorted(candidates, key=lambda c: (c.distance if c.distance is not None else float("inf"), c.offer.price))
    return sorted(candidates, key=lambda c: c.offer.price)


def to_annotated_offer(c: CandidateOffer) -> AnnotatedOffer:
    """Project a candidate to its response shape; the pharmacy carries is_currently_open."""
    pharmacy = c.pharmacy.summary().model_copy(update={"is_currently_open": c.is_currently_open})
    return AnnotatedOffer(
        pharmacy=pharmacy,
        quantity=c.offer.quantity,
        price=c.offer.price,
        discount_price=c.offer.discount_price,
        status=c.offer.status,
        distance=c.distance,
    )


def group_by_medicine(candidates: Sequence[CandidateOffer]) -> list[SearchResultGroup]:
    """Stage 7: one group per medicine in first-appearance order; offer order is preserved."""
    groups: dict[int, SearchResultGroup] = {}
    for c in candidates:
        group = groups.get(c.medicine.id)
        if group is None:
            group = groups[c.medicine.id] = SearchResultGroup(medicine=c.medicine, availability=[])
        group.availability.append(to_annotated_offer(c))
    log_search_stage("group_by_medicine", groups=len(groups))
    return list(groups.values())


def paginate(items: Sequence, page: int, limit: int) -> Page:
    """Stage 8: offset pagination; pages = ceil(total / limit)."""
    total = len(items)
    start = (page - 1) * limit
    window = list(items[start:start + limit])
    return Page(
        count=len(window),
        total=total,
        pages=ceil(total / limit) if limit else 0,
        current_page=page,
        items=window,
    )
