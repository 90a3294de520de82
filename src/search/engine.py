"""SearchEngine: composes the pipeline stages and the read-side catalog/pharmacy queries."""

from contextlib import contextmanager
from datetime import datetime
from math import ceil
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from opentelemetry.trace import SpanKind

from src.config import PHARMACY_TIMEZONE, PHARMACY_TOP_MEDICINES_LIMIT, TRENDING_LIMIT
from src.db.repositories import inventory_repo, medicine_repo, pharmacy_repo
from src.errors import NotFoundError, store_errors
from src.models.catalog import CategoriesView, TrendingItem
from src.models.pharmacy import PharmacyView
from src.models.search import (
    MedicineDetailResponse,
    NearbyQuery,
    NearbyResponse,
    PharmacyDetailResponse,
    PharmacyInventoryQuery,
    PharmacyInventoryResponse,
    SearchQuery,
    SearchResponse,
)
from src.search import pipeline
from src.search.geo import haversine_m
from src.search.hours import is_open
from src.utils.logger import get_logger
from src.utils.tracing import get_tracer

logger = get_logger("medassist.search")

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Wall-clock time in the pharmacy timezone (server local time when none is configured)."""
    if PHARMACY_TIMEZONE:
        return datetime.now(ZoneInfo(PHARMACY_TIMEZONE))
    return datetime.now()


class SearchEngine:
    """Read-only availability search over the catalog, offer and pharmacy stores."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or local_now
        self._tracer = get_tracer()

    @contextmanager
    def _span(self, name: str, **attributes: Any):
        with self._tracer.start_as_current_span(
            f"search.{name}", kind=SpanKind.INTERNAL, attributes=attributes
        ) as span:
            yield span

    def _with_open_status(self, pharmacy: PharmacyView, now: datetime) -> PharmacyView:
        return pharmacy.model_copy(
            update={"is_currently_open": is_open(pharmacy.operating_hours, pharmacy.is_24_hours, now)}
        )

    def search_medicines(self, query: SearchQuery) -> SearchResponse:
        """Grouped, sorted, paginated availability for a free-text medicine query."""
        origin = pipeline.GeoOrigin.from_query(query)
        with store_errors(), self._span("medicines", term=query.search, geo=origin is not None) as root:
            with self._span("match_medicines") as span:
                medicines = pipeline.match_medicines(query)
                span.set_attribute("output.count", len(medicines))
            if not medicines:
                logger.info("search.medicines.completed", term=query.search, matched=0, groups=0)
                root.set_attribute("output.total", 0)
                return SearchResponse(
                    message="No medicines found",
                    count=0,
                    total=0,
                    pages=0,
                    current_page=query.page,
                    results=[],
                )

            with self._span("fetch_eligible_offers", input_count=len(medicines)) as span:
                offers = pipeline.fetch_eligible_offers(medicines, query.min_price, query.max_price)
                span.set_attribute("output.count", len(offers))
            with self._span("join_pharmacies", input_count=len(offers)) as span:
                candidates = pipeline.join_pharmacies(offers, medicines, origin)
                span.set_attribute("output.count", len(candidates))
            with self._span("apply_geo_filter", input_count=len(candidates)) as span:
                candidates = pipeline.apply_geo_filter(candidates, origin)
                span.set_attribute("output.count", len(candidates))

            candidates = pipeline.annotate_open_status(candidates, self._clock())
            candidates = pipeline.sort_offers(candidates, geo=origin is not None)
            groups = pipeline.group_by_medicine(candidates)
            page = pipeline.paginate(groups, query.page, query.limit)
            root.set_attribute("output.total", page.total)

        logger.info(
            "search.medicines.completed",
            term=query.search,
            matched=len(medicines),
            offers=len(candidates),
            groups=page.total,
            page=page.current_page,
        )
        return SearchResponse(
            count=page.count,
            total=page.total,
            pages=page.pages,
            current_page=page.current_page,
            results=page.items,
        )

    def get_medicine(self, medicine_id: int) -> MedicineDetailResponse:
        """Medicine record with its offers at eligible pharmacies, price ascending."""
        with store_errors():
            medicine = medicine_repo.get_by_id(medicine_id)
            if medicine is None:
                raise NotFoundError("Medicine not found")
            offers = pipeline.fetch_eligible_offers([medicine])
            candidates = pipeline.join_pharmacies(offers, [medicine])
        candidates = pipeline.annotate_open_status(candidates, self._clock())
        candidates = pipeline.sort_offers(candidates, geo=False)
        return MedicineDetailResponse(
            medicine=medicine,
            availability=[pipeline.to_annotated_offer(c) for c in candidates],
        )

    def categories(self) -> CategoriesView:
        with store_errors():
            return medicine_repo.distinct_categories()

    def trending(self, limit: int = TRENDING_LIMIT) -> list[TrendingItem]:
        """Most widely stocked medicines among available offers."""
        with store_errors():
            rows = inventory_repo.trending(limit)
            medicines = medicine_repo.get_many(r["medicine_id"] for r in rows)
        items = [
            TrendingItem(
                medicine=medicines[r["medicine_id"]],
                total_quantity=r["total_quantity"],
                pharmacy_count=r["pharmacy_count"],
                avg_price=r["avg_price"],
            )
            for r in rows
            if r["medicine_id"] in medicines
        ]
        logger.debug("search.trending.completed", count=len(items))
        return items

    def nearby(self, query: NearbyQuery) -> NearbyResponse:
        """Eligible pharmacies within the radius, nearest first, with optional tag filters."""
        origin = pipeline.GeoOrigin.from_query(query)
        with store_errors(), self._span("nearby", radius=query.radius) as span:
            rows = pharmacy_repo.find_eligible_in_box(origin.box())
            span.set_attribute("input.count", len(rows))

        wanted_services = set(query.services)
        kept: list[PharmacyView] = []
        for p in rows:
            if query.specialty is not None and query.specialty not in p.specialties:
                continue
            # is24Hours only ever narrows; false means no filter
            if query.is_24_hours and not p.is_24_hours:
                continue
            if wanted_services and not wanted_services.intersection(p.services):
                continue
            distance = haversine_m(origin.latitude, origin.longitude, p.location.latitude, p.location.longitude)
            if distance <= origin.radius:
                kept.append(p.model_copy(update={"distance": distance}))
        kept.sort(key=lambda p: p.distance)

        page = pipeline.paginate(kept, query.page, query.limit)
        now = self._clock()
        pharmacies = [self._with_open_status(p, now) for p in page.items]
        logger.info("search.nearby.completed", radius=query.radius, found=page.total, returned=page.count)
        return NearbyResponse(count=len(pharmacies), pharmacies=pharmacies)

    def get_pharmacy(self, pharmacy_id: int) -> PharmacyDetailResponse:
        """Pharmacy record with open status and its best-stocked available medicines."""
        with store_errors():
            pharmacy = pharmacy_repo.get_by_id(pharmacy_id)
            if pharmacy is None:
                raise NotFoundError("Pharmacy not found")
            top = inventory_repo.top_available_for_pharmacy(pharmacy_id, PHARMACY_TOP_MEDICINES_LIMIT)
        return PharmacyDetailResponse(
            pharmacy=self._with_open_status(pharmacy, self._clock()),
            top_medicines=top,
        )

    def pharmacy_inventory(self, pharmacy_id: int, query: PharmacyInventoryQuery) -> PharmacyInventoryResponse:
        """One page of a pharmacy's offers, sorted by medicine name."""
        with store_errors():
            if pharmacy_repo.get_owner_id(pharmacy_id) is None:
                raise NotFoundError("Pharmacy not found")
            lines, total = inventory_repo.list_for_pharmacy(
                pharmacy_id,
                query.page,
                query.limit,
                search=query.search,
                status=query.status,
                therapeutic_class=query.therapeutic_class,
            )
        return PharmacyInventoryResponse(
            count=len(lines),
            total=total,
            pages=ceil(total / query.limit),
            current_page=query.page,
            inventory=lines,
        )

