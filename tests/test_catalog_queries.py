"""Tests for nearby pharmacies, trending, categories, medicine and pharmacy detail, inventory listing."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from helpers import (  # noqa: E402
    MONDAY_7AM,
    ORIGIN_LAT,
    ORIGIN_LON,
    fixed_clock,
    make_medicine,
    make_offer,
    make_pharmacy,
    north_of_origin,
    reset_database,
)

from src.errors import NotFoundError
from src.models.enums import OfferStatus, PharmacyService, PharmacySpecialty
from src.models.search import NearbyQuery, PharmacyInventoryQuery
from src.search.engine import SearchEngine


class TestNearby(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_database()
        cls.close = make_pharmacy(**north_of_origin(800), services=["delivery"], specialties=["diabetes"])
        cls.mid = make_pharmacy(**north_of_origin(3000), is_24_hours=True, services=["insurance", "prescription"])
        cls.edge = make_pharmacy(**north_of_origin(9500), services=["vaccination"])
        cls.outside = make_pharmacy(**north_of_origin(15000))
        cls.unverified = make_pharmacy(is_verified=False)
        cls.engine = SearchEngine(clock=fixed_clock(MONDAY_7AM))

    @classmethod
    def tearDownClass(cls):
        reset_database()

    def nearby(self, **params):
        return self.engine.nearby(NearbyQuery(latitude=ORIGIN_LAT, longitude=ORIGIN_LON, **params))

    def test_default_radius_sorted_by_distance(self):
        response = self.nearby()
        self.assertEqual([p.id for p in response.pharmacies], [self.close, self.mid, self.edge])
        self.assertEqual(response.count, 3)
        distances = [p.distance for p in response.pharmacies]
        self.assertEqual(distances, sorted(distances))

    def test_open_status_annotated(self):
        response = self.nearby()
        status = {p.id: p.is_currently_open for p in response.pharmacies}
        self.assertEqual(status, {self.close: False, self.mid: True, self.edge: False})

    def test_filters(self):
        self.assertEqual([p.id for p in self.nearby(is_24_hours=True).pharmacies], [self.mid])
        self.assertEqual([p.id for p in self.nearby(is_24_hours=False).pharmacies], [self.close, self.mid, self.edge])
        self.assertEqual([p.id for p in self.nearby(specialty=PharmacySpecialty.DIABETES).pharmacies], [self.close])
        any_of = self.nearby(services=[PharmacyService.DELIVERY, PharmacyService.VACCINATION])
        self.assertEqual([p.id for p in any_of.pharmacies], [self.close, self.edge])

    def test_radius_and_paging(self):
        self.assertEqual([p.id for p in self.nearby(radius=1000).pharmacies], [self.close])
        second = self.nearby(page=2, limit=2)
        self.assertEqual([p.id for p in second.pharmacies], [self.edge])
        self.assertEqual(second.count, 1)


class TestCatalogQueries(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_database()
        cls.owner_pharmacy = make_pharmacy(owner_id="owner-x")
        cls.other = make_pharmacy()
        cls.unverified = make_pharmacy(is_verified=False)
        cls.para = make_medicine(name="Paracetamol", category="tablet", therapeutic_class="painkillers")
        cls.metformin = make_medicine(name="Metformin", category="tablet", therapeutic_class="diabetes")
        cls.salbutamol = make_medicine(name="Salbutamol", category="inhaler", therapeutic_class="respiratory")

        make_offer(cls.owner_pharmacy, cls.para, price=50, quantity=100)
        make_offer(cls.other, cls.para, price=40, quantity=30)
        make_offer(cls.unverified, cls.para, price=10, quantity=500)
        make_offer(cls.owner_pharmacy, cls.metformin, price=300, quantity=400)
        make_offer(cls.owner_pharmacy, cls.salbutamol, price=800, quantity=5)
        make_offer(cls.other, cls.salbutamol, price=750, quantity=0)
        cls.engine = SearchEngine(clock=fixed_clock())

    @classmethod
    def tearDownClass(cls):
        reset_database()

    def test_categories(self):
        view = self.engine.categories()
        self.assertEqual(view.categories, ["inhaler", "tablet"])
        self.assertEqual(view.therapeutic_classes, ["diabetes", "painkillers", "respiratory"])

    def test_trending_ranking(self):
        items = self.engine.trending()
        # unverified pharmacy offers still count: trending is not eligibility filtered
        self.assertEqual([i.medicine.id for i in items], [self.para, self.metformin])
        top = items[0]
        self.assertEqual((top.pharmacy_count, top.total_quantity), (3, 630))
        self.assertAlmostEqual(top.avg_price, (50 + 40 + 10) / 3)

    def test_trending_limit(self):
        self.assertEqual(len(self.engine.trending(limit=1)), 1)

    def test_medicine_detail(self):
        detail = self.engine.get_medicine(self.para)
        self.assertEqual(detail.medicine.name, "Paracetamol")
        self.assertEqual([o.price for o in detail.availability], [40, 50])
        self.assertTrue(all(o.pharmacy.is_currently_open for o in detail.availability))

    def test_medicine_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.engine.get_medicine(99999)
        self.assertEqual(ctx.exception.message, "Medicine not found")

    def test_pharmacy_detail(self):
        detail = self.engine.get_pharmacy(self.owner_pharmacy)
        self.assertIs(detail.pharmacy.is_currently_open, True)
        self.assertEqual([line.medicine.name for line in detail.top_medicines], ["Metformin", "Paracetamol"])

    def test_pharmacy_not_found(self):
        with self.assertRaises(NotFoundError):
            self.engine.get_pharmacy(99999)
        with self.assertRaises(NotFoundError):
            self.engine.pharmacy_inventory(99999, PharmacyInventoryQuery())

    def test_pharmacy_inventory_listing(self):
        listing = self.engine.pharmacy_inventory(self.owner_pharmacy, PharmacyInventoryQuery(limit=2))
        self.assertEqual((listing.total, listing.count, listing.pages), (3, 2, 2))
        self.assertEqual([line.medicine.name for line in listing.inventory], ["Metformin", "Paracetamol"])

    def test_pharmacy_inventory_filters(self):
        low = self.engine.pharmacy_inventory(self.owner_pharmacy, PharmacyInventoryQuery(status="low_stock"))
        self.assertEqual([line.medicine.name for line in low.inventory], ["Salbutamol"])
        self.assertIs(low.inventory[0].status, OfferStatus.LOW_STOCK)

        text = self.engine.pharmacy_inventory(self.owner_pharmacy, PharmacyInventoryQuery(search="metf"))
        self.assertEqual(text.total, 1)

        by_class = self.engine.pharmacy_inventory(
            self.owner_pharmacy, PharmacyInventoryQuery(therapeutic_class="respiratory")
        )
        self.assertEqual([line.medicine.name for line in by_class.inventory], ["Salbutamol"])

        everything = self.engine.pharmacy_inventory(self.other, PharmacyInventoryQuery(status="all"))
        self.assertEqual(everything.total, 2)


if __name__ == "__main__":
    unittest.main()
