"""Tests for the pharmacy-side inventory write path: authorization, upsert, status derivation, delete, alerts."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from helpers import make_medicine, make_pharmacy, reset_database  # noqa: E402

from src.db.repositories import inventory_repo
from src.errors import AuthorizationError, NotFoundError
from src.models.enums import OfferStatus, UserRole
from src.models.inventory import Identity, OfferUpsert
from src.search.inventory import InventoryManager

OWNER = Identity(user_id="owner-1", role=UserRole.PHARMACY)
STRANGER = Identity(user_id="someone-else", role=UserRole.PHARMACY)
ADMIN = Identity(user_id="admin-1", role=UserRole.ADMIN)


class TestInventoryManager(unittest.TestCase):
    def setUp(self):
        reset_database()
        self.pharmacy = make_pharmacy(owner_id=OWNER.user_id)
        self.medicine = make_medicine(name="Amoxicillin")
        self.manager = InventoryManager()

    def upsert(self, identity=OWNER, **fields):
        payload = {"pharmacy": self.pharmacy, "medicine": self.medicine, "quantity": 50, "price": 120, **fields}
        return self.manager.upsert_offer(identity, OfferUpsert.from_payload(payload))

    def test_create_then_update(self):
        created = self.upsert()
        self.assertTrue(created.created)
        self.assertEqual(created.message, "Inventory item created")
        self.assertIs(created.inventory.status, OfferStatus.AVAILABLE)

        updated = self.upsert(quantity=4, price=110)
        self.assertFalse(updated.created)
        self.assertEqual(updated.message, "Inventory item updated")
        self.assertEqual(updated.inventory.id, created.inventory.id)
        self.assertIs(updated.inventory.status, OfferStatus.LOW_STOCK)
        self.assertEqual(updated.inventory.price, 110)

    def test_status_follows_quantity(self):
        self.assertIs(self.upsert(quantity=0).inventory.status, OfferStatus.OUT_OF_STOCK)
        self.assertIs(self.upsert(quantity=10, minQuantityAlert=10).inventory.status, OfferStatus.LOW_STOCK)
        self.assertIs(self.upsert(quantity=11).inventory.status, OfferStatus.AVAILABLE)

    def test_threshold_is_kept_between_updates(self):
        self.upsert(quantity=30, minQuantityAlert=40)
        self.assertIs(self.upsert(quantity=35).inventory.status, OfferStatus.LOW_STOCK)

    def test_discontinued_stays_until_status_is_given(self):
        self.assertIs(self.upsert(status="discontinued").inventory.status, OfferStatus.DISCONTINUED)
        self.assertIs(self.upsert(quantity=500).inventory.status, OfferStatus.DISCONTINUED)
        self.assertIs(self.upsert(quantity=500, status="available").inventory.status, OfferStatus.AVAILABLE)

    def test_admin_may_write_any_pharmacy(self):
        self.assertTrue(self.upsert(identity=ADMIN).created)

    def test_non_owner_rejected(self):
        with self.assertRaises(AuthorizationError) as ctx:
            self.upsert(identity=STRANGER)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(inventory_repo.list_for_pharmacy(self.pharmacy, 1, 20)[1], 0)

    def test_unknown_pharmacy_or_medicine(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.upsert(pharmacy=99999)
        self.assertEqual(ctx.exception.message, "Pharmacy not found")
        with self.assertRaises(NotFoundError) as ctx:
            self.upsert(medicine=99999)
        self.assertEqual(ctx.exception.message, "Medicine not found")

    def test_delete(self):
        offer_id = self.upsert().inventory.id
        with self.assertRaises(AuthorizationError):
            self.manager.delete_offer(STRANGER, offer_id)
        response = self.manager.delete_offer(OWNER, offer_id)
        self.assertEqual(response.message, "Inventory item deleted")
        self.assertIsNone(inventory_repo.get_by_id(offer_id))
        with self.assertRaises(NotFoundError):
            self.manager.delete_offer(OWNER, offer_id)

    def test_low_stock_alerts(self):
        other_medicine = make_medicine(name="Zinc")
        third_medicine = make_medicine(name="Cetirizine")
        self.upsert(quantity=3)
        self.manager.upsert_offer(
            OWNER, OfferUpsert(pharmacy=self.pharmacy, medicine=other_medicine, quantity=0, price=20)
        )
        self.manager.upsert_offer(
            OWNER, OfferUpsert(pharmacy=self.pharmacy, medicine=third_medicine, quantity=80, price=20)
        )
        alerts = self.manager.low_stock_alerts(OWNER, self.pharmacy)
        self.assertEqual(alerts.count, 2)
        self.assertEqual([a.quantity for a in alerts.alerts], [0, 3])
        self.assertEqual(alerts.alerts[0].medicine.name, "Zinc")
        with self.assertRaises(AuthorizationError):
            self.manager.low_stock_alerts(STRANGER, self.pharmacy)


if __name__ == "__main__":
    unittest.main()
