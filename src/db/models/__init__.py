"""Re-export all ORM models so Base.metadata has all tables."""

from src.db.models.catalog import Medicine
from src.db.models.inventory import Offer
from src.db.models.pharmacy import Pharmacy
from src.db.models.subscription import Subscription

__all__ = [
    "Medicine",
    "Pharmacy",
    "Offer",
    "Subscription",
]
