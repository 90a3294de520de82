"""ORM model for inventory offers: one row per (pharmacy, medicine)."""

from datetime import date, datetime

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, TimestampMixin, utcnow


class Offer(Base, TimestampMixin):
    """Priced, quantified availability of one medicine at one pharmacy.

    status is written by the inventory write path via src.search.stock.derive_status.
    """

    __tablename__ = "inventory"
    __table_args__ = (
        UniqueConstraint("pharmacy_id", "medicine_id", name="uq_inventory_pharmacy_medicine"),
        Index("ix_inventory_medicine_status", "medicine_id", "status"),
        Index("ix_inventory_pharmacy_status", "pharmacy_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    pharmacy_id: Mapped[int] = mapped_column(ForeignKey("pharmacies.id"), nullable=False)
    medicine_id: Mapped[int] = mapped_column(ForeignKey("medicines.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    min_quantity_alert: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    max_quantity_per_customer: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="available")
    last_updated: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(64), nullable=True)

    pharmacy: Mapped["Pharmacy"] = relationship("Pharmacy", back_populates="offers")
    medicine: Mapped["Medicine"] = relationship("Medicine")
