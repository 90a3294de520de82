"""ORM model for pharmacies."""

from typing import Any

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.db.base import Base, TimestampMixin


class Pharmacy(Base, TimestampMixin):
    """Pharmacy with geo point and weekly operating hours.

    operating_hours maps weekday name -> {"open": "HH:MM", "close": "HH:MM", "closed": bool}.
    """

    __tablename__ = "pharmacies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    license: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    county: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    town: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    website: Mapped[str | None] = mapped_column(String(512), nullable=True)
    operating_hours: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_24_hours: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    services: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    specialties: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    delivery_radius: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)
    delivery_fee: Mapped[float] = mapped_column(Float, nullable=False, default=200.0)

    offers: Mapped[list["Offer"]] = relationship("Offer", back_populates="pharmacy")
