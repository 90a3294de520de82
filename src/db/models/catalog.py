"""ORM model for the medicine catalog."""

from datetime import date

from sqlalchemy import JSON, Boolean, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, TimestampMixin


class Medicine(Base, TimestampMixin):
    """Catalog entry. category and therapeutic_class hold values of the closed enums in src.models.enums."""

    __tablename__ = "medicines"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    generic_name: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)
    brand: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    therapeutic_class: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    dosage: Mapped[str | None] = mapped_column(String(256), nullable=True)
    strength: Mapped[str | None] = mapped_column(String(128), nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String(256), nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    barcode: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image: Mapped[str | None] = mapped_column(String(512), nullable=True)
    requires_prescription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_controlled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    side_effects: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    contraindications: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    active_ingredients: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    indications: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    dosage_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    warnings: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    storage_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    pregnancy_category: Mapped[str] = mapped_column(String(8), nullable=False, default="N/A")
