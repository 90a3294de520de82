"""ORM model for paid subscriptions."""

from datetime import datetime

from sqlalchemy import Boolean, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, TimestampMixin, utcnow


class Subscription(Base, TimestampMixin):
    """One subscription purchase attempt. checkout_request_id is the gateway reference."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    plan: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="KES")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending", index=True)
    start_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    end_date: Mapped[datetime] = mapped_column(nullable=False, index=True)
    auto_renew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    payment_method: Mapped[str] = mapped_column(String(16), nullable=False, default="mpesa")
    phone_number: Mapped[str | None] = mapped_column(String(16), nullable=True)
    receipt_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    transaction_date: Mapped[datetime | None] = mapped_column(nullable=True)
    checkout_request_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
