"""Subscription repository: create pending, attach gateway reference, settle, list, cancel."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select

from src.db import get_session
from src.db.models.subscription import Subscription
from src.models.enums import SubscriptionStatus
from src.models.subscription import SubscriptionView


def create_pending(
    user_id: str,
    plan: str,
    amount: float,
    currency: str,
    start_date: datetime,
    end_date: datetime,
    phone_number: str,
) -> SubscriptionView:
    """Insert a pending subscription before the payment request is sent."""
    with get_session() as session:
        row = Subscription(
            user_id=user_id,
            plan=plan,
            amount=amount,
            currency=currency,
            status=SubscriptionStatus.PENDING.value,
            start_date=start_date,
            end_date=end_date,
            phone_number=phone_number,
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        return SubscriptionView.model_validate(row)


def set_reference(subscription_id: int, checkout_request_id: str) -> None:
    with get_session() as session:
        row = session.get(Subscription, subscription_id)
        if row is not None:
            row.checkout_request_id = checkout_request_id


def set_status(subscription_id: int, status: SubscriptionStatus) -> None:
    with get_session() as session:
        row = session.get(Subscription, subscription_id)
        if row is not None:
            row.status = status.value


def get_by_reference(checkout_request_id: str) -> Optional[SubscriptionView]:
    with get_session() as session:
        row = session.scalars(
            select(Subscription).where(Subscription.checkout_request_id == checkout_request_id)
        ).first()
        return SubscriptionView.model_validate(row) if row is not None else None


def activate(
    subscription_id: int,
    receipt_number: str,
    transaction_date: datetime,
    start_date: datetime,
    end_date: datetime,
) -> SubscriptionView:
    """Mark a subscription paid and active for [start_date, end_date]."""
    with get_session() as session:
        row = session.get(Subscription, subscription_id)
        row.status = SubscriptionStatus.ACTIVE.value
        row.receipt_number = receipt_number
        row.transaction_date = transaction_date
        row.start_date = start_date
        row.end_date = end_date
        session.flush()
        return SubscriptionView.model_validate(row)


def list_for_user(user_id: str) -> list[SubscriptionView]:
    """All subscriptions of a user, newest first."""
    with get_session() as session:
        rows = session.scalars(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        ).all()
        return [SubscriptionView.model_validate(r) for r in rows]


def find_active(user_id: str, now: datetime) -> Optional[SubscriptionView]:
    """The user's active subscription whose end date is still in the future, if any."""
    with get_session() as session:
        row = session.scalars(
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Subscription.end_date > now,
            )
            .order_by(Subscription.end_date.desc())
        ).first()
        return SubscriptionView.model_validate(row) if row is not None else None


def cancel(subscription_id: int) -> SubscriptionView:
    with get_session() as session:
        row = session.get(Subscription, subscription_id)
        row.status = SubscriptionStatus.CANCELLED.value
        row.auto_renew = False
        session.flush()
        return SubscriptionView.model_validate(row)
