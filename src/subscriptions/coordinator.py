"""SubscriptionCoordinator: plan purchase through an injected payment gateway and SMS notifier."""

import re
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional

from src.db.base import utcnow
from src.db.repositories import subscription_repo
from src.errors import NotFoundError, PaymentGatewayError, ValidationError, store_errors
from src.models.enums import SubscriptionStatus
from src.models.subscription import (
    CancelResponse,
    PaymentQueryResponse,
    PaymentRequest,
    Plan,
    PlanCatalog,
    SubscribeResponse,
    SubscriptionsResponse,
    SubscriptionView,
)
from src.subscriptions.gateway import PaymentGateway
from src.subscriptions.notifier import Notifier
from src.utils.logger import get_logger

logger = get_logger("medassist.subscriptions")

_PHONE_PATTERN = re.compile(r"^254\d{9}$")


def normalize_phone(raw: str) -> str:
    """Normalise a Kenyan mobile number to 254XXXXXXXXX; ValidationError when it cannot be."""
    digits = re.sub(r"\D", "", raw or "")
    if digits.startswith("0"):
        digits = "254" + digits[1:]
    elif not digits.startswith("254"):
        digits = "254" + digits
    if not _PHONE_PATTERN.match(digits):
        raise ValidationError("Invalid phone number format. Use 254XXXXXXXXX")
    return digits


class SubscriptionCoordinator:
    """Owns the subscription lifecycle: pending -> active | failed, active -> cancelled."""

    def __init__(
        self,
        plans: PlanCatalog,
        gateway: PaymentGateway,
        notifier: Notifier,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._plans = plans
        self._gateway = gateway
        self._notifier = notifier
        self._clock = clock or utcnow

    def plans(self) -> PlanCatalog:
        return self._plans

    def _plan(self, plan_id: str) -> Plan:
        plan = self._plans.get(plan_id)
        if plan is None:
            raise ValidationError("Invalid subscription plan")
        return plan

    def initiate(self, user_id: str, plan_id: str, phone_number: str) -> SubscribeResponse:
        """Create a pending subscription and ask the gateway to collect payment."""
        plan = self._plan(plan_id)
        phone = normalize_phone(phone_number)
        now = self._clock()
        with store_errors():
            pending = subscription_repo.create_pending(
                user_id=user_id,
                plan=plan.id,
                amount=plan.price,
                currency=plan.currency,
                start_date=now,
                end_date=now + timedelta(days=plan.duration_days),
                phone_number=phone,
            )
        request = PaymentRequest(
            phone_number=phone,
            amount=plan.price,
            account_reference=f"MedAssist-{plan.id.upper()}-{user_id}",
            description=f"MedAssist {plan.name} Subscription",
        )
        initiation = self._gateway.initiate(request)
        if not initiation.accepted or not initiation.reference:
            with store_errors():
                subscription_repo.set_status(pending.id, SubscriptionStatus.FAILED)
            logger.warning(
                "subscription.initiate.rejected",
                subscription_id=pending.id,
                description=initiation.description,
            )
            raise PaymentGatewayError(initiation.description or "Payment request failed")

        with store_errors():
            subscription_repo.set_reference(pending.id, initiation.reference)
        logger.info(
            "subscription.initiate.sent",
            subscription_id=pending.id,
            plan=plan.id,
            reference=initiation.reference,
        )
        return SubscribeResponse(
            message="Payment request sent to your phone",
            subscription_id=pending.id,
            checkout_request_id=initiation.reference,
            plan=plan,
        )

    def handle_callback(self, payload: Mapping[str, Any]) -> Optional[SubscriptionView]:
        """Apply a settlement webhook. Returns the updated subscription, or None for unknown references."""
        event = self._gateway.parse_callback(payload)
        with store_errors():
            subscription = subscription_repo.get_by_reference(event.reference)
            if subscription is None:
                logger.warning("subscription.callback.unknown_reference", reference=event.reference)
                return None
            if not event.success:
                subscription_repo.set_status(subscription.id, SubscriptionStatus.FAILED)
                logger.info(
                    "subscription.callback.failed",
                    subscription_id=subscription.id,
                    description=event.description,
                )
                return subscription.model_copy(update={"status": SubscriptionStatus.FAILED})

            plan = self._plans.get(subscription.plan)
            now = self._clock()
            duration = plan.duration_days if plan is not None else (subscription.end_date - subscription.start_date).days
            activated = subscription_repo.activate(
                subscription.id,
                receipt_number=event.receipt_number or "",
                transaction_date=event.transaction_date or now,
                start_date=now,
                end_date=now + timedelta(days=duration),
            )
        logger.info(
            "subscription.callback.activated",
            subscription_id=activated.id,
            plan=activated.plan,
            receipt_number=activated.receipt_number,
        )
        self._confirm(activated, plan)
        return activated

    def _confirm(self, subscription: SubscriptionView, plan: Optional[Plan]) -> None:
        phone = subscription.phone_number
        if not phone:
            return
        name = plan.name if plan is not None else subscription.plan
        message = (
            f"MedAssist: your {name} is active until {subscription.end_date:%Y-%m-%d}. "
            f"Receipt {subscription.receipt_number}."
        )
        try:
            self._notifier.send(phone, message)
        except Exception as e:
            logger.warning("subscription.callback.notify_failed", subscription_id=subscription.id, error=str(e))

    def query_status(self, reference: str) -> PaymentQueryResponse:
        """Gateway-side status of a checkout plus the local subscription status."""
        if not reference or not reference.strip():
            raise ValidationError("Please provide checkoutRequestId")
        gateway_response = self._gateway.query(reference)
        with store_errors():
            subscription = subscription_repo.get_by_reference(reference)
        return PaymentQueryResponse(
            gateway_response=gateway_response,
            subscription_status=subscription.status.value if subscription is not None else "not_found",
        )

    def user_subscriptions(self, user_id: str) -> SubscriptionsResponse:
        """All of a user's subscriptions, newest first, plus the one currently active."""
        with store_errors():
            subscriptions = subscription_repo.list_for_user(user_id)
            active = subscription_repo.find_active(user_id, self._clock())
        return SubscriptionsResponse(subscriptions=subscriptions, active_subscription=active)

    def cancel(self, user_id: str) -> CancelResponse:
        """Stop auto-renewal of the active subscription; access continues until its end date."""
        with store_errors():
            active = subscription_repo.find_active(user_id, self._clock())
            if active is None:
                raise NotFoundError("No active subscription found")
            cancelled = subscription_repo.cancel(active.id)
        logger.info("subscription.cancelled", subscription_id=cancelled.id, user_id=user_id)
        return CancelResponse(
            message="Subscription cancelled successfully. Access will continue until expiry date.",
            expiry_date=cancelled.end_date,
        )
