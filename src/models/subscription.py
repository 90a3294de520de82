"""Subscription plans, payment contract messages and subscription views."""

from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import Field, field_validator

from src.models.base import ApiModel
from src.models.enums import SubscriptionStatus


class PlanLimits(ApiModel):
    """Feature gates a caller may consult for a plan."""

    model_config = {**ApiModel.model_config, "frozen": True, "extra": "forbid"}

    max_searches_per_day: int = Field(50, ge=0)
    can_view_prices: bool = True
    can_get_alerts: bool = True
    can_access_telemedicine: bool = False
    priority_support: bool = False


class Plan(ApiModel):
    model_config = {**ApiModel.model_config, "frozen": True, "extra": "forbid"}

    id: str
    name: str
    price: float = Field(gt=0)
    currency: str = "KES"
    duration_days: int = Field(gt=0)
    features: tuple[str, ...] = ()
    limits: PlanLimits = PlanLimits()


class PlanCatalog:
    """Immutable plan table, loaded once at startup and passed to whoever needs it."""

    def __init__(self, plans: Mapping[str, Plan]):
        self._plans = MappingProxyType(dict(plans))

    def get(self, plan_id: str) -> Optional[Plan]:
        return self._plans.get(plan_id)

    def __contains__(self, plan_id: object) -> bool:
        return plan_id in self._plans

    def __iter__(self):
        return iter(self._plans.values())

    def __len__(self) -> int:
        return len(self._plans)

    def ids(self) -> list[str]:
        return list(self._plans)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return {pid: p.model_dump(by_alias=True) for pid, p in self._plans.items()}


class SubscriptionView(ApiModel):
    id: int
    user_id: str
    plan: str
    amount: float
    currency: str
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime
    auto_renew: bool = True
    payment_method: str = "mpesa"
    phone_number: Optional[str] = None
    receipt_number: Optional[str] = None
    transaction_date: Optional[datetime] = None
    checkout_request_id: Optional[str] = None


class PaymentRequest(ApiModel):
    """What the coordinator asks the gateway to collect."""

    phone_number: str
    amount: float
    account_reference: str
    description: str


class PaymentInitiation(ApiModel):
    """Gateway answer to a payment request. reference identifies the pending transaction."""

    accepted: bool
    reference: Optional[str] = None
    description: str = ""


class SettlementEvent(ApiModel):
    """Parsed gateway callback."""

    reference: str
    success: bool
    receipt_number: Optional[str] = None
    amount: Optional[float] = None
    phone_number: Optional[str] = None
    transaction_date: Optional[datetime] = None
    description: str = ""


class SubscribeRequest(ApiModel):
    plan: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)

    @field_validator("plan", "phone_number", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class SubscribeResponse(ApiModel):
    success: bool = True
    message: str
    subscription_id: int
    checkout_request_id: str
    plan: Plan


class PaymentQueryRequest(ApiModel):
    checkout_request_id: str = Field(min_length=1)


class PaymentQueryResponse(ApiModel):
    success: bool = True
    gateway_response: dict[str, Any]
    subscription_status: str


class SubscriptionsResponse(ApiModel):
    success: bool = True
    subscriptions: list[SubscriptionView]
    active_subscription: Optional[SubscriptionView] = None


class CancelResponse(ApiModel):
    success: bool = True
    message: str
    expiry_date: datetime


class PlansResponse(ApiModel):
    success: bool = True
    plans: dict[str, Plan]
