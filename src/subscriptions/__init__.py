"""Subscriptions: plan table, payment gateway and notifier capabilities, coordinator."""

from src.subscriptions.coordinator import SubscriptionCoordinator, normalize_phone
from src.subscriptions.gateway import MockPaymentGateway, PaymentGateway, build_stk_callback
from src.subscriptions.notifier import LogNotifier, Notifier
from src.subscriptions.plans import load_plan_catalog

__all__ = [
    "LogNotifier",
    "MockPaymentGateway",
    "Notifier",
    "PaymentGateway",
    "SubscriptionCoordinator",
    "build_stk_callback",
    "load_plan_catalog",
    "normalize_phone",
]
