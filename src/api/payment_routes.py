"""Payment routes: plans, subscribe, gateway callback, status query, subscriptions, cancel."""

import asyncio
from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError as PydanticValidationError

from src.api.deps import get_coordinator, get_identity
from src.errors import ValidationError
from src.models.inventory import Identity
from src.models.subscription import (
    CancelResponse,
    PaymentQueryRequest,
    PaymentQueryResponse,
    PlansResponse,
    SubscribeRequest,
    SubscribeResponse,
    SubscriptionsResponse,
)
from src.subscriptions.coordinator import SubscriptionCoordinator
from src.utils.logger import get_logger

logger = get_logger("medassist.api.payments")

router = APIRouter(prefix="/api/payments", tags=["payments"])

_CALLBACK_ACK = {"ResultCode": 0, "ResultDesc": "Success"}


@router.get("/plans", response_model=PlansResponse)
async def plans(
    identity: Identity = Depends(get_identity),
    coordinator: SubscriptionCoordinator = Depends(get_coordinator),
) -> PlansResponse:
    return PlansResponse(plans={p.id: p for p in coordinator.plans()})


@router.post("/subscribe", response_model=SubscribeResponse)
async def subscribe(
    payload: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_identity),
    coordinator: SubscriptionCoordinator = Depends(get_coordinator),
) -> SubscribeResponse:
    try:
        body = SubscribeRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Please provide plan and phoneNumber") from e
    return await asyncio.to_thread(coordinator.initiate, identity.user_id, body.plan, body.phone_number)


@router.post("/callback")
async def callback(
    payload: Any = Body(None),
    coordinator: SubscriptionCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Gateway webhook. Always acknowledged so the gateway does not retry."""
    try:
        await asyncio.to_thread(coordinator.handle_callback, payload if isinstance(payload, dict) else {})
    except Exception as e:
        logger.exception("subscription.callback.error", error=str(e))
    return _CALLBACK_ACK


@router.post("/query", response_model=PaymentQueryResponse)
async def query_status(
    payload: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_identity),
    coordinator: SubscriptionCoordinator = Depends(get_coordinator),
) -> PaymentQueryResponse:
    try:
        body = PaymentQueryRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Please provide checkoutRequestId") from e
    return await asyncio.to_thread(coordinator.query_status, body.checkout_request_id)


@router.get("/subscriptions", response_model=SubscriptionsResponse)
async def subscriptions(
    identity: Identity = Depends(get_identity),
    coordinator: SubscriptionCoordinator = Depends(get_coordinator),
) -> SubscriptionsResponse:
    return await asyncio.to_thread(coordinator.user_subscriptions, identity.user_id)


@router.post("/cancel", response_model=CancelResponse)
async def cancel(
    identity: Identity = Depends(get_identity),
    coordinator: SubscriptionCoordinator = Depends(get_coordinator),
) -> CancelResponse:
    return await asyncio.to_thread(coordinator.cancel, identity.user_id)
