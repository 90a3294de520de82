"""Payment gateway capability (mobile-money push checkout) and an in-memory mock."""

from datetime import datetime
from itertools import count
from typing import Any, Mapping, Protocol

from src.errors import ValidationError
from src.models.subscription import PaymentInitiation, PaymentRequest, SettlementEvent
from src.utils.logger import get_logger

logger = get_logger("medassist.subscriptions.gateway")

# Callback metadata timestamps look like 20240115143012
_TRANSACTION_DATE_FORMAT = "%Y%m%d%H%M%S"


class PaymentGateway(Protocol):
    """What the subscription coordinator needs from a payment provider."""

    def initiate(self, request: PaymentRequest) -> PaymentInitiation:
        """Ask the provider to collect request.amount from request.phone_number."""
        ...

    def query(self, reference: str) -> dict[str, Any]:
        """Provider-side status of a pending transaction, as returned by the provider."""
        ...

    def parse_callback(self, payload: Mapping[str, Any]) -> SettlementEvent:
        """Turn the provider's settlement webhook body into a SettlementEvent."""
        ...


def _metadata(items: Any) -> dict[str, Any]:
    if not isinstance(items, list):
        return {}
    return {i["Name"]: i.get("Value") for i in items if isinstance(i, dict) and "Name" in i}


def _parse_transaction_date(value: Any) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.strptime(str(value), _TRANSACTION_DATE_FORMAT)
    except ValueError:
        return None


def parse_stk_callback(payload: Mapping[str, Any]) -> SettlementEvent:
    """Parse a push-checkout callback: {"Body": {"stkCallback": {...}}}.

    ResultCode 0 means paid; CallbackMetadata.Item carries Amount, MpesaReceiptNumber,
    TransactionDate and PhoneNumber.
    """
    body = payload.get("Body") if isinstance(payload, Mapping) else None
    callback = body.get("stkCallback") if isinstance(body, Mapping) else None
    if not isinstance(callback, Mapping) or not callback.get("CheckoutRequestID"):
        raise ValidationError("Malformed payment callback")
    success = str(callback.get("ResultCode")) == "0"
    meta = _metadata((callback.get("CallbackMetadata") or {}).get("Item")) if success else {}
    amount = meta.get("Amount")
    phone = meta.get("PhoneNumber")
    return SettlementEvent(
        reference=str(callback["CheckoutRequestID"]),
        success=success,
        receipt_number=meta.get("MpesaReceiptNumber"),
        amount=float(amount) if amount is not None else None,
        phone_number=str(phone) if phone is not None else None,
        transaction_date=_parse_transaction_date(meta.get("TransactionDate")),
        description=str(callback.get("ResultDesc") or ""),
    )


def build_stk_callback(
    reference: str,
    success: bool = True,
    receipt_number: str = "QKL0000000",
    amount: float | None = None,
    phone_number: str | None = None,
    transaction_date: datetime | None = None,
) -> dict[str, Any]:
    """Build a callback body in the provider's shape (demo runs and tests)."""
    callback: dict[str, Any] = {
        "MerchantRequestID": f"mr-{reference}",
        "CheckoutRequestID": reference,
        "ResultCode": 0 if success else 1032,
        "ResultDesc": "The service request is processed successfully." if success else "Request cancelled by user",
    }
    if success:
        items: list[dict[str, Any]] = [{"Name": "MpesaReceiptNumber", "Value": receipt_number}]
        if amount is not None:
            items.append({"Name": "Amount", "Value": amount})
        if transaction_date is not None:
            items.append({"Name": "TransactionDate", "Value": int(transaction_date.strftime(_TRANSACTION_DATE_FORMAT))})
        if phone_number is not None:
            items.append({"Name": "PhoneNumber", "Value": int(phone_number)})
        callback["CallbackMetadata"] = {"Item": items}
    return {"Body": {"stkCallback": callback}}


class MockPaymentGateway:
    """In-memory gateway: deterministic references, optional rejection, recorded requests."""

    def __init__(self, accept: bool = True, reject_description: str = "Payment request failed"):
        self.accept = accept
        self.reject_description = reject_description
        self.requests: list[PaymentRequest] = []
        self._statuses: dict[str, dict[str, Any]] = {}
        self._ids = count(1)

    def initiate(self, request: PaymentRequest) -> PaymentInitiation:
        self.requests.append(request)
        if not self.accept:
            logger.info("gateway.mock.rejected", account_reference=request.account_reference)
            return PaymentInitiation(accepted=False, description=self.reject_description)
        reference = f"ws_CO_{next(self._ids):06d}"
        self._statuses[reference] = {
            "CheckoutRequestID": reference,
            "ResultCode": "1037",
            "ResultDesc": "Awaiting customer confirmation",
        }
        logger.info("gateway.mock.initiated", reference=reference, amount=request.amount)
        return PaymentInitiation(accepted=True, reference=reference, description="Success. Request accepted for processing")

    def query(self, reference: str) -> dict[str, Any]:
        status = self._statuses.get(reference)
        if status is None:
            return {"CheckoutRequestID": reference, "ResultCode": "2001", "ResultDesc": "Unknown transaction"}
        return dict(status)

    def parse_callback(self, payload: Mapping[str, Any]) -> SettlementEvent:
        event = parse_stk_callback(payload)
        if event.reference in self._statuses:
            self._statuses[event.reference] = {
                "CheckoutRequestID": event.reference,
                "ResultCode": "0" if event.success else "1032",
                "ResultDesc": event.description,
            }
        return event
