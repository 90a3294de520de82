"""SMS notifier capability and the log-backed implementation."""

from typing import Protocol

from src.utils.logger import get_logger

logger = get_logger("medassist.subscriptions.notifier")


class Notifier(Protocol):
    def send(self, phone_number: str, message: str) -> None:
        """Deliver a text message. Raises on delivery failure."""
        ...


class LogNotifier:
    """Writes each message to the structured log instead of an SMS provider."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send(self, phone_number: str, message: str) -> None:
        self.sent.append((phone_number, message))
        logger.info("notifier.sms.sent", phone_number=phone_number, message=message)
