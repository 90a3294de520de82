"""Error taxonomy shared by the search engine, repositories, coordinator and API."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError


class MedAssistError(Exception):
    """Base error; carries the HTTP-equivalent status and a human-readable message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MedAssistError):
    """Missing or malformed input (absent search term, bad coordinates, unknown plan)."""

    status_code = 400


class AuthorizationError(MedAssistError):
    """Caller identity missing (401) or not allowed to act on the resource (403)."""

    status_code = 403

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(MedAssistError):
    """Referenced medicine, pharmacy, offer or subscription does not exist."""

    status_code = 404


class InternalError(MedAssistError):
    """Store unreachable or query failure. The underlying message is surfaced as-is."""

    status_code = 500


class PaymentGatewayError(MedAssistError):
    """The payment gateway rejected or failed a request."""

    status_code = 502


@contextmanager
def store_errors() -> Iterator[None]:
    """Convert store faults raised inside the block into InternalError with the underlying message."""
    try:
        yield
    except SQLAlchemyError as e:
        raise InternalError(str(e)) from e
