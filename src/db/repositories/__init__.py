"""DB repositories: sync functions that open their own session and return pydantic views."""

from src.db.repositories import (
    inventory_repo,
    medicine_repo,
    pharmacy_repo,
    subscription_repo,
)

__all__ = [
    "medicine_repo",
    "pharmacy_repo",
    "inventory_repo",
    "subscription_repo",
]
