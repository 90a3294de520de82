"""Request dependencies: collaborators from app.state and the caller identity headers."""

from typing import Optional

from fastapi import Header, Request

from src.errors import AuthorizationError
from src.models.enums import UserRole
from src.models.inventory import Identity
from src.search.engine import SearchEngine
from src.search.inventory import InventoryManager
from src.subscriptions.coordinator import SubscriptionCoordinator


def get_search_engine(request: Request) -> SearchEngine:
    return request.app.state.search_engine


def get_inventory_manager(request: Request) -> InventoryManager:
    return request.app.state.inventory_manager


def get_coordinator(request: Request) -> SubscriptionCoordinator:
    return request.app.state.coordinator


def get_identity(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Identity:
    """Identity asserted by the upstream gateway via X-User-Id / X-User-Role."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise AuthorizationError("Not authorized to access this route", status_code=401)
    role = (x_user_role or UserRole.USER.value).strip().lower()
    try:
        return Identity(user_id=user_id, role=UserRole(role))
    except ValueError as e:
        raise AuthorizationError(f"User role {role} is not authorized to access this route") from e
