"""Authorization rules shared by the order use cases."""

from __future__ import annotations

from storefront.domain.exceptions import AccessDenied, OrderNotFound
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.order_repository import OrderRepository


def authorize_order_access(order: Order, owner: OwnerKey) -> None:
    """Only the order's owner (user or guest session) or an admin may see it."""
    if owner.is_admin:
        return
    if not order.is_owned_by(owner.user_id, owner.guest_session_id):
        raise AccessDenied("Access denied")


def require_admin(owner: OwnerKey) -> None:
    if not owner.is_admin:
        raise AccessDenied("Administrator privileges required")


def load_order(order_repo: OrderRepository, order_id: str) -> Order:
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise OrderNotFound("Order not found")
    return order
