"""Application service: order history of a signed-in user (query)."""

from __future__ import annotations

from storefront.application.dto import OrderSummaryView
from storefront.application.mapping import to_order_summary
from storefront.domain.exceptions import AccessDenied
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, owner: OwnerKey) -> list[OrderSummaryView]:
        if owner.is_guest:
            raise AccessDenied("Sign in to see your order history")
        return [to_order_summary(order) for order in self._order_repo.list_by_user(owner.user_id)]
