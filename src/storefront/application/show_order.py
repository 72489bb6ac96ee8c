"""Application service: look up one order by its public number (query)."""

from __future__ import annotations

from storefront.application.access import authorize_order_access
from storefront.application.dto import OrderView
from storefront.application.mapping import to_order_view
from storefront.domain.exceptions import OrderNotFound, ValidationError
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.order_numbering import parse_order_number


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_number: str, owner: OwnerKey) -> OrderView:
        try:
            parse_order_number(order_number)
        except ValidationError as exc:
            raise OrderNotFound("Order not found") from exc

        order = self._order_repo.get_by_number(order_number.strip())
        if order is None:
            raise OrderNotFound("Order not found")
        authorize_order_access(order, owner)
        return to_order_view(order)
