"""Application service: admin order status updates.

Forward transitions only (Paid, Shipped, Delivered); cancellation has its
own use case because it touches stock.
"""

from __future__ import annotations

from typing import Callable

from storefront.application.access import load_order, require_admin
from storefront.application.dto import OrderView
from storefront.application.mapping import to_order_view
from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.order_lifecycle import OrderLifecycle


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: StockLedger,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._lifecycle = OrderLifecycle(order_repo, ledger)
        self._attempts = attempts

    def mark_paid(
        self,
        order_id: str,
        owner: OwnerKey,
        payment_method: str | None = None,
        payment_reference: str | None = None,
        note: str | None = None,
    ) -> OrderView:
        return self._apply(
            order_id,
            owner,
            lambda order: self._lifecycle.mark_paid(
                order, payment_method, payment_reference, note
            ),
        )

    def mark_shipped(
        self,
        order_id: str,
        owner: OwnerKey,
        tracking_number: str | None = None,
        shipping_method: str | None = None,
        note: str | None = None,
    ) -> OrderView:
        return self._apply(
            order_id,
            owner,
            lambda order: self._lifecycle.mark_shipped(
                order, tracking_number, shipping_method, note
            ),
        )

    def mark_delivered(
        self, order_id: str, owner: OwnerKey, note: str | None = None
    ) -> OrderView:
        return self._apply(
            order_id, owner, lambda order: self._lifecycle.mark_delivered(order, note)
        )

    def _apply(
        self, order_id: str, owner: OwnerKey, change: Callable[[Order], Order]
    ) -> OrderView:
        require_admin(owner)
        order = retry_on_conflict(
            lambda: change(load_order(self._order_repo, order_id)), self._attempts
        )
        return to_order_view(order)
