"""Domain service: order status lifecycle.

Pending -> Paid -> Shipped -> Delivered, with Cancelled reachable from
Pending or Paid.  Cancellation is the exact inverse of checkout's
reservation step: every OrderItem's quantity goes back to its variant.

The cancelled status is saved before any stock moves.  The repository's
version check lets exactly one of two racing cancellations commit, so
stock is released once per order.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import OrderNotCancellable
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = structlog.get_logger(__name__)


class OrderLifecycle:

    def __init__(self, order_repo: OrderRepository, ledger: StockLedger) -> None:
        self._order_repo = order_repo
        self._reservations = StockReservationService(ledger)

    def cancel(self, order: Order, reason: str | None = None) -> Order:
        if not order.can_be_cancelled:
            raise OrderNotCancellable(
                f"Order cannot be cancelled. Current status: {order.status.value}"
            )

        order.cancel(reason)
        self._order_repo.save(order)
        self._reservations.release_for_order(order)

        logger.info(
            "Order cancelled",
            order_number=order.order_number,
            units_restored=order.total_quantity,
            reason=reason,
        )
        return order

    def mark_paid(
        self,
        order: Order,
        payment_method: str | None = None,
        payment_reference: str | None = None,
        note: str | None = None,
    ) -> Order:
        order.mark_paid(payment_method, payment_reference, note)
        return self._commit(order, note)

    def mark_shipped(
        self,
        order: Order,
        tracking_number: str | None = None,
        shipping_method: str | None = None,
        note: str | None = None,
    ) -> Order:
        order.mark_shipped(tracking_number, shipping_method, note)
        return self._commit(order, note)

    def mark_delivered(self, order: Order, note: str | None = None) -> Order:
        order.mark_delivered(note)
        return self._commit(order, note)

    def _commit(self, order: Order, note: str | None) -> Order:
        if note:
            order.append_note(note)
        self._order_repo.save(order)
        logger.info(
            "Order status changed",
            order_number=order.order_number,
            status=order.status.value,
        )
        return order
