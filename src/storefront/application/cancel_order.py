"""Application service: Cancel Order use case."""

from __future__ import annotations

from storefront.application.access import authorize_order_access, load_order
from storefront.application.dto import OrderView
from storefront.application.mapping import to_order_view
from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.order_lifecycle import OrderLifecycle


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: StockLedger,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._lifecycle = OrderLifecycle(order_repo, ledger)
        self._attempts = attempts

    def handle(self, order_id: str, owner: OwnerKey, reason: str | None = None) -> OrderView:
        """Cancel a Pending or Paid order and put its stock back.

        Allowed for the order's owner and for admins.  A conflicting save
        reloads the order, so the losing side of a race sees it cancelled.
        """

        def attempt() -> Order:
            order = load_order(self._order_repo, order_id)
            authorize_order_access(order, owner)
            return self._lifecycle.cancel(order, reason)

        return to_order_view(retry_on_conflict(attempt, self._attempts))
