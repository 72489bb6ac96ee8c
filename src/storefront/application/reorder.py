"""Application service: Reorder use case.

Copies a past order back into the caller's cart at today's prices,
reporting every line that could not be fully restored.
"""

from __future__ import annotations

from storefront.application.access import authorize_order_access, load_order
from storefront.application.dto import ReorderView
from storefront.application.mapping import to_cart_view
from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.cart_store import CartStore
from storefront.domain.service.reorder_planner import ReorderOutcome, ReorderPlanner


class ReorderHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        currency: str,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._store = CartStore(cart_repo, catalog, ledger)
        self._planner = ReorderPlanner(catalog, ledger)
        self._catalog = catalog
        self._ledger = ledger
        self._currency = currency
        self._attempts = attempts

    def handle(self, order_id: str, owner: OwnerKey) -> ReorderView:
        order = load_order(self._order_repo, order_id)
        authorize_order_access(order, owner)

        def attempt() -> ReorderOutcome:
            cart = self._store.get_or_create(owner)
            outcome = self._planner.apply(order, cart)
            self._store.save(cart)
            return outcome

        outcome = retry_on_conflict(attempt, self._attempts)
        return ReorderView(
            cart=to_cart_view(outcome.cart, self._catalog, self._ledger, self._currency),
            items_added=outcome.items_added,
            items_partially_added=outcome.items_partially_added,
            items_skipped=outcome.items_skipped,
            reasons=list(outcome.reasons),
        )
