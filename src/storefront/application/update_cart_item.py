"""Application service: Update Cart Item use case."""

from __future__ import annotations

from storefront.application.dto import CartView
from storefront.application.mapping import to_cart_view
from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.cart_store import CartStore


class UpdateCartItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        currency: str,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._store = CartStore(cart_repo, catalog, ledger)
        self._catalog = catalog
        self._ledger = ledger
        self._currency = currency
        self._attempts = attempts

    def handle(self, owner: OwnerKey, item_id: str, quantity: int) -> CartView:
        """Set a line to an absolute quantity (0 removes it)."""

        def attempt() -> Cart:
            cart = self._store.load(owner)
            self._store.update_item_quantity(cart, item_id, quantity)
            return cart

        cart = retry_on_conflict(attempt, self._attempts)
        return to_cart_view(cart, self._catalog, self._ledger, self._currency)
