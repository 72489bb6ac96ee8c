"""Application service: Clear Cart use case.

Clearing a cart that does not exist is a successful no-op.
"""

from __future__ import annotations

from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.cart_store import CartStore


class ClearCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._cart_repo = cart_repo
        self._store = CartStore(cart_repo, catalog, ledger)
        self._attempts = attempts

    def handle(self, owner: OwnerKey) -> None:
        def attempt() -> None:
            cart = self._cart_repo.get_by_owner(owner)
            if cart is None or cart.is_empty:
                return
            self._store.clear(cart)

        retry_on_conflict(attempt, self._attempts)
