"""Application service: Remove From Cart use case."""

from __future__ import annotations

from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.exceptions import ItemNotFound
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.cart_store import CartStore


class RemoveFromCartHandler:

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

    def handle(self, owner: OwnerKey, item_id: str) -> None:
        """Remove one line.  With no cart at all the item is just as absent."""

        def attempt() -> None:
            cart = self._cart_repo.get_by_owner(owner)
            if cart is None:
                raise ItemNotFound(f"Cart item '{item_id}' not found")
            self._store.remove_item(cart, item_id)

        retry_on_conflict(attempt, self._attempts)
