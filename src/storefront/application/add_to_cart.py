"""Application service: Add To Cart use case."""

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


class AddToCartHandler:

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

    def handle(
        self,
        owner: OwnerKey,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> CartView:
        """Add a product (optionally a specific variant) to the owner's cart.

        The cart is created on first use.  A lost race against another
        writer reloads the cart and re-checks stock.
        """

        def attempt() -> Cart:
            cart = self._store.get_or_create(owner)
            self._store.add_item(cart, product_id, variant_id, quantity)
            return cart

        cart = retry_on_conflict(attempt, self._attempts)
        return to_cart_view(cart, self._catalog, self._ledger, self._currency)
