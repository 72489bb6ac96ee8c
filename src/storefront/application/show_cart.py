"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from storefront.application.dto import CartView
from storefront.application.mapping import empty_cart_view, to_cart_view
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger


class ShowCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        currency: str,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog = catalog
        self._ledger = ledger
        self._currency = currency

    def handle(self, owner: OwnerKey) -> CartView:
        cart = self._cart_repo.get_by_owner(owner)
        if cart is None:
            return empty_cart_view(owner, self._currency)
        return to_cart_view(cart, self._catalog, self._ledger, self._currency)
