"""Application service: Merge Guest Cart use case.

Called once the guest logs in; folds the session's cart into the user's.
"""

from __future__ import annotations

from storefront.application.dto import CartView
from storefront.application.mapping import empty_cart_view, to_cart_view
from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.cart_merger import CartMerger


class MergeGuestCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        currency: str,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._merger = CartMerger(cart_repo, ledger)
        self._catalog = catalog
        self._ledger = ledger
        self._currency = currency
        self._attempts = attempts

    def handle(self, guest_session_id: str, owner: OwnerKey) -> CartView:
        cart = retry_on_conflict(
            lambda: self._merger.merge(guest_session_id, owner), self._attempts
        )
        if cart.is_empty and cart.version == 0:
            # Nothing merged and the user never had a cart.
            return empty_cart_view(owner, self._currency)
        return to_cart_view(cart, self._catalog, self._ledger, self._currency)
