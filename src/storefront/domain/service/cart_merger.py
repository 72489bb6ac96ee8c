"""Domain service: fold a guest cart into a user's cart at login.

Quantities are capped at the variant's current stock so the merged cart
never shows an unorderable line.  Nothing is reserved; the cap is a
display courtesy and the authoritative check still happens at checkout.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import AccessDenied, GuestSessionRequired
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class CartMerger:

    def __init__(self, cart_repo: CartRepository, ledger: StockLedger) -> None:
        self._cart_repo = cart_repo
        self._ledger = ledger

    def merge(self, guest_session_id: str, user: OwnerKey) -> Cart:
        """Merge the guest session's cart into ``user``'s cart.

        Idempotent: once the guest cart is gone, further calls just
        return the user's current cart.
        """
        if not guest_session_id or not guest_session_id.strip():
            raise GuestSessionRequired("Guest session ID is required")
        if user.is_guest:
            raise AccessDenied("User must be authenticated to merge carts")

        guest_cart = self._cart_repo.get_by_owner(OwnerKey.guest(guest_session_id))
        user_cart = self._cart_repo.get_by_owner(user) or Cart.for_owner(user)

        if guest_cart is None:
            return user_cart

        for guest_item in guest_cart.items:
            cap = self._ledger.current_stock(guest_item.variant_id)
            existing = user_cart.find_line(guest_item.product_id, guest_item.variant_id)

            if existing is not None:
                merged = min(existing.quantity.value + guest_item.quantity.value, cap)
                user_cart.set_item_quantity(existing.id, max(merged, 0))
            else:
                added = min(guest_item.quantity.value, cap)
                if added > 0:
                    user_cart.add_line(
                        guest_item.product_id,
                        guest_item.variant_id,
                        added,
                        guest_item.unit_price,
                    )

        self._cart_repo.save(user_cart)
        self._cart_repo.delete(guest_cart.id)

        logger.info(
            "Guest cart merged",
            guest_cart_id=guest_cart.id,
            user_cart_id=user_cart.id,
            lines=len(user_cart.items),
        )
        return user_cart
