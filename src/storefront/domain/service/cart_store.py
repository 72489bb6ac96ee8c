"""Domain service: CartStore.

CRUD over carts with stock-aware guards.  Stock is only *checked* here,
never reserved; reservation happens once, at order creation.  Every
mutation persists the cart immediately, so a stale version surfaces as
ConcurrencyConflict and the application layer can reload and retry.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import (
    CartNotFound,
    InsufficientStock,
    NoAvailableVariant,
    ProductUnavailable,
    VariantUnavailable,
)
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.catalog import Product, Variant
from storefront.domain.model.value_objects import OwnerKey, validate_requested_quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class CartStore:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog = catalog
        self._ledger = ledger

    # --- Loading --------------------------------------------------------------

    def get_or_create(self, owner: OwnerKey) -> Cart:
        """Return the owner's cart, or a fresh unsaved one.

        The new cart is only written on its first mutation, so calling
        this repeatedly never creates duplicates.
        """
        cart = self._cart_repo.get_by_owner(owner)
        if cart is None:
            cart = Cart.for_owner(owner)
        return cart

    def load(self, owner: OwnerKey) -> Cart:
        cart = self._cart_repo.get_by_owner(owner)
        if cart is None:
            raise CartNotFound("Cart not found")
        return cart

    def save(self, cart: Cart) -> None:
        self._cart_repo.save(cart)

    # --- Catalog resolution ---------------------------------------------------

    def resolve_variant(
        self, product_id: str, variant_id: str | None
    ) -> tuple[Product, Variant]:
        """Find the product and the variant a cart line should point at.

        An explicit variant must exist and be active; without one, the
        product's first active variant is used.
        """
        product = self._catalog.get_product_with_variants(product_id)
        if product is None or not product.is_active:
            raise ProductUnavailable("Product not found or not available.")

        if variant_id is not None:
            variant = product.find_variant(variant_id)
            if variant is None or not variant.is_active:
                raise VariantUnavailable("Product variant not found or not available.")
            return product, variant

        variant = product.first_active_variant()
        if variant is None:
            raise NoAvailableVariant("No available variants for this product.")
        return product, variant

    # --- Mutations ------------------------------------------------------------

    def add_item(
        self,
        cart: Cart,
        product_id: str,
        variant_id: str | None,
        quantity: int,
    ) -> CartItem:
        """Add units to the cart, merging with an existing line.

        The stock check applies to the summed quantity.  New lines capture
        base price + variant adjustment at this moment.
        """
        validate_requested_quantity(quantity)
        product, variant = self.resolve_variant(product_id, variant_id)

        available = self._ledger.current_stock(variant.id)
        in_cart = cart.quantity_of(product.id, variant.id)
        if available < in_cart + quantity:
            if in_cart:
                message = f"Cannot add more items. Only {available} available."
            else:
                message = f"Only {available} items available in stock."
            raise InsufficientStock(message, available=available)

        item = cart.add_line(product.id, variant.id, quantity, product.price_for(variant))
        self._cart_repo.save(cart)
        logger.info(
            "Cart item added",
            cart_id=cart.id,
            variant_id=variant.id,
            quantity=item.quantity.value,
        )
        return item

    def update_item_quantity(self, cart: Cart, item_id: str, new_quantity: int) -> None:
        """Replace a line's quantity; 0 removes the line.

        The stock check is against the absolute new quantity, not the
        delta.
        """
        validate_requested_quantity(new_quantity, allow_zero=True)
        item = cart.get_item(item_id)

        if new_quantity > 0:
            available = self._ledger.current_stock(item.variant_id)
            if available < new_quantity:
                raise InsufficientStock(
                    f"Only {available} items available in stock.", available=available
                )

        cart.set_item_quantity(item_id, new_quantity)
        self._cart_repo.save(cart)

    def remove_item(self, cart: Cart, item_id: str) -> None:
        cart.remove_item(item_id)
        self._cart_repo.save(cart)

    def clear(self, cart: Cart) -> None:
        cart.clear()
        self._cart_repo.save(cart)
