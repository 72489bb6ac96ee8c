"""Domain service: OrderFactory, turning a cart into a placed order.

Checkout is one logical transaction spanning three stores (ledger,
orders, carts) that cannot commit together.  The factory therefore runs
the steps in a fixed order and, on any failure after stock was taken,
undoes the completed steps in reverse:

  1. load cart, resolve every line against the catalog
  2. advisory availability checks (fail fast, no side effects)
  3. allocate an order number
  4. reserve stock, all lines or none           <- undo: release
  5-6. snapshot items, price the order
  7. persist the order                          <- undo: delete order
  8. clear the cart (optimistic version check)  <- commit point

Step 8 is the commit point: if the cart changed underneath us the
version check fails, the order is removed, stock is released, and the
ConcurrencyConflict reaches the caller, who may retry.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable

import structlog

from storefront.domain.exceptions import (
    CartEmpty,
    InsufficientStock,
    OperationCancelled,
    ProductUnavailable,
    VariantUnavailable,
)
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.catalog import Product, Variant
from storefront.domain.model.inventory import Reservation, StockRequest
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.model.value_objects import Address, Money, OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.order_numbering import OrderNumberGenerator
from storefront.domain.service.pricing import shipping_cost_for, tax_for
from storefront.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutDetails:
    """Customer-supplied data for a new order."""

    customer_email: str
    shipping_address: Address
    shipping_method: str
    billing_address: Address | None = None
    customer_phone: str | None = None
    notes: str | None = None
    discount_amount: Money | None = None


@dataclass(frozen=True)
class _ResolvedLine:
    cart_item: CartItem
    product: Product
    variant: Variant


class OrderFactory:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        numbering: OrderNumberGenerator,
        currency: str,
    ) -> None:
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._catalog = catalog
        self._ledger = ledger
        self._reservations = StockReservationService(ledger)
        self._numbering = numbering
        self._currency = currency

    def create_order(
        self,
        owner: OwnerKey,
        details: CheckoutDetails,
        cancellation: threading.Event | None = None,
        next_number: Callable[[], str] | None = None,
    ) -> Order:
        cart = self._cart_repo.get_by_owner(owner)
        if cart is None or cart.is_empty:
            raise CartEmpty("Cart is empty")

        lines = self._resolve_lines(cart)
        self._check_cancelled(cancellation)

        order_number = (next_number or self._numbering.next_number)()
        reservations = self._reservations.reserve_all(
            [
                StockRequest(
                    variant_id=line.variant.id,
                    quantity=line.cart_item.quantity.value,
                    product_name=line.product.name,
                )
                for line in lines
            ],
            cancellation,
        )

        order: Order | None = None
        try:
            order = self._build_order(order_number, owner, details, lines)
            self._check_cancelled(cancellation)
            self._order_repo.save(order)
            cart.clear()
            self._cart_repo.save(cart)
        except Exception:
            logger.warning(
                "Order creation failed after reserving stock, compensating",
                order_number=order_number,
                reservations=len(reservations),
            )
            self._undo(order, reservations)
            raise

        logger.info(
            "Order created",
            order_number=order.order_number,
            lines=len(order.items),
            units=order.total_quantity,
            total=str(order.total),
        )
        return order

    # --- Steps ----------------------------------------------------------------

    def _resolve_lines(self, cart: Cart) -> list[_ResolvedLine]:
        """Steps 1-2: resolve and pre-check every line, without side effects.

        The stock check here is advisory; the reservation is what counts.
        """
        products = self._catalog.get_products([item.product_id for item in cart.items])
        lines: list[_ResolvedLine] = []

        for item in cart.items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                raise ProductUnavailable(
                    f"Product '{item.product_id}' is no longer available"
                )

            variant = product.find_variant(item.variant_id)
            if variant is None or not variant.is_active:
                raise VariantUnavailable(
                    f"Variant of '{product.name}' is no longer available"
                )

            available = self._ledger.current_stock(variant.id)
            if available < item.quantity.value:
                raise InsufficientStock(
                    f"Insufficient stock for '{product.name}'", available=available
                )
            lines.append(_ResolvedLine(item, product, variant))
        return lines

    def _build_order(
        self,
        order_number: str,
        owner: OwnerKey,
        details: CheckoutDetails,
        lines: list[_ResolvedLine],
    ) -> Order:
        """Steps 5-6: snapshot lines and compute the stored money fields."""
        items = [
            OrderItem(
                product_id=line.product.id,
                variant_id=line.variant.id,
                product_name=line.product.name,
                variant_name=line.variant.name,
                sku=line.variant.sku,
                quantity=line.cart_item.quantity,
                unit_price=line.cart_item.unit_price,  # <-- price snapshot
            )
            for line in lines
        ]

        subtotal = Money.zero(self._currency)
        for item in items:
            subtotal = subtotal + item.line_total

        return Order.place(
            order_number=order_number,
            customer_email=details.customer_email,
            items=items,
            shipping_address=details.shipping_address,
            shipping_cost=shipping_cost_for(details.shipping_method, self._currency),
            tax_amount=tax_for(subtotal),
            currency=self._currency,
            discount_amount=details.discount_amount,
            user_id=owner.user_id,
            guest_session_id=owner.guest_session_id,
            customer_phone=details.customer_phone,
            billing_address=details.billing_address,
            shipping_method=details.shipping_method,
            notes=details.notes,
        )

    def _undo(self, order: Order | None, reservations: list[Reservation]) -> None:
        try:
            if order is not None and self._order_repo.get_by_id(order.id) is not None:
                self._order_repo.delete(order.id)
        finally:
            self._reservations.release_all(reservations)

    @staticmethod
    def _check_cancelled(cancellation: threading.Event | None) -> None:
        if cancellation is not None and cancellation.is_set():
            raise OperationCancelled("Order creation cancelled by the caller")
