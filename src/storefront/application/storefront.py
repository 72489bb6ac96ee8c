"""Storefront: the single entry point controllers talk to.

Every public method returns a ``Result``.  Expected domain outcomes come
back as failures carrying a ``kind`` and a human-readable message; anything
else (exhausted retries, a lost compensating release, store errors)
propagates as an exception.
"""

from __future__ import annotations

import threading
from typing import Callable, TypeVar

import structlog

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.clear_cart import ClearCartHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import (
    CartView,
    CheckoutRequest,
    OrderSummaryView,
    OrderView,
    ReorderView,
)
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.merge_guest_cart import MergeGuestCartHandler
from storefront.application.remove_from_cart import RemoveFromCartHandler
from storefront.application.reorder import ReorderHandler
from storefront.application.result import Result
from storefront.application.retry import DEFAULT_ATTEMPTS
from storefront.application.show_cart import ShowCartHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.order_sequence import OrderSequence
from storefront.domain.repository.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Storefront:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        sequence: OrderSequence,
        currency: str = DEFAULT_CURRENCY,
        cart_retries: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._add = AddToCartHandler(cart_repo, catalog, ledger, currency, cart_retries)
        self._update = UpdateCartItemHandler(cart_repo, catalog, ledger, currency, cart_retries)
        self._remove = RemoveFromCartHandler(cart_repo, catalog, ledger, cart_retries)
        self._clear = ClearCartHandler(cart_repo, catalog, ledger, cart_retries)
        self._show_cart = ShowCartHandler(cart_repo, catalog, ledger, currency)
        self._merge = MergeGuestCartHandler(cart_repo, catalog, ledger, currency, cart_retries)
        self._create = CreateOrderHandler(
            cart_repo, order_repo, catalog, ledger, sequence, currency, cart_retries
        )
        self._cancel = CancelOrderHandler(order_repo, ledger, cart_retries)
        self._status = UpdateOrderStatusHandler(order_repo, ledger, cart_retries)
        self._reorder = ReorderHandler(
            cart_repo, order_repo, catalog, ledger, currency, cart_retries
        )
        self._show_order = ShowOrderHandler(order_repo)
        self._list_orders = ListOrdersHandler(order_repo)

    # --- Cart -----------------------------------------------------------------

    def add_to_cart(
        self,
        product_id: str,
        quantity: int,
        owner: OwnerKey,
        variant_id: str | None = None,
    ) -> Result[CartView]:
        return self._run(
            "add_to_cart",
            lambda: self._add.handle(owner, product_id, quantity, variant_id),
        )

    def update_cart_item(self, item_id: str, quantity: int, owner: OwnerKey) -> Result[CartView]:
        return self._run(
            "update_cart_item", lambda: self._update.handle(owner, item_id, quantity)
        )

    def remove_from_cart(self, item_id: str, owner: OwnerKey) -> Result[None]:
        return self._run("remove_from_cart", lambda: self._remove.handle(owner, item_id))

    def clear_cart(self, owner: OwnerKey) -> Result[None]:
        return self._run("clear_cart", lambda: self._clear.handle(owner))

    def get_cart(self, owner: OwnerKey) -> Result[CartView]:
        return self._run("get_cart", lambda: self._show_cart.handle(owner))

    def merge_guest_cart(self, guest_session_id: str, owner: OwnerKey) -> Result[CartView]:
        return self._run(
            "merge_guest_cart", lambda: self._merge.handle(guest_session_id, owner)
        )

    # --- Orders ---------------------------------------------------------------

    def create_order(
        self,
        owner: OwnerKey,
        request: CheckoutRequest,
        cancellation: threading.Event | None = None,
    ) -> Result[OrderView]:
        return self._run(
            "create_order", lambda: self._create.handle(owner, request, cancellation)
        )

    def cancel_order(
        self, order_id: str, owner: OwnerKey, reason: str | None = None
    ) -> Result[OrderView]:
        return self._run(
            "cancel_order", lambda: self._cancel.handle(order_id, owner, reason)
        )

    def reorder(self, order_id: str, owner: OwnerKey) -> Result[ReorderView]:
        return self._run("reorder", lambda: self._reorder.handle(order_id, owner))

    def get_order_by_number(self, order_number: str, owner: OwnerKey) -> Result[OrderView]:
        return self._run(
            "get_order_by_number", lambda: self._show_order.handle(order_number, owner)
        )

    def list_orders(self, owner: OwnerKey) -> Result[list[OrderSummaryView]]:
        return self._run("list_orders", lambda: self._list_orders.handle(owner))

    # --- Admin ----------------------------------------------------------------

    def mark_paid(
        self,
        order_id: str,
        owner: OwnerKey,
        payment_method: str | None = None,
        payment_reference: str | None = None,
        note: str | None = None,
    ) -> Result[OrderView]:
        return self._run(
            "mark_paid",
            lambda: self._status.mark_paid(
                order_id, owner, payment_method, payment_reference, note
            ),
        )

    def mark_shipped(
        self,
        order_id: str,
        owner: OwnerKey,
        tracking_number: str | None = None,
        shipping_method: str | None = None,
        note: str | None = None,
    ) -> Result[OrderView]:
        return self._run(
            "mark_shipped",
            lambda: self._status.mark_shipped(
                order_id, owner, tracking_number, shipping_method, note
            ),
        )

    def mark_delivered(
        self, order_id: str, owner: OwnerKey, note: str | None = None
    ) -> Result[OrderView]:
        return self._run(
            "mark_delivered", lambda: self._status.mark_delivered(order_id, owner, note)
        )

    @staticmethod
    def _run(operation: str, action: Callable[[], T]) -> Result[T]:
        try:
            return Result.success(action())
        except DomainException as exc:
            logger.info(
                "Request rejected", operation=operation, kind=exc.kind, reason=exc.message
            )
            return Result.failure(exc)
