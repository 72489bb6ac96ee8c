"""Application service: Create Order use case.

Orchestrates the checkout flow:
  1. Validate and normalise customer input (email, addresses)
  2. Delegate to the OrderFactory domain service (reserve, snapshot, persist)
  3. Retry when the cart was modified concurrently, keeping the order number
  4. Map the resulting Order to an OrderView DTO
"""

from __future__ import annotations

import threading

from storefront.application.dto import CheckoutRequest, OrderView
from storefront.application.mapping import to_address, to_order_view
from storefront.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import OwnerKey, normalize_email
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.order_sequence import OrderSequence
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.order_factory import CheckoutDetails, OrderFactory
from storefront.domain.service.order_numbering import OrderNumberGenerator, allocate_once


class CreateOrderHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        catalog: ProductCatalogReader,
        ledger: StockLedger,
        sequence: OrderSequence,
        currency: str,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._numbering = OrderNumberGenerator(sequence)
        self._factory = OrderFactory(
            cart_repo=cart_repo,
            order_repo=order_repo,
            catalog=catalog,
            ledger=ledger,
            numbering=self._numbering,
            currency=currency,
        )
        self._attempts = attempts

    def handle(
        self,
        owner: OwnerKey,
        request: CheckoutRequest,
        cancellation: threading.Event | None = None,
    ) -> OrderView:
        details = self._to_details(request)
        next_number = allocate_once(self._numbering.next_number)
        order = retry_on_conflict(
            lambda: self._factory.create_order(owner, details, cancellation, next_number),
            self._attempts,
        )
        return to_order_view(order)

    @staticmethod
    def _to_details(request: CheckoutRequest) -> CheckoutDetails:
        if not request.shipping_method or not request.shipping_method.strip():
            raise ValidationError("Shipping method is required")
        return CheckoutDetails(
            customer_email=normalize_email(request.customer_email),
            shipping_address=to_address(request.shipping_address),
            shipping_method=request.shipping_method.strip(),
            billing_address=(
                to_address(request.billing_address) if request.billing_address else None
            ),
            customer_phone=request.customer_phone or None,
            notes=request.notes or None,
        )
