"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items and its audit
trail of status events.  Once placed, only the status, shipping/tracking,
payment and cancellation metadata may change; items and money fields are
frozen snapshots.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import (
    InvalidStatusTransition,
    OrderNotCancellable,
    ValidationError,
)
from storefront.domain.model.value_objects import Address, Money, Quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# Forward-only state machine.  Cancellation is only reachable before
# shipment; returns and refunds are handled elsewhere.
_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderItem:
    """Snapshot of a purchased variant at order-creation time.

    Later catalog edits (renames, price changes, deactivation) never
    reach this record.
    """

    product_id: str
    variant_id: str
    product_name: str
    variant_name: str
    sku: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderEvent:
    """Append-only audit record of a status change."""

    status: OrderStatus
    description: str
    note: str | None = None
    created_at: datetime = field(default_factory=_now)


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders; it enforces the creation rules
    and computes the stored totals.  The ``__init__`` is intentionally
    simple so the repository can reconstitute persisted orders without
    re-validating or recomputing anything.
    """

    id: str
    order_number: str
    customer_email: str
    items: list[OrderItem]
    shipping_address: Address
    subtotal: Money
    shipping_cost: Money
    tax_amount: Money
    discount_amount: Money
    total: Money
    currency: str
    user_id: str | None = None
    guest_session_id: str | None = None
    customer_phone: str | None = None
    billing_address: Address | None = None
    shipping_method: str | None = None
    notes: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    events: list[OrderEvent] = field(default_factory=list)
    tracking_number: str | None = None
    payment_method: str | None = None
    payment_reference: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    paid_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    version: int = 0  # bumped by the repository on every save

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        order_number: str,
        customer_email: str,
        items: list[OrderItem],
        shipping_address: Address,
        shipping_cost: Money,
        tax_amount: Money,
        currency: str,
        discount_amount: Money | None = None,
        user_id: str | None = None,
        guest_session_id: str | None = None,
        customer_phone: str | None = None,
        billing_address: Address | None = None,
        shipping_method: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """Create a new Pending order, computing and freezing its totals."""
        if not order_number or not order_number.strip():
            raise ValidationError("Order number cannot be empty")
        if not items:
            raise ValidationError("Order must contain at least one item")

        discount = discount_amount if discount_amount is not None else Money.zero(currency)
        subtotal = Money.zero(currency)
        for item in items:
            subtotal = subtotal + item.line_total
        total = subtotal + shipping_cost + tax_amount - discount

        order = Order(
            id=uuid.uuid4().hex,
            order_number=order_number,
            customer_email=customer_email,
            items=list(items),
            shipping_address=shipping_address,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax_amount=tax_amount,
            discount_amount=discount,
            total=total,
            currency=currency,
            user_id=user_id,
            guest_session_id=guest_session_id,
            customer_phone=customer_phone.strip() if customer_phone else None,
            billing_address=billing_address,
            shipping_method=shipping_method,
            notes=notes,
        )
        order._record(OrderStatus.PENDING, "Order placed")
        return order

    # --- Queries --------------------------------------------------------------

    @property
    def can_be_cancelled(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.PAID)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def is_owned_by(self, user_id: str | None, guest_session_id: str | None) -> bool:
        if user_id is not None:
            return self.user_id == user_id
        return self.user_id is None and self.guest_session_id == guest_session_id

    # --- State transitions ----------------------------------------------------

    def mark_paid(
        self,
        payment_method: str | None = None,
        payment_reference: str | None = None,
        note: str | None = None,
    ) -> None:
        """Pending -> Paid.  Payment details are recorded, not verified."""
        self._transition(OrderStatus.PAID, "Payment received", note)
        self.payment_method = payment_method
        self.payment_reference = payment_reference
        self.paid_at = self.updated_at

    def mark_shipped(
        self,
        tracking_number: str | None = None,
        shipping_method: str | None = None,
        note: str | None = None,
    ) -> None:
        """Paid -> Shipped."""
        self._transition(OrderStatus.SHIPPED, "Order shipped", note)
        if tracking_number:
            self.tracking_number = tracking_number
        if shipping_method:
            self.shipping_method = shipping_method
        self.shipped_at = self.updated_at

    def mark_delivered(self, note: str | None = None) -> None:
        """Shipped -> Delivered (terminal)."""
        self._transition(OrderStatus.DELIVERED, "Order delivered", note)
        self.delivered_at = self.updated_at

    def cancel(self, reason: str | None = None) -> None:
        """Pending|Paid -> Cancelled.

        Stock is restored by the OrderLifecycle domain service once the
        cancelled status has been saved.
        """
        if not self.can_be_cancelled:
            raise OrderNotCancellable(
                f"Order cannot be cancelled. Current status: {self.status.value}"
            )
        self._transition(OrderStatus.CANCELLED, "Order cancelled", reason)
        self.cancellation_reason = reason
        self.cancelled_at = self.updated_at

    def append_note(self, note: str) -> None:
        """Append a timestamped admin note to the order notes."""
        entry = f"[{_now():%Y-%m-%d %H:%M}] Status {self.status.value}: {note}"
        self.notes = f"{self.notes}\n{entry}" if self.notes else entry
        self.updated_at = _now()

    # --- Internal helpers -----------------------------------------------------

    def _transition(self, target: OrderStatus, description: str, note: str | None) -> None:
        if target not in _TRANSITIONS[self.status]:
            raise InvalidStatusTransition(
                f"Cannot transition order from {self.status.value} to {target.value}"
            )
        self.status = target
        self._record(target, description, note)

    def _record(self, status: OrderStatus, description: str, note: str | None = None) -> None:
        event = OrderEvent(status=status, description=description, note=note)
        self.events.append(event)
        self.updated_at = event.created_at
