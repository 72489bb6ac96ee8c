"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other controller) and the
application layer without exposing domain internals.  Money is rendered
as a two-decimal string next to an explicit currency.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AddressSpec:
    """Input: an address as typed by the customer."""

    first_name: str
    last_name: str
    address_line1: str
    city: str
    postal_code: str
    country: str
    address_line2: str = ""
    state: str = ""
    phone: str = ""


@dataclass(frozen=True)
class CheckoutRequest:
    """Input: everything the customer submits at checkout."""

    customer_email: str
    shipping_address: AddressSpec
    shipping_method: str
    billing_address: AddressSpec | None = None
    customer_phone: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class CartItemView:
    id: str
    product_id: str
    variant_id: str
    product_name: str
    variant_name: str | None
    sku: str | None
    unit_price: str  # captured when the line was added
    current_price: str | None
    quantity: int
    line_total: str
    available_stock: int
    is_available: bool


@dataclass(frozen=True)
class CartView:
    id: str | None
    user_id: str | None
    guest_session_id: str | None
    currency: str
    items: list[CartItemView]
    subtotal: str
    tax: str  # VAT estimate; shipping is only known at checkout
    total: str
    item_count: int


@dataclass(frozen=True)
class OrderItemView:
    product_id: str
    variant_id: str
    product_name: str
    variant_name: str
    sku: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderEventView:
    status: str
    description: str
    note: str | None
    created_at: str


@dataclass(frozen=True)
class OrderView:
    id: str
    order_number: str
    user_id: str | None
    customer_email: str
    customer_phone: str | None
    status: str
    currency: str
    subtotal: str
    shipping_cost: str
    tax_amount: str
    discount_amount: str
    total: str
    shipping_method: str | None
    shipping_address: dict[str, str]
    billing_address: dict[str, str] | None
    tracking_number: str | None
    payment_method: str | None
    notes: str | None
    cancellation_reason: str | None
    items: list[OrderItemView]
    events: list[OrderEventView]
    created_at: str
    paid_at: str | None = None
    shipped_at: str | None = None
    delivered_at: str | None = None
    cancelled_at: str | None = None


@dataclass(frozen=True)
class OrderSummaryView:
    id: str
    order_number: str
    status: str
    total: str
    currency: str
    item_count: int
    created_at: str


@dataclass(frozen=True)
class ReorderView:
    """Output: what a reorder managed to put back into the cart."""

    cart: CartView
    items_added: int
    items_partially_added: int
    items_skipped: int
    reasons: list[str] = field(default_factory=list)
