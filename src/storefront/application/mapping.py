"""Domain -> DTO mapping shared by the use-case handlers."""

from __future__ import annotations

from datetime import datetime

from storefront.application.dto import (
    AddressSpec,
    CartItemView,
    CartView,
    OrderEventView,
    OrderItemView,
    OrderSummaryView,
    OrderView,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Address, Money, OwnerKey
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.service.pricing import tax_for

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def money(value: Money) -> str:
    return str(value.rounded().amount)


def timestamp(value: datetime | None) -> str | None:
    return value.strftime(_TIMESTAMP_FORMAT) if value else None


def to_address(spec: AddressSpec) -> Address:
    return Address(
        first_name=spec.first_name,
        last_name=spec.last_name,
        address_line1=spec.address_line1,
        address_line2=spec.address_line2,
        city=spec.city,
        state=spec.state,
        postal_code=spec.postal_code,
        country=spec.country,
        phone=spec.phone,
    )


def empty_cart_view(owner: OwnerKey, currency: str) -> CartView:
    return CartView(
        id=None,
        user_id=owner.user_id,
        guest_session_id=owner.guest_session_id,
        currency=currency,
        items=[],
        subtotal="0.00",
        tax="0.00",
        total="0.00",
        item_count=0,
    )


def to_cart_view(
    cart: Cart,
    catalog: ProductCatalogReader,
    ledger: StockLedger,
    currency: str,
) -> CartView:
    """Render a cart with live catalog data next to the captured prices."""
    products = catalog.get_products([item.product_id for item in cart.items])
    items: list[CartItemView] = []

    for item in cart.items:
        product = products.get(item.product_id)
        variant = product.find_variant(item.variant_id) if product else None
        items.append(
            CartItemView(
                id=item.id,
                product_id=item.product_id,
                variant_id=item.variant_id,
                product_name=product.name if product else "(unavailable product)",
                variant_name=variant.name if variant else None,
                sku=variant.sku if variant else None,
                unit_price=money(item.unit_price),
                current_price=money(product.price_for(variant)) if product and variant else None,
                quantity=item.quantity.value,
                line_total=money(item.line_total),
                available_stock=ledger.current_stock(item.variant_id),
                is_available=bool(
                    product and product.is_active and variant and variant.is_active
                ),
            )
        )

    subtotal = cart.subtotal(currency)
    tax = tax_for(subtotal)
    return CartView(
        id=cart.id,
        user_id=cart.user_id,
        guest_session_id=cart.session_id,
        currency=currency,
        items=items,
        subtotal=money(subtotal),
        tax=money(tax),
        total=money(subtotal + tax),
        item_count=cart.total_items,
    )


def to_order_view(order: Order) -> OrderView:
    return OrderView(
        id=order.id,
        order_number=order.order_number,
        user_id=order.user_id,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        status=order.status.value,
        currency=order.currency,
        subtotal=money(order.subtotal),
        shipping_cost=money(order.shipping_cost),
        tax_amount=money(order.tax_amount),
        discount_amount=money(order.discount_amount),
        total=money(order.total),
        shipping_method=order.shipping_method,
        shipping_address=order.shipping_address.to_dict(),
        billing_address=order.billing_address.to_dict() if order.billing_address else None,
        tracking_number=order.tracking_number,
        payment_method=order.payment_method,
        notes=order.notes,
        cancellation_reason=order.cancellation_reason,
        items=[
            OrderItemView(
                product_id=item.product_id,
                variant_id=item.variant_id,
                product_name=item.product_name,
                variant_name=item.variant_name,
                sku=item.sku,
                quantity=item.quantity.value,
                unit_price=money(item.unit_price),
                line_total=money(item.line_total),
            )
            for item in order.items
        ],
        events=[
            OrderEventView(
                status=event.status.value,
                description=event.description,
                note=event.note,
                created_at=timestamp(event.created_at),
            )
            for event in order.events
        ],
        created_at=timestamp(order.created_at),
        paid_at=timestamp(order.paid_at),
        shipped_at=timestamp(order.shipped_at),
        delivered_at=timestamp(order.delivered_at),
        cancelled_at=timestamp(order.cancelled_at),
    )


def to_order_summary(order: Order) -> OrderSummaryView:
    return OrderSummaryView(
        id=order.id,
        order_number=order.order_number,
        status=order.status.value,
        total=money(order.total),
        currency=order.currency,
        item_count=order.total_quantity,
        created_at=timestamp(order.created_at),
    )
