"""Cart and order aggregates as JSON documents.

Carts and orders are stored whole, one document per row.  The row's
``version`` column is authoritative and is not part of the document.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal

from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.order import Order, OrderEvent, OrderItem, OrderStatus
from storefront.domain.model.value_objects import Address, Money, OwnerKey, Quantity


def _money(amount: str, currency: str) -> Money:
    return Money(Decimal(amount), currency)


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def owner_key(user_id: str | None, session_id: str | None) -> str:
    """Unique lookup key for the owner of a cart."""
    if user_id is not None:
        return f"user:{user_id}"
    return f"guest:{session_id}"


def owner_key_for(owner: OwnerKey) -> str:
    return owner_key(owner.user_id, owner.guest_session_id)


# --- Carts --------------------------------------------------------------------

def dump_cart(cart: Cart) -> str:
    return json.dumps(
        {
            "id": cart.id,
            "user_id": cart.user_id,
            "session_id": cart.session_id,
            "created_at": cart.created_at.isoformat(),
            "updated_at": cart.updated_at.isoformat(),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "added_at": item.added_at.isoformat(),
                }
                for item in cart.items
            ],
        }
    )


def load_cart(document: str, version: int) -> Cart:
    raw = json.loads(document)
    return Cart(
        id=raw["id"],
        user_id=raw.get("user_id"),
        session_id=raw.get("session_id"),
        version=version,
        created_at=datetime.fromisoformat(raw["created_at"]),
        updated_at=datetime.fromisoformat(raw["updated_at"]),
        items=[
            CartItem(
                id=item["id"],
                product_id=item["product_id"],
                variant_id=item["variant_id"],
                quantity=Quantity(item["quantity"]),
                unit_price=_money(item["unit_price"], item["currency"]),
                added_at=datetime.fromisoformat(item["added_at"]),
            )
            for item in raw["items"]
        ],
    )


# --- Orders -------------------------------------------------------------------

def dump_order(order: Order) -> str:
    return json.dumps(
        {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "guest_session_id": order.guest_session_id,
            "customer_email": order.customer_email,
            "customer_phone": order.customer_phone,
            "status": order.status.value,
            "currency": order.currency,
            "subtotal": str(order.subtotal.amount),
            "shipping_cost": str(order.shipping_cost.amount),
            "tax_amount": str(order.tax_amount.amount),
            "discount_amount": str(order.discount_amount.amount),
            "total": str(order.total.amount),
            "shipping_method": order.shipping_method,
            "shipping_address": order.shipping_address.to_dict(),
            "billing_address": (
                order.billing_address.to_dict() if order.billing_address else None
            ),
            "notes": order.notes,
            "tracking_number": order.tracking_number,
            "payment_method": order.payment_method,
            "payment_reference": order.payment_reference,
            "cancellation_reason": order.cancellation_reason,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "paid_at": _iso(order.paid_at),
            "shipped_at": _iso(order.shipped_at),
            "delivered_at": _iso(order.delivered_at),
            "cancelled_at": _iso(order.cancelled_at),
            "items": [
                {
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "product_name": item.product_name,
                    "variant_name": item.variant_name,
                    "sku": item.sku,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                }
                for item in order.items
            ],
            "events": [
                {
                    "status": event.status.value,
                    "description": event.description,
                    "note": event.note,
                    "created_at": event.created_at.isoformat(),
                }
                for event in order.events
            ],
        }
    )


def load_order(document: str, version: int) -> Order:
    raw = json.loads(document)
    currency = raw["currency"]
    billing = raw.get("billing_address")
    return Order(
        id=raw["id"],
        order_number=raw["order_number"],
        user_id=raw.get("user_id"),
        guest_session_id=raw.get("guest_session_id"),
        customer_email=raw["customer_email"],
        customer_phone=raw.get("customer_phone"),
        status=OrderStatus(raw["status"]),
        currency=currency,
        subtotal=_money(raw["subtotal"], currency),
        shipping_cost=_money(raw["shipping_cost"], currency),
        tax_amount=_money(raw["tax_amount"], currency),
        discount_amount=_money(raw["discount_amount"], currency),
        total=_money(raw["total"], currency),
        shipping_method=raw.get("shipping_method"),
        shipping_address=Address.from_dict(raw["shipping_address"]),
        billing_address=Address.from_dict(billing) if billing else None,
        notes=raw.get("notes"),
        tracking_number=raw.get("tracking_number"),
        payment_method=raw.get("payment_method"),
        payment_reference=raw.get("payment_reference"),
        cancellation_reason=raw.get("cancellation_reason"),
        created_at=datetime.fromisoformat(raw["created_at"]),
        updated_at=datetime.fromisoformat(raw["updated_at"]),
        paid_at=_dt(raw.get("paid_at")),
        shipped_at=_dt(raw.get("shipped_at")),
        delivered_at=_dt(raw.get("delivered_at")),
        cancelled_at=_dt(raw.get("cancelled_at")),
        version=version,
        items=[
            OrderItem(
                product_id=item["product_id"],
                variant_id=item["variant_id"],
                product_name=item["product_name"],
                variant_name=item["variant_name"],
                sku=item["sku"],
                quantity=Quantity(item["quantity"]),
                unit_price=_money(item["unit_price"], currency),
            )
            for item in raw["items"]
        ],
        events=[
            OrderEvent(
                status=OrderStatus(event["status"]),
                description=event["description"],
                note=event.get("note"),
                created_at=datetime.fromisoformat(event["created_at"]),
            )
            for event in raw.get("events", [])
        ],
    )
