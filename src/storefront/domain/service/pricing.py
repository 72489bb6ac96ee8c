"""Domain service: order pricing rules.

Shipping is a static lookup by method name (no carrier integration) and
tax is a flat VAT rate, rounded half-up to cents.
"""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.value_objects import Money

SHIPPING_RATES: dict[str, Decimal] = {
    "express": Decimal("15.99"),
    "standard": Decimal("5.99"),
    "free": Decimal("0.00"),
}
DEFAULT_SHIPPING_RATE = Decimal("9.99")
VAT_RATE = Decimal("0.20")


def shipping_cost_for(method: str, currency: str) -> Money:
    """Flat shipping cost for a method; unknown methods get the default rate."""
    rate = SHIPPING_RATES.get(method.strip().lower(), DEFAULT_SHIPPING_RATE)
    return Money(rate, currency)


def tax_for(subtotal: Money) -> Money:
    return subtotal.scaled(VAT_RATE)
