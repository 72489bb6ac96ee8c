"""Catalog read model: products and their variants.

The catalog is owned by an external subsystem.  This core only reads it
(through ProductCatalogReader) to check active flags and to price cart
lines.  Stock levels are deliberately absent here: the StockLedger is the
only source of truth for availability.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class Variant:
    id: str
    product_id: str
    sku: str
    name: str
    price_adjustment: Decimal = Decimal("0.00")
    is_active: bool = True
    sort_order: int = 0


@dataclass(frozen=True)
class Product:
    """A product with its variants, as exposed by the catalog."""

    id: str
    name: str
    base_price: Money
    is_active: bool = True
    variants: tuple[Variant, ...] = field(default_factory=tuple)

    def find_variant(self, variant_id: str) -> Variant | None:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def first_active_variant(self) -> Variant | None:
        """The default variant: lowest sort order among active ones."""
        active = [v for v in self.variants if v.is_active]
        if not active:
            return None
        return min(active, key=lambda v: v.sort_order)

    def price_for(self, variant: Variant) -> Money:
        """Current unit price: base price plus the variant's adjustment."""
        amount = self.base_price.amount + variant.price_adjustment
        if amount < Decimal("0"):
            raise ValidationError(
                f"Variant {variant.sku} resolves to a negative price"
            )
        return Money(amount, self.base_price.currency)
