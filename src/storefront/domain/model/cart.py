"""Cart aggregate.

A cart belongs to exactly one owner (a user or a guest session) and holds
at most one line per (product, variant) pair.  Carts never reserve stock;
stock-aware guards live in the CartStore domain service.

``version`` is the optimistic-concurrency token.  Repositories compare it
on save and bump it, so a concurrent writer that loaded the same version
loses with ConcurrencyConflict instead of silently overwriting.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ItemNotFound, ValidationError
from storefront.domain.model.value_objects import Money, OwnerKey, Quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartItem:
    """One line of a cart.

    ``unit_price`` is captured when the line is created and is not
    recomputed when the catalog price later changes.
    """

    id: str
    product_id: str
    variant_id: str
    quantity: Quantity
    unit_price: Money
    added_at: datetime = field(default_factory=_now)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    def set_quantity(self, quantity: int) -> None:
        self.quantity = Quantity(quantity)


@dataclass
class Cart:
    """Aggregate root for a shopping cart."""

    id: str
    user_id: str | None = None
    session_id: str | None = None
    items: list[CartItem] = field(default_factory=list)
    version: int = 0
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def for_owner(owner: OwnerKey) -> Cart:
        """Create a new, empty cart for the given owner."""
        return Cart(
            id=uuid.uuid4().hex,
            user_id=owner.user_id,
            session_id=owner.guest_session_id,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_guest_cart(self) -> bool:
        return self.user_id is None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def subtotal(self, currency: str) -> Money:
        result = Money.zero(currency)
        for item in self.items:
            result = result + item.line_total
        return result

    def find_line(self, product_id: str, variant_id: str) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id and item.variant_id == variant_id:
                return item
        return None

    def get_item(self, item_id: str) -> CartItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ItemNotFound(f"Cart item '{item_id}' not found")

    def quantity_of(self, product_id: str, variant_id: str) -> int:
        line = self.find_line(product_id, variant_id)
        return line.quantity.value if line else 0

    # --- Mutations ------------------------------------------------------------

    def add_line(
        self,
        product_id: str,
        variant_id: str,
        quantity: int,
        unit_price: Money,
    ) -> CartItem:
        """Add units of a variant, summing into an existing line if present.

        The existing line keeps its originally captured price.
        """
        existing = self.find_line(product_id, variant_id)
        if existing is not None:
            existing.set_quantity(existing.quantity.value + quantity)
            self._touch()
            return existing

        item = CartItem(
            id=uuid.uuid4().hex,
            product_id=product_id,
            variant_id=variant_id,
            quantity=Quantity(quantity),
            unit_price=unit_price,
        )
        self.items.append(item)
        self._touch()
        return item

    def set_item_quantity(self, item_id: str, quantity: int) -> None:
        """Replace a line's quantity; zero removes the line."""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        item = self.get_item(item_id)
        if quantity == 0:
            self.items.remove(item)
        else:
            item.set_quantity(quantity)
        self._touch()

    def remove_item(self, item_id: str) -> None:
        item = self.get_item(item_id)
        self.items.remove(item)
        self._touch()

    def clear(self) -> None:
        self.items.clear()
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _now()
