"""Abstract repository for the Cart aggregate.

Carts are saved with optimistic concurrency: ``save()`` must fail with
ConcurrencyConflict when the stored version differs from the version the
cart was loaded with, and must bump ``cart.version`` on success.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import OwnerKey


class CartRepository(ABC):

    @abstractmethod
    def get_by_owner(self, owner: OwnerKey) -> Cart | None:
        """Return the cart (with all items) owned by a user or guest session."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart, checking its version token."""

    @abstractmethod
    def delete(self, cart_id: str) -> None:
        """Remove a cart record.  Deleting a missing cart is a no-op."""
