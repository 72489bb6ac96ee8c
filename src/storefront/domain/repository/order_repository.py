"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order (items and events included), or None."""

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its human-readable number, or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order and bump its ``version``.

        Raises ConcurrencyConflict if the stored version differs from
        ``order.version`` (0 meaning "not stored yet").
        """

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove an order.  Only used to undo a failed order creation."""
