"""Port for the stock ledger, the only writer of variant stock counts.

Implementations must make ``try_reserve`` a single atomic
check-and-decrement (a conditional UPDATE checked by affected-row count,
or a compare-and-swap under a lock).  Reading the stock first and writing
it back later from application code oversells under concurrent checkout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.inventory import Reservation


class StockLedger(ABC):

    @abstractmethod
    def try_reserve(self, variant_id: str, quantity: int) -> Reservation:
        """Atomically take ``quantity`` units.

        Raises InsufficientStock (carrying the available count) when the
        variant holds fewer than ``quantity`` units.
        """

    @abstractmethod
    def release(self, variant_id: str, quantity: int) -> None:
        """Atomically give back ``quantity`` units.

        Targets the variant id regardless of its catalog state.  Callers
        only release what they previously reserved.
        """

    @abstractmethod
    def current_stock(self, variant_id: str) -> int:
        """Snapshot read for display and advisory checks; 0 if unknown."""

    @abstractmethod
    def set_stock(self, variant_id: str, quantity: int) -> None:
        """Administrative absolute set (stock intake, corrections)."""

    @abstractmethod
    def list_stock(self) -> dict[str, int]:
        """Every known variant id with its current stock."""
