"""Stock reservations.

Stock counts themselves live behind the StockLedger port; this module only
holds the receipt a successful reservation hands back, so callers can undo
exactly what they took.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Reservation:
    """Proof that ``quantity`` units of a variant were taken from stock."""

    variant_id: str
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")


@dataclass(frozen=True)
class StockRequest:
    """One line's demand on the ledger during order creation."""

    variant_id: str
    quantity: int
    product_name: str
