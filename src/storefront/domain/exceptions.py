"""Domain-level exceptions.

Every expected business outcome is a subclass of DomainException with a
stable ``kind`` so the application facade can return it as a typed result
and the CLI can display a user-friendly message.

Infrastructure failures (optimistic-lock conflicts that survive retries,
a compensating stock release that itself failed) are *not* domain outcomes
and derive from InfrastructureError instead.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "DomainError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "ValidationError"


class ProductUnavailable(DomainException):
    kind = "ProductUnavailable"


class VariantUnavailable(DomainException):
    kind = "VariantUnavailable"


class NoAvailableVariant(DomainException):
    kind = "NoAvailableVariant"


class InsufficientStock(DomainException):
    """Requested quantity exceeds what the ledger currently holds."""

    kind = "InsufficientStock"

    def __init__(self, message: str, available: int) -> None:
        super().__init__(message)
        self.available = available


class CartNotFound(DomainException):
    kind = "CartNotFound"


class ItemNotFound(DomainException):
    kind = "ItemNotFound"


class CartEmpty(DomainException):
    kind = "CartEmpty"


class AccessDenied(DomainException):
    kind = "AccessDenied"


class OrderNotFound(DomainException):
    kind = "OrderNotFound"


class OrderNotCancellable(DomainException):
    kind = "OrderNotCancellable"


class InvalidStatusTransition(DomainException):
    kind = "InvalidStatusTransition"


class GuestSessionRequired(DomainException):
    kind = "GuestSessionRequired"


# ---------------------------------------------------------------------------
# Infrastructure errors (unexpected, never wrapped into results)
# ---------------------------------------------------------------------------


class InfrastructureError(Exception):
    """Base class for failures of the underlying stores."""


class ConcurrencyConflict(InfrastructureError):
    """A save lost an optimistic-concurrency race (stale version token)."""


class StockIntegrityError(InfrastructureError):
    """A compensating stock release failed; stock may be lost."""


class OperationCancelled(InfrastructureError):
    """The caller cancelled the request before it committed."""
