"""Domain service: Stock Reservation.

This service coordinates the cross-aggregate operation of taking or giving
back stock for an order.  It lives in the domain layer because the
all-or-nothing rule is a core business rule, not just orchestration.

Reservation goes line by line through the ledger's atomic ``try_reserve``.
If any line fails, every reservation already made for the order is
released before the error propagates, so a failed checkout never leaks
stock.
"""

from __future__ import annotations

import threading

import structlog

from storefront.domain.exceptions import (
    InsufficientStock,
    OperationCancelled,
    StockIntegrityError,
)
from storefront.domain.model.inventory import Reservation, StockRequest
from storefront.domain.model.order import Order
from storefront.domain.repository.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class StockReservationService:

    def __init__(self, ledger: StockLedger) -> None:
        self._ledger = ledger

    def reserve_all(
        self,
        requests: list[StockRequest],
        cancellation: threading.Event | None = None,
    ) -> list[Reservation]:
        """Reserve every request or none of them.

        Raises InsufficientStock naming the offending product, or
        OperationCancelled if the caller gave up mid-way.  In both cases
        the reservations made so far are released first.
        """
        reservations: list[Reservation] = []
        for request in requests:
            if cancellation is not None and cancellation.is_set():
                self.release_all(reservations)
                raise OperationCancelled("Order creation cancelled before stock was committed")
            try:
                reservations.append(
                    self._ledger.try_reserve(request.variant_id, request.quantity)
                )
            except InsufficientStock as exc:
                logger.info(
                    "Reservation failed, rolling back",
                    variant_id=request.variant_id,
                    requested=request.quantity,
                    available=exc.available,
                    rolled_back=len(reservations),
                )
                self.release_all(reservations)
                raise InsufficientStock(
                    f"Insufficient stock for '{request.product_name}' "
                    f"(need {request.quantity}, have {exc.available} available)",
                    available=exc.available,
                ) from exc
        return reservations

    def release_all(self, reservations: list[Reservation]) -> None:
        """Compensating action: give back reservations in reverse order.

        Keeps going past individual failures so as much stock as possible
        is restored, then raises StockIntegrityError if anything was lost.
        """
        failed: list[Reservation] = []
        for reservation in reversed(reservations):
            try:
                self._ledger.release(reservation.variant_id, reservation.quantity)
            except Exception:
                logger.critical(
                    "Compensating stock release failed; stock may be lost",
                    variant_id=reservation.variant_id,
                    quantity=reservation.quantity,
                    exc_info=True,
                )
                failed.append(reservation)
        if failed:
            lost = ", ".join(f"{r.variant_id}x{r.quantity}" for r in failed)
            raise StockIntegrityError(f"Failed to release reserved stock: {lost}")

    def release_for_order(self, order: Order) -> None:
        """Give back exactly what an order reserved.

        Quantities come from the order's own snapshot, never from the
        current catalog, so a deactivated or deleted variant still gets
        its stock back.  A failed release is logged at critical and raises
        StockIntegrityError, since the order is already cancelled.
        """
        self.release_all(
            [Reservation(item.variant_id, item.quantity.value) for item in order.items]
        )
