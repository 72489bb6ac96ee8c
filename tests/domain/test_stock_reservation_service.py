"""Unit tests for all-or-nothing stock reservation and compensation."""

import threading

import pytest

from storefront.domain.exceptions import (
    InsufficientStock,
    OperationCancelled,
    StockIntegrityError,
)
from storefront.domain.model.inventory import Reservation, StockRequest
from storefront.domain.service.stock_reservation_service import StockReservationService
from tests.fakes import FakeStockLedger


class BrokenReleaseLedger(FakeStockLedger):

    def release(self, variant_id: str, quantity: int) -> None:
        raise RuntimeError("ledger unreachable")


def _request(variant_id: str, qty: int, name: str = "T-Shirt") -> StockRequest:
    return StockRequest(variant_id=variant_id, quantity=qty, product_name=name)


class TestReserveAll:

    def test_reserves_every_line(self):
        ledger = FakeStockLedger({"v1": 5, "v2": 3})
        reservations = StockReservationService(ledger).reserve_all(
            [_request("v1", 2), _request("v2", 3)]
        )
        assert reservations == [Reservation("v1", 2), Reservation("v2", 3)]
        assert ledger.current_stock("v1") == 3
        assert ledger.current_stock("v2") == 0

    def test_failure_rolls_back_earlier_lines(self):
        ledger = FakeStockLedger({"v1": 5, "v2": 1})
        with pytest.raises(InsufficientStock, match="'Mug'") as exc_info:
            StockReservationService(ledger).reserve_all(
                [_request("v1", 2), _request("v2", 3, name="Mug")]
            )
        assert exc_info.value.available == 1
        assert ledger.current_stock("v1") == 5
        assert ledger.current_stock("v2") == 1

    def test_cancellation_releases_and_raises(self):
        ledger = FakeStockLedger({"v1": 5})
        cancelled = threading.Event()
        cancelled.set()
        with pytest.raises(OperationCancelled):
            StockReservationService(ledger).reserve_all([_request("v1", 2)], cancelled)
        assert ledger.current_stock("v1") == 5

    def test_concurrent_reservations_never_oversell(self):
        ledger = FakeStockLedger({"v1": 10})
        service = StockReservationService(ledger)
        outcomes: list[bool] = []
        lock = threading.Lock()

        def buy():
            try:
                service.reserve_all([_request("v1", 1)])
                ok = True
            except InsufficientStock:
                ok = False
            with lock:
                outcomes.append(ok)

        threads = [threading.Thread(target=buy) for _ in range(25)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count(True) == 10
        assert outcomes.count(False) == 15
        assert ledger.current_stock("v1") == 0


class TestReleaseAll:

    def test_failed_release_is_an_integrity_error(self):
        ledger = BrokenReleaseLedger({"v1": 5})
        with pytest.raises(StockIntegrityError, match="v1x2"):
            StockReservationService(ledger).release_all([Reservation("v1", 2)])
