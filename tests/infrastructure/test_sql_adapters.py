"""Tests for the SQLAlchemy stock ledger and order sequence (SQLite)."""

import threading

import pytest
from sqlalchemy import create_engine

from storefront.domain.exceptions import InsufficientStock, ValidationError
from storefront.infrastructure.persistence.sql_order_sequence import SqlOrderSequence
from storefront.infrastructure.persistence.sql_stock_ledger import SqlStockLedger


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    yield engine
    engine.dispose()


class TestSqlStockLedger:

    def test_reserve_and_release(self, engine):
        ledger = SqlStockLedger(engine)
        ledger.set_stock("v1", 5)

        reservation = ledger.try_reserve("v1", 3)

        assert reservation.quantity == 3
        assert ledger.current_stock("v1") == 2
        ledger.release("v1", 3)
        assert ledger.current_stock("v1") == 5

    def test_reserve_more_than_available(self, engine):
        ledger = SqlStockLedger(engine)
        ledger.set_stock("v1", 2)
        with pytest.raises(InsufficientStock) as exc_info:
            ledger.try_reserve("v1", 3)
        assert exc_info.value.available == 2
        assert ledger.current_stock("v1") == 2

    def test_unknown_variant_has_no_stock(self, engine):
        ledger = SqlStockLedger(engine)
        assert ledger.current_stock("nope") == 0
        with pytest.raises(InsufficientStock):
            ledger.try_reserve("nope", 1)

    def test_release_creates_missing_row(self, engine):
        ledger = SqlStockLedger(engine)
        ledger.release("v9", 2)
        assert ledger.current_stock("v9") == 2

    def test_rejects_non_positive_quantities(self, engine):
        ledger = SqlStockLedger(engine)
        with pytest.raises(ValidationError):
            ledger.try_reserve("v1", 0)
        with pytest.raises(ValidationError):
            ledger.set_stock("v1", -1)

    def test_list_stock(self, engine):
        ledger = SqlStockLedger(engine)
        ledger.set_stock("b", 2)
        ledger.set_stock("a", 1)
        assert ledger.list_stock() == {"a": 1, "b": 2}

    def test_concurrent_reservations_never_go_negative(self, engine):
        ledger = SqlStockLedger(engine)
        ledger.set_stock("v1", 5)
        successes: list[int] = []
        lock = threading.Lock()

        def buy():
            try:
                ledger.try_reserve("v1", 1)
            except InsufficientStock:
                return
            with lock:
                successes.append(1)

        threads = [threading.Thread(target=buy) for _ in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(successes) == 5
        assert ledger.current_stock("v1") == 0


class TestSqlOrderSequence:

    def test_per_year_counter(self, engine):
        sequence = SqlOrderSequence(engine)
        assert sequence.next_value(2026) == 1
        assert sequence.next_value(2026) == 2
        assert sequence.next_value(2027) == 1

    def test_shares_state_across_instances(self, engine):
        SqlOrderSequence(engine).next_value(2026)
        assert SqlOrderSequence(engine).next_value(2026) == 2
