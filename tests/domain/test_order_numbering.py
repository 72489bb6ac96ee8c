"""Unit tests for order number formatting and allocation."""

import threading
from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.service.order_numbering import (
    OrderNumberGenerator,
    allocate_once,
    format_order_number,
    parse_order_number,
)
from tests.fakes import FakeOrderSequence


def _clock(year: int):
    return lambda: datetime(year, 6, 1, tzinfo=timezone.utc)


class TestFormat:

    def test_zero_padded(self):
        assert format_order_number(2026, 42) == "ORD-2026-000042"

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            format_order_number(2026, 1_000_000)

    def test_parse(self):
        assert parse_order_number("ORD-2026-000042") == (2026, 42)

    @pytest.mark.parametrize("raw", ["ORD-26-1", "XYZ-2026-000001", "ORD-2026-00001"])
    def test_parse_malformed(self, raw):
        with pytest.raises(ValidationError):
            parse_order_number(raw)

    def test_sorts_as_text(self):
        numbers = [format_order_number(2026, n) for n in (10, 2, 100)]
        assert sorted(numbers) == [format_order_number(2026, n) for n in (2, 10, 100)]


class TestGenerator:

    def test_allocate_once_reuses_first_number(self):
        generator = OrderNumberGenerator(FakeOrderSequence(), _clock(2026))
        next_number = allocate_once(generator.next_number)
        assert next_number() == next_number() == "ORD-2026-000001"
        assert generator.next_number() == "ORD-2026-000002"

    def test_sequence_per_year(self):
        sequence = FakeOrderSequence()
        gen_2025 = OrderNumberGenerator(sequence, _clock(2025))
        gen_2026 = OrderNumberGenerator(sequence, _clock(2026))
        assert gen_2025.next_number() == "ORD-2025-000001"
        assert gen_2025.next_number() == "ORD-2025-000002"
        assert gen_2026.next_number() == "ORD-2026-000001"

    def test_concurrent_allocation_is_unique(self):
        generator = OrderNumberGenerator(FakeOrderSequence(), _clock(2026))
        numbers: list[str] = []
        lock = threading.Lock()

        def allocate():
            for _ in range(50):
                number = generator.next_number()
                with lock:
                    numbers.append(number)

        threads = [threading.Thread(target=allocate) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(numbers) == len(set(numbers)) == 200
