"""Domain service: human-readable order numbers.

Numbers look like ``ORD-2026-000042``: a four-digit UTC year and a
six-digit, zero-padded sequence that restarts at 1 every year.  The format
is an external contract and sorts correctly as text within a year.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable

from storefront.domain.exceptions import ValidationError
from storefront.domain.repository.order_sequence import OrderSequence

ORDER_NUMBER_PREFIX = "ORD"
MAX_SEQUENCE = 999_999

_ORDER_NUMBER_RE = re.compile(r"^ORD-(\d{4})-(\d{6})$")


def format_order_number(year: int, sequence: int) -> str:
    if not 1 <= sequence <= MAX_SEQUENCE:
        raise ValidationError(f"Order sequence {sequence} out of range for {year}")
    return f"{ORDER_NUMBER_PREFIX}-{year:04d}-{sequence:06d}"


def parse_order_number(order_number: str) -> tuple[int, int]:
    """Split an order number into (year, sequence)."""
    match = _ORDER_NUMBER_RE.match(order_number.strip())
    if match is None:
        raise ValidationError(f"Malformed order number: {order_number!r}")
    return int(match.group(1)), int(match.group(2))


class OrderNumberGenerator:

    def __init__(
        self,
        sequence: OrderSequence,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sequence = sequence
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def next_number(self) -> str:
        """Allocate the next number from the atomic per-year counter.

        Never derived from counting existing orders, which races under
        concurrent checkout.
        """
        year = self._clock().astimezone(timezone.utc).year
        return format_order_number(year, self._sequence.next_value(year))


def allocate_once(allocate: Callable[[], str]) -> Callable[[], str]:
    """Wrap an allocator so every call after the first returns the same number.

    A checkout retried after a conflict keeps its number; the order saved
    by the failed attempt has already been deleted.
    """
    number: str | None = None

    def next_number() -> str:
        nonlocal number
        if number is None:
            number = allocate()
        return number

    return next_number
