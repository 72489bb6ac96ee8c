"""Retry loop for optimistic-concurrency conflicts.

Cart commands reload the cart and re-apply themselves when a concurrent
writer bumped its version first.  The re-run re-checks stock against the
fresh state, so a lost race turns into a proper domain error (for example
InsufficientStock) instead of a silently dropped update.
"""

from __future__ import annotations

from typing import Callable, TypeVar

import structlog

from storefront.domain.exceptions import ConcurrencyConflict

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 5


def retry_on_conflict(operation: Callable[[], T], attempts: int = DEFAULT_ATTEMPTS) -> T:
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConcurrencyConflict:
            if attempt == attempts:
                raise
            logger.warning("Concurrent modification detected, retrying", attempt=attempt)
    raise AssertionError("unreachable")
