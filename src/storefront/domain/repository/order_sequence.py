"""Port for the per-year order counter."""

from __future__ import annotations

from abc import ABC, abstractmethod


class OrderSequence(ABC):

    @abstractmethod
    def next_value(self, year: int) -> int:
        """Atomically increment and return the counter for ``year``.

        The first call for a year returns 1.  Two concurrent calls never
        return the same value.
        """
