"""Typed results returned across the application boundary.

Expected domain outcomes (out of stock, not found, access denied...) come
back as ``Result.failure`` so controllers can map them to user-facing
messages.  Infrastructure failures are never wrapped; they propagate as
exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from storefront.domain.exceptions import DomainException

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: DomainException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> str | None:
        return self.error.kind if self.error else None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    def unwrap(self) -> T:
        """Return the value, or raise the wrapped domain error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @staticmethod
    def success(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def failure(error: DomainException) -> Result[T]:
        return Result(error=error)
