"""SQLAlchemy-backed per-year order counter."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Engine

from storefront.domain.repository.order_sequence import OrderSequence
from storefront.infrastructure.persistence.sql_schema import create_schema

_INCREMENT = text(
    """
    INSERT INTO order_sequences (year, last_value)
    VALUES (:year, 1)
    ON CONFLICT (year) DO UPDATE
    SET last_value = order_sequences.last_value + 1
    """
)

_CURRENT = text("SELECT last_value FROM order_sequences WHERE year = :year")


class SqlOrderSequence(OrderSequence):

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        create_schema(engine)

    def next_value(self, year: int) -> int:
        # The increment takes the row's write lock, so the read below sees
        # this transaction's value and no other.
        with self._engine.begin() as conn:
            conn.execute(_INCREMENT, {"year": year})
            return conn.execute(_CURRENT, {"year": year}).scalar_one()
