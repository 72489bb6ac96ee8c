"""SQLAlchemy-backed StockLedger.

Reservation is a single conditional UPDATE; the database decides, so two
concurrent checkouts for the last unit can never both succeed.
"""

from __future__ import annotations

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Engine

from storefront.domain.exceptions import InsufficientStock, ValidationError
from storefront.domain.model.inventory import Reservation
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.infrastructure.persistence.sql_schema import create_schema

logger = structlog.get_logger(__name__)

_RESERVE = text(
    """
    UPDATE variant_stock
    SET quantity = quantity - :qty
    WHERE variant_id = :variant_id AND quantity >= :qty
    """
)

_RELEASE = text(
    """
    INSERT INTO variant_stock (variant_id, quantity)
    VALUES (:variant_id, :qty)
    ON CONFLICT (variant_id) DO UPDATE
    SET quantity = variant_stock.quantity + excluded.quantity
    """
)

_SET = text(
    """
    INSERT INTO variant_stock (variant_id, quantity)
    VALUES (:variant_id, :qty)
    ON CONFLICT (variant_id) DO UPDATE
    SET quantity = excluded.quantity
    """
)

_CURRENT = text("SELECT quantity FROM variant_stock WHERE variant_id = :variant_id")

_LIST = text("SELECT variant_id, quantity FROM variant_stock ORDER BY variant_id")


class SqlStockLedger(StockLedger):

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        create_schema(engine)

    def try_reserve(self, variant_id: str, quantity: int) -> Reservation:
        self._require_positive(quantity)
        with self._engine.begin() as conn:
            result = conn.execute(_RESERVE, {"variant_id": variant_id, "qty": quantity})
            if result.rowcount == 1:
                logger.debug("Stock reserved", variant_id=variant_id, quantity=quantity)
                return Reservation(variant_id=variant_id, quantity=quantity)
            available = conn.execute(_CURRENT, {"variant_id": variant_id}).scalar() or 0

        raise InsufficientStock(
            f"Only {available} items available in stock.", available=available
        )

    def release(self, variant_id: str, quantity: int) -> None:
        self._require_positive(quantity)
        with self._engine.begin() as conn:
            conn.execute(_RELEASE, {"variant_id": variant_id, "qty": quantity})
        logger.debug("Stock released", variant_id=variant_id, quantity=quantity)

    def current_stock(self, variant_id: str) -> int:
        with self._engine.connect() as conn:
            return conn.execute(_CURRENT, {"variant_id": variant_id}).scalar() or 0

    def set_stock(self, variant_id: str, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        with self._engine.begin() as conn:
            conn.execute(_SET, {"variant_id": variant_id, "qty": quantity})
        logger.info("Stock set", variant_id=variant_id, quantity=quantity)

    def list_stock(self) -> dict[str, int]:
        with self._engine.connect() as conn:
            return {row.variant_id: row.quantity for row in conn.execute(_LIST)}

    @staticmethod
    def _require_positive(quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Stock quantity must be positive")
