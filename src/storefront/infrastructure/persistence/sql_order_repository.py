"""SQLAlchemy-backed OrderRepository.

Same optimistic scheme as carts: a save of version N only succeeds while
the stored row is still at N.  Two cancellations racing on one order
therefore cannot both commit.
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from storefront.domain.exceptions import ConcurrencyConflict
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.documents import dump_order, load_order
from storefront.infrastructure.persistence.sql_schema import create_schema

_BY_ID = text("SELECT version, document FROM orders WHERE id = :id")

_BY_NUMBER = text("SELECT version, document FROM orders WHERE order_number = :order_number")

_BY_USER = text("SELECT version, document FROM orders WHERE user_id = :user_id")

_INSERT = text(
    """
    INSERT INTO orders (id, order_number, user_id, version, document)
    VALUES (:id, :order_number, :user_id, 1, :document)
    """
)

_UPDATE = text(
    """
    UPDATE orders
    SET version = version + 1, document = :document
    WHERE id = :id AND version = :expected
    """
)

_DELETE = text("DELETE FROM orders WHERE id = :id")


class SqlOrderRepository(OrderRepository):

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        create_schema(engine)

    def get_by_id(self, order_id: str) -> Order | None:
        return self._fetch_one(_BY_ID, {"id": order_id})

    def get_by_number(self, order_number: str) -> Order | None:
        return self._fetch_one(_BY_NUMBER, {"order_number": order_number})

    def list_by_user(self, user_id: str) -> list[Order]:
        with self._engine.connect() as conn:
            rows = conn.execute(_BY_USER, {"user_id": user_id}).all()
        orders = [load_order(row.document, row.version) for row in rows]
        return sorted(orders, key=lambda o: (o.created_at, o.order_number), reverse=True)

    def save(self, order: Order) -> None:
        params = {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "document": dump_order(order),
            "expected": order.version,
        }
        try:
            with self._engine.begin() as conn:
                if order.version == 0:
                    conn.execute(_INSERT, params)
                    matched = 1
                else:
                    matched = conn.execute(_UPDATE, params).rowcount
        except IntegrityError as exc:
            raise ConcurrencyConflict(
                f"Order {order.order_number} already exists"
            ) from exc

        if matched != 1:
            raise ConcurrencyConflict(
                f"Order {order.order_number} was modified concurrently "
                f"(expected version {order.version})"
            )
        order.version += 1

    def delete(self, order_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(_DELETE, {"id": order_id})

    def _fetch_one(self, statement, params: dict) -> Order | None:
        with self._engine.connect() as conn:
            row = conn.execute(statement, params).first()
        return load_order(row.document, row.version) if row else None
