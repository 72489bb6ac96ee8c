"""SQLAlchemy-backed CartRepository.

Saves are optimistic.  An update only matches the row while its
``version`` still equals the one the caller loaded; the database applies
that check, so it holds across threads and across CLI processes alike.
A second cart for an owner trips the unique ``owner_key``.
"""

from __future__ import annotations

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from storefront.domain.exceptions import ConcurrencyConflict
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import OwnerKey
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.documents import (
    dump_cart,
    load_cart,
    owner_key,
    owner_key_for,
)
from storefront.infrastructure.persistence.sql_schema import create_schema

logger = structlog.get_logger(__name__)

_BY_OWNER = text("SELECT version, document FROM carts WHERE owner_key = :owner_key")

_INSERT = text(
    """
    INSERT INTO carts (id, owner_key, version, document)
    VALUES (:id, :owner_key, 1, :document)
    """
)

_UPDATE = text(
    """
    UPDATE carts
    SET owner_key = :owner_key, version = version + 1, document = :document
    WHERE id = :id AND version = :expected
    """
)

_DELETE = text("DELETE FROM carts WHERE id = :id")


class SqlCartRepository(CartRepository):

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        create_schema(engine)

    def get_by_owner(self, owner: OwnerKey) -> Cart | None:
        with self._engine.connect() as conn:
            row = conn.execute(_BY_OWNER, {"owner_key": owner_key_for(owner)}).first()
        return load_cart(row.document, row.version) if row else None

    def save(self, cart: Cart) -> None:
        params = {
            "id": cart.id,
            "owner_key": owner_key(cart.user_id, cart.session_id),
            "document": dump_cart(cart),
            "expected": cart.version,
        }
        try:
            with self._engine.begin() as conn:
                if cart.version == 0:
                    conn.execute(_INSERT, params)
                    matched = 1
                else:
                    matched = conn.execute(_UPDATE, params).rowcount
        except IntegrityError as exc:
            raise ConcurrencyConflict(f"Owner of cart {cart.id} already has a cart") from exc

        if matched != 1:
            logger.info("Stale cart version", cart_id=cart.id, version=cart.version)
            raise ConcurrencyConflict(
                f"Cart {cart.id} was modified concurrently (expected version {cart.version})"
            )
        cart.version += 1

    def delete(self, cart_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(_DELETE, {"id": cart_id})
