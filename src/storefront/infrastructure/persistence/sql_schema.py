"""Relational schema shared by the SQLAlchemy adapters.

Stock and the order-number counter are plain counters.  Carts and orders
are stored as JSON documents next to the columns they are looked up by,
plus a ``version`` column that every update compares and bumps.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

metadata = MetaData()

variant_stock = Table(
    "variant_stock",
    metadata,
    Column("variant_id", String(64), primary_key=True),
    Column("quantity", Integer, nullable=False),
)

order_sequences = Table(
    "order_sequences",
    metadata,
    Column("year", Integer, primary_key=True, autoincrement=False),
    Column("last_value", Integer, nullable=False),
)

carts = Table(
    "carts",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("owner_key", String(255), nullable=False, unique=True),
    Column("version", Integer, nullable=False),
    Column("document", Text, nullable=False),
)

orders = Table(
    "orders",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("order_number", String(32), nullable=False, unique=True),
    Column("user_id", String(255), index=True),
    Column("version", Integer, nullable=False),
    Column("document", Text, nullable=False),
)


def create_schema(engine: Engine) -> None:
    metadata.create_all(engine)
