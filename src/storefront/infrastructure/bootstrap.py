"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from storefront.application.storefront import Storefront
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.json_catalog_reader import JsonCatalogReader
from storefront.infrastructure.persistence.sql_cart_repository import SqlCartRepository
from storefront.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from storefront.infrastructure.persistence.sql_order_sequence import SqlOrderSequence
from storefront.infrastructure.persistence.sql_stock_ledger import SqlStockLedger


def load_settings() -> Settings:
    return Settings.from_env()


def database_engine(settings: Settings) -> Engine:
    url = make_url(settings.resolved_database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url)


def catalog_reader(settings: Settings) -> JsonCatalogReader:
    return JsonCatalogReader(settings.data_dir / "products.json")


def stock_ledger(settings: Settings) -> SqlStockLedger:
    return SqlStockLedger(database_engine(settings))


def build_storefront(settings: Settings) -> Storefront:
    engine = database_engine(settings)
    return Storefront(
        cart_repo=SqlCartRepository(engine),
        order_repo=SqlOrderRepository(engine),
        catalog=catalog_reader(settings),
        ledger=SqlStockLedger(engine),
        sequence=SqlOrderSequence(engine),
        currency=settings.currency,
        cart_retries=settings.cart_retries,
    )
