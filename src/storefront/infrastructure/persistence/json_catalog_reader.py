"""JSON-file-backed product catalog.

Implements the read-only ProductCatalogReader port; ``save`` and
``list_all`` exist for seeding the catalog from the admin CLI.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.model.catalog import Product, Variant
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.infrastructure.persistence.json_file import JsonCollectionFile


class JsonCatalogReader(ProductCatalogReader):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonCollectionFile(file_path)

    # --- ProductCatalogReader interface ---------------------------------------

    def get_product_with_variants(self, product_id: str) -> Product | None:
        for raw in self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_products(self, product_ids: list[str]) -> dict[str, Product]:
        wanted = set(product_ids)
        return {
            raw["id"]: self._to_domain(raw)
            for raw in self._file.load()
            if raw["id"] in wanted
        }

    # --- Catalog administration -----------------------------------------------

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, product: Product) -> None:
        records = self._file.load()
        replaced = False
        for i, raw in enumerate(records):
            if raw["id"] == product.id:
                records[i] = self._to_raw(product)
                replaced = True
                break
        if not replaced:
            records.append(self._to_raw(product))
        self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "base_price": str(product.base_price.amount),
            "currency": product.base_price.currency,
            "is_active": product.is_active,
            "variants": [
                {
                    "id": variant.id,
                    "sku": variant.sku,
                    "name": variant.name,
                    "price_adjustment": str(variant.price_adjustment),
                    "is_active": variant.is_active,
                    "sort_order": variant.sort_order,
                }
                for variant in product.variants
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            base_price=Money(Decimal(raw["base_price"]), raw["currency"]),
            is_active=raw.get("is_active", True),
            variants=tuple(
                Variant(
                    id=variant["id"],
                    product_id=raw["id"],
                    sku=variant["sku"],
                    name=variant["name"],
                    price_adjustment=Decimal(variant.get("price_adjustment", "0.00")),
                    is_active=variant.get("is_active", True),
                    sort_order=variant.get("sort_order", 0),
                )
                for variant in raw.get("variants", [])
            ),
        )
