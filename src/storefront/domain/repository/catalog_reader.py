"""Read-only port onto the product catalog.

The catalog is managed by another subsystem.  Defined in the domain layer
so the domain never depends on infrastructure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import Product


class ProductCatalogReader(ABC):

    @abstractmethod
    def get_product_with_variants(self, product_id: str) -> Product | None:
        """Return a product with all of its variants, active or not."""

    def get_products(self, product_ids: list[str]) -> dict[str, Product]:
        """Batch lookup keyed by product id; unknown ids are omitted."""
        found: dict[str, Product] = {}
        for product_id in dict.fromkeys(product_ids):
            product = self.get_product_with_variants(product_id)
            if product is not None:
                found[product_id] = product
        return found
