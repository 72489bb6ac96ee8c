"""Domain service: rebuild cart lines from a past order.

Each historical line is re-validated against today's catalog and stock.
Lines that cannot be added are skipped with a reason, lines that can only
be partly added are truncated with a note, and nothing is ever silently
dropped.  Prices are today's prices, not the historical ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.repository.catalog_reader import ProductCatalogReader
from storefront.domain.repository.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


@dataclass
class ReorderOutcome:
    cart: Cart
    items_added: int = 0
    items_partially_added: int = 0
    items_skipped: int = 0
    reasons: list[str] = field(default_factory=list)


class ReorderPlanner:

    def __init__(self, catalog: ProductCatalogReader, ledger: StockLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger

    def apply(self, order: Order, cart: Cart) -> ReorderOutcome:
        """Add as much of ``order`` to ``cart`` as stock allows.

        Mutates ``cart`` in place; the caller persists it.
        """
        outcome = ReorderOutcome(cart=cart)
        products = self._catalog.get_products([item.product_id for item in order.items])

        for item in order.items:
            name = item.product_name
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                outcome.items_skipped += 1
                outcome.reasons.append(f"'{name}' is no longer available")
                continue

            variant = product.find_variant(item.variant_id)
            if variant is None or not variant.is_active:
                variant = product.first_active_variant()
                if variant is None:
                    outcome.items_skipped += 1
                    outcome.reasons.append(f"'{name}' has no available variants")
                    continue

            requested = item.quantity.value
            max_addable = (
                self._ledger.current_stock(variant.id)
                - cart.quantity_of(product.id, variant.id)
            )
            if max_addable <= 0:
                outcome.items_skipped += 1
                outcome.reasons.append(f"'{name}' is already at max quantity in cart")
                continue

            qty_to_add = min(requested, max_addable)
            # Merges into an existing line, which keeps its captured price.
            cart.add_line(product.id, variant.id, qty_to_add, product.price_for(variant))
            outcome.items_added += 1

            if qty_to_add < requested:
                outcome.items_partially_added += 1
                outcome.reasons.append(
                    f"'{name}': only {qty_to_add} of {requested} added (limited stock)"
                )

        logger.info(
            "Reorder planned",
            order_number=order.order_number,
            added=outcome.items_added,
            skipped=outcome.items_skipped,
        )
        return outcome
