"""Unit tests for turning a cart into an order, including compensation."""

import threading
from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import (
    CartEmpty,
    ConcurrencyConflict,
    InsufficientStock,
    OperationCancelled,
    ProductUnavailable,
    VariantUnavailable,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import Address, Money, OwnerKey
from storefront.domain.service.order_factory import CheckoutDetails, OrderFactory
from storefront.domain.service.order_numbering import OrderNumberGenerator
from tests.fakes import (
    FakeCartRepository,
    FakeCatalogReader,
    FakeOrderRepository,
    FakeOrderSequence,
    FakeStockLedger,
    make_product,
)

OWNER = OwnerKey.user("u1")
DETAILS = CheckoutDetails(
    customer_email="ada@example.com",
    shipping_address=Address("Ada", "Lovelace", "1 Main St", "Berlin", "10115", "DE"),
    shipping_method="express",
)


class FailingOrderRepository(FakeOrderRepository):

    def save(self, order: Order) -> None:
        raise RuntimeError("disk full")


class StaleCartRepository(FakeCartRepository):
    """Simulates another writer touching the cart between load and clear."""

    def save(self, cart: Cart) -> None:
        if cart.is_empty:
            raise ConcurrencyConflict("cart changed")
        super().save(cart)


def _setup(order_repo=None, cart_repo=None, stock=None):
    catalog = FakeCatalogReader([
        make_product("p1", "T-Shirt", "25.00", [("v1", "0.00")]),
        make_product("p2", "Mug", "10.00", [("v2", "0.00")]),
    ])
    ledger = FakeStockLedger(stock if stock is not None else {"v1": 10, "v2": 10})
    cart_repo = cart_repo or FakeCartRepository()
    order_repo = order_repo or FakeOrderRepository()
    numbering = OrderNumberGenerator(
        FakeOrderSequence(), lambda: datetime(2026, 3, 1, tzinfo=timezone.utc)
    )
    factory = OrderFactory(cart_repo, order_repo, catalog, ledger, numbering, "EUR")
    return factory, cart_repo, order_repo, catalog, ledger


def _fill_cart(cart_repo, lines):
    cart = Cart.for_owner(OWNER)
    for pid, vid, qty, price in lines:
        cart.add_line(pid, vid, qty, Money.of(price))
    cart_repo.save(cart)


class TestCreateOrderHappyPath:

    def test_express_pricing(self):
        factory, cart_repo, _, _, _ = _setup()
        _fill_cart(cart_repo, [("p1", "v1", 4, "25.00")])

        order = factory.create_order(OWNER, DETAILS)

        assert order.subtotal == Money.of("100.00")
        assert order.shipping_cost == Money.of("15.99")
        assert order.tax_amount == Money.of("20.00")
        assert order.total == Money.of("135.99")
        assert order.order_number == "ORD-2026-000001"
        assert order.status == OrderStatus.PENDING

    def test_reserves_exactly_the_ordered_quantity_and_clears_cart(self):
        factory, cart_repo, order_repo, _, ledger = _setup()
        _fill_cart(cart_repo, [("p1", "v1", 3, "25.00"), ("p2", "v2", 2, "10.00")])

        order = factory.create_order(OWNER, DETAILS)

        assert ledger.current_stock("v1") == 7
        assert ledger.current_stock("v2") == 8
        assert order.total_quantity == 5
        assert cart_repo.get_by_owner(OWNER).is_empty
        assert order_repo.get_by_id(order.id) is not None

    def test_snapshots_cart_price_not_catalog_price(self):
        factory, cart_repo, _, catalog, _ = _setup()
        _fill_cart(cart_repo, [("p1", "v1", 1, "19.00")])

        order = factory.create_order(OWNER, DETAILS)

        assert order.items[0].unit_price == Money.of("19.00")
        assert order.items[0].sku == "SKU-v1"


class TestCreateOrderRejections:

    def test_empty_cart(self):
        factory, *_ = _setup()
        with pytest.raises(CartEmpty):
            factory.create_order(OWNER, DETAILS)

    def test_deactivated_product(self):
        factory, cart_repo, _, catalog, ledger = _setup()
        _fill_cart(cart_repo, [("p1", "v1", 1, "25.00")])
        catalog.put(make_product("p1", "T-Shirt", "25.00", [("v1", "0.00")], is_active=False))

        with pytest.raises(ProductUnavailable):
            factory.create_order(OWNER, DETAILS)
        assert ledger.current_stock("v1") == 10

    def test_removed_variant(self):
        factory, cart_repo, _, catalog, _ = _setup()
        _fill_cart(cart_repo, [("p1", "v1", 1, "25.00")])
        catalog.put(make_product("p1", "T-Shirt", "25.00", [("v9", "0.00")]))

        with pytest.raises(VariantUnavailable):
            factory.create_order(OWNER, DETAILS)

    def test_insufficient_stock_leaves_everything_untouched(self):
        factory, cart_repo, order_repo, _, ledger = _setup(stock={"v1": 10, "v2": 1})
        _fill_cart(cart_repo, [("p1", "v1", 2, "25.00"), ("p2", "v2", 2, "10.00")])

        with pytest.raises(InsufficientStock):
            factory.create_order(OWNER, DETAILS)

        assert ledger.current_stock("v1") == 10
        assert order_repo.count() == 0
        assert cart_repo.get_by_owner(OWNER).total_items == 4


class TestCreateOrderCompensation:

    def test_order_save_failure_releases_stock(self):
        factory, cart_repo, _, _, ledger = _setup(order_repo=FailingOrderRepository())
        _fill_cart(cart_repo, [("p1", "v1", 3, "25.00")])

        with pytest.raises(RuntimeError, match="disk full"):
            factory.create_order(OWNER, DETAILS)

        assert ledger.current_stock("v1") == 10
        assert cart_repo.get_by_owner(OWNER).total_items == 3

    def test_cart_conflict_removes_order_and_releases_stock(self):
        factory, cart_repo, order_repo, _, ledger = _setup(cart_repo=StaleCartRepository())
        _fill_cart(cart_repo, [("p1", "v1", 3, "25.00")])

        with pytest.raises(ConcurrencyConflict):
            factory.create_order(OWNER, DETAILS)

        assert order_repo.count() == 0
        assert ledger.current_stock("v1") == 10

    def test_cancellation_token(self):
        factory, cart_repo, order_repo, _, ledger = _setup()
        _fill_cart(cart_repo, [("p1", "v1", 3, "25.00")])
        cancelled = threading.Event()
        cancelled.set()

        with pytest.raises(OperationCancelled):
            factory.create_order(OWNER, DETAILS, cancelled)

        assert order_repo.count() == 0
        assert ledger.current_stock("v1") == 10
