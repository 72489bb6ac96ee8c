"""Unit tests for the CartStore domain service."""

import pytest

from storefront.domain.exceptions import (
    CartNotFound,
    InsufficientStock,
    NoAvailableVariant,
    ProductUnavailable,
    ValidationError,
    VariantUnavailable,
)
from storefront.domain.model.value_objects import Money, OwnerKey
from storefront.domain.service.cart_store import CartStore
from tests.fakes import (
    FakeCartRepository,
    FakeCatalogReader,
    FakeStockLedger,
    make_product,
)

OWNER = OwnerKey.user("u1")


def _setup(stock: dict[str, int] | None = None):
    catalog = FakeCatalogReader([
        make_product("p1", "T-Shirt", "20.00", [("v1", "0.00"), ("v2", "2.50")]),
    ])
    ledger = FakeStockLedger(stock if stock is not None else {"v1": 5, "v2": 5})
    cart_repo = FakeCartRepository()
    return CartStore(cart_repo, catalog, ledger), cart_repo, catalog, ledger


class TestResolveVariant:

    def test_defaults_to_first_active_variant(self):
        store, *_ = _setup()
        _, variant = store.resolve_variant("p1", None)
        assert variant.id == "v1"

    def test_unknown_product(self):
        store, *_ = _setup()
        with pytest.raises(ProductUnavailable):
            store.resolve_variant("nope", None)

    def test_inactive_product(self):
        store, _, catalog, _ = _setup()
        catalog.put(make_product("p1", is_active=False))
        with pytest.raises(ProductUnavailable):
            store.resolve_variant("p1", None)

    def test_unknown_variant(self):
        store, *_ = _setup()
        with pytest.raises(VariantUnavailable):
            store.resolve_variant("p1", "v9")

    def test_no_active_variants(self):
        store, _, catalog, _ = _setup()
        catalog.put(make_product("p1", variants=[]))
        with pytest.raises(NoAvailableVariant):
            store.resolve_variant("p1", None)


class TestAddItem:

    def test_captures_base_plus_adjustment(self):
        store, cart_repo, _, _ = _setup()
        cart = store.get_or_create(OWNER)
        item = store.add_item(cart, "p1", "v2", 2)
        assert item.unit_price == Money.of("22.50")
        assert cart_repo.get_by_owner(OWNER).total_items == 2

    def test_stock_check_covers_quantity_already_in_cart(self):
        store, *_ = _setup()
        cart = store.get_or_create(OWNER)
        store.add_item(cart, "p1", "v1", 3)
        with pytest.raises(InsufficientStock, match="Cannot add more items. Only 5 available."):
            store.add_item(cart, "p1", "v1", 3)

    def test_first_add_over_stock(self):
        store, *_ = _setup({"v1": 2})
        cart = store.get_or_create(OWNER)
        with pytest.raises(InsufficientStock, match="Only 2 items available in stock.") as exc_info:
            store.add_item(cart, "p1", "v1", 3)
        assert exc_info.value.available == 2

    @pytest.mark.parametrize("qty", [0, 101])
    def test_quantity_bounds(self, qty):
        store, *_ = _setup()
        with pytest.raises(ValidationError):
            store.add_item(store.get_or_create(OWNER), "p1", "v1", qty)

    def test_get_or_create_does_not_persist(self):
        store, cart_repo, _, _ = _setup()
        store.get_or_create(OWNER)
        assert cart_repo.count() == 0


class TestUpdateItemQuantity:

    def test_absolute_stock_check(self):
        store, cart_repo, _, _ = _setup()
        cart = store.get_or_create(OWNER)
        item = store.add_item(cart, "p1", "v1", 3)

        store.update_item_quantity(cart, item.id, 5)
        assert cart.get_item(item.id).quantity.value == 5

        with pytest.raises(InsufficientStock) as exc_info:
            store.update_item_quantity(cart, item.id, 6)
        assert exc_info.value.available == 5

    def test_zero_removes(self):
        store, cart_repo, _, _ = _setup()
        cart = store.get_or_create(OWNER)
        item = store.add_item(cart, "p1", "v1", 1)
        store.update_item_quantity(cart, item.id, 0)
        assert cart_repo.get_by_owner(OWNER).is_empty


class TestLoad:

    def test_missing_cart(self):
        store, *_ = _setup()
        with pytest.raises(CartNotFound):
            store.load(OWNER)
