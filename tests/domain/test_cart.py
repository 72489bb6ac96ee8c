"""Unit tests for the Cart aggregate."""

import pytest

from storefront.domain.exceptions import ItemNotFound, ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Money, OwnerKey


def _cart() -> Cart:
    return Cart.for_owner(OwnerKey.user("u1"))


class TestCartLines:

    def test_new_cart_is_empty(self):
        cart = _cart()
        assert cart.is_empty
        assert cart.version == 0
        assert not cart.is_guest_cart

    def test_add_line_merges_same_variant(self):
        cart = _cart()
        first = cart.add_line("p1", "v1", 2, Money.of("10.00"))
        second = cart.add_line("p1", "v1", 3, Money.of("12.00"))
        assert first.id == second.id
        assert len(cart.items) == 1
        assert cart.quantity_of("p1", "v1") == 5

    def test_merged_line_keeps_captured_price(self):
        cart = _cart()
        cart.add_line("p1", "v1", 1, Money.of("10.00"))
        cart.add_line("p1", "v1", 1, Money.of("12.00"))
        assert cart.items[0].unit_price == Money.of("10.00")

    def test_different_variants_are_separate_lines(self):
        cart = _cart()
        cart.add_line("p1", "v1", 1, Money.of("10.00"))
        cart.add_line("p1", "v2", 1, Money.of("10.00"))
        assert len(cart.items) == 2

    def test_subtotal_and_item_count(self):
        cart = _cart()
        cart.add_line("p1", "v1", 2, Money.of("10.00"))
        cart.add_line("p2", "v2", 1, Money.of("5.50"))
        assert cart.subtotal("EUR") == Money.of("25.50")
        assert cart.total_items == 3


class TestCartQuantityChanges:

    def test_set_quantity(self):
        cart = _cart()
        item = cart.add_line("p1", "v1", 2, Money.of("10.00"))
        cart.set_item_quantity(item.id, 4)
        assert cart.get_item(item.id).quantity.value == 4

    def test_zero_removes_line(self):
        cart = _cart()
        item = cart.add_line("p1", "v1", 2, Money.of("10.00"))
        cart.set_item_quantity(item.id, 0)
        assert cart.is_empty

    def test_negative_rejected(self):
        cart = _cart()
        item = cart.add_line("p1", "v1", 2, Money.of("10.00"))
        with pytest.raises(ValidationError):
            cart.set_item_quantity(item.id, -1)

    def test_unknown_item(self):
        with pytest.raises(ItemNotFound):
            _cart().remove_item("nope")

    def test_clear(self):
        cart = _cart()
        cart.add_line("p1", "v1", 2, Money.of("10.00"))
        cart.clear()
        assert cart.is_empty
