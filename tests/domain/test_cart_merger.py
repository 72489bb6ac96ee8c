"""Unit tests for folding a guest cart into a user cart."""

import pytest

from storefront.domain.exceptions import AccessDenied, GuestSessionRequired
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Money, OwnerKey
from storefront.domain.service.cart_merger import CartMerger
from tests.fakes import FakeCartRepository, FakeStockLedger

USER = OwnerKey.user("u1")
GUEST = OwnerKey.guest("sess-1")


def _seed(repo: FakeCartRepository, owner: OwnerKey, lines: list[tuple[str, int]]) -> Cart:
    cart = Cart.for_owner(owner)
    for variant_id, qty in lines:
        cart.add_line("p1", variant_id, qty, Money.of("10.00"))
    repo.save(cart)
    return cart


class TestMerge:

    def test_sums_matching_lines(self):
        repo = FakeCartRepository()
        _seed(repo, USER, [("v1", 1)])
        _seed(repo, GUEST, [("v1", 2), ("v2", 1)])

        merged = CartMerger(repo, FakeStockLedger({"v1": 10, "v2": 10})).merge("sess-1", USER)

        assert merged.quantity_of("p1", "v1") == 3
        assert merged.quantity_of("p1", "v2") == 1
        assert repo.get_by_owner(GUEST) is None

    def test_caps_at_current_stock(self):
        repo = FakeCartRepository()
        _seed(repo, USER, [("v1", 2)])
        _seed(repo, GUEST, [("v1", 3), ("v2", 4)])

        merged = CartMerger(repo, FakeStockLedger({"v1": 4, "v2": 1})).merge("sess-1", USER)

        assert merged.quantity_of("p1", "v1") == 4
        assert merged.quantity_of("p1", "v2") == 1

    def test_out_of_stock_guest_line_is_dropped(self):
        repo = FakeCartRepository()
        _seed(repo, GUEST, [("v1", 2)])
        merged = CartMerger(repo, FakeStockLedger({"v1": 0})).merge("sess-1", USER)
        assert merged.is_empty

    def test_existing_line_over_stock_is_reduced(self):
        repo = FakeCartRepository()
        _seed(repo, USER, [("v1", 5)])
        _seed(repo, GUEST, [("v1", 1)])
        merged = CartMerger(repo, FakeStockLedger({"v1": 0})).merge("sess-1", USER)
        assert merged.find_line("p1", "v1") is None

    def test_second_merge_is_a_no_op(self):
        repo = FakeCartRepository()
        _seed(repo, GUEST, [("v1", 2)])
        merger = CartMerger(repo, FakeStockLedger({"v1": 10}))

        first = merger.merge("sess-1", USER)
        second = merger.merge("sess-1", USER)

        assert second.id == first.id
        assert second.quantity_of("p1", "v1") == 2

    def test_guest_session_required(self):
        with pytest.raises(GuestSessionRequired):
            CartMerger(FakeCartRepository(), FakeStockLedger()).merge("  ", USER)

    def test_guest_cannot_merge(self):
        with pytest.raises(AccessDenied):
            CartMerger(FakeCartRepository(), FakeStockLedger()).merge("sess-1", GUEST)
