"""Unit tests for value objects: Money, Quantity, Address, OwnerKey."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import (
    Address,
    Money,
    OwnerKey,
    Quantity,
    normalize_email,
    validate_requested_quantity,
)


class TestMoney:

    def test_defaults_to_euro(self):
        assert Money.of("10.00").currency == "EUR"

    def test_addition(self):
        assert Money.of("10.00") + Money.of("5.50") == Money.of("15.50")

    def test_multiplication_by_int(self):
        assert Money.of("15.99") * 3 == Money.of("47.97")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1.00") * 1.5

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1.00"))

    def test_subtraction_below_zero_rejected(self):
        with pytest.raises(ValidationError):
            Money.of("1.00") - Money.of("2.00")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("1.00", "EUR") + Money.of("1.00", "USD")

    def test_scaled_rounds_half_up(self):
        assert Money.of("0.125").scaled(Decimal("1")) == Money.of("0.13")
        assert Money.of("100.00").scaled(Decimal("0.20")) == Money.of("20.00")

    def test_str(self):
        assert str(Money.of("15")) == "15.00 EUR"

    def test_invalid_amount(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError):
            Quantity(value)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            Quantity(True)


class TestRequestedQuantity:

    def test_bounds(self):
        assert validate_requested_quantity(1) == 1
        assert validate_requested_quantity(100) == 100

    def test_above_maximum(self):
        with pytest.raises(ValidationError, match="Maximum quantity is 100"):
            validate_requested_quantity(101)

    def test_zero_only_when_allowed(self):
        with pytest.raises(ValidationError):
            validate_requested_quantity(0)
        assert validate_requested_quantity(0, allow_zero=True) == 0


class TestAddress:

    def test_required_fields(self):
        with pytest.raises(ValidationError, match="City is required"):
            Address("Ada", "Lovelace", "1 Main St", " ", "12345", "DE")

    def test_dict_round_trip(self):
        address = Address("Ada", "Lovelace", "1 Main St", "Berlin", "10115", "DE", state="BE")
        assert Address.from_dict(address.to_dict()) == address
        assert address.full_name == "Ada Lovelace"


class TestEmail:

    def test_normalised(self):
        assert normalize_email("  Ada@Example.COM ") == "ada@example.com"

    @pytest.mark.parametrize("email", ["", "ada", "ada@", "ada@example"])
    def test_invalid(self, email):
        with pytest.raises(ValidationError):
            normalize_email(email)


class TestOwnerKey:

    def test_user(self):
        owner = OwnerKey.user("u1")
        assert not owner.is_guest
        assert str(owner) == "user:u1"

    def test_guest(self):
        owner = OwnerKey.guest("s1")
        assert owner.is_guest
        assert not owner.is_admin

    def test_exactly_one_identity(self):
        with pytest.raises(ValidationError):
            OwnerKey()
        with pytest.raises(ValidationError):
            OwnerKey(user_id="u1", guest_session_id="s1")
