"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "EUR"
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount in a single currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.  Amounts are kept at full
    precision; ``rounded()`` applies half-up rounding to cents.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def scaled(self, rate: Decimal) -> Money:
        """Multiply by a decimal rate and round half-up to cents."""
        return Money((self.amount * rate).quantize(_CENT, rounding=ROUND_HALF_UP), self.currency)

    def rounded(self) -> Money:
        return Money(self.amount.quantize(_CENT, rounding=ROUND_HALF_UP), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)} {self.currency}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0.00"), currency)


# Bounds enforced at the command boundary for cart quantities.
MIN_LINE_QUANTITY = 1
MAX_LINE_QUANTITY = 100


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that a cart or order line never holds zero or
    negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


def validate_requested_quantity(quantity: int, allow_zero: bool = False) -> int:
    """Check a caller-supplied quantity against the 1..100 command bounds.

    ``allow_zero`` is used by quantity updates where 0 means "remove".
    """
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(f"Quantity must be an integer, got {quantity!r}")
    if allow_zero and quantity == 0:
        return quantity
    if quantity < MIN_LINE_QUANTITY:
        raise ValidationError("Quantity must be greater than 0")
    if quantity > MAX_LINE_QUANTITY:
        raise ValidationError(f"Maximum quantity is {MAX_LINE_QUANTITY}")
    return quantity


@dataclass(frozen=True)
class Address:
    """Postal address captured by value on an order.

    Orders keep their own copy so a later edit in the customer's address
    book never alters a past order.
    """

    first_name: str
    last_name: str
    address_line1: str
    city: str
    postal_code: str
    country: str
    address_line2: str = ""
    state: str = ""
    phone: str = ""

    def __post_init__(self) -> None:
        required = {
            "First name": self.first_name,
            "Last name": self.last_name,
            "Address": self.address_line1,
            "City": self.city,
            "Postal code": self.postal_code,
            "Country": self.country,
        }
        for label, value in required.items():
            if not value or not value.strip():
                raise ValidationError(f"{label} is required")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "phone": self.phone,
        }

    @staticmethod
    def from_dict(raw: dict) -> Address:
        return Address(
            first_name=raw["first_name"],
            last_name=raw["last_name"],
            address_line1=raw["address_line1"],
            address_line2=raw.get("address_line2", ""),
            city=raw["city"],
            state=raw.get("state", ""),
            postal_code=raw["postal_code"],
            country=raw["country"],
            phone=raw.get("phone", ""),
        )


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Trim and lower-case an email, rejecting obviously invalid input."""
    if not email or not email.strip():
        raise ValidationError("Email is required")
    cleaned = email.strip().lower()
    if not _EMAIL_RE.match(cleaned):
        raise ValidationError("Invalid email format")
    return cleaned


@dataclass(frozen=True)
class OwnerKey:
    """The acting identity: an authenticated user or a guest session.

    Exactly one of ``user_id`` / ``guest_session_id`` is set.  Resolving
    the identity is the caller's job; this core only consumes it.
    """

    user_id: str | None = None
    guest_session_id: str | None = None
    is_admin: bool = False

    def __post_init__(self) -> None:
        has_user = bool(self.user_id)
        has_guest = bool(self.guest_session_id)
        if has_user == has_guest:
            raise ValidationError(
                "Owner must be exactly one of a user id or a guest session id"
            )

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @staticmethod
    def user(user_id: str, is_admin: bool = False) -> OwnerKey:
        return OwnerKey(user_id=user_id, is_admin=is_admin)

    @staticmethod
    def guest(session_id: str) -> OwnerKey:
        return OwnerKey(guest_session_id=session_id)

    def __str__(self) -> str:
        if self.user_id is not None:
            return f"user:{self.user_id}"
        return f"guest:{self.guest_session_id}"
