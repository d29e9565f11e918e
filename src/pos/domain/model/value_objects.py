"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from pos.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Monetary amount in whole currency units.

    The store sells in a currency without minor units, so amounts are
    plain ints. Fractional arithmetic (price x weighed quantity) happens
    in the pricing policy, which always hands back whole units.
    """

    amount: int
    currency: str = "VND"

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an int, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
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
        if result < 0:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

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

    def saturating_sub(self, other: Money) -> Money:
        """Subtract, clamping at zero instead of raising."""
        self._assert_same_currency(other)
        return Money(max(self.amount - other.amount, 0), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:,} {self.currency}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero(currency: str = "VND") -> Money:
        return Money(0, currency)

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = "VND") -> Money:
        """Convenient factory that coerces to whole currency units safely."""
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite() or value != value.to_integral_value():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return Money(int(value), currency)


@dataclass(frozen=True)
class FieldResult:
    """Outcome of validating one text field: a value, or an error message."""

    value: Any
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
