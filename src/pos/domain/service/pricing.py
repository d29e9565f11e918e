"""Domain service: money arithmetic for cart lines.

Quantities for weighed goods are fractional, prices are whole currency
units.  Two-stage rounding keeps every line total integral:

  1. the quantity is snapped to the configured decimal resolution
     (``10 ** -qty_precision``), then
  2. ``unit_price x quantity`` is rounded to whole currency units using
     the configured rounding mode and clamped at zero.

Cart totals are sums of already-rounded line totals, never a rounded sum
of raw products, so rounding is per line and not distributive.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money


class RoundingMode(Enum):
    FLOOR = "floor"
    NEAREST = "nearest"

    @staticmethod
    def parse(text: str) -> RoundingMode:
        try:
            return RoundingMode(text.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(mode.value for mode in RoundingMode)
            raise ValidationError(
                f"Unknown money rounding mode {text!r} (expected one of: {allowed})"
            ) from exc


DEFAULT_QTY_PRECISION = 3
DEFAULT_MAX_EDITABLE_PRICE = 9_999_999


@dataclass(frozen=True)
class PricingPolicy:
    """Precision and rounding rules shared by the validator, cart and settlement."""

    qty_precision: int = DEFAULT_QTY_PRECISION
    rounding_mode: RoundingMode = RoundingMode.FLOOR
    max_editable_price: int = DEFAULT_MAX_EDITABLE_PRICE

    def __post_init__(self) -> None:
        if self.qty_precision < 0:
            raise ValidationError("Quantity precision cannot be negative")
        if self.max_editable_price < 0:
            raise ValidationError("Maximum editable price cannot be negative")

    @property
    def precision_factor(self) -> int:
        return 10 ** self.qty_precision

    @property
    def decimal_step(self) -> Decimal:
        return Decimal(1).scaleb(-self.qty_precision)

    # --- Quantities -----------------------------------------------------------

    def snap_quantity(self, qty: Decimal | int) -> Decimal:
        """Round *qty* to the nearest multiple of the decimal step."""
        return _to_decimal(qty).quantize(self.decimal_step, rounding=ROUND_HALF_UP)

    def step_for(self, allow_decimal: bool) -> Decimal:
        return self.decimal_step if allow_decimal else Decimal(1)

    def normalize_quantity(self, qty: Decimal | int, allow_decimal: bool) -> Decimal:
        """Force *qty* onto the line's grid: whole units or decimal steps, never below one step."""
        qty = _to_decimal(qty)
        if allow_decimal:
            return self.snap_quantity(max(self.decimal_step, qty))
        return max(Decimal(1), qty.to_integral_value(rounding=ROUND_HALF_UP))

    def quantity_after_delta(
        self, qty: Decimal, delta_steps: int, allow_decimal: bool
    ) -> Decimal | None:
        """Apply *delta_steps* steps to *qty*.

        Returns None when the result drops to zero or below, meaning the
        line should be removed.
        """
        raw = qty + delta_steps * self.step_for(allow_decimal)
        if raw <= 0:
            return None
        return self.normalize_quantity(raw, allow_decimal)

    def format_quantity(self, qty: Decimal | int, allow_decimal: bool) -> str:
        if not allow_decimal:
            whole = _to_decimal(qty).to_integral_value(rounding=ROUND_HALF_UP)
            return str(max(1, int(whole)))
        text = f"{self.snap_quantity(qty):.{self.qty_precision}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    # --- Money ----------------------------------------------------------------

    def round_money(self, raw: Decimal) -> int:
        if self.rounding_mode is RoundingMode.NEAREST:
            rounded = raw.to_integral_value(rounding=ROUND_HALF_UP)
        else:
            rounded = raw.to_integral_value(rounding=ROUND_FLOOR)
        return max(0, int(rounded))

    def line_subtotal(self, unit_price: Money, qty: Decimal | int) -> Money:
        scaled_qty = (_to_decimal(qty) * self.precision_factor).to_integral_value(
            rounding=ROUND_HALF_UP
        )
        raw = Decimal(unit_price.amount) * scaled_qty / self.precision_factor
        return Money(self.round_money(raw), unit_price.currency)


def _to_decimal(value: Decimal | int) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
