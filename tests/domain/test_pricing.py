"""Unit tests for the pricing policy (money arithmetic)."""

from decimal import Decimal

import pytest

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money
from pos.domain.service.input_validator import validate_quantity
from pos.domain.service.pricing import PricingPolicy, RoundingMode

FLOOR = PricingPolicy()
NEAREST = PricingPolicy(rounding_mode=RoundingMode.NEAREST)


class TestLineSubtotal:

    def test_whole_quantity(self):
        assert FLOOR.line_subtotal(Money(39000), Decimal(2)) == Money(78000)

    def test_floor_rounding(self):
        assert FLOOR.line_subtotal(Money(999), Decimal("0.5")) == Money(499)

    def test_nearest_rounding(self):
        assert NEAREST.line_subtotal(Money(999), Decimal("0.5")) == Money(500)

    def test_quantity_snapped_before_multiplying(self):
        # 0.3335 snaps to 0.334 before the price is applied.
        assert FLOOR.line_subtotal(Money(1000), Decimal("0.3335")) == Money(334)

    def test_zero_price(self):
        assert FLOOR.line_subtotal(Money(0), Decimal("1.5")) == Money(0)

    def test_always_whole_units(self):
        result = FLOOR.line_subtotal(Money(120000), Decimal("0.257"))
        assert isinstance(result.amount, int)
        assert result == Money(30840)

    def test_rounding_is_per_line_not_distributive(self):
        price = Money(999)
        half = Decimal("0.5")
        split = FLOOR.line_subtotal(price, half) + FLOOR.line_subtotal(price, half)
        combined = FLOOR.line_subtotal(price, half + half)
        assert split == Money(998)
        assert combined == Money(999)
        assert split != combined

    def test_round_money_clamps_at_zero(self):
        assert FLOOR.round_money(Decimal("-3.7")) == 0
        assert NEAREST.round_money(Decimal("-3.7")) == 0


class TestQuantities:

    def test_precision_factor_and_step(self):
        assert FLOOR.precision_factor == 1000
        assert FLOOR.decimal_step == Decimal("0.001")

    def test_snap_quantity(self):
        assert FLOOR.snap_quantity(Decimal("1.23456")) == Decimal("1.235")

    def test_normalize_whole_rounds_half_up_with_minimum_one(self):
        assert FLOOR.normalize_quantity(Decimal("2.5"), allow_decimal=False) == 3
        assert FLOOR.normalize_quantity(Decimal("0"), allow_decimal=False) == 1

    def test_normalize_decimal_minimum_one_step(self):
        assert FLOOR.normalize_quantity(Decimal("0.0001"), allow_decimal=True) == Decimal("0.001")

    def test_delta_on_whole_line(self):
        assert FLOOR.quantity_after_delta(Decimal(2), 1, allow_decimal=False) == 3
        assert FLOOR.quantity_after_delta(Decimal(1), -1, allow_decimal=False) is None

    def test_delta_on_decimal_line(self):
        assert FLOOR.quantity_after_delta(Decimal("1.5"), 1, True) == Decimal("1.501")
        assert FLOOR.quantity_after_delta(Decimal("0.001"), -1, True) is None

    def test_format_decimal_strips_trailing_zeros(self):
        assert FLOOR.format_quantity(Decimal("1.500"), allow_decimal=True) == "1.5"
        assert FLOOR.format_quantity(Decimal("2"), allow_decimal=True) == "2"
        assert FLOOR.format_quantity(Decimal("0.125"), allow_decimal=True) == "0.125"

    def test_format_whole(self):
        assert FLOOR.format_quantity(Decimal(2), allow_decimal=False) == "2"
        assert FLOOR.format_quantity(Decimal(0), allow_decimal=False) == "1"

    @pytest.mark.parametrize("qty", ["1.5", "2", "0.125", "10.01"])
    def test_format_parse_format_is_stable(self, qty):
        text = FLOOR.format_quantity(Decimal(qty), allow_decimal=True)
        reparsed = validate_quantity(text, allow_decimal=True, policy=FLOOR).value
        assert FLOOR.format_quantity(reparsed, allow_decimal=True) == text


class TestPolicyConfiguration:

    def test_parse_rounding_mode(self):
        assert RoundingMode.parse("NEAREST") is RoundingMode.NEAREST
        assert RoundingMode.parse(" floor ") is RoundingMode.FLOOR

    def test_unknown_rounding_mode_rejected(self):
        with pytest.raises(ValidationError, match="Unknown money rounding mode"):
            RoundingMode.parse("ceil")

    def test_negative_precision_rejected(self):
        with pytest.raises(ValidationError, match="precision"):
            PricingPolicy(qty_precision=-1)
