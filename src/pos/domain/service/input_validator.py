"""Domain service: turn sanitized field text into a value or a field error.

Validators are pure.  They return a ``FieldResult`` instead of raising,
because a bad field is an ordinary, recoverable state of a cart line.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pos.domain.model.value_objects import FieldResult
from pos.domain.service.pricing import PricingPolicy

QTY_NOT_POSITIVE = "quantity must be > 0"
QTY_INVALID = "invalid quantity"
QTY_INTEGERS_ONLY = "integers only"
QTY_TOO_PRECISE = "too many decimal digits"

PRICE_NOT_A_NUMBER = "price must be a number"
PRICE_INVALID = "invalid price"
PRICE_TOO_HIGH = "exceeds maximum"

_DEFAULT_POLICY = PricingPolicy()


def validate_quantity(
    text: str | None,
    allow_decimal: bool,
    policy: PricingPolicy = _DEFAULT_POLICY,
) -> FieldResult:
    if text is None or text == "" or text == ".":
        return FieldResult(Decimal(0), QTY_NOT_POSITIVE)

    numeric = _parse(text)
    if numeric is None:
        return FieldResult(Decimal(0), QTY_INVALID)
    if numeric <= 0:
        return FieldResult(Decimal(0), QTY_NOT_POSITIVE)
    if not allow_decimal and numeric != numeric.to_integral_value():
        return FieldResult(Decimal(0), QTY_INTEGERS_ONLY)

    _, _, fraction = text.partition(".")
    if allow_decimal and len(fraction) > policy.qty_precision:
        return FieldResult(Decimal(0), QTY_TOO_PRECISE)

    if not allow_decimal:
        return FieldResult(numeric.to_integral_value())
    return FieldResult(policy.snap_quantity(numeric))


def validate_price(
    text: str | None,
    policy: PricingPolicy = _DEFAULT_POLICY,
) -> FieldResult:
    """Empty text is valid and means "no override" (value None)."""
    if text is None or text == "":
        return FieldResult(None)

    numeric = _parse(text)
    if numeric is None:
        return FieldResult(None, PRICE_NOT_A_NUMBER)
    if numeric < 0 or numeric != numeric.to_integral_value():
        return FieldResult(None, PRICE_INVALID)
    if numeric > policy.max_editable_price:
        return FieldResult(None, PRICE_TOO_HIGH)
    return FieldResult(int(numeric))


def _parse(text: str) -> Decimal | None:
    try:
        numeric = Decimal(text.strip())
    except InvalidOperation:
        return None
    return numeric if numeric.is_finite() else None
