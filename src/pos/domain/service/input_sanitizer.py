"""Domain service: sanitize raw keyboard/touch text for numeric fields.

Sanitizers never reject input.  Characters that cannot belong to the
field are silently dropped so the operator only ever sees text that is
at least a partial number.
"""

from __future__ import annotations

import re

from pos.domain.service.pricing import DEFAULT_QTY_PRECISION

_NON_DIGIT = re.compile(r"\D")
_NON_DECIMAL = re.compile(r"[^0-9.]")


def sanitize_digits(raw: str | None) -> str:
    """Keep digits only."""
    return _NON_DIGIT.sub("", raw or "")


def sanitize_price(raw: str | None) -> str:
    """Prices are whole currency units, so only digits survive."""
    return sanitize_digits(raw)


def sanitize_quantity(
    raw: str | None,
    allow_decimal: bool,
    precision: int = DEFAULT_QTY_PRECISION,
) -> str:
    """Clean quantity text for a whole-unit or a decimal line.

    For decimal lines extra dots are folded into the first one
    (``"1.2.3"`` -> ``"1.23"``), the fraction is cut to *precision*
    digits, and a leading ``"."`` is kept when only a fraction was typed.
    """
    if not allow_decimal:
        return sanitize_digits(raw)

    sanitized = _NON_DECIMAL.sub("", raw or "")
    head, dot, tail = sanitized.partition(".")
    fraction = tail.replace(".", "")[:precision] if dot else ""

    if head == "" and fraction:
        return f".{fraction}"
    if fraction:
        return f"{head}.{fraction}"
    # "12." is a number still being typed; keep the dot for the next key.
    return f"{head}{dot}"
