"""Domain service: invoice number generation.

Format: prefix + UTC timestamp ``YYYYMMDDHHMMSS`` + a random 3-digit
suffix (100-999) to tell apart sales rung up in the same second.

Uniqueness is best effort only.  Two terminals settling in the same
second can draw the same suffix, so the payment store is responsible
for rejecting duplicates; a rejected sale is simply confirmed again and
gets a fresh number.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import datetime, timezone

DEFAULT_INVOICE_PREFIX = "HD"
_TIMESTAMP_WIDTH = 14


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InvoiceNumberGenerator:

    def __init__(
        self,
        prefix: str = DEFAULT_INVOICE_PREFIX,
        clock: Callable[[], datetime] = _utc_now,
        rng: random.Random | None = None,
    ) -> None:
        self._prefix = prefix
        self._clock = clock
        self._rng = rng or random.Random()

    def next_number(self) -> str:
        now = self._clock().astimezone(timezone.utc)
        compact = "".join(ch for ch in now.isoformat() if ch.isdigit())
        suffix = self._rng.randint(100, 999)
        return f"{self._prefix}{compact[:_TIMESTAMP_WIDTH]}{suffix}"
