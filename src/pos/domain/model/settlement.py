"""Settlement state for the cash-payment step of a sale.

Like the Cart, a Settlement is immutable.  Confirmation is a two-phase
commit: ``begin()`` marks the settlement PENDING while the payment store
is called, then either ``resolve()`` (stored) or ``reject()`` (failed,
back to IDLE with everything else as it was).  While PENDING no second
confirmation can start.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from pos.domain.exceptions import ValidationError
from pos.domain.model.cart import Cart
from pos.domain.model.value_objects import Money
from pos.domain.service.input_sanitizer import sanitize_digits

_LEADING_ZEROS = re.compile(r"^0+(?!$)")

KEY_CLEAR = "clear"
KEY_BACKSPACE = "backspace"


class SettlementStatus(Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"


@dataclass(frozen=True)
class Settlement:
    is_open: bool = False
    cash_text: str = ""
    note: str = ""
    status: SettlementStatus = SettlementStatus.IDLE

    # --- Opening / closing ----------------------------------------------------

    def open(self, cart: Cart) -> Settlement:
        """Open the payment step; does nothing unless the cart is ready to pay."""
        if not cart.is_ready_to_pay:
            return self
        return replace(self, is_open=True)

    def close(self) -> Settlement:
        return replace(self, is_open=False, cash_text="")

    # --- Cash entry -----------------------------------------------------------

    def enter_cash(self, raw: str) -> Settlement:
        return replace(self, cash_text=sanitize_digits(raw))

    def add_cash(self, amount: int) -> Settlement:
        """Quick-add a banknote denomination to the tendered amount."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError(f"Quick-add amount must be a positive integer, got {amount!r}")
        return replace(self, cash_text=str(self.cash_tendered.amount + amount))

    def press_key(self, key: str) -> Settlement:
        """Apply one press of the on-screen keypad."""
        if key == KEY_CLEAR:
            return replace(self, cash_text="")
        if key == KEY_BACKSPACE:
            return replace(self, cash_text=self.cash_text[:-1])
        typed = _LEADING_ZEROS.sub("", self.cash_text + sanitize_digits(key))
        return replace(self, cash_text=typed)

    def with_note(self, note: str) -> Settlement:
        return replace(self, note=note)

    # --- Derived values -------------------------------------------------------

    @property
    def cash_tendered(self) -> Money:
        return Money(int(self.cash_text or "0"))

    @property
    def is_pending(self) -> bool:
        return self.status is SettlementStatus.PENDING

    def change_due(self, total: Money) -> Money:
        return Money(max(self.cash_tendered.amount - total.amount, 0), total.currency)

    def can_confirm(self, cart: Cart) -> bool:
        total = cart.total
        return (
            total.amount > 0
            and self.cash_tendered.amount >= total.amount
            and cart.is_ready_to_pay
            and not self.is_pending
        )

    # --- Two-phase commit -----------------------------------------------------

    def begin(self) -> Settlement:
        return replace(self, status=SettlementStatus.PENDING)

    def resolve(self) -> Settlement:
        """The payment was stored: close and forget the note."""
        return Settlement()

    def reject(self) -> Settlement:
        return replace(self, status=SettlementStatus.IDLE)
