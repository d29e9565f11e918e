"""Payment aggregate, the finalized record of a sale.

A ``PaymentDraft`` is built once, at confirm time, from the cart and the
settlement.  The payment store turns it into a canonical
``PaymentRecord`` (adding an id and timestamp); after that neither is
ever mutated again.  A ``Receipt`` wraps the record for printing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pos.domain.exceptions import ValidationError
from pos.domain.model.cart import Cart
from pos.domain.model.settlement import Settlement
from pos.domain.model.value_objects import Money

DEFAULT_PAPER_WIDTH = "58mm"


@dataclass(frozen=True)
class PaymentLine:
    """Snapshot of one cart line at confirm time."""

    product_id: str | None
    name: str
    quantity: Decimal
    base_unit_price: Money
    edited_unit_price: Money | None
    effective_unit_price: Money
    line_subtotal: Money
    line_discount: Money


@dataclass(frozen=True)
class PaymentDraft:
    invoice_number: str
    cashier_name: str
    items: tuple[PaymentLine, ...]
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    paid_cash: Money
    change_due: Money
    note: str | None = None

    @staticmethod
    def from_cart(
        cart: Cart,
        settlement: Settlement,
        cashier_name: str,
        invoice_number: str,
    ) -> PaymentDraft:
        if cart.is_empty:
            raise ValidationError("Payment must contain at least one item")

        lines = tuple(
            PaymentLine(
                product_id=item.product_id,
                name=item.name,
                quantity=item.qty,
                base_unit_price=item.base_unit_price,
                edited_unit_price=item.edited_unit_price,
                effective_unit_price=item.effective_unit_price,
                line_subtotal=cart.line_subtotal(item),
                line_discount=Money.zero(item.base_unit_price.currency),
            )
            for item in cart.items
        )
        total = cart.total
        return PaymentDraft(
            invoice_number=invoice_number,
            cashier_name=cashier_name,
            items=lines,
            subtotal=cart.subtotal,
            tax=cart.tax,
            discount=cart.discount,
            total=total,
            paid_cash=settlement.cash_tendered,
            change_due=settlement.change_due(total),
            note=normalize_note(settlement.note),
        )


@dataclass(frozen=True)
class PaymentRecord:
    """A stored payment, as returned by the payment store."""

    id: int
    invoice_number: str
    cashier_name: str
    items: tuple[PaymentLine, ...]
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    paid_cash: Money
    change_due: Money
    note: str | None
    created_at: datetime

    @staticmethod
    def from_draft(draft: PaymentDraft, record_id: int, created_at: datetime) -> PaymentRecord:
        return PaymentRecord(
            id=record_id,
            invoice_number=draft.invoice_number,
            cashier_name=draft.cashier_name,
            items=draft.items,
            subtotal=draft.subtotal,
            tax=draft.tax,
            discount=draft.discount,
            total=draft.total,
            paid_cash=draft.paid_cash,
            change_due=draft.change_due,
            note=draft.note,
            created_at=created_at,
        )


@dataclass(frozen=True)
class StoreProfile:
    name: str
    address: str = ""
    phone: str = ""
    footer: str = "Thank you and see you again!"


@dataclass(frozen=True)
class Receipt:
    """Everything the printer needs; all money fields are final whole amounts."""

    store: StoreProfile
    payment: PaymentRecord
    paper_width: str = DEFAULT_PAPER_WIDTH


def normalize_note(note: str | None) -> str | None:
    if note is None:
        return None
    cleaned = note.strip()
    return cleaned or None
