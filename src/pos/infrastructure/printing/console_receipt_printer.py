"""Plain-text receipt printer that writes to the terminal."""

from __future__ import annotations

from decimal import Decimal

import click

from pos.domain.model.payment import Receipt
from pos.domain.model.value_objects import Money
from pos.domain.repository.receipt_printer import ReceiptPrinter

# Characters per line for common thermal paper rolls.
COLUMNS_BY_PAPER_WIDTH = {"58mm": 32, "80mm": 48}


class ConsoleReceiptPrinter(ReceiptPrinter):

    def print_receipt(self, receipt: Receipt) -> None:
        for line in render_receipt(receipt):
            click.echo(line)


def render_receipt(receipt: Receipt) -> list[str]:
    width = COLUMNS_BY_PAPER_WIDTH.get(receipt.paper_width, 32)
    store = receipt.store
    payment = receipt.payment
    divider = "-" * width

    lines = [store.name.upper().center(width)]
    lines += [text.center(width) for text in (store.address, store.phone) if text]
    lines.append(divider)
    lines.append(f"Invoice: {payment.invoice_number}")
    lines.append(f"Date:    {payment.created_at.strftime('%Y-%m-%d %H:%M')}")
    lines.append(f"Cashier: {payment.cashier_name}")
    lines.append(divider)

    for item in payment.items:
        lines.append(item.name[:width])
        price = _amount(item.effective_unit_price)
        if item.edited_unit_price is not None:
            price += f" (was {_amount(item.base_unit_price)})"
        lines.append(_row(f"  {_qty(item.quantity)} x {price}", _amount(item.line_subtotal), width))
        if item.line_discount.amount:
            lines.append(_row("  Discount", f"-{_amount(item.line_discount)}", width))

    lines.append(divider)
    lines.append(_row("Subtotal", _amount(payment.subtotal), width))
    if payment.discount.amount:
        lines.append(_row("Discount", f"-{_amount(payment.discount)}", width))
    if payment.tax.amount:
        lines.append(_row("Tax", _amount(payment.tax), width))
    lines.append(_row("TOTAL", _amount(payment.total), width))
    lines.append(_row("Cash", _amount(payment.paid_cash), width))
    lines.append(_row("Change", _amount(payment.change_due), width))
    if payment.note:
        lines.append(divider)
        lines.append(f"Note: {payment.note}")
    lines.append(divider)
    lines.append(store.footer.center(width))
    return lines


def _row(label: str, value: str, width: int) -> str:
    gap = max(1, width - len(label) - len(value))
    return f"{label}{' ' * gap}{value}"


def _amount(money: Money) -> str:
    return f"{money.amount:,}"


def _qty(qty: Decimal) -> str:
    return format(qty.normalize(), "f")
