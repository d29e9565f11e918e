"""Application service: Show Payment use case (query)."""

from __future__ import annotations

from decimal import Decimal

from pos.application.dto import PaymentDTO, PaymentLineDTO
from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.payment import PaymentRecord
from pos.domain.repository.payment_repository import PaymentRepository


class ShowPaymentHandler:

    def __init__(self, payment_repo: PaymentRepository) -> None:
        self._payment_repo = payment_repo

    def handle(self, invoice_number: str) -> PaymentDTO:
        payment = self._payment_repo.get_by_invoice_number(invoice_number.strip())
        if payment is None:
            raise EntityNotFoundError(f"Invoice '{invoice_number}' not found")
        return to_payment_dto(payment)


def to_payment_dto(payment: PaymentRecord) -> PaymentDTO:
    return PaymentDTO(
        id=payment.id,
        invoice_number=payment.invoice_number,
        cashier_name=payment.cashier_name,
        items=[
            PaymentLineDTO(
                name=line.name,
                quantity=_format_quantity(line.quantity),
                effective_unit_price=str(line.effective_unit_price),
                base_unit_price=str(line.base_unit_price),
                line_subtotal=str(line.line_subtotal),
            )
            for line in payment.items
        ],
        subtotal=str(payment.subtotal),
        tax=str(payment.tax),
        discount=str(payment.discount),
        total=str(payment.total),
        paid_cash=str(payment.paid_cash),
        change_due=str(payment.change_due),
        note=payment.note,
        created_at=payment.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def _format_quantity(qty: Decimal) -> str:
    return format(qty.normalize(), "f")
