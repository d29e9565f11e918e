"""Application service: List Payments use case (invoice history query)."""

from __future__ import annotations

from datetime import date

from pos.application.dto import PaymentDTO
from pos.application.show_payment import to_payment_dto
from pos.domain.repository.payment_repository import PaymentRepository


class ListPaymentsHandler:

    def __init__(self, payment_repo: PaymentRepository) -> None:
        self._payment_repo = payment_repo

    def handle(self, on_date: date | None = None) -> list[PaymentDTO]:
        """Every stored invoice, newest first, optionally for one UTC day."""
        payments = [
            p
            for p in self._payment_repo.list_all()
            if on_date is None or p.created_at.date() == on_date
        ]
        payments.sort(key=lambda p: p.created_at, reverse=True)
        return [to_payment_dto(p) for p in payments]
