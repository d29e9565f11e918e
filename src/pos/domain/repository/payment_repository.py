"""Abstract repository for stored payments (invoices)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.payment import PaymentDraft, PaymentRecord


class PaymentRepository(ABC):

    @abstractmethod
    def create(self, draft: PaymentDraft) -> PaymentRecord:
        """Persist a finalized sale and return the canonical record.

        Raises PaymentRejectedError if the draft cannot be stored,
        including when its invoice number is already taken.
        """

    @abstractmethod
    def get_by_invoice_number(self, invoice_number: str) -> PaymentRecord | None:
        """Return a payment by invoice number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[PaymentRecord]:
        """Return every stored payment, oldest first."""
