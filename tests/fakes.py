"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories
and the console printer but keep everything in memory. No file I/O, no
side effects.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pos.domain.exceptions import PaymentRejectedError
from pos.domain.model.payment import PaymentDraft, PaymentRecord, Receipt
from pos.domain.model.product import Product
from pos.domain.repository.payment_repository import PaymentRepository
from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.receipt_printer import ReceiptPrinter

FIXED_NOW = datetime(2026, 10, 16, 9, 30, 15, tzinfo=timezone.utc)


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def next_id(self) -> str:
        ids = [int(pid) for pid in self._store if pid.isdigit()]
        return str(max(ids) + 1) if ids else "1"

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for p in self._store.values():
            if p.name.lower() == name.lower():
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product


class FakePaymentRepository(PaymentRepository):
    """Stores drafts in a list; can be told to fail the next N calls."""

    def __init__(
        self, fail_times: int = 0, records: list[PaymentRecord] | None = None
    ) -> None:
        self._store: list[PaymentRecord] = list(records or [])
        self.drafts: list[PaymentDraft] = []
        self.fail_times = fail_times
        self.on_create = None

    def create(self, draft: PaymentDraft) -> PaymentRecord:
        self.drafts.append(draft)
        if self.on_create is not None:
            self.on_create()
        if self.fail_times > 0:
            self.fail_times -= 1
            raise PaymentRejectedError("payment store unavailable")
        if self.get_by_invoice_number(draft.invoice_number) is not None:
            raise PaymentRejectedError(f"Invoice number {draft.invoice_number} already exists")
        record = PaymentRecord.from_draft(
            draft, record_id=len(self._store) + 1, created_at=FIXED_NOW
        )
        self._store.append(record)
        return record

    def get_by_invoice_number(self, invoice_number: str) -> PaymentRecord | None:
        for record in self._store:
            if record.invoice_number == invoice_number:
                return record
        return None

    def list_all(self) -> list[PaymentRecord]:
        return list(self._store)


class FakeReceiptPrinter(ReceiptPrinter):

    def __init__(self) -> None:
        self.printed: list[Receipt] = []

    def print_receipt(self, receipt: Receipt) -> None:
        self.printed.append(receipt)


class SequenceInvoiceNumbers:
    """Deterministic stand-in for InvoiceNumberGenerator."""

    def __init__(self, *numbers: str) -> None:
        self._numbers = list(numbers) or ["HD20261016093015100"]
        self._index = 0

    def next_number(self) -> str:
        number = self._numbers[min(self._index, len(self._numbers) - 1)]
        self._index += 1
        return number
