"""JSON-file-backed implementation of PaymentRepository.

Plays the part of the payment store: it re-checks the draft, refuses
duplicate invoice numbers, and stamps the canonical record with a
sequential id and a UTC creation time.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from pos.domain.exceptions import PaymentRejectedError
from pos.domain.model.payment import PaymentDraft, PaymentLine, PaymentRecord
from pos.domain.model.value_objects import Money
from pos.domain.repository.payment_repository import PaymentRepository


class JsonPaymentRepository(PaymentRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- PaymentRepository interface ------------------------------------------

    def create(self, draft: PaymentDraft) -> PaymentRecord:
        self._check_draft(draft)
        invoice_number = draft.invoice_number.strip()
        try:
            payments = self._load_raw()
            taken = {raw["invoice_number"] for raw in payments}
            next_id = max((int(raw["id"]) for raw in payments), default=0) + 1
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise PaymentRejectedError(f"Cannot read payment store: {exc!r}") from exc

        if invoice_number in taken:
            raise PaymentRejectedError(f"Invoice number {invoice_number} already exists")

        record = PaymentRecord.from_draft(
            draft, record_id=next_id, created_at=datetime.now(timezone.utc)
        )
        payments.append(self._to_raw(record))

        try:
            self._persist_raw(payments)
        except OSError as exc:
            raise PaymentRejectedError(f"Cannot write payment store: {exc}") from exc
        return record

    def get_by_invoice_number(self, invoice_number: str) -> PaymentRecord | None:
        for raw in self._load_raw():
            if raw["invoice_number"] == invoice_number:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[PaymentRecord]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    # --- Validation -----------------------------------------------------------

    @staticmethod
    def _check_draft(draft: PaymentDraft) -> None:
        if not draft.invoice_number.strip():
            raise PaymentRejectedError("Invoice number is required")
        if not draft.cashier_name.strip():
            raise PaymentRejectedError("Cashier name is required")
        if not draft.items:
            raise PaymentRejectedError("Payment must contain at least one item")
        for line in draft.items:
            if not line.quantity.is_finite() or line.quantity <= 0:
                raise PaymentRejectedError("Item quantity must be greater than 0")
            if not line.name.strip():
                raise PaymentRejectedError("Item name cannot be empty")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: PaymentRecord) -> dict:
        return {
            "id": record.id,
            "invoice_number": record.invoice_number.strip(),
            "cashier_name": record.cashier_name.strip(),
            "currency": record.total.currency,
            "subtotal": record.subtotal.amount,
            "tax": record.tax.amount,
            "discount": record.discount.amount,
            "total": record.total.amount,
            "paid_cash": record.paid_cash.amount,
            "change_due": record.change_due.amount,
            "note": record.note,
            "created_at": record.created_at.isoformat(),
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name.strip(),
                    "quantity": str(line.quantity),
                    "base_unit_price": line.base_unit_price.amount,
                    "edited_unit_price": (
                        line.edited_unit_price.amount
                        if line.edited_unit_price is not None
                        else None
                    ),
                    "effective_unit_price": line.effective_unit_price.amount,
                    "line_subtotal": line.line_subtotal.amount,
                    "line_discount": line.line_discount.amount,
                }
                for line in record.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> PaymentRecord:
        currency = raw.get("currency", "VND")

        def money(amount: int) -> Money:
            return Money(amount, currency)

        items = tuple(
            PaymentLine(
                product_id=i.get("product_id"),
                name=i["name"],
                quantity=Decimal(i["quantity"]),
                base_unit_price=money(i["base_unit_price"]),
                edited_unit_price=(
                    money(i["edited_unit_price"])
                    if i.get("edited_unit_price") is not None
                    else None
                ),
                effective_unit_price=money(i["effective_unit_price"]),
                line_subtotal=money(i["line_subtotal"]),
                line_discount=money(i.get("line_discount", 0)),
            )
            for i in raw["items"]
        )
        return PaymentRecord(
            id=raw["id"],
            invoice_number=raw["invoice_number"],
            cashier_name=raw["cashier_name"],
            items=items,
            subtotal=money(raw["subtotal"]),
            tax=money(raw.get("tax", 0)),
            discount=money(raw.get("discount", 0)),
            total=money(raw["total"]),
            paid_cash=money(raw["paid_cash"]),
            change_due=money(raw["change_due"]),
            note=raw.get("note"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, payments: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(payments, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
