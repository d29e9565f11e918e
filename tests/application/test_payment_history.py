"""Tests for the invoice history queries."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from pos.application.list_payments import ListPaymentsHandler
from pos.application.show_payment import ShowPaymentHandler
from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.payment import PaymentLine, PaymentRecord
from pos.domain.model.value_objects import Money
from tests.fakes import FakePaymentRepository


def _record(record_id, invoice, created_at, note=None):
    line = PaymentLine(
        product_id="2",
        name="Pork",
        quantity=Decimal("0.250"),
        base_unit_price=Money(120000),
        edited_unit_price=None,
        effective_unit_price=Money(120000),
        line_subtotal=Money(30000),
        line_discount=Money(0),
    )
    return PaymentRecord(
        id=record_id,
        invoice_number=invoice,
        cashier_name="Lan",
        items=(line,),
        subtotal=Money(30000),
        tax=Money(0),
        discount=Money(0),
        total=Money(30000),
        paid_cash=Money(50000),
        change_due=Money(20000),
        note=note,
        created_at=created_at,
    )


def _repo():
    return FakePaymentRepository(
        records=[
            _record(1, "HD1", datetime(2026, 10, 15, 18, 0, tzinfo=timezone.utc)),
            _record(2, "HD2", datetime(2026, 10, 16, 8, 5, tzinfo=timezone.utc), note="table 3"),
            _record(3, "HD3", datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)),
        ]
    )


class TestListPayments:

    def test_newest_first(self):
        assert [p.invoice_number for p in ListPaymentsHandler(_repo()).handle()] == [
            "HD3",
            "HD2",
            "HD1",
        ]

    def test_filter_by_day(self):
        payments = ListPaymentsHandler(_repo()).handle(on_date=date(2026, 10, 15))
        assert [p.invoice_number for p in payments] == ["HD1"]


class TestShowPayment:

    def test_show(self):
        dto = ShowPaymentHandler(_repo()).handle(" HD2 ")
        assert dto.id == 2
        assert dto.note == "table 3"
        assert dto.total == "30,000 VND"
        assert dto.change_due == "20,000 VND"
        assert dto.created_at == "2026-10-16 08:05 UTC"
        assert dto.items[0].quantity == "0.25"

    def test_unknown_invoice(self):
        with pytest.raises(EntityNotFoundError):
            ShowPaymentHandler(_repo()).handle("HD404")
