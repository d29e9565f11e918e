"""Tests for the CheckoutSession application service.

Uses in-memory fakes for the payment store and the receipt printer.
"""

import pytest
from structlog.testing import capture_logs

from pos.application.checkout_session import CheckoutSession
from pos.domain.exceptions import EntityNotFoundError, PaymentRejectedError, ValidationError
from pos.domain.model.cart_actions import AddProduct
from pos.domain.model.payment import StoreProfile
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from tests.fakes import FakePaymentRepository, FakeReceiptPrinter, SequenceInvoiceNumbers

COFFEE = Product(id="1", name="Coffee", price=Money(39000), allow_decimal_qty=False)
PORK = Product(id="2", name="Pork", price=Money(120000), allow_decimal_qty=True)


def _setup(fail_times=0, numbers=("HD20261016093015100",)):
    payments = FakePaymentRepository(fail_times=fail_times)
    printer = FakeReceiptPrinter()
    session = CheckoutSession(
        cashier_name="Lan",
        catalog=[COFFEE, PORK],
        payment_repo=payments,
        printer=printer,
        invoice_numbers=SequenceInvoiceNumbers(*numbers),
        store=StoreProfile(name="Corner Shop"),
    )
    return session, payments, printer


def _ring_up_coffee(session):
    """Two coffees at an overridden 45,000 each: total 90,000."""
    session.add_product("1")
    session.add_product("1")
    session.edit_price("1", "45000")
    session.commit_price("1")


class TestCartOperations:

    def test_unknown_product_rejected(self):
        session, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            session.add_product("99")

    def test_cashier_required(self):
        with pytest.raises(ValidationError, match="Cashier name"):
            CheckoutSession(" ", [], FakePaymentRepository(), FakeReceiptPrinter())

    def test_catalog_is_snapshotted(self):
        product = Product(id="7", name="Tea", price=Money(10000))
        session = CheckoutSession("Lan", [product], FakePaymentRepository(), FakeReceiptPrinter())
        product.update_price(Money(99000))
        session.add_product("7")
        assert session.cart.line("7").base_unit_price == Money(10000)

    def test_dispatch_matches_named_operations(self):
        session, _, _ = _setup()
        session.dispatch(AddProduct(COFFEE))
        other, _, _ = _setup()
        other.add_product("1")
        assert session.cart == other.cart

    def test_remove_and_clear(self):
        session, _, _ = _setup()
        session.add_product("1")
        session.add_product("2")
        session.remove_line("1")
        assert [item.product_id for item in session.cart.items] == ["2"]
        session.clear_cart()
        assert session.cart.is_empty

    def test_cancel_edits(self):
        session, _, _ = _setup()
        session.add_product("2")
        session.edit_quantity("2", "3.5")
        session.cancel_quantity_edit("2")
        session.edit_price("2", "1")
        session.cancel_price_edit("2")
        line = session.cart.line("2")
        assert line.qty_input == "1"
        assert line.unit_price_input == "120000"


class TestSettlement:

    def test_cannot_open_with_empty_cart(self):
        session, _, _ = _setup()
        assert session.open_settlement() is False

    def test_worked_example_change(self):
        session, _, _ = _setup()
        _ring_up_coffee(session)
        assert session.open_settlement() is True
        session.enter_cash("100000")
        assert session.cart.total == Money(90000)
        assert session.change_due == Money(10000)
        assert session.can_confirm
        assert session.blocked_reason() is None

    def test_keypad_and_quick_cash(self):
        session, _, _ = _setup()
        session.add_cash(50000)
        session.press_key("0")
        assert session.settlement.cash_text == "500000"
        session.press_key("backspace")
        session.press_key("backspace")
        assert session.settlement.cash_tendered == Money(5000)

    def test_close_clears_cash(self):
        session, _, _ = _setup()
        _ring_up_coffee(session)
        session.open_settlement()
        session.enter_cash("100000")
        session.close_settlement()
        assert not session.settlement.is_open
        assert session.settlement.cash_text == ""

    @pytest.mark.parametrize(
        "prepare, reason",
        [
            (lambda s: None, "the cart is empty"),
            (
                lambda s: (s.add_product("1"), s.edit_quantity("1", ""), s.commit_quantity("1")),
                "a cart line has an invalid quantity or price",
            ),
            (lambda s: (s.add_product("1"), s.enter_cash("1000")), "cash tendered is less than the total"),
        ],
    )
    def test_blocked_reasons(self, prepare, reason):
        session, _, _ = _setup()
        prepare(session)
        assert session.blocked_reason() == reason
        assert not session.can_confirm


class TestConfirmPayment:

    def test_confirm_stores_prints_and_resets(self):
        session, payments, printer = _setup()
        _ring_up_coffee(session)
        session.open_settlement()
        session.enter_cash("100000")
        session.set_note("  no sugar ")

        record = session.confirm_payment()

        assert record is not None
        assert record.invoice_number == "HD20261016093015100"
        assert record.cashier_name == "Lan"
        assert record.total == Money(90000)
        assert record.paid_cash == Money(100000)
        assert record.change_due == Money(10000)
        assert record.note == "no sugar"
        assert record.items[0].edited_unit_price == Money(45000)
        assert len(payments.list_all()) == 1
        assert len(printer.printed) == 1
        assert printer.printed[0].payment == record
        assert printer.printed[0].store.name == "Corner Shop"
        assert session.cart.is_empty
        assert not session.settlement.is_open
        assert session.settlement.note == ""
        assert session.settlement.cash_text == ""

    def test_blocked_confirm_has_no_side_effects(self):
        session, payments, printer = _setup()
        _ring_up_coffee(session)
        session.enter_cash("50000")
        cart_before = session.cart
        assert session.confirm_payment() is None
        assert payments.drafts == []
        assert printer.printed == []
        assert session.cart == cart_before

    def test_rejected_payment_restores_state(self):
        session, payments, printer = _setup(fail_times=1, numbers=("HD-A", "HD-B"))
        _ring_up_coffee(session)
        session.open_settlement()
        session.enter_cash("100000")
        session.set_note("table 2")
        cart_before = session.cart
        settlement_before = session.settlement

        with pytest.raises(PaymentRejectedError):
            session.confirm_payment()

        assert session.cart == cart_before
        assert session.settlement == settlement_before
        assert printer.printed == []

        record = session.confirm_payment()
        assert record.invoice_number == "HD-B"
        assert [d.invoice_number for d in payments.drafts] == ["HD-A", "HD-B"]
        assert len(printer.printed) == 1

    def test_unexpected_store_error_restores_state(self):
        session, payments, printer = _setup(numbers=("HD-A", "HD-B"))
        _ring_up_coffee(session)
        session.enter_cash("100000")
        settlement_before = session.settlement

        def connection_lost():
            payments.on_create = None
            raise ConnectionError("payment store unreachable")

        payments.on_create = connection_lost
        with pytest.raises(ConnectionError):
            session.confirm_payment()

        assert not session.settlement.is_pending
        assert session.settlement == settlement_before
        assert session.can_confirm
        assert session.blocked_reason() is None
        assert printer.printed == []

        record = session.confirm_payment()
        assert record.invoice_number == "HD-B"
        assert session.cart.is_empty

    def test_second_confirm_while_pending_is_ignored(self):
        session, payments, _ = _setup()
        _ring_up_coffee(session)
        session.enter_cash("100000")
        inner_results = []
        payments.on_create = lambda: inner_results.append(session.confirm_payment())

        record = session.confirm_payment()

        assert record is not None
        assert inner_results == [None]
        assert len(payments.drafts) == 1

    def test_duplicate_invoice_number_retried_with_fresh_number(self):
        session, payments, _ = _setup(numbers=("HD1", "HD1", "HD2"))
        _ring_up_coffee(session)
        session.enter_cash("100000")
        first = session.confirm_payment()
        assert first.invoice_number == "HD1"

        _ring_up_coffee(session)
        session.enter_cash("100000")
        with pytest.raises(PaymentRejectedError, match="already exists"):
            session.confirm_payment()
        second = session.confirm_payment()
        assert second.invoice_number == "HD2"
        assert len(payments.list_all()) == 2

    def test_weighed_line_in_payment(self):
        session, _, _ = _setup()
        session.add_product("2")
        session.edit_quantity("2", "0.25")
        session.commit_quantity("2")
        session.enter_cash("30000")
        record = session.confirm_payment()
        assert record.total == Money(30000)
        assert record.change_due == Money(0)


class TestLogging:

    def test_stored_payment_is_logged(self):
        with capture_logs() as logs:
            session, _, _ = _setup()
            _ring_up_coffee(session)
            session.enter_cash("100000")
            session.confirm_payment()
        stored = [entry for entry in logs if entry["event"] == "payment_stored"]
        assert len(stored) == 1
        assert stored[0]["log_level"] == "info"
        assert stored[0]["cashier"] == "Lan"
        assert stored[0]["total"] == 90000
        assert stored[0]["change_due"] == 10000

    def test_blocked_confirm_is_logged(self):
        with capture_logs() as logs:
            session, _, _ = _setup()
            session.confirm_payment()
        assert logs[0]["event"] == "payment_confirm_blocked"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["reason"] == "the cart is empty"

    def test_rejection_is_logged(self):
        with capture_logs() as logs:
            session, _, _ = _setup(fail_times=1)
            _ring_up_coffee(session)
            session.enter_cash("100000")
            with pytest.raises(PaymentRejectedError):
                session.confirm_payment()
        assert logs[-1]["event"] == "payment_rejected"
        assert logs[-1]["log_level"] == "error"
        assert logs[-1]["error"] == "payment store unavailable"
        assert logs[-1]["error_type"] == "PaymentRejectedError"


class TestSnapshot:

    def test_snapshot_reflects_state(self):
        session, _, _ = _setup()
        _ring_up_coffee(session)
        session.add_product("2")
        session.edit_quantity("2", "0.5")
        session.commit_quantity("2")
        session.edit_price("2", "99999999")
        session.commit_price("2")
        session.enter_cash("200000")

        view = session.snapshot()

        coffee, pork = view.cart.lines
        assert coffee.quantity == "2"
        assert coffee.price_overridden is True
        assert coffee.base_unit_price == "39,000 VND"
        assert coffee.line_subtotal == "90,000 VND"
        assert pork.quantity == "0.5"
        assert pork.unit_price_error == "exceeds maximum"
        assert view.cart.ready_to_pay is False
        assert view.cart.total == "150,000 VND"
        assert view.settlement.cash_tendered == "200,000 VND"
        assert view.settlement.can_confirm is False
        assert view.settlement.pending is False
