"""Application service: the checkout session at one terminal.

The session is the single owner of the sale in progress: the Cart and
the Settlement.  Every operator action replaces one of them with a new
immutable value, so there is exactly one mutator and no locking.

Confirming a payment is the only call that leaves the process.  It is a
two-phase commit over the settlement state:

1. mark the settlement PENDING and hand the draft to the payment store;
2. on success, clear the cart and note, close the settlement and pass
   the stored record to the receipt printer;
   on failure, drop back to exactly the pre-attempt state so the
   operator can try again.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from pos.application.dto import (
    CartDTO,
    CartLineDTO,
    CheckoutDTO,
    SettlementDTO,
)
from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.cart import Cart
from pos.domain.model.cart_actions import (
    AddProduct,
    CancelPriceEdit,
    CancelQtyEdit,
    CartAction,
    ChangeQuantity,
    ClearCart,
    CommitPrice,
    CommitQty,
    EditPriceText,
    EditQtyText,
    RemoveLine,
    reduce_cart,
)
from pos.domain.model.payment import (
    DEFAULT_PAPER_WIDTH,
    PaymentDraft,
    PaymentRecord,
    Receipt,
    StoreProfile,
)
from pos.domain.model.product import Product
from pos.domain.model.settlement import Settlement
from pos.domain.model.value_objects import Money
from pos.domain.repository.payment_repository import PaymentRepository
from pos.domain.repository.receipt_printer import ReceiptPrinter
from pos.domain.service.invoice_numbers import InvoiceNumberGenerator
from pos.domain.service.pricing import PricingPolicy

logger = structlog.get_logger()


class CheckoutSession:

    def __init__(
        self,
        cashier_name: str,
        catalog: list[Product],
        payment_repo: PaymentRepository,
        printer: ReceiptPrinter,
        invoice_numbers: InvoiceNumberGenerator | None = None,
        policy: PricingPolicy | None = None,
        store: StoreProfile | None = None,
        paper_width: str = DEFAULT_PAPER_WIDTH,
    ) -> None:
        if not cashier_name or not cashier_name.strip():
            raise ValidationError("Cashier name is required")
        self._cashier_name = cashier_name.strip()
        # Snapshot taken once per session; later catalog edits do not leak in.
        self._catalog = {product.id: replace(product) for product in catalog}
        self._payment_repo = payment_repo
        self._printer = printer
        self._invoice_numbers = invoice_numbers or InvoiceNumberGenerator()
        self._store = store or StoreProfile(name="POS")
        self._paper_width = paper_width
        self._cart = Cart(policy=policy or PricingPolicy())
        self._settlement = Settlement()
        self._log = logger.bind(cashier=self._cashier_name)

    # --- State ----------------------------------------------------------------

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def settlement(self) -> Settlement:
        return self._settlement

    @property
    def cashier_name(self) -> str:
        return self._cashier_name

    def product(self, product_id: str) -> Product:
        product = self._catalog.get(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product

    # --- Cart actions ---------------------------------------------------------

    def dispatch(self, action: CartAction) -> Cart:
        self._cart = reduce_cart(self._cart, action)
        return self._cart

    def add_product(self, product_id: str) -> Cart:
        return self.dispatch(AddProduct(self.product(product_id)))

    def change_quantity(self, product_id: str, delta_steps: int) -> Cart:
        return self.dispatch(ChangeQuantity(product_id, delta_steps))

    def edit_price(self, product_id: str, text: str) -> Cart:
        return self.dispatch(EditPriceText(product_id, text))

    def commit_price(self, product_id: str) -> Cart:
        return self.dispatch(CommitPrice(product_id))

    def cancel_price_edit(self, product_id: str) -> Cart:
        return self.dispatch(CancelPriceEdit(product_id))

    def edit_quantity(self, product_id: str, text: str) -> Cart:
        return self.dispatch(EditQtyText(product_id, text))

    def commit_quantity(self, product_id: str) -> Cart:
        return self.dispatch(CommitQty(product_id))

    def cancel_quantity_edit(self, product_id: str) -> Cart:
        return self.dispatch(CancelQtyEdit(product_id))

    def remove_line(self, product_id: str) -> Cart:
        return self.dispatch(RemoveLine(product_id))

    def clear_cart(self) -> Cart:
        return self.dispatch(ClearCart())

    # --- Settlement actions ---------------------------------------------------

    def open_settlement(self) -> bool:
        """Open the payment step; returns whether it is now open."""
        self._settlement = self._settlement.open(self._cart)
        return self._settlement.is_open

    def close_settlement(self) -> None:
        self._settlement = self._settlement.close()

    def enter_cash(self, raw: str) -> None:
        self._settlement = self._settlement.enter_cash(raw)

    def add_cash(self, amount: int) -> None:
        self._settlement = self._settlement.add_cash(amount)

    def press_key(self, key: str) -> None:
        self._settlement = self._settlement.press_key(key)

    def set_note(self, note: str) -> None:
        self._settlement = self._settlement.with_note(note)

    @property
    def change_due(self) -> Money:
        return self._settlement.change_due(self._cart.total)

    @property
    def can_confirm(self) -> bool:
        return self._settlement.can_confirm(self._cart)

    def blocked_reason(self) -> str | None:
        """Why confirmation is disabled right now, or None if it is enabled."""
        if self._settlement.is_pending:
            return "a payment is already being saved"
        if self._cart.is_empty:
            return "the cart is empty"
        if self._cart.has_errors:
            return "a cart line has an invalid quantity or price"
        if self._cart.total.amount <= 0:
            return "the total is zero"
        if self._settlement.cash_tendered.amount < self._cart.total.amount:
            return "cash tendered is less than the total"
        return None

    def confirm_payment(self) -> PaymentRecord | None:
        """Store the sale and print its receipt.

        Returns None without side effects when confirmation is disabled.
        If the payment store raises (PaymentRejectedError or anything
        else), the error propagates and cart, note and settlement are
        left as they were.
        """
        reason = self.blocked_reason()
        if reason is not None:
            self._log.warning("payment_confirm_blocked", reason=reason)
            return None

        draft = PaymentDraft.from_cart(
            self._cart,
            self._settlement,
            cashier_name=self._cashier_name,
            invoice_number=self._invoice_numbers.next_number(),
        )
        log = self._log.bind(invoice_number=draft.invoice_number)

        self._settlement = self._settlement.begin()
        try:
            record = self._payment_repo.create(draft)
        except Exception as exc:
            # Any store failure must leave the terminal able to retry.
            self._settlement = self._settlement.reject()
            log.error("payment_rejected", error=str(exc), error_type=type(exc).__name__)
            raise

        if record.note is None and draft.note is not None:
            record = replace(record, note=draft.note)

        self._cart = self._cart.clear()
        self._settlement = self._settlement.resolve()
        log.info(
            "payment_stored",
            payment_id=record.id,
            total=record.total.amount,
            paid_cash=record.paid_cash.amount,
            change_due=record.change_due.amount,
            lines=len(record.items),
        )

        self._printer.print_receipt(
            Receipt(store=self._store, payment=record, paper_width=self._paper_width)
        )
        return record

    # --- Display --------------------------------------------------------------

    def snapshot(self) -> CheckoutDTO:
        cart = self._cart
        policy = cart.policy
        return CheckoutDTO(
            cart=CartDTO(
                lines=[
                    CartLineDTO(
                        product_id=item.product_id,
                        name=item.name,
                        quantity=policy.format_quantity(item.qty, item.allow_decimal_qty),
                        qty_input=item.qty_input,
                        unit_price_input=item.unit_price_input,
                        base_unit_price=str(item.base_unit_price),
                        effective_unit_price=str(item.effective_unit_price),
                        line_subtotal=str(cart.line_subtotal(item)),
                        price_overridden=item.edited_unit_price is not None,
                        qty_error=item.qty_error,
                        unit_price_error=item.unit_price_error,
                    )
                    for item in cart.items
                ],
                subtotal=str(cart.subtotal),
                tax=str(cart.tax),
                discount=str(cart.discount),
                total=str(cart.total),
                ready_to_pay=cart.is_ready_to_pay,
            ),
            settlement=SettlementDTO(
                is_open=self._settlement.is_open,
                cash_tendered=str(self._settlement.cash_tendered),
                change_due=str(self.change_due),
                note=self._settlement.note,
                can_confirm=self.can_confirm,
                pending=self._settlement.is_pending,
            ),
        )


