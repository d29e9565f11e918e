"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Money is pre-formatted
for display; quantities are the committed text form.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SaleItemSpec:
    """Input: one line of a scripted sale (product id, quantity text, optional price text)."""

    product_id: str
    quantity: str
    unit_price: str | None = None


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    price: str
    allow_decimal_qty: bool
    barcode: str | None


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single cart line as displayed to the operator."""

    product_id: str
    name: str
    quantity: str
    qty_input: str
    unit_price_input: str
    base_unit_price: str
    effective_unit_price: str
    line_subtotal: str
    price_overridden: bool
    qty_error: str | None
    unit_price_error: str | None


@dataclass(frozen=True)
class CartDTO:
    lines: list[CartLineDTO]
    subtotal: str
    tax: str
    discount: str
    total: str
    ready_to_pay: bool


@dataclass(frozen=True)
class SettlementDTO:
    is_open: bool
    cash_tendered: str
    change_due: str
    note: str
    can_confirm: bool
    pending: bool


@dataclass(frozen=True)
class CheckoutDTO:
    cart: CartDTO
    settlement: SettlementDTO


@dataclass(frozen=True)
class PaymentLineDTO:
    name: str
    quantity: str
    effective_unit_price: str
    base_unit_price: str
    line_subtotal: str


@dataclass(frozen=True)
class PaymentDTO:
    """Output: a stored invoice as displayed in the history."""

    id: int
    invoice_number: str
    cashier_name: str
    items: list[PaymentLineDTO]
    subtotal: str
    tax: str
    discount: str
    total: str
    paid_cash: str
    change_due: str
    note: str | None
    created_at: str
