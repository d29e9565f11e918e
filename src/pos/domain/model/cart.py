"""Cart aggregate: the sale being rung up at the terminal.

The Cart is an immutable value: every transition returns a new Cart and
leaves the old one untouched.  That keeps the state machine testable
without any UI and lets the checkout session roll back to a previous
snapshot for free.

Each CartItem carries two views of its quantity and price:

- the *committed* values (``qty``, ``edited_unit_price``), which are
  always valid and are the only ones that take part in totals, and
- the *input mirrors* (``qty_input``, ``unit_price_input``) plus a
  per-field error, which hold whatever the operator is typing until it
  is committed or cancelled.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from decimal import Decimal

from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.service.input_sanitizer import sanitize_price, sanitize_quantity
from pos.domain.service.input_validator import validate_price, validate_quantity
from pos.domain.service.pricing import PricingPolicy


@dataclass(frozen=True)
class CartItem:
    """One line of the sale.

    Identity, name and base price are copied from the catalog when the
    line is created and never change afterwards (price lock).
    """

    product_id: str
    name: str
    allow_decimal_qty: bool
    base_unit_price: Money
    qty: Decimal
    edited_unit_price: Money | None = None
    unit_price_input: str = ""
    qty_input: str = ""
    unit_price_error: str | None = None
    qty_error: str | None = None

    @staticmethod
    def from_product(
        product: Product,
        policy: PricingPolicy,
        initial_qty: Decimal | int = 1,
    ) -> CartItem:
        qty = policy.normalize_quantity(initial_qty, product.allow_decimal_qty)
        return CartItem(
            product_id=product.id,
            name=product.name,
            allow_decimal_qty=product.allow_decimal_qty,
            base_unit_price=product.price,
            qty=qty,
            unit_price_input=str(product.price.amount),
            qty_input=policy.format_quantity(qty, product.allow_decimal_qty),
        )

    @property
    def effective_unit_price(self) -> Money:
        if self.edited_unit_price is not None:
            return self.edited_unit_price
        return self.base_unit_price

    @property
    def has_error(self) -> bool:
        return self.qty_error is not None or self.unit_price_error is not None

    # --- Quantity -------------------------------------------------------------

    def with_quantity(self, qty: Decimal, policy: PricingPolicy) -> CartItem:
        """Commit *qty* and regenerate the mirror from it."""
        return replace(
            self,
            qty=qty,
            qty_input=policy.format_quantity(qty, self.allow_decimal_qty),
            qty_error=None,
        )

    def edit_qty_text(self, raw: str, policy: PricingPolicy) -> CartItem:
        return replace(
            self,
            qty_input=sanitize_quantity(raw, self.allow_decimal_qty, policy.qty_precision),
            qty_error=None,
        )

    def commit_qty(self, policy: PricingPolicy) -> CartItem:
        result = validate_quantity(self.qty_input, self.allow_decimal_qty, policy)
        if not result.ok:
            return replace(self, qty_error=result.error)
        return self.with_quantity(result.value, policy)

    def cancel_qty_edit(self, policy: PricingPolicy) -> CartItem:
        return replace(
            self,
            qty_input=policy.format_quantity(self.qty, self.allow_decimal_qty),
            qty_error=None,
        )

    # --- Unit price -----------------------------------------------------------

    def edit_price_text(self, raw: str) -> CartItem:
        return replace(self, unit_price_input=sanitize_price(raw), unit_price_error=None)

    def commit_price(self, policy: PricingPolicy) -> CartItem:
        """Commit the price mirror.

        An empty mirror, or one equal to the base price, clears the
        override instead of storing a redundant one.
        """
        result = validate_price(self.unit_price_input, policy)
        if not result.ok:
            return replace(self, unit_price_error=result.error)
        if result.value is None or result.value == self.base_unit_price.amount:
            return replace(
                self,
                edited_unit_price=None,
                unit_price_input=str(self.base_unit_price.amount),
                unit_price_error=None,
            )
        return replace(
            self,
            edited_unit_price=Money(result.value, self.base_unit_price.currency),
            unit_price_input=str(result.value),
            unit_price_error=None,
        )

    def cancel_price_edit(self) -> CartItem:
        return replace(
            self,
            unit_price_input=str(self.effective_unit_price.amount),
            unit_price_error=None,
        )


@dataclass(frozen=True)
class Cart:
    """Insertion-ordered cart lines, at most one line per product."""

    items: tuple[CartItem, ...] = ()
    policy: PricingPolicy = field(default_factory=PricingPolicy)

    # --- Transitions ----------------------------------------------------------

    def add(self, product: Product) -> Cart:
        """Add one unit (or one step) of *product*.

        A product already in the cart gets its quantity bumped by one
        step instead of a second line.
        """
        existing = self._find(product.id)
        if existing is None:
            return replace(
                self, items=self.items + (CartItem.from_product(product, self.policy),)
            )
        next_qty = self.policy.quantity_after_delta(
            existing.qty, 1, existing.allow_decimal_qty
        )
        return self._update(
            product.id,
            lambda item: item.with_quantity(next_qty or item.qty, self.policy),
        )

    def change_quantity(self, product_id: str, delta_steps: int) -> Cart:
        """Move the quantity by *delta_steps* steps; dropping to zero removes the line."""
        item = self.line(product_id)
        next_qty = self.policy.quantity_after_delta(
            item.qty, delta_steps, item.allow_decimal_qty
        )
        if next_qty is None:
            return self.remove_line(product_id)
        return self._update(product_id, lambda i: i.with_quantity(next_qty, self.policy))

    def edit_price_text(self, product_id: str, raw: str) -> Cart:
        return self._update(product_id, lambda item: item.edit_price_text(raw))

    def commit_price(self, product_id: str) -> Cart:
        return self._update(product_id, lambda item: item.commit_price(self.policy))

    def cancel_price_edit(self, product_id: str) -> Cart:
        return self._update(product_id, lambda item: item.cancel_price_edit())

    def edit_qty_text(self, product_id: str, raw: str) -> Cart:
        return self._update(product_id, lambda item: item.edit_qty_text(raw, self.policy))

    def commit_qty(self, product_id: str) -> Cart:
        return self._update(product_id, lambda item: item.commit_qty(self.policy))

    def cancel_qty_edit(self, product_id: str) -> Cart:
        return self._update(product_id, lambda item: item.cancel_qty_edit(self.policy))

    def remove_line(self, product_id: str) -> Cart:
        return replace(
            self, items=tuple(i for i in self.items if i.product_id != product_id)
        )

    def clear(self) -> Cart:
        return replace(self, items=())

    # --- Queries --------------------------------------------------------------

    def line(self, product_id: str) -> CartItem:
        item = self._find(product_id)
        if item is None:
            raise EntityNotFoundError(f"Product ID '{product_id}' is not in the cart")
        return item

    def line_subtotal(self, item: CartItem) -> Money:
        return self.policy.line_subtotal(item.effective_unit_price, item.qty)

    @property
    def currency(self) -> str:
        return self.items[0].base_unit_price.currency if self.items else "VND"

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            result = result + self.line_subtotal(item)
        return result

    @property
    def tax(self) -> Money:
        return Money.zero(self.currency)

    @property
    def discount(self) -> Money:
        return Money.zero(self.currency)

    @property
    def total(self) -> Money:
        return self.subtotal.saturating_sub(self.discount) + self.tax

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def has_errors(self) -> bool:
        return any(item.has_error for item in self.items)

    @property
    def is_ready_to_pay(self) -> bool:
        return not self.is_empty and not self.has_errors

    # --- Internal helpers -----------------------------------------------------

    def _find(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def _update(self, product_id: str, change: Callable[[CartItem], CartItem]) -> Cart:
        self.line(product_id)
        return replace(
            self,
            items=tuple(
                change(item) if item.product_id == product_id else item
                for item in self.items
            ),
        )
