"""CLI command that rings up one sale at the terminal."""

from __future__ import annotations

import click

from pos.application.checkout_session import CheckoutSession
from pos.application.dto import SaleItemSpec
from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import checkout_session


def _parse_items(raw_items: tuple[str, ...]) -> list[SaleItemSpec]:
    """Parse ('1:2', '3:1.5@45000') into SaleItemSpec list."""
    specs: list[SaleItemSpec] = []
    seen: set[str] = set()
    for raw in raw_items:
        product_id, sep, rest = raw.strip().partition(":")
        if not sep or not product_id.strip():
            raise click.BadParameter(
                f"Invalid item format '{raw}'. Expected 'ProductId:Qty[@Price]'."
            )
        product_id = product_id.strip()
        if product_id in seen:
            raise click.BadParameter(f"Product '{product_id}' is listed more than once.")
        seen.add(product_id)
        quantity, has_price, price = rest.partition("@")
        specs.append(
            SaleItemSpec(
                product_id=product_id,
                quantity=quantity.strip(),
                unit_price=price.strip() if has_price else None,
            )
        )
    return specs


def _ring_up(session: CheckoutSession, specs: list[SaleItemSpec]) -> None:
    for spec in specs:
        session.add_product(spec.product_id)
        if spec.quantity:
            session.edit_quantity(spec.product_id, spec.quantity)
            session.commit_quantity(spec.product_id)
        if spec.unit_price is not None:
            session.edit_price(spec.product_id, spec.unit_price)
            session.commit_price(spec.product_id)


def _display_cart(session: CheckoutSession) -> None:
    dto = session.snapshot()
    click.echo(f"  {'Product':<20} {'Qty':>8} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*59}")
    for line in dto.cart.lines:
        price = line.effective_unit_price + ("*" if line.price_overridden else "")
        click.echo(
            f"  {line.name:<20} {line.quantity:>8} {price:>14} {line.line_subtotal:>14}"
        )
        for error in (line.qty_error, line.unit_price_error):
            if error:
                click.echo(f"    ! {error}")
    click.echo(f"  {'-'*59}")
    click.echo(f"  {'Total':<29} {dto.cart.total:>29}")
    click.echo(f"  {'Cash':<29} {dto.settlement.cash_tendered:>29}")
    click.echo(f"  {'Change':<29} {dto.settlement.change_due:>29}")


@click.command("sale")
@click.option("--cashier", required=True, help="Cashier name.")
@click.option(
    "--item",
    "items",
    required=True,
    multiple=True,
    help="Line as 'ProductId:Qty' or 'ProductId:Qty@UnitPrice'. Repeatable.",
)
@click.option("--cash", required=True, help="Cash tendered, in whole currency units.")
@click.option("--note", default="", help="Optional note printed on the receipt.")
def sale(cashier: str, items: tuple[str, ...], cash: str, note: str) -> None:
    """Ring up a sale, take cash, and print the receipt."""
    specs = _parse_items(items)

    try:
        session = checkout_session(cashier)
        _ring_up(session, specs)
        session.set_note(note)
        session.open_settlement()
        session.enter_cash(cash)
        _display_cart(session)

        reason = session.blocked_reason()
        if reason is not None:
            raise click.ClickException(f"Cannot confirm payment: {reason}")

        record = session.confirm_payment()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if record is None:
        raise click.ClickException("Payment was not confirmed")
    click.echo(f"Invoice {record.invoice_number} saved.")
