"""CLI commands for stored payments (invoice history)."""

from __future__ import annotations

from datetime import datetime

import click

from pos.application.dto import PaymentDTO
from pos.application.list_payments import ListPaymentsHandler
from pos.application.show_payment import ShowPaymentHandler
from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import payment_repository


@click.command("list")
@click.option("--date", "on_date", default=None, help="Only this UTC day (YYYY-MM-DD).")
def payment_list(on_date: str | None) -> None:
    """List stored invoices, newest first."""
    day = None
    if on_date:
        try:
            day = datetime.strptime(on_date, "%Y-%m-%d").date()
        except ValueError:
            raise click.BadParameter(f"Invalid date '{on_date}'. Expected YYYY-MM-DD.")

    payments = ListPaymentsHandler(payment_repository()).handle(on_date=day)

    if not payments:
        click.echo("No invoices found.")
        return

    click.echo(f"{'Invoice':<22} {'Created':<21} {'Cashier':<14} {'Total':>14}")
    click.echo("-" * 74)
    for p in payments:
        click.echo(f"{p.invoice_number:<22} {p.created_at:<21} {p.cashier_name:<14} {p.total:>14}")


def _display_payment(dto: PaymentDTO) -> None:
    click.echo(f"Invoice {dto.invoice_number}  (#{dto.id})")
    click.echo(f"Cashier: {dto.cashier_name}")
    click.echo(f"Created: {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>8} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*59}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<20} {item.quantity:>8} {item.effective_unit_price:>14} {item.line_subtotal:>14}"
        )
    click.echo(f"  {'-'*59}")
    click.echo(f"  {'Subtotal':<29} {dto.subtotal:>29}")
    click.echo(f"  {'Total':<29} {dto.total:>29}")
    click.echo(f"  {'Cash':<29} {dto.paid_cash:>29}")
    click.echo(f"  {'Change':<29} {dto.change_due:>29}")
    if dto.note:
        click.echo(f"Note: {dto.note}")


@click.command("show")
@click.option("--invoice", required=True, help="Invoice number to display.")
def payment_show(invoice: str) -> None:
    """Show details of a stored invoice."""
    handler = ShowPaymentHandler(payment_repository())

    try:
        dto = handler.handle(invoice)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_payment(dto)
