"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from pos.application.add_product import AddProductHandler
from pos.application.list_products import ListProductsHandler
from pos.application.update_product import UpdateProductHandler
from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price in whole currency units (e.g. 39000).")
@click.option(
    "--whole-units",
    is_flag=True,
    default=False,
    help="Sell only in whole units (default allows fractional quantities).",
)
@click.option("--barcode", default=None, help="Optional barcode.")
def product_add(name: str, price: str, whole_units: bool, barcode: str | None) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            name=name, price=price, allow_decimal_qty=not whole_units, barcode=barcode
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
@click.option("--search", default="", help="Only products whose name contains this.")
@click.option("--all", "include_hidden", is_flag=True, default=False, help="Include hidden products.")
def product_list(search: str, include_hidden: bool) -> None:
    """List products in the catalog."""
    products = ListProductsHandler(product_repository()).handle(search, include_hidden)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>14} {'Unit':>6}")
    click.echo("-" * 49)
    for p in products:
        unit = "dec" if p.allow_decimal_qty else "whole"
        click.echo(f"{p.id:<6} {p.name:<20} {p.price:>14} {unit:>6}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price in whole currency units.")
@click.option("--name", default=None, help="New product name.")
@click.option(
    "--visible",
    type=click.Choice(["yes", "no"]),
    default=None,
    help="Show or hide the product at the terminal.",
)
def product_update(
    product_id: str, price: str | None, name: str | None, visible: str | None
) -> None:
    """Update a product's price, name or visibility."""
    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            product_id=product_id,
            new_price=price,
            new_name=name,
            visible=None if visible is None else visible == "yes",
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' now at {product.price}")
