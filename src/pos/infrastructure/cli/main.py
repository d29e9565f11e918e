import click

from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import settings
from pos.infrastructure.cli.payment_commands import payment_list, payment_show
from pos.infrastructure.cli.product_commands import product_add, product_list, product_update
from pos.infrastructure.cli.sale_commands import sale
from pos.infrastructure.log_config import configure_logging


@click.group()
def cli() -> None:
    """POS — point-of-sale order entry"""
    try:
        configure_logging(settings().log_level)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@cli.group()
def product() -> None:
    """Manage catalog products."""


@cli.group()
def payment() -> None:
    """Browse stored invoices."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
payment.add_command(payment_list)
payment.add_command(payment_show)
cli.add_command(sale)
