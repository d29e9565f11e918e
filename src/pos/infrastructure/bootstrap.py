"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pos.application.checkout_session import CheckoutSession
from pos.application.list_products import ListProductsHandler
from pos.domain.service.invoice_numbers import InvoiceNumberGenerator
from pos.infrastructure.persistence.json_payment_repository import (
    JsonPaymentRepository,
)
from pos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from pos.infrastructure.printing.console_receipt_printer import ConsoleReceiptPrinter
from pos.infrastructure.settings import Settings


def settings() -> Settings:
    return Settings.from_env()


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().data_dir / "products.json")


def payment_repository() -> JsonPaymentRepository:
    return JsonPaymentRepository(settings().data_dir / "payments.json")


def checkout_session(cashier_name: str) -> CheckoutSession:
    cfg = settings()
    catalog = ListProductsHandler(product_repository()).catalog()
    return CheckoutSession(
        cashier_name=cashier_name,
        catalog=catalog,
        payment_repo=payment_repository(),
        printer=ConsoleReceiptPrinter(),
        invoice_numbers=InvoiceNumberGenerator(prefix=cfg.invoice_prefix),
        policy=cfg.pricing,
        store=cfg.store,
        paper_width=cfg.paper_width,
    )
