"""Product aggregate.

Products live independently of sales. They have their own lifecycle:
prices change, products are added and hidden from the catalog.  A cart
line copies what it needs at add time, so catalog edits never reach a
sale in progress.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money

DEFAULT_ALLOW_DECIMAL_QTY = True


@dataclass
class Product:
    """A product in the catalog.

    ``allow_decimal_qty`` marks weighed goods that may be sold in
    fractional quantities; other products sell in whole units.
    """

    id: str
    name: str
    price: Money
    allow_decimal_qty: bool = DEFAULT_ALLOW_DECIMAL_QTY
    barcode: str | None = None
    visible: bool = True
    display_order: int = 1

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing cart lines or invoices because
        both capture a price snapshot.
        """
        self.price = new_price

    def rename(self, new_name: str) -> None:
        if not new_name or not new_name.strip():
            raise ValidationError("Product name is required")
        self.name = new_name.strip()

    # --- Boundary schema ------------------------------------------------------

    @staticmethod
    def from_record(raw: Mapping[str, Any]) -> Product:
        """Build a Product from a loosely-shaped catalog record.

        Catalog rows come from several writers and spell fields
        differently; this is the only place that knows the aliases and
        defaults.
        """
        if raw.get("id") is None:
            raise ValidationError("Product record is missing an id")
        name = str(raw.get("name") or "").strip()
        if not name:
            raise ValidationError(f"Product {raw['id']!r} has no name")

        price = _first_present(raw, "baseUnitPrice", "base_unit_price", "price", "unitPrice")
        allow_decimal = _first_present(raw, "allowDecimalQty", "allow_decimal_qty")
        display_order = _first_present(raw, "displayOrder", "display_order")
        visible = raw.get("visible")

        return Product(
            id=str(raw["id"]),
            name=name,
            price=Money.of(price if price is not None else 0, raw.get("currency") or "VND"),
            allow_decimal_qty=_flag(allow_decimal, DEFAULT_ALLOW_DECIMAL_QTY, "allowDecimalQty"),
            barcode=_normalize_barcode(raw.get("barcode")),
            visible=_flag(visible, True, "visible"),
            display_order=_display_order(display_order),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price.amount,
            "currency": self.price.currency,
            "allow_decimal_qty": self.allow_decimal_qty,
            "barcode": self.barcode,
            "visible": self.visible,
            "display_order": self.display_order,
        }


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _normalize_barcode(barcode: Any) -> str | None:
    if barcode is None:
        return None
    cleaned = str(barcode).strip()
    return cleaned or None


_TRUE_TEXT = {"true", "1", "yes", "y", "on"}
_FALSE_TEXT = {"false", "0", "no", "n", "off"}


def _flag(value: Any, default: bool, field_name: str) -> bool:
    """Read a boolean that may have been written as a bool, a number or text."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_TEXT:
        return True
    if text in _FALSE_TEXT:
        return False
    raise ValidationError(f"Invalid {field_name} value: {value!r}")


def _display_order(value: Any) -> int:
    if value is None:
        return 1
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid displayOrder value: {value!r}") from exc
