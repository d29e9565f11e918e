"""Application service: Add Product use case."""

from __future__ import annotations

from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        allow_decimal_qty: bool = True,
        barcode: str | None = None,
    ) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        existing = self._product_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Product '{name.strip()}' already exists")

        product = Product.from_record(
            {
                "id": self._product_repo.next_id(),
                "name": name,
                "price": Money.of(price).amount,
                "allow_decimal_qty": allow_decimal_qty,
                "barcode": barcode,
                "display_order": len(self._product_repo.list_all()) + 1,
            }
        )
        self._product_repo.save(product)
        return product
