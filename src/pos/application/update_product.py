"""Application service: Update Product use case."""

from __future__ import annotations

from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        new_price: str | None = None,
        new_name: str | None = None,
        visible: bool | None = None,
    ) -> Product:
        """Update a catalog product.

        This does NOT affect any cart line or stored invoice; both
        captured a price snapshot.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        if new_price is not None:
            product.update_price(Money.of(new_price, product.price.currency))
        if new_name is not None:
            product.rename(new_name)
        if visible is not None:
            product.visible = visible
        self._product_repo.save(product)
        return product
