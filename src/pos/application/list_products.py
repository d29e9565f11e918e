"""Application service: List Products use case (query).

Produces the catalog snapshot a checkout session works from.
"""

from __future__ import annotations

from pos.application.dto import ProductDTO
from pos.domain.model.product import Product
from pos.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def catalog(self, keyword: str = "", include_hidden: bool = False) -> list[Product]:
        """Products in display order, optionally filtered by a name keyword."""
        needle = keyword.strip().lower()
        products = [
            p
            for p in self._product_repo.list_all()
            if (include_hidden or p.visible) and needle in p.name.lower()
        ]
        return sorted(products, key=lambda p: (p.display_order, p.name.lower()))

    def handle(self, keyword: str = "", include_hidden: bool = False) -> list[ProductDTO]:
        return [
            ProductDTO(
                id=p.id,
                name=p.name,
                price=str(p.price),
                allow_decimal_qty=p.allow_decimal_qty,
                barcode=p.barcode,
            )
            for p in self.catalog(keyword, include_hidden)
        ]
