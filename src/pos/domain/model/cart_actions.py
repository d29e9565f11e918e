"""Operator actions on the cart, and the reducer that applies them.

``reduce_cart(cart, action)`` is a pure function: the same cart and
action always give the same new cart.
"""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.model.cart import Cart
from pos.domain.model.product import Product


@dataclass(frozen=True)
class AddProduct:
    product: Product


@dataclass(frozen=True)
class ChangeQuantity:
    product_id: str
    delta_steps: int


@dataclass(frozen=True)
class EditPriceText:
    product_id: str
    text: str


@dataclass(frozen=True)
class CommitPrice:
    product_id: str


@dataclass(frozen=True)
class CancelPriceEdit:
    product_id: str


@dataclass(frozen=True)
class EditQtyText:
    product_id: str
    text: str


@dataclass(frozen=True)
class CommitQty:
    product_id: str


@dataclass(frozen=True)
class CancelQtyEdit:
    product_id: str


@dataclass(frozen=True)
class RemoveLine:
    product_id: str


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = (
    AddProduct
    | ChangeQuantity
    | EditPriceText
    | CommitPrice
    | CancelPriceEdit
    | EditQtyText
    | CommitQty
    | CancelQtyEdit
    | RemoveLine
    | ClearCart
)


def reduce_cart(cart: Cart, action: CartAction) -> Cart:
    if isinstance(action, AddProduct):
        return cart.add(action.product)
    if isinstance(action, ChangeQuantity):
        return cart.change_quantity(action.product_id, action.delta_steps)
    if isinstance(action, EditPriceText):
        return cart.edit_price_text(action.product_id, action.text)
    if isinstance(action, CommitPrice):
        return cart.commit_price(action.product_id)
    if isinstance(action, CancelPriceEdit):
        return cart.cancel_price_edit(action.product_id)
    if isinstance(action, EditQtyText):
        return cart.edit_qty_text(action.product_id, action.text)
    if isinstance(action, CommitQty):
        return cart.commit_qty(action.product_id)
    if isinstance(action, CancelQtyEdit):
        return cart.cancel_qty_edit(action.product_id)
    if isinstance(action, RemoveLine):
        return cart.remove_line(action.product_id)
    if isinstance(action, ClearCart):
        return cart.clear()
    raise TypeError(f"Unknown cart action: {type(action).__name__}")
