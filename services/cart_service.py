# karu/services/cart_service.py
from dataclasses import replace
from typing import List, Optional, Tuple

from domain.exceptions import InsufficientStockError, ProductNotFoundError
from domain.models import CartLine, Product


def add_to_cart(cart: List[CartLine], product: Product, quantity: int = 1) -> List[CartLine]:
    """
    Return a new cart with `quantity` more of `product`.

    Raises InsufficientStockError (cart untouched) when the resulting line
    would exceed the stock known for the product.
    """
    if product.stock_quantity < quantity:
        raise InsufficientStockError(product.name, product.stock_quantity)

    existing = next((line for line in cart if line.product_id == product.id), None)

    if existing is None:
        return [*cart, CartLine.from_product(product, quantity)]

    new_quantity = existing.quantity + quantity
    if new_quantity > product.stock_quantity:
        raise InsufficientStockError(product.name, product.stock_quantity)

    return [
        replace(line, quantity=new_quantity, total=new_quantity * line.price)
        if line.product_id == product.id
        else line
        for line in cart
    ]


def update_quantity(
        cart: List[CartLine],
        products: List[Product],
        product_id: str,
        new_quantity: int,
) -> List[CartLine]:
    if new_quantity <= 0:
        return remove_from_cart(cart, product_id)

    product = next((p for p in products if p.id == product_id), None)
    if product is not None and new_quantity > product.stock_quantity:
        raise InsufficientStockError(product.name, product.stock_quantity)

    return [
        replace(line, quantity=new_quantity, total=new_quantity * line.price)
        if line.product_id == product_id
        else line
        for line in cart
    ]


def remove_from_cart(cart: List[CartLine], product_id: str) -> List[CartLine]:
    return [line for line in cart if line.product_id != product_id]


def find_by_barcode(products: List[Product], barcode: str) -> Optional[Product]:
    """
    Exact match on the trimmed barcode. Blank input returns None.
    """
    code = (barcode or "").strip()
    if not code:
        return None

    product = next((p for p in products if p.barcode == code), None)
    if product is None:
        raise ProductNotFoundError(code)
    return product


def add_by_barcode(cart: List[CartLine], products: List[Product], barcode: str) -> Tuple[List[CartLine], Optional[Product]]:
    product = find_by_barcode(products, barcode)
    if product is None:
        return cart, None
    return add_to_cart(cart, product), product


def cart_item_count(cart: List[CartLine]) -> int:
    return len(cart)
