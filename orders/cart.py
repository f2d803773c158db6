# orders/cart.py
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from catalog.models import Product
from wallets.models import q


def line_total(line: Mapping) -> Decimal:
    """(price - discount + tax) * quantity for one cart line."""
    qty = int(line.get("quantity") or 0)
    price = Decimal(str(line.get("price") or 0))
    discount = Decimal(str(line.get("discount") or 0))
    tax = Decimal(str(line.get("tax") or 0))
    return (price - discount + tax) * qty


def cart_grand_total(cart: Iterable[Mapping]) -> Decimal:
    return q(sum((line_total(line) for line in cart), Decimal("0")))


def price_cart(lines: Iterable[Mapping]) -> list[dict]:
    """
    Build cart lines from what a customer asked for (product id, quantity,
    variant) with unit price, tax and discount read from the catalog.
    Any price the request carried is ignored.

    Raises ValueError("UNKNOWN_PRODUCT") when a line names a product that
    does not exist or is not for sale.
    """
    lines = list(lines)
    ids = {int(line["id"]) for line in lines}
    products = Product.objects.filter(pk__in=ids, status=True).in_bulk()
    if len(products) != len(ids):
        raise ValueError("UNKNOWN_PRODUCT")

    cart = []
    for line in lines:
        product = products[int(line["id"])]
        cart.append({
            "id": product.pk,
            "quantity": int(line["quantity"]),
            "price": q(product.price),
            "tax": product.unit_tax,
            "discount": product.unit_discount,
            "variant": line.get("variant") or "",
            "variations": line.get("variations") or [],
        })
    return cart
