from decimal import Decimal
from typing import Iterable, Mapping, Union

from storefront.core.config import settings
from storefront.core.money import round2, to_decimal
from storefront.schemas.cart import CartItem, CartPrices


def _line_total(item: Union[CartItem, Mapping]) -> Decimal:
    if isinstance(item, CartItem):
        price, qty = item.price, item.qty
    else:
        price, qty = item["price"], item["qty"]
    return to_decimal(price) * qty


def calc_price(items: Iterable[Union[CartItem, Mapping]]) -> CartPrices:
    """
    Derive cart totals from its lines.

    Shipping is free from FREE_SHIPPING_THRESHOLD upwards and tax is charged
    on the subtotal only. Pure: same items, same strings.
    """
    items_price = round2(sum((_line_total(item) for item in items), Decimal("0")))
    if items_price >= settings.FREE_SHIPPING_THRESHOLD:
        shipping_price = round2(0)
    else:
        shipping_price = round2(settings.FLAT_SHIPPING_PRICE)
    tax_price = round2(settings.TAX_RATE * items_price)
    total_price = round2(items_price + tax_price + shipping_price)

    return CartPrices(
        items_price=f"{items_price:.2f}",
        shipping_price=f"{shipping_price:.2f}",
        tax_price=f"{tax_price:.2f}",
        total_price=f"{total_price:.2f}"
    )
