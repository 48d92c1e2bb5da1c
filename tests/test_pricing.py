import pytest
from decimal import Decimal

from storefront.core.money import round2
from storefront.schemas.cart import CartItem
from storefront.services.pricing import calc_price


def line(price: str, qty: int) -> dict:
    return {"price": price, "qty": qty}


def test_two_lines_at_threshold():
    prices = calc_price([line("50.00", 2)])

    assert prices.items_price == "100.00"
    assert prices.shipping_price == "0.00"
    assert prices.tax_price == "15.00"
    assert prices.total_price == "115.00"


@pytest.mark.parametrize("subtotal,shipping", [
    ("100.00", "0.00"),
    ("99.99", "10.00"),
    ("100.01", "0.00"),
])
def test_shipping_threshold(subtotal, shipping):
    assert calc_price([line(subtotal, 1)]).shipping_price == shipping


def test_single_cheap_item():
    prices = calc_price([line("25.00", 1)])

    assert prices.items_price == "25.00"
    assert prices.shipping_price == "10.00"
    assert prices.tax_price == "3.75"
    assert prices.total_price == "38.75"


def test_empty_cart_still_charges_shipping():
    prices = calc_price([])

    assert prices.items_price == "0.00"
    assert prices.shipping_price == "10.00"
    assert prices.tax_price == "0.00"
    assert prices.total_price == "10.00"


def test_accepts_cart_item_models():
    item = CartItem(
        product_id="p1",
        name="Basin",
        slug="basin",
        image="/basin.jpg",
        price="33.33",
        qty=3
    )

    prices = calc_price([item])

    assert prices.items_price == "99.99"
    assert prices.tax_price == "15.00"
    assert prices.total_price == "124.99"


@pytest.mark.parametrize("items", [
    [line("0.10", 3)],
    [line("19.99", 1), line("5.05", 7)],
    [line("33.33", 3), line("0.01", 1)],
    [line("1234.56", 2), line("0.99", 9)],
])
def test_totals_are_consistent(items):
    prices = calc_price(items)

    items_price = Decimal(prices.items_price)
    tax_price = Decimal(prices.tax_price)
    shipping_price = Decimal(prices.shipping_price)

    assert tax_price == round2(Decimal("0.15") * items_price)
    assert Decimal(prices.total_price) == round2(items_price + tax_price + shipping_price)


def test_is_deterministic():
    items = [line("19.99", 1), line("5.05", 7)]

    assert calc_price(items) == calc_price(items)
