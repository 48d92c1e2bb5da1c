import pytest
from decimal import Decimal

from storefront.core.money import InvalidMoneyValue, format_money, round2


def test_round2_half_up():
    assert round2("2.345") == Decimal("2.35")
    assert round2("2.344") == Decimal("2.34")
    assert round2(10) == Decimal("10.00")


def test_round2_counters_float_drift():
    assert round2(1.005) == Decimal("1.01")
    assert round2(0.1 + 0.2) == Decimal("0.30")


def test_round2_accepts_padded_numeric_string():
    assert round2(" 19.989 ") == Decimal("19.99")


@pytest.mark.parametrize("value", ["abc", "", None, True, float("nan"), float("inf"), "Infinity", "1e30", [1]])
def test_round2_rejects_non_numeric(value):
    with pytest.raises(InvalidMoneyValue):
        round2(value)


def test_format_money_always_two_decimals():
    assert format_money(19.9) == "19.90"
    assert format_money(Decimal("0")) == "0.00"
    assert format_money("115") == "115.00"
