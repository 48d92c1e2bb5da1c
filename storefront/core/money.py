"""
Currency helpers.

All cart arithmetic is done in Decimal and rounded half-up to cents.
Values leave the service as fixed 2-decimal strings ("19.99").
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


class InvalidMoneyValue(ValueError):
    pass


def to_decimal(value) -> Decimal:
    # bool is an int subclass, never a price
    if isinstance(value, bool) or value is None:
        raise InvalidMoneyValue(f"Invalid value: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # repr gives the shortest string that round-trips, so 1.005 stays 1.005
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidMoneyValue(f"Invalid value: {value!r}")
    else:
        raise InvalidMoneyValue(f"Invalid value: {value!r}")

    if not result.is_finite():
        raise InvalidMoneyValue(f"Invalid value: {value!r}")
    return result


def round2(value) -> Decimal:
    """Round a number or numeric string to 2 decimal places, half-up."""
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidMoneyValue(f"Value out of range: {value!r}")


def format_money(value) -> str:
    return f"{round2(value):.2f}"
