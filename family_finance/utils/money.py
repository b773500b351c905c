"""
Currency helpers.
Analytics run on floats; values leaving the core are quantized Decimals.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Context, Decimal, getcontext
from typing import Union

from .constants import BUDGET_ROUNDING_UNIT, CURRENCY_DECIMALS

Number = Union[int, float, Decimal]

CENT = Decimal(1).scaleb(-CURRENCY_DECIMALS)
ZERO = Decimal("0.00")


def _cent_context(value: Decimal) -> Context:
    # Enough digits to hold every integer digit plus the cents.
    return Context(prec=max(getcontext().prec, value.adjusted() + CURRENCY_DECIMALS + 2))


def to_money(value: Number) -> Decimal:
    """
    Quantize a number to currency precision (half up).

    Balances that compounded past the default 28 digits are still quantized.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP, context=_cent_context(value))


def ceil_to_unit(value: Number, unit: int = BUDGET_ROUNDING_UNIT) -> Decimal:
    """
    Round up to the next multiple of ``unit``.

    The value is first quantized to cents so float noise such as
    5000.000000001 does not push an exact multiple up a whole unit.

    Examples:
        123456 -> 124000
        5000   -> 5000
        -1500  -> -1000
    """
    cents = to_money(value)
    step = Decimal(unit)
    multiples = (cents / step).to_integral_value(rounding=ROUND_CEILING)
    return to_money(multiples * step)
