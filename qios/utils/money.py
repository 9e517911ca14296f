from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from qios.core.constants import MONEY_QUANT


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    # str() first so floats like 0.1 don't drag binary noise along
    return Decimal(str(value))


def round_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def compute_tax(subtotal: Decimal, rate: Decimal) -> Decimal:
    return round_money(to_decimal(subtotal) * to_decimal(rate))
