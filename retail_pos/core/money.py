"""
Decimal helpers for monetary values.

Calculations run on unrounded Decimals; rounding happens only when a value
is displayed or persisted.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """
    Convert int, float or str to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a monetary value")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    return Decimal(value)


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def round_currency(amount: Decimal, places: int = 2) -> Decimal:
    """
    Round to currency precision (ROUND_HALF_UP).

    Args:
        amount: Amount to round
        places: Decimal places (2 for INR)

    Returns:
        Rounded amount
    """
    return to_decimal(amount).quantize(_quantum(places), rounding=ROUND_HALF_UP)

