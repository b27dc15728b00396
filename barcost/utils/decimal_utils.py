"""Decimal conversion helpers shared by the costing engine."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. None is treated as zero.

    Examples:
        >>> to_decimal(0.5)
        Decimal('0.5')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


QUANTITY_PLACES = Decimal("0.0001")


def quantize_quantity(value: Number) -> Decimal:
    """Round a stock quantity to the 4 places the quantity columns store.

    Examples:
        >>> quantize_quantity(Decimal(4000) / 3)
        Decimal('1333.3333')
    """
    return to_decimal(value).quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)
