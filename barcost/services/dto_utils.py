"""DTO utilities for service layer.

Provides standardized formatting functions for data transfer objects,
ensuring consistent JSON serialization of costs and quantities.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union


def cost_to_string(value: Union[Decimal, float, int, str, None]) -> str:
    """
    Convert a cost value to a 2-decimal string format.

    Args:
        value: Cost value (Decimal, float, int, str, or None)

    Returns:
        String formatted as "12.34" (2 decimal places).
        Returns "0.00" if value is None.

    Examples:
        >>> cost_to_string(Decimal("12.345"))
        '12.35'
        >>> cost_to_string(None)
        '0.00'
    """
    if value is None:
        return "0.00"

    decimal_value = Decimal(str(value))
    rounded = decimal_value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return str(rounded)


def quantity_to_string(value: Union[Decimal, float, int, str, None]) -> str:
    """
    Convert a quantity to a string with at most 4 decimal places.

    Trailing zeros are dropped so whole quantities read naturally.

    Examples:
        >>> quantity_to_string(Decimal("4000.0000"))
        '4000'
        >>> quantity_to_string(Decimal("12.50"))
        '12.5'
    """
    if value is None:
        return "0"

    decimal_value = Decimal(str(value)).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    text = format(decimal_value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
