"""
Inventory valuation (lot-based).

This module provides functions for:
- Unit cost of a single purchase lot
- Total remaining stock, weighted-average unit cost and stock value of an ingredient
- Low-stock detection

Transaction boundary: Pure computation (no database access). Values are
recomputed from the lots on every call; nothing is cached, so a valuation
always reflects the latest depletion.
"""

from dataclasses import dataclass
from decimal import Decimal

from barcost.utils.constants import ZERO
from barcost.utils.decimal_utils import to_decimal


@dataclass(frozen=True)
class StockValuation:
    """Current stock figures for one ingredient.

    Attributes:
        total_stock: Sum of remaining quantity over all lots
        avg_unit_cost: total_value / total_stock (0 when there is no stock)
        total_value: Sum of remaining quantity * lot unit cost
    """

    total_stock: Decimal
    avg_unit_cost: Decimal
    total_value: Decimal


def lot_unit_cost(lot) -> Decimal:
    """Cost of one unit from a purchase lot.

    A lot with a zero (or negative) purchased quantity costs nothing per
    unit rather than raising.

    Args:
        lot: Object with purchased_quantity and total_price

    Returns:
        total_price / purchased_quantity, or 0

    Examples:
        >>> lot_unit_cost(PurchaseLot(purchased_quantity=5000, total_price=100))
        Decimal('0.02')
    """
    purchased = to_decimal(lot.purchased_quantity)
    if purchased <= ZERO:
        return ZERO
    return to_decimal(lot.total_price) / purchased


def valuate(ingredient) -> StockValuation:
    """Compute total stock, average unit cost and value from an ingredient's lots.

    Args:
        ingredient: Object with a ``lots`` sequence

    Returns:
        StockValuation (all zeros for an ingredient without lots)
    """
    total_stock = ZERO
    total_value = ZERO

    for lot in ingredient.lots:
        remaining = to_decimal(lot.remaining_quantity)
        total_stock += remaining
        total_value += remaining * lot_unit_cost(lot)

    avg_unit_cost = total_value / total_stock if total_stock > ZERO else ZERO

    return StockValuation(
        total_stock=total_stock,
        avg_unit_cost=avg_unit_cost,
        total_value=total_value,
    )


def is_low_stock(ingredient) -> bool:
    """Check whether an ingredient's stock has fallen below its alert threshold.

    Ingredients without a threshold (None or 0) are never low.
    """
    threshold = getattr(ingredient, "low_stock_threshold", None)
    if not threshold:
        return False
    return valuate(ingredient).total_stock < to_decimal(threshold)
