"""
Cost aggregation for event pricing.

This module provides functions for:
- Pricing an ingredient usage map at current weighted-average stock cost
- Adding flat staff (operational) costs
- Applying the profit margin to derive the chargeable price
- Costing a single serving of a drink
- Running a full simulation (projection + pricing) for a set of drinks

Transaction boundary: Pure computation (no database access).

Profit is charged on ingredient cost only; operational cost is passed
through without markup. Inputs are not clamped: a negative margin or staff
cost flows through the arithmetic unchanged.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable

from barcost.utils.constants import ZERO
from barcost.utils.decimal_utils import to_decimal

from .consumption import ConsumptionProjection, IngredientLookup, project_drinks, resolve
from .valuation import valuate

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CostBreakdown:
    """Cost and price of an event or simulation.

    Attributes:
        ingredient_cost: Usage priced at average stock cost
        operational_cost: Sum of staff costs
        total_cost: ingredient_cost + operational_cost
        profit: ingredient_cost * margin / 100
        final_price: total_cost + profit
    """

    ingredient_cost: Decimal
    operational_cost: Decimal
    total_cost: Decimal
    profit: Decimal
    final_price: Decimal

    def to_dict(self) -> Dict[str, str]:
        """Serialize with 2-decimal cost strings."""
        from barcost.services.dto_utils import cost_to_string

        return {
            "ingredient_cost": cost_to_string(self.ingredient_cost),
            "operational_cost": cost_to_string(self.operational_cost),
            "total_cost": cost_to_string(self.total_cost),
            "profit": cost_to_string(self.profit),
            "final_price": cost_to_string(self.final_price),
        }


@dataclass
class SimulationResult:
    """Projection and pricing produced by simulate_costs().

    Attributes:
        projection: Servings per drink and consolidated usage
        breakdown: Cost breakdown of the consolidated usage plus staff
        ingredient_costs: Ingredient id -> cost of its projected usage
    """

    projection: ConsumptionProjection
    breakdown: CostBreakdown
    ingredient_costs: Dict[Any, Decimal] = field(default_factory=dict)


def price_usage(usage: Dict[Any, Decimal], ingredient_lookup: IngredientLookup) -> Dict[Any, Decimal]:
    """Cost of each usage entry at the ingredient's current average unit cost.

    Unknown ingredient ids are priced at 0.
    """
    costs = {}
    for ingredient_id, quantity in usage.items():
        ingredient = resolve(ingredient_lookup, ingredient_id)
        if ingredient is None:
            costs[ingredient_id] = ZERO
            continue
        costs[ingredient_id] = valuate(ingredient).avg_unit_cost * to_decimal(quantity)
    return costs


def aggregate(
    usage: Dict[Any, Decimal],
    ingredient_lookup: IngredientLookup,
    staff: Iterable,
    profit_margin_percent,
) -> CostBreakdown:
    """Combine ingredient usage and staff into a priced cost breakdown.

    Args:
        usage: Ingredient id -> quantity (e.g., from project_drinks().usage)
        ingredient_lookup: Mapping or callable resolving ingredient ids
        staff: Objects with a ``cost`` attribute (flat, not time-scaled)
        profit_margin_percent: Markup applied to ingredient cost only

    Returns:
        CostBreakdown with every field defined

    Example:
        ingredient cost 100, staff 50, margin 20 -> profit 20, final price 170
    """
    ingredient_cost = sum(price_usage(usage, ingredient_lookup).values(), ZERO)
    operational_cost = sum((to_decimal(member.cost) for member in staff), ZERO)
    total_cost = ingredient_cost + operational_cost
    profit = ingredient_cost * (to_decimal(profit_margin_percent) / HUNDRED)
    final_price = total_cost + profit

    return CostBreakdown(
        ingredient_cost=ingredient_cost,
        operational_cost=operational_cost,
        total_cost=total_cost,
        profit=profit,
        final_price=final_price,
    )


def serving_cost(drink, ingredient_lookup: IngredientLookup) -> Decimal:
    """Cost of one serving of a drink at current average stock cost.

    Ingredients without stock (or unknown ids) contribute 0, so a zero
    result for a drink with a recipe usually means nothing is in stock.
    """
    usage = {}
    for line in drink.recipe:
        usage[line.ingredient_id] = usage.get(line.ingredient_id, ZERO) + to_decimal(
            line.quantity
        )
    return sum(price_usage(usage, ingredient_lookup).values(), ZERO)


def simulate_costs(
    drinks: Iterable,
    ingredient_lookup: IngredientLookup,
    num_adults,
    num_children,
    duration_hours,
    staff: Iterable,
    profit_margin_percent,
) -> SimulationResult:
    """Project consumption for the drinks and price it.

    Args:
        drinks: Drinks offered at the event
        ingredient_lookup: Mapping or callable resolving ingredient ids
        num_adults: Adult guests
        num_children: Child guests
        duration_hours: Event length in hours (<= 0 gives zero ingredient cost)
        staff: Objects with a ``cost`` attribute
        profit_margin_percent: Markup applied to ingredient cost

    Returns:
        SimulationResult
    """
    projection = project_drinks(drinks, num_adults, num_children, duration_hours, ingredient_lookup)
    breakdown = aggregate(projection.usage, ingredient_lookup, staff, profit_margin_percent)

    return SimulationResult(
        projection=projection,
        breakdown=breakdown,
        ingredient_costs=price_usage(projection.usage, ingredient_lookup),
    )
