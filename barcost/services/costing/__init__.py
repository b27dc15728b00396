"""
Costing engine: pure calculations over in-memory catalog snapshots.

Modules:
- valuation: Lot-based stock quantity, average unit cost and value
- consumption: Servings and ingredient usage projected from guests and duration
- cost_aggregation: Ingredient + staff cost, profit and final price
- fifo: Oldest-lot-first depletion (plan, then apply)
- reconciler: Event completion composed from the modules above

None of these modules open a database session. Inputs are model instances
(or any objects with the same attributes); the only mutations are lot
remaining quantities and event status, made by fifo and reconciler.
"""

from .valuation import StockValuation, is_low_stock, lot_unit_cost, valuate
from .consumption import (
    ConsumptionProjection,
    DrinkProjection,
    effective_children_rate,
    is_drink_alcoholic,
    project_drinks,
    project_servings,
    project_usage,
)
from .cost_aggregation import CostBreakdown, SimulationResult, aggregate, serving_cost, simulate_costs
from .fifo import DepletionPlan, LotDeduction, apply_depletion, deplete, plan_adjustment, plan_depletion
from .reconciler import CompletionResult, EventCompletionPlan, complete, plan_event_completion

__all__ = [
    "StockValuation",
    "is_low_stock",
    "lot_unit_cost",
    "valuate",
    "ConsumptionProjection",
    "DrinkProjection",
    "effective_children_rate",
    "is_drink_alcoholic",
    "project_drinks",
    "project_servings",
    "project_usage",
    "CostBreakdown",
    "SimulationResult",
    "aggregate",
    "serving_cost",
    "simulate_costs",
    "DepletionPlan",
    "LotDeduction",
    "apply_depletion",
    "deplete",
    "plan_adjustment",
    "plan_depletion",
    "CompletionResult",
    "EventCompletionPlan",
    "complete",
    "plan_event_completion",
]
