"""
FIFO (First In, First Out) depletion of purchase lots.

Depletion is split into two phases so a caller can wrap the mutation in a
single transaction:

1. plan_depletion() walks the lots oldest first and records how much to take
   from each, without touching them.
2. apply_depletion() checks that no lot changed since planning and then
   writes the new remaining quantities.

deplete() runs both phases. Running out of stock is not an error: the plan
reports the unmet amount as ``shortfall`` and leaves every lot at zero, never
negative. Manual adjustments go through plan_adjustment(), which refuses to
plan more than the ingredient has in stock.

Transaction boundary: Pure computation over in-memory lots. The only
mutation is lot.remaining_quantity, made by apply_depletion().
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List

from barcost.utils.constants import ZERO
from barcost.utils.decimal_utils import quantize_quantity, to_decimal

from ..exceptions import InsufficientStock, StaleDepletionPlan, ValidationError
from .valuation import lot_unit_cost, valuate


@dataclass(frozen=True)
class LotDeduction:
    """Quantity to take from one lot.

    Attributes:
        lot: The purchase lot
        remaining_before: Lot remaining quantity when the plan was made
        quantity: Amount to deduct (> 0)
        unit_cost: Lot unit cost, for historical (FIFO) costing
    """

    lot: Any
    remaining_before: Decimal
    quantity: Decimal
    unit_cost: Decimal

    @property
    def remaining_after(self) -> Decimal:
        """Lot remaining quantity once the deduction is applied."""
        return self.remaining_before - self.quantity

    @property
    def cost(self) -> Decimal:
        """Cost of the deducted quantity at the lot's unit cost."""
        return self.quantity * self.unit_cost


@dataclass
class DepletionPlan:
    """Planned (or applied) FIFO depletion of one ingredient.

    Attributes:
        ingredient: The ingredient being depleted
        requested: Quantity asked for
        deductions: Per-lot deductions, oldest lot first
        shortfall: Quantity that stock could not cover (0 if satisfied)
        ordered_lots: All of the ingredient's lots in FIFO order
        applied: True once apply_depletion() has run
    """

    ingredient: Any
    requested: Decimal
    deductions: List[LotDeduction] = field(default_factory=list)
    shortfall: Decimal = ZERO
    ordered_lots: List[Any] = field(default_factory=list)
    applied: bool = False

    @property
    def ingredient_id(self):
        """ID of the ingredient being depleted."""
        return self.ingredient.id

    @property
    def consumed(self) -> Decimal:
        """Quantity actually taken from lots."""
        return sum((d.quantity for d in self.deductions), ZERO)

    @property
    def satisfied(self) -> bool:
        """True when the full requested quantity was covered."""
        return self.shortfall == ZERO

    @property
    def cost(self) -> Decimal:
        """FIFO cost of the consumed quantity."""
        return sum((d.cost for d in self.deductions), ZERO)

    @property
    def updated_lots(self) -> List[Any]:
        """The ingredient's lots in FIFO order (mutated once applied)."""
        return self.ordered_lots


def _fifo_key(lot):
    """Sort key: purchase date ascending, undated lots last."""
    return (lot.purchase_date is None, lot.purchase_date)


def fifo_order(lots) -> list:
    """Return lots oldest first.

    The sort is stable, so lots bought on the same date keep their
    insertion order.
    """
    return sorted(lots, key=_fifo_key)


def plan_depletion(ingredient, required_quantity) -> DepletionPlan:
    """Plan a FIFO depletion without modifying any lot.

    Algorithm:
        1. Order lots by purchase_date ascending (ties in insertion order)
        2. Take min(still needed, lot remaining) from each lot in turn
        3. Stop when the requirement is met or the lots run out
        4. Whatever is still needed becomes the shortfall

    Args:
        ingredient: Object with ``lots`` (each with purchase_date,
                    remaining_quantity, purchased_quantity, total_price)
        required_quantity: Quantity needed, in the ingredient's unit; rounded
                           to the 4 places lot quantities are stored with

    Returns:
        DepletionPlan. A non-positive requirement yields an empty plan with
        zero shortfall.

    Example:
        Lots [2025-01-01: 10, 2025-02-01: 10], required 12
        -> take 10 from the January lot, 2 from the February lot, shortfall 0
    """
    required = quantize_quantity(required_quantity)
    ordered = fifo_order(ingredient.lots)
    plan = DepletionPlan(ingredient=ingredient, requested=required, ordered_lots=ordered)

    if required <= ZERO:
        return plan

    remaining_needed = required
    for lot in ordered:
        if remaining_needed <= ZERO:
            break

        available = to_decimal(lot.remaining_quantity)
        if available <= ZERO:
            continue

        to_deduct = min(remaining_needed, available)
        plan.deductions.append(
            LotDeduction(
                lot=lot,
                remaining_before=available,
                quantity=to_deduct,
                unit_cost=lot_unit_cost(lot),
            )
        )
        remaining_needed -= to_deduct

    plan.shortfall = max(ZERO, remaining_needed)
    return plan


def ensure_plan_current(plan: DepletionPlan) -> None:
    """Check that every lot in the plan still holds what it held at planning time.

    Raises:
        StaleDepletionPlan: On the first lot whose remaining quantity differs
    """
    for deduction in plan.deductions:
        current = to_decimal(deduction.lot.remaining_quantity)
        if current != deduction.remaining_before:
            raise StaleDepletionPlan(
                getattr(deduction.lot, "id", None), deduction.remaining_before, current
            )


def apply_depletion(plan: DepletionPlan) -> DepletionPlan:
    """Apply a depletion plan to its lots.

    Every lot is checked before any is written, so a stale plan leaves all
    lots untouched. Applying an already applied plan does nothing.

    Args:
        plan: Plan from plan_depletion() or plan_adjustment()

    Returns:
        The same plan, marked applied

    Raises:
        StaleDepletionPlan: If a lot's remaining quantity changed since planning
    """
    if plan.applied:
        return plan

    ensure_plan_current(plan)

    for deduction in plan.deductions:
        deduction.lot.remaining_quantity = deduction.remaining_after

    plan.applied = True
    return plan


def deplete(ingredient, required_quantity) -> DepletionPlan:
    """Deduct a quantity from an ingredient's lots, oldest first.

    Args:
        ingredient: Ingredient whose lots are mutated
        required_quantity: Quantity needed

    Returns:
        Applied DepletionPlan; ``updated_lots`` and ``shortfall`` describe the outcome
    """
    return apply_depletion(plan_depletion(ingredient, required_quantity))


def plan_adjustment(ingredient, quantity) -> DepletionPlan:
    """Plan a manual stock removal, refusing anything stock cannot cover.

    Unlike event completion, a manual adjustment must be fully satisfiable,
    so sufficiency is checked against current total stock before a plan is
    produced.

    Args:
        ingredient: Ingredient to remove stock from
        quantity: Quantity to remove (> 0)

    Returns:
        DepletionPlan with zero shortfall (not yet applied)

    Raises:
        ValidationError: If quantity <= 0
        InsufficientStock: If quantity exceeds current total stock
    """
    requested = quantize_quantity(quantity)
    if requested <= ZERO:
        raise ValidationError(["Adjustment quantity must be greater than zero"])

    available = valuate(ingredient).total_stock
    if requested > available:
        raise InsufficientStock(ingredient.name, requested, available)

    return plan_depletion(ingredient, requested)
