"""
Event lifecycle reconciliation.

State machine: PLANNED --complete()--> COMPLETED

Completing an event composes the other costing modules into one
side-effecting step:

1. Project servings for every selected drink and sum the usage per ingredient
2. Plan a FIFO depletion for every ingredient in the usage map
3. Apply all plans, then set the event status to COMPLETED

Every plan is computed and checked before any lot is written, so in memory
the lot mutations and the status flip happen together or not at all. The
service layer (event_service.complete_event) runs this inside one database
transaction for the same guarantee on disk.

Transaction boundary: Pure computation over in-memory snapshots. Mutates
lot remaining quantities and event.status only.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from barcost.models.enums import EventStatus
from barcost.utils.constants import ZERO
from barcost.utils.decimal_utils import to_decimal

from ..exceptions import InvalidEventDuration
from .consumption import ConsumptionProjection, IngredientLookup, project_drinks, resolve
from .fifo import DepletionPlan, apply_depletion, ensure_plan_current, plan_depletion


@dataclass
class EventCompletionPlan:
    """Everything an event completion would change, computed but not applied.

    Attributes:
        event: The event being completed
        duration_hours: Event length used for the projection
        projection: Servings per drink and consolidated usage
        depletions: Ingredient id -> FIFO depletion plan
        skipped_drink_ids: Selected drink ids missing from the drink lookup
        skipped_ingredient_ids: Used ingredient ids missing from the ingredient lookup
    """

    event: Any
    duration_hours: Decimal
    projection: ConsumptionProjection
    depletions: Dict[Any, DepletionPlan] = field(default_factory=dict)
    skipped_drink_ids: List[Any] = field(default_factory=list)
    skipped_ingredient_ids: List[Any] = field(default_factory=list)


@dataclass
class CompletionResult:
    """Outcome of complete().

    Attributes:
        event: The event
        already_completed: True when the event was completed before this call
                           (nothing was changed)
        plan: The applied completion plan (None when already completed)
    """

    event: Any
    already_completed: bool = False
    plan: Optional[EventCompletionPlan] = None

    @property
    def depletions(self) -> Dict[Any, DepletionPlan]:
        """Ingredient id -> applied depletion plan."""
        return self.plan.depletions if self.plan else {}

    @property
    def usage(self) -> Dict[Any, Decimal]:
        """Consolidated ingredient usage that was depleted."""
        return self.plan.projection.usage if self.plan else {}

    @property
    def shortfalls(self) -> Dict[Any, Decimal]:
        """Ingredient id -> quantity stock could not cover (only ingredients that fell short)."""
        return {
            ingredient_id: plan.shortfall
            for ingredient_id, plan in self.depletions.items()
            if plan.shortfall > ZERO
        }

    @property
    def has_shortfall(self) -> bool:
        """True when at least one ingredient ran out."""
        return bool(self.shortfalls)

    @property
    def consumed_cost(self) -> Decimal:
        """Historical cost of the stock consumed, at each lot's own unit cost."""
        return sum((plan.cost for plan in self.depletions.values()), ZERO)


def plan_event_completion(
    event,
    drink_lookup,
    ingredient_lookup: IngredientLookup,
) -> EventCompletionPlan:
    """Compute the depletions an event completion requires, without applying them.

    Unknown drink ids and unknown ingredient ids contribute nothing and are
    listed on the plan.

    Args:
        event: Object with selected_drink_ids, num_adults, num_children and duration_hours
        drink_lookup: Mapping or callable resolving drink ids
        ingredient_lookup: Mapping or callable resolving ingredient ids

    Returns:
        EventCompletionPlan

    Raises:
        InvalidEventDuration: If the event's duration is not positive
    """
    duration = to_decimal(event.duration_hours)
    if duration <= ZERO:
        raise InvalidEventDuration(event.id, duration)

    drinks = []
    skipped_drink_ids = []
    for drink_id in event.selected_drink_ids:
        drink = resolve(drink_lookup, drink_id)
        if drink is None:
            skipped_drink_ids.append(drink_id)
            continue
        drinks.append(drink)

    projection = project_drinks(
        drinks, event.num_adults, event.num_children, duration, ingredient_lookup
    )

    plan = EventCompletionPlan(
        event=event,
        duration_hours=duration,
        projection=projection,
        skipped_drink_ids=skipped_drink_ids,
    )

    for ingredient_id, quantity in projection.usage.items():
        ingredient = resolve(ingredient_lookup, ingredient_id)
        if ingredient is None:
            plan.skipped_ingredient_ids.append(ingredient_id)
            continue
        plan.depletions[ingredient_id] = plan_depletion(ingredient, quantity)

    return plan


def complete(event, drink_lookup, ingredient_lookup: IngredientLookup) -> CompletionResult:
    """Complete an event: deplete its projected consumption and mark it COMPLETED.

    Completing an already completed event is a no-op, so calling this twice
    never depletes stock twice.

    Args:
        event: Event to complete (status is mutated)
        drink_lookup: Mapping or callable resolving drink ids
        ingredient_lookup: Mapping or callable resolving ingredient ids

    Returns:
        CompletionResult with per-ingredient depletions and shortfalls

    Raises:
        InvalidEventDuration: If the event's duration is not positive
        StaleDepletionPlan: If a lot changed between planning and applying
    """
    if event.status == EventStatus.COMPLETED:
        return CompletionResult(event=event, already_completed=True)

    plan = plan_event_completion(event, drink_lookup, ingredient_lookup)

    for depletion in plan.depletions.values():
        ensure_plan_current(depletion)

    for depletion in plan.depletions.values():
        apply_depletion(depletion)

    event.status = EventStatus.COMPLETED
    return CompletionResult(event=event, plan=plan)
