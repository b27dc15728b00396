"""
Consumption projection for drinks at an event.

This module provides functions for:
- Deriving whether a drink is alcoholic from the current ingredient catalog
- Projecting total servings from guest counts, duration and consumption rates
- Expanding servings into per-ingredient usage, summed across drinks

Transaction boundary: Pure computation (no database access).

Ingredient lookups may be a mapping of ingredient id -> ingredient or a
callable taking an id. Unknown ingredient ids never raise: they count as
non-alcoholic, and their usage is still reported so callers can decide to
ignore it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from barcost.utils.constants import ZERO
from barcost.utils.decimal_utils import to_decimal

IngredientLookup = Union[Mapping[Any, Any], Callable[[Any], Any]]
UsageMap = Dict[Any, Decimal]


@dataclass
class DrinkProjection:
    """Projected consumption of one drink.

    Attributes:
        drink_id: The drink ID
        drink_name: The drink display name
        is_alcoholic: Derived alcoholic flag used for the projection
        adult_servings: Servings drunk by adults
        child_servings: Servings drunk by children (0 for alcoholic drinks)
        total_servings: adult_servings + child_servings
        usage: Ingredient id -> quantity for this drink alone
    """

    drink_id: Any
    drink_name: str
    is_alcoholic: bool
    adult_servings: Decimal
    child_servings: Decimal
    total_servings: Decimal
    usage: UsageMap = field(default_factory=dict)


@dataclass
class ConsumptionProjection:
    """Projected consumption of a set of drinks.

    Attributes:
        drinks: One DrinkProjection per projected drink, in input order
        usage: Ingredient id -> quantity summed over all drinks
    """

    drinks: List[DrinkProjection] = field(default_factory=list)
    usage: UsageMap = field(default_factory=dict)

    @property
    def total_servings(self) -> Decimal:
        """Servings across all drinks."""
        return sum((d.total_servings for d in self.drinks), ZERO)


def resolve(lookup, key):
    """Resolve an id through a mapping or a callable; None when unknown."""
    if lookup is None:
        return None
    if isinstance(lookup, Mapping):
        return lookup.get(key)
    return lookup(key)


def is_drink_alcoholic(drink, ingredient_lookup: IngredientLookup) -> bool:
    """Check whether any recipe line of the drink uses an alcoholic ingredient.

    Computed from the catalog on every call so a change to an ingredient's
    flag is reflected immediately.

    Args:
        drink: Object with a ``recipe`` sequence of lines (ingredient_id, quantity)
        ingredient_lookup: Mapping or callable resolving ingredient ids

    Returns:
        True if at least one referenced ingredient is alcoholic
    """
    for line in drink.recipe:
        ingredient = resolve(ingredient_lookup, line.ingredient_id)
        if ingredient is not None and ingredient.is_alcoholic:
            return True
    return False


def effective_children_rate(drink, ingredient_lookup: IngredientLookup) -> Decimal:
    """Children's servings per person per hour actually used for projection.

    Always 0 for an alcoholic drink, whatever rate is stored on the drink.
    """
    if is_drink_alcoholic(drink, ingredient_lookup):
        return ZERO
    return to_decimal(drink.children_per_person_per_hour)


def _split_servings(drink, num_adults, num_children, duration_hours, ingredient_lookup):
    """Return (is_alcoholic, adult_servings, child_servings)."""
    alcoholic = is_drink_alcoholic(drink, ingredient_lookup)
    hours = to_decimal(duration_hours)

    if hours <= ZERO:
        return alcoholic, ZERO, ZERO

    adult_servings = (
        to_decimal(num_adults) * hours * to_decimal(drink.adults_per_person_per_hour)
    )
    if alcoholic:
        child_servings = ZERO
    else:
        child_servings = (
            to_decimal(num_children) * hours * to_decimal(drink.children_per_person_per_hour)
        )
    return alcoholic, adult_servings, child_servings


def project_servings(
    drink,
    num_adults,
    num_children,
    duration_hours,
    ingredient_lookup: IngredientLookup,
) -> Decimal:
    """Project the total servings of a drink for an event.

    adult servings = adults * hours * adult rate
    child servings = 0 if the drink is alcoholic, else children * hours * child rate

    A non-positive duration yields zero servings rather than an error.

    Args:
        drink: Drink with adults_per_person_per_hour / children_per_person_per_hour
        num_adults: Adult guests
        num_children: Child guests
        duration_hours: Event length in hours
        ingredient_lookup: Mapping or callable resolving ingredient ids

    Returns:
        Total servings (Decimal)

    Example:
        >>> project_servings(mojito, 40, 0, 4, ingredients)  # adult rate 0.5
        Decimal('80.0')
    """
    _, adult_servings, child_servings = _split_servings(
        drink, num_adults, num_children, duration_hours, ingredient_lookup
    )
    return adult_servings + child_servings


def project_usage(drink, total_servings, usage: Optional[UsageMap] = None) -> UsageMap:
    """Expand servings of a drink into per-ingredient quantities.

    Each recipe line contributes quantity * total_servings. When ``usage`` is
    given the quantities are added to it (an ingredient used by several
    drinks accumulates, it is never overwritten) and the same dict is
    returned.

    Args:
        drink: Object with a ``recipe`` sequence of lines
        total_servings: Servings to expand
        usage: Optional usage map to accumulate into

    Returns:
        Ingredient id -> quantity. Unchanged (empty for a new map) when
        total_servings <= 0.
    """
    if usage is None:
        usage = {}

    servings = to_decimal(total_servings)
    if servings <= ZERO:
        return usage

    for line in drink.recipe:
        quantity = to_decimal(line.quantity) * servings
        usage[line.ingredient_id] = usage.get(line.ingredient_id, ZERO) + quantity

    return usage


def project_drinks(
    drinks: Iterable,
    num_adults,
    num_children,
    duration_hours,
    ingredient_lookup: IngredientLookup,
) -> ConsumptionProjection:
    """Project servings and consolidated ingredient usage for several drinks.

    Args:
        drinks: Drinks to project together
        num_adults: Adult guests
        num_children: Child guests
        duration_hours: Event length in hours
        ingredient_lookup: Mapping or callable resolving ingredient ids

    Returns:
        ConsumptionProjection with per-drink detail and the summed usage map
    """
    projection = ConsumptionProjection()

    for drink in drinks:
        alcoholic, adult_servings, child_servings = _split_servings(
            drink, num_adults, num_children, duration_hours, ingredient_lookup
        )
        total_servings = adult_servings + child_servings

        projection.drinks.append(
            DrinkProjection(
                drink_id=drink.id,
                drink_name=drink.name,
                is_alcoholic=alcoholic,
                adult_servings=adult_servings,
                child_servings=child_servings,
                total_servings=total_servings,
                usage=project_usage(drink, total_servings),
            )
        )
        project_usage(drink, total_servings, projection.usage)

    return projection
