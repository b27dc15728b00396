"""
Drink catalog service.

This module provides business logic for drinks including:
- CRUD operations on drinks and their recipes
- Serving cost at current average stock cost
- The derived alcoholic flag

A drink stores the children's consumption rate exactly as entered. Whether a
drink is alcoholic is never stored: it is derived from its ingredients each
time, and an alcoholic drink is projected with a children's rate of 0.

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barcost.models import Drink, Ingredient, RecipeLine, event_drinks
from barcost.utils.decimal_utils import to_decimal
from barcost.utils.validators import sanitize_string, validate_drink_data

from .costing.consumption import effective_children_rate, is_drink_alcoholic
from .costing.cost_aggregation import serving_cost
from .database import session_scope
from .exceptions import (
    DatabaseError,
    DrinkInUse,
    DrinkNotFound,
    IngredientNotFound,
    ValidationError,
)
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def _get_drink_or_raise(drink_id: int, session: Session) -> Drink:
    """Get drink by ID or raise DrinkNotFound.

    Transaction boundary: Inherits session from caller.
    """
    drink = session.get(Drink, drink_id)
    if drink is None:
        raise DrinkNotFound(drink_id)
    return drink


def ingredient_lookup(session: Session) -> Dict[int, Ingredient]:
    """All ingredients keyed by ID, for the costing engine.

    Transaction boundary: Inherits session from caller.
    """
    return {ingredient.id: ingredient for ingredient in session.query(Ingredient).all()}


def _build_recipe(recipe: List[Dict], session: Session) -> List[RecipeLine]:
    lines = []
    for line in recipe:
        ingredient_id = line["ingredient_id"]
        if session.get(Ingredient, ingredient_id) is None:
            raise IngredientNotFound(ingredient_id)
        lines.append(
            RecipeLine(ingredient_id=ingredient_id, quantity=to_decimal(line["quantity"]))
        )
    return lines


def _create_drink_impl(data: Dict, session: Session) -> Drink:
    drink = Drink(
        name=sanitize_string(data["name"]),
        adults_per_person_per_hour=to_decimal(data.get("adults_per_person_per_hour")),
        children_per_person_per_hour=to_decimal(data.get("children_per_person_per_hour")),
        notes=sanitize_string(data.get("notes")),
        recipe=_build_recipe(data.get("recipe") or [], session),
    )
    session.add(drink)
    session.flush()

    log_operation(
        logger,
        operation="create_drink",
        outcome="success",
        drink_id=drink.id,
        recipe_lines=len(drink.recipe),
    )
    return drink


def create_drink(data: Dict, session: Session = None) -> Drink:
    """
    Create a drink with its recipe.

    Args:
        data: Dictionary with name, adults_per_person_per_hour,
              children_per_person_per_hour, optional notes and recipe
              (list of {"ingredient_id", "quantity"} per serving)
        session: Optional session for transaction sharing

    Returns:
        Created Drink

    Raises:
        ValidationError: If data validation fails
        IngredientNotFound: If a recipe line references an unknown ingredient
        DatabaseError: If database operation fails

    Example:
        >>> create_drink({
        ...     "name": "Mojito",
        ...     "adults_per_person_per_hour": "0.5",
        ...     "children_per_person_per_hour": "0",
        ...     "recipe": [{"ingredient_id": rum.id, "quantity": 50}],
        ... })
    """
    is_valid, errors = validate_drink_data(data)
    if not is_valid:
        raise ValidationError(errors)

    if session is not None:
        return _create_drink_impl(data, session)

    try:
        with session_scope() as session:
            return _create_drink_impl(data, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create drink", e)


def get_drink(drink_id: int, session: Session = None) -> Drink:
    """
    Retrieve a drink with its recipe.

    Raises:
        DrinkNotFound: If drink doesn't exist
    """
    if session is not None:
        return _get_drink_or_raise(drink_id, session)

    try:
        with session_scope() as session:
            return _get_drink_or_raise(drink_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve drink {drink_id}", e)


def get_all_drinks(session: Session = None) -> List[Drink]:
    """List drinks ordered by name."""
    if session is not None:
        return session.query(Drink).order_by(Drink.name).all()

    try:
        with session_scope() as session:
            return session.query(Drink).order_by(Drink.name).all()
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve drinks", e)


def _update_drink_impl(drink_id: int, data: Dict, session: Session) -> Drink:
    drink = _get_drink_or_raise(drink_id, session)

    if "name" in data:
        drink.name = sanitize_string(data["name"])
    if "notes" in data:
        drink.notes = sanitize_string(data["notes"])
    for field in ("adults_per_person_per_hour", "children_per_person_per_hour"):
        if field in data:
            setattr(drink, field, to_decimal(data[field]))
    if "recipe" in data:
        # old lines must be deleted before new ones reuse their ingredients
        drink.recipe = []
        session.flush()
        drink.recipe = _build_recipe(data["recipe"] or [], session)

    session.flush()
    log_operation(logger, operation="update_drink", outcome="success", drink_id=drink_id)
    return drink


def update_drink(drink_id: int, data: Dict, session: Session = None) -> Drink:
    """
    Update a drink. A ``recipe`` key replaces the whole recipe.

    Raises:
        DrinkNotFound: If drink doesn't exist
        ValidationError: If data validation fails
        IngredientNotFound: If a recipe line references an unknown ingredient
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_drink_data(data, partial=True)
    if not is_valid:
        raise ValidationError(errors)

    if session is not None:
        return _update_drink_impl(drink_id, data, session)

    try:
        with session_scope() as session:
            return _update_drink_impl(drink_id, data, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update drink {drink_id}", e)


def _delete_drink_impl(drink_id: int, session: Session) -> bool:
    drink = _get_drink_or_raise(drink_id, session)

    event_count = (
        session.query(event_drinks.c.event_id)
        .filter(event_drinks.c.drink_id == drink_id)
        .count()
    )
    if event_count > 0:
        log_operation(
            logger,
            operation="delete_drink",
            outcome="rejected",
            drink_id=drink_id,
            event_count=event_count,
        )
        raise DrinkInUse(drink_id, event_count)

    session.delete(drink)
    session.flush()
    log_operation(logger, operation="delete_drink", outcome="success", drink_id=drink_id)
    return True


def delete_drink(drink_id: int, session: Session = None) -> bool:
    """
    Delete a drink and its recipe.

    Raises:
        DrinkNotFound: If drink doesn't exist
        DrinkInUse: If any event has the drink selected
        DatabaseError: If database operation fails
    """
    if session is not None:
        return _delete_drink_impl(drink_id, session)

    try:
        with session_scope() as session:
            return _delete_drink_impl(drink_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete drink {drink_id}", e)


def _with_drink(drink_id: int, session: Optional[Session], compute):
    if session is not None:
        drink = _get_drink_or_raise(drink_id, session)
        return compute(drink, ingredient_lookup(session))

    try:
        with session_scope() as session:
            drink = _get_drink_or_raise(drink_id, session)
            return compute(drink, ingredient_lookup(session))
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to load drink {drink_id}", e)


def get_serving_cost(drink_id: int, session: Session = None) -> Decimal:
    """
    Cost of one serving at each ingredient's current average stock cost.

    Raises:
        DrinkNotFound: If drink doesn't exist
    """
    return _with_drink(drink_id, session, serving_cost)


def is_alcoholic(drink_id: int, session: Session = None) -> bool:
    """
    Whether the drink contains at least one alcoholic ingredient.

    Raises:
        DrinkNotFound: If drink doesn't exist
    """
    return _with_drink(drink_id, session, is_drink_alcoholic)


def get_effective_children_rate(drink_id: int, session: Session = None) -> Decimal:
    """Children's rate used for projection (0 when the drink is alcoholic)."""
    return _with_drink(drink_id, session, effective_children_rate)


def load_drinks(drink_ids: List[int], session: Session) -> List[Drink]:
    """Load drinks in the order given, raising DrinkNotFound for any unknown ID.

    Duplicate IDs are collapsed.

    Transaction boundary: Inherits session from caller.
    """
    drinks = []
    seen = set()
    for drink_id in drink_ids:
        if drink_id in seen:
            continue
        seen.add(drink_id)
        drinks.append(_get_drink_or_raise(drink_id, session))
    return drinks
