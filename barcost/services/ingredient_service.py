"""
Ingredient catalog service.

This module provides business logic for ingredients including:
- CRUD operations (create, read, update, delete)
- Stock summaries (total stock, average unit cost, total value)
- Low-stock listing

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barcost.models import Ingredient, RecipeLine
from barcost.utils.config import get_config
from barcost.utils.validators import sanitize_string, validate_ingredient_data

from .costing.valuation import StockValuation, is_low_stock, valuate
from .database import session_scope
from .exceptions import DatabaseError, IngredientInUse, IngredientNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)

_UPDATABLE_FIELDS = ("name", "unit", "is_alcoholic", "low_stock_threshold")


def _get_ingredient_or_raise(ingredient_id: int, session: Session) -> Ingredient:
    """Get ingredient by ID or raise IngredientNotFound.

    Transaction boundary: Inherits session from caller.
    """
    ingredient = session.get(Ingredient, ingredient_id)
    if ingredient is None:
        raise IngredientNotFound(ingredient_id)
    return ingredient


def _create_ingredient_impl(data: Dict, session: Session) -> Ingredient:
    threshold = data.get("low_stock_threshold")
    if threshold is None:
        threshold = get_config().low_stock_default_threshold

    ingredient = Ingredient(
        name=sanitize_string(data["name"]),
        unit=str(data["unit"]).lower(),
        is_alcoholic=bool(data.get("is_alcoholic", False)),
        low_stock_threshold=threshold,
        lots=[],
    )
    session.add(ingredient)
    session.flush()

    log_operation(
        logger,
        operation="create_ingredient",
        outcome="success",
        ingredient_id=ingredient.id,
        unit=ingredient.unit,
    )
    return ingredient


def create_ingredient(data: Dict, session: Session = None) -> Ingredient:
    """
    Create a new ingredient.

    Args:
        data: Dictionary with name, unit, is_alcoholic and optional low_stock_threshold
        session: Optional session for transaction sharing

    Returns:
        Created Ingredient (no purchase lots yet)

    Raises:
        ValidationError: If data validation fails
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_ingredient_data(data)
    if not is_valid:
        raise ValidationError(errors)

    if session is not None:
        return _create_ingredient_impl(data, session)

    try:
        with session_scope() as session:
            return _create_ingredient_impl(data, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create ingredient", e)


def get_ingredient(ingredient_id: int, session: Session = None) -> Ingredient:
    """
    Retrieve an ingredient with its purchase lots.

    Raises:
        IngredientNotFound: If ingredient doesn't exist
        DatabaseError: If database operation fails
    """
    if session is not None:
        return _get_ingredient_or_raise(ingredient_id, session)

    try:
        with session_scope() as session:
            return _get_ingredient_or_raise(ingredient_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve ingredient {ingredient_id}", e)


def _get_all_ingredients_impl(alcoholic: Optional[bool], session: Session) -> List[Ingredient]:
    query = session.query(Ingredient)
    if alcoholic is not None:
        query = query.filter(Ingredient.is_alcoholic == alcoholic)
    return query.order_by(Ingredient.name).all()


def get_all_ingredients(alcoholic: Optional[bool] = None, session: Session = None) -> List[Ingredient]:
    """
    List ingredients ordered by name.

    Args:
        alcoholic: Optional filter on the alcoholic flag
        session: Optional session for transaction sharing

    Returns:
        List of Ingredient instances
    """
    if session is not None:
        return _get_all_ingredients_impl(alcoholic, session)

    try:
        with session_scope() as session:
            return _get_all_ingredients_impl(alcoholic, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve ingredients", e)


def _update_ingredient_impl(ingredient_id: int, data: Dict, session: Session) -> Ingredient:
    ingredient = _get_ingredient_or_raise(ingredient_id, session)

    for field in _UPDATABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == "name":
            value = sanitize_string(value)
        elif field == "unit":
            value = str(value).lower()
        elif field == "is_alcoholic":
            value = bool(value)
        setattr(ingredient, field, value)

    session.flush()
    log_operation(
        logger,
        operation="update_ingredient",
        outcome="success",
        ingredient_id=ingredient_id,
        fields=sorted(k for k in data if k in _UPDATABLE_FIELDS),
    )
    return ingredient


def update_ingredient(ingredient_id: int, data: Dict, session: Session = None) -> Ingredient:
    """
    Update an ingredient.

    Changing ``is_alcoholic`` takes effect immediately for every drink using
    the ingredient, since the drink flag is derived on each read.

    Args:
        ingredient_id: Ingredient ID
        data: Fields to update (name, unit, is_alcoholic, low_stock_threshold)
        session: Optional session for transaction sharing

    Returns:
        Updated Ingredient

    Raises:
        IngredientNotFound: If ingredient doesn't exist
        ValidationError: If data validation fails
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_ingredient_data(data, partial=True)
    if not is_valid:
        raise ValidationError(errors)

    if session is not None:
        return _update_ingredient_impl(ingredient_id, data, session)

    try:
        with session_scope() as session:
            return _update_ingredient_impl(ingredient_id, data, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update ingredient {ingredient_id}", e)


def _delete_ingredient_impl(ingredient_id: int, session: Session) -> bool:
    ingredient = _get_ingredient_or_raise(ingredient_id, session)

    drink_count = (
        session.query(RecipeLine.drink_id)
        .filter(RecipeLine.ingredient_id == ingredient_id)
        .distinct()
        .count()
    )
    if drink_count > 0:
        log_operation(
            logger,
            operation="delete_ingredient",
            outcome="rejected",
            ingredient_id=ingredient_id,
            drink_count=drink_count,
        )
        raise IngredientInUse(ingredient_id, drink_count)

    session.delete(ingredient)
    session.flush()
    log_operation(logger, operation="delete_ingredient", outcome="success", ingredient_id=ingredient_id)
    return True


def delete_ingredient(ingredient_id: int, session: Session = None) -> bool:
    """
    Delete an ingredient and its purchase lots.

    Raises:
        IngredientNotFound: If ingredient doesn't exist
        IngredientInUse: If any drink recipe uses the ingredient
        DatabaseError: If database operation fails
    """
    if session is not None:
        return _delete_ingredient_impl(ingredient_id, session)

    try:
        with session_scope() as session:
            return _delete_ingredient_impl(ingredient_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete ingredient {ingredient_id}", e)


def get_stock_summary(ingredient_id: int, session: Session = None) -> StockValuation:
    """
    Total stock, weighted average unit cost and total value of an ingredient.

    Raises:
        IngredientNotFound: If ingredient doesn't exist
    """
    return valuate(get_ingredient(ingredient_id, session=session))


def _get_low_stock_impl(session: Session) -> List[Ingredient]:
    return [i for i in _get_all_ingredients_impl(None, session) if is_low_stock(i)]


def get_low_stock_ingredients(session: Session = None) -> List[Ingredient]:
    """
    Ingredients whose total stock is below their low-stock threshold.

    Ingredients without a threshold are never reported.
    """
    if session is not None:
        return _get_low_stock_impl(session)

    try:
        with session_scope() as session:
            return _get_low_stock_impl(session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve low stock ingredients", e)
