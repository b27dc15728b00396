"""
Stock service: purchase lots, manual adjustments and the depletion audit trail.

This module provides:
- Stock intake as purchase lots (the unit of FIFO depletion)
- Lot lookup and lot history per ingredient
- Manual stock adjustments (spoilage, breakage, correction, other), applied
  FIFO after checking the ingredient has enough stock
- Depletion history queries

Every quantity removed from a lot is recorded as a StockDepletion row with
the lot's unit cost, in the same transaction as the lot update.

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from datetime import date
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barcost.models import DepletionReason, PurchaseLot, StockDepletion
from barcost.utils.datetime_utils import utc_now
from barcost.utils.decimal_utils import to_decimal
from barcost.utils.validators import (
    sanitize_string,
    validate_non_negative_number,
    validate_positive_number,
)

from .costing.fifo import DepletionPlan, apply_depletion, plan_adjustment
from .database import session_scope
from .exceptions import DatabaseError, InsufficientStock, PurchaseLotNotFound, ValidationError
from .ingredient_service import _get_ingredient_or_raise
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def record_depletions(
    plan: DepletionPlan,
    reason: DepletionReason,
    session: Session,
    event_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> List[StockDepletion]:
    """Add one StockDepletion row per lot deduction of an applied plan.

    Transaction boundary: Inherits session from caller.
    """
    depleted_at = utc_now()
    records = []
    for deduction in plan.deductions:
        record = StockDepletion(
            purchase_lot_id=deduction.lot.id,
            event_id=event_id,
            quantity_depleted=deduction.quantity,
            depletion_reason=reason.value,
            unit_cost=deduction.unit_cost,
            cost=deduction.cost,
            depletion_date=depleted_at,
            notes=notes,
        )
        session.add(record)
        records.append(record)
    session.flush()
    return records


def _add_stock_lot_impl(
    ingredient_id: int,
    quantity,
    total_price,
    purchase_date: Optional[date],
    notes: Optional[str],
    session: Session,
) -> PurchaseLot:
    ingredient = _get_ingredient_or_raise(ingredient_id, session)

    purchased = to_decimal(quantity)
    lot = PurchaseLot(
        purchase_date=purchase_date or date.today(),
        purchased_quantity=purchased,
        total_price=to_decimal(total_price),
        remaining_quantity=purchased,
        notes=sanitize_string(notes),
    )
    ingredient.lots.append(lot)
    session.flush()

    log_operation(
        logger,
        operation="add_stock_lot",
        outcome="success",
        ingredient_id=ingredient_id,
        lot_id=lot.id,
        quantity=str(purchased),
        total_price=str(lot.total_price),
    )
    return lot


def add_stock_lot(
    ingredient_id: int,
    quantity,
    total_price,
    purchase_date: Optional[date] = None,
    notes: Optional[str] = None,
    session: Session = None,
) -> PurchaseLot:
    """
    Record a stock purchase as a new lot.

    Args:
        ingredient_id: Ingredient bought
        quantity: Quantity bought, in the ingredient's unit (> 0)
        total_price: Price paid for the whole lot (>= 0)
        purchase_date: Date of purchase (defaults to today); drives FIFO order
        notes: Optional notes
        session: Optional session for transaction sharing

    Returns:
        Created PurchaseLot with remaining_quantity == quantity

    Raises:
        ValidationError: If quantity <= 0 or price < 0
        IngredientNotFound: If ingredient doesn't exist
        DatabaseError: If database operation fails
    """
    errors = []
    is_valid, error = validate_positive_number(quantity, "Quantity")
    if not is_valid:
        errors.append(error)
    is_valid, error = validate_non_negative_number(total_price, "Total price")
    if not is_valid:
        errors.append(error)
    if errors:
        raise ValidationError(errors)

    if session is not None:
        return _add_stock_lot_impl(ingredient_id, quantity, total_price, purchase_date, notes, session)

    try:
        with session_scope() as session:
            return _add_stock_lot_impl(
                ingredient_id, quantity, total_price, purchase_date, notes, session
            )
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to add stock for ingredient {ingredient_id}", e)


def get_lot(lot_id: int, session: Session = None) -> PurchaseLot:
    """
    Retrieve a purchase lot.

    Raises:
        PurchaseLotNotFound: If lot doesn't exist
    """
    if session is not None:
        lot = session.get(PurchaseLot, lot_id)
        if lot is None:
            raise PurchaseLotNotFound(lot_id)
        return lot

    try:
        with session_scope() as session:
            return get_lot(lot_id, session=session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve lot {lot_id}", e)


def _get_lot_history_impl(ingredient_id: int, include_depleted: bool, session: Session):
    _get_ingredient_or_raise(ingredient_id, session)

    query = session.query(PurchaseLot).filter(PurchaseLot.ingredient_id == ingredient_id)
    if not include_depleted:
        query = query.filter(PurchaseLot.remaining_quantity > 0)
    return query.order_by(PurchaseLot.purchase_date.desc(), PurchaseLot.id.desc()).all()


def get_lot_history(
    ingredient_id: int, include_depleted: bool = True, session: Session = None
) -> List[PurchaseLot]:
    """
    Purchase lots of an ingredient, newest first.

    Args:
        ingredient_id: Ingredient ID
        include_depleted: If False, omit lots with nothing remaining
        session: Optional session for transaction sharing

    Raises:
        IngredientNotFound: If ingredient doesn't exist
    """
    if session is not None:
        return _get_lot_history_impl(ingredient_id, include_depleted, session)

    try:
        with session_scope() as session:
            return _get_lot_history_impl(ingredient_id, include_depleted, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve lots for ingredient {ingredient_id}", e)


def _to_reason(reason: Union[DepletionReason, str]) -> DepletionReason:
    try:
        return DepletionReason(reason)
    except ValueError:
        raise ValidationError([f"Unknown depletion reason: {reason}"])


def _parse_reason(reason: Union[DepletionReason, str]) -> DepletionReason:
    parsed = _to_reason(reason)
    if parsed not in DepletionReason.manual_reasons():
        raise ValidationError([f"Reason '{parsed.value}' is reserved for event completion"])
    return parsed


def _adjust_stock_impl(
    ingredient_id: int,
    quantity,
    reason: DepletionReason,
    notes: Optional[str],
    session: Session,
) -> DepletionPlan:
    ingredient = _get_ingredient_or_raise(ingredient_id, session)

    try:
        plan = plan_adjustment(ingredient, quantity)
    except InsufficientStock as e:
        log_operation(
            logger,
            operation="adjust_stock",
            outcome="rejected",
            ingredient_id=ingredient_id,
            quantity=str(quantity),
            reason=reason.value,
            error=str(e),
        )
        raise

    apply_depletion(plan)
    record_depletions(plan, reason, session, notes=sanitize_string(notes))

    log_operation(
        logger,
        operation="adjust_stock",
        outcome="success",
        ingredient_id=ingredient_id,
        quantity=str(plan.consumed),
        reason=reason.value,
        lots_touched=len(plan.deductions),
        cost=str(plan.cost),
    )
    return plan


def adjust_stock(
    ingredient_id: int,
    quantity,
    reason: Union[DepletionReason, str] = DepletionReason.CORRECTION,
    notes: Optional[str] = None,
    session: Session = None,
) -> DepletionPlan:
    """
    Remove stock manually, oldest lots first.

    The ingredient must hold at least ``quantity`` in total; otherwise
    nothing is changed and InsufficientStock is raised.

    Args:
        ingredient_id: Ingredient to adjust
        quantity: Quantity to remove (> 0)
        reason: SPOILAGE, BREAKAGE, CORRECTION or OTHER
        notes: Optional explanation stored on the audit rows
        session: Optional session for transaction sharing

    Returns:
        The applied DepletionPlan (per-lot deductions and FIFO cost)

    Raises:
        ValidationError: If quantity <= 0 or reason is not a manual reason
        InsufficientStock: If quantity exceeds the ingredient's total stock
        IngredientNotFound: If ingredient doesn't exist
        DatabaseError: If database operation fails
    """
    is_valid, error = validate_positive_number(quantity, "Quantity")
    if not is_valid:
        raise ValidationError([error])
    parsed_reason = _parse_reason(reason)

    if session is not None:
        return _adjust_stock_impl(ingredient_id, quantity, parsed_reason, notes, session)

    try:
        with session_scope() as session:
            return _adjust_stock_impl(ingredient_id, quantity, parsed_reason, notes, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to adjust stock for ingredient {ingredient_id}", e)


def _get_depletion_history_impl(
    ingredient_id: Optional[int],
    event_id: Optional[int],
    reason: Optional[DepletionReason],
    session: Session,
) -> List[StockDepletion]:
    query = session.query(StockDepletion)
    if ingredient_id is not None:
        query = query.join(PurchaseLot, StockDepletion.purchase_lot_id == PurchaseLot.id).filter(
            PurchaseLot.ingredient_id == ingredient_id
        )
    if event_id is not None:
        query = query.filter(StockDepletion.event_id == event_id)
    if reason is not None:
        query = query.filter(StockDepletion.depletion_reason == reason.value)
    return query.order_by(StockDepletion.depletion_date.desc(), StockDepletion.id.desc()).all()


def get_depletion_history(
    ingredient_id: Optional[int] = None,
    event_id: Optional[int] = None,
    reason: Optional[Union[DepletionReason, str]] = None,
    session: Session = None,
) -> List[StockDepletion]:
    """
    Depletion audit rows, newest first.

    Args:
        ingredient_id: Optional filter on the depleted ingredient
        event_id: Optional filter on the completing event
        reason: Optional filter on the depletion reason
        session: Optional session for transaction sharing

    Raises:
        ValidationError: If reason is not a known depletion reason
    """
    if reason is not None:
        reason = _to_reason(reason)

    if session is not None:
        return _get_depletion_history_impl(ingredient_id, event_id, reason, session)

    try:
        with session_scope() as session:
            return _get_depletion_history_impl(ingredient_id, event_id, reason, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve depletion history", e)
