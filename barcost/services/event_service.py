"""
Event service: planning, cost estimation and completion of bar events.

This module provides:
- Event CRUD (create, get, list, delete)
- Cost estimation at current average stock cost
- Event completion: FIFO depletion of the projected consumption, the
  per-lot audit trail and the actual ingredient cost

State machine: PLANNED --complete_event()--> COMPLETED

Completion runs inside one transaction. Lot updates, audit rows, the
actual cost and the status change are committed together; if anything
fails the transaction rolls back and stock is left untouched. Completing an
event twice is a no-op.

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barcost.models import DepletionReason, Event, EventStatus, StaffMember
from barcost.utils.config import get_config
from barcost.utils.constants import DEFAULT_EVENT_ADULTS, DEFAULT_EVENT_CHILDREN, MAX_NAME_LENGTH
from barcost.utils.datetime_utils import utc_now
from barcost.utils.decimal_utils import to_decimal
from barcost.utils.validators import (
    sanitize_string,
    validate_required_string,
    validate_staff_data,
    validate_string_length,
)

from .costing.cost_aggregation import SimulationResult, simulate_costs
from .costing.reconciler import CompletionResult, complete
from .database import session_scope
from .drink_service import ingredient_lookup, load_drinks
from .dto_utils import cost_to_string, quantity_to_string
from .exceptions import DatabaseError, EventNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation
from .stock_service import record_depletions

logger = get_service_logger(__name__)


def _get_event_or_raise(event_id: int, session: Session) -> Event:
    """Get event by ID or raise EventNotFound.

    Transaction boundary: Inherits session from caller.
    """
    event = session.get(Event, event_id)
    if event is None:
        raise EventNotFound(event_id)
    return event


def build_staff(staff: Optional[List[Dict]]) -> List[StaffMember]:
    """Turn staff dicts ({"role", "cost"}) into unsaved StaffMember rows."""
    return [
        StaffMember(role=sanitize_string(member["role"]), cost=to_decimal(member["cost"]))
        for member in staff or []
    ]


def validate_event_fields(
    name: Optional[str],
    start_time: datetime,
    end_time: datetime,
    drink_ids: List[int],
    num_adults,
    num_children,
    staff: Optional[List[Dict]] = None,
) -> List[str]:
    """Collect validation errors for a new event. Empty list when valid."""
    errors = []

    is_valid, error = validate_required_string(name, "Name")
    if not is_valid:
        errors.append(error)
    else:
        is_valid, error = validate_string_length(name, MAX_NAME_LENGTH, "Name")
        if not is_valid:
            errors.append(error)

    if start_time is None or end_time is None:
        errors.append("Start and end time are required")
    elif end_time <= start_time:
        errors.append("End time must be after start time")

    if not drink_ids:
        errors.append("Select at least one drink")

    for value, label in ((num_adults, "Adults"), (num_children, "Children")):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            errors.append(f"{label}: Must be a whole number, zero or greater")

    _, staff_errors = validate_staff_data(staff or [])
    errors.extend(staff_errors)
    return errors


def _create_event_impl(
    name: str,
    start_time: datetime,
    end_time: datetime,
    drink_ids: List[int],
    num_adults: int,
    num_children: int,
    staff: Optional[List[Dict]],
    notes: Optional[str],
    session: Session,
) -> Event:
    event = Event(
        name=sanitize_string(name),
        start_time=start_time,
        end_time=end_time,
        status=EventStatus.PLANNED,
        num_adults=num_adults,
        num_children=num_children,
        notes=sanitize_string(notes),
        drinks=load_drinks(drink_ids, session),
        staff=build_staff(staff),
    )
    session.add(event)
    session.flush()

    log_operation(
        logger,
        operation="create_event",
        outcome="success",
        event_id=event.id,
        drink_count=len(event.drinks),
        guests=event.total_guests,
    )
    return event


def create_event(
    name: str,
    start_time: datetime,
    end_time: datetime,
    drink_ids: List[int],
    num_adults: int = DEFAULT_EVENT_ADULTS,
    num_children: int = DEFAULT_EVENT_CHILDREN,
    staff: Optional[List[Dict]] = None,
    notes: Optional[str] = None,
    session: Session = None,
) -> Event:
    """
    Create a planned event.

    Args:
        name: Event name
        start_time: When the bar opens
        end_time: When the bar closes (must be after start_time)
        drink_ids: Drinks offered (at least one)
        num_adults: Adult guests
        num_children: Child guests
        staff: Optional list of {"role", "cost"} dicts (flat costs)
        notes: Optional notes
        session: Optional session for transaction sharing

    Returns:
        Created Event with status PLANNED

    Raises:
        ValidationError: If any field is invalid
        DrinkNotFound: If a drink ID does not exist
        DatabaseError: If database operation fails
    """
    errors = validate_event_fields(
        name, start_time, end_time, drink_ids, num_adults, num_children, staff
    )
    if errors:
        raise ValidationError(errors)

    args = (name, start_time, end_time, drink_ids, num_adults, num_children, staff, notes)
    if session is not None:
        return _create_event_impl(*args, session)

    try:
        with session_scope() as session:
            return _create_event_impl(*args, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create event", e)


def get_event(event_id: int, session: Session = None) -> Event:
    """
    Retrieve an event with its drinks and staff.

    Raises:
        EventNotFound: If event doesn't exist
    """
    if session is not None:
        return _get_event_or_raise(event_id, session)

    try:
        with session_scope() as session:
            return _get_event_or_raise(event_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve event {event_id}", e)


def _get_all_events_impl(status: Optional[EventStatus], session: Session) -> List[Event]:
    query = session.query(Event)
    if status is not None:
        query = query.filter(Event.status == EventStatus(status))
    return query.order_by(Event.start_time, Event.id).all()


def get_all_events(status: Optional[EventStatus] = None, session: Session = None) -> List[Event]:
    """List events ordered by start time, optionally filtered by status."""
    if session is not None:
        return _get_all_events_impl(status, session)

    try:
        with session_scope() as session:
            return _get_all_events_impl(status, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve events", e)


def _delete_event_impl(event_id: int, session: Session) -> bool:
    event = _get_event_or_raise(event_id, session)
    session.delete(event)
    session.flush()
    log_operation(logger, operation="delete_event", outcome="success", event_id=event_id)
    return True


def delete_event(event_id: int, session: Session = None) -> bool:
    """
    Delete an event and its staff.

    Stock already depleted by a completed event is not restored; its audit
    rows are kept with the event reference cleared.

    Raises:
        EventNotFound: If event doesn't exist
    """
    if session is not None:
        return _delete_event_impl(event_id, session)

    try:
        with session_scope() as session:
            return _delete_event_impl(event_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete event {event_id}", e)


def _estimate_event_costs_impl(event_id: int, profit_margin_percent, session: Session):
    event = _get_event_or_raise(event_id, session)
    if profit_margin_percent is None:
        profit_margin_percent = get_config().default_profit_margin

    return simulate_costs(
        event.drinks,
        ingredient_lookup(session),
        event.num_adults,
        event.num_children,
        event.duration_hours,
        event.staff,
        profit_margin_percent,
    )


def estimate_event_costs(
    event_id: int, profit_margin_percent=None, session: Session = None
) -> SimulationResult:
    """
    Projected consumption and cost of an event at current average stock cost.

    Args:
        event_id: Event ID
        profit_margin_percent: Markup on ingredient cost (defaults to the
                               configured default margin)
        session: Optional session for transaction sharing

    Returns:
        SimulationResult (projection, breakdown, per-ingredient costs)

    Raises:
        EventNotFound: If event doesn't exist
    """
    if session is not None:
        return _estimate_event_costs_impl(event_id, profit_margin_percent, session)

    try:
        with session_scope() as session:
            return _estimate_event_costs_impl(event_id, profit_margin_percent, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to estimate costs for event {event_id}", e)


def _complete_event_impl(event_id: int, session: Session) -> CompletionResult:
    event = _get_event_or_raise(event_id, session)
    drinks = {drink.id: drink for drink in event.drinks}

    result = complete(event, drinks, ingredient_lookup(session))

    if result.already_completed:
        log_operation(
            logger,
            operation="complete_event",
            outcome="already_completed",
            event_id=event_id,
        )
        return result

    for plan in result.depletions.values():
        record_depletions(plan, DepletionReason.EVENT_COMPLETION, session, event_id=event.id)

    event.actual_ingredient_cost = result.consumed_cost
    event.completed_at = utc_now()
    session.flush()

    if result.has_shortfall:
        log_operation(
            logger,
            operation="complete_event",
            outcome="shortfall",
            level=logging.WARNING,
            event_id=event_id,
            shortfalls={
                str(ingredient_id): quantity_to_string(quantity)
                for ingredient_id, quantity in result.shortfalls.items()
            },
        )

    log_operation(
        logger,
        operation="complete_event",
        outcome="success",
        event_id=event_id,
        ingredients_depleted=len(result.depletions),
        actual_ingredient_cost=cost_to_string(result.consumed_cost),
    )
    return result


def complete_event(event_id: int, session: Session = None) -> CompletionResult:
    """
    Complete an event, depleting its projected consumption from stock.

    Usage per ingredient is projected from the event's drinks, guests and
    duration, then taken FIFO from the purchase lots. Running out of stock
    is not an error: lots stop at zero and the unmet quantity is reported in
    ``result.shortfalls`` (and logged as a warning).

    Args:
        event_id: Event ID
        session: Optional session for transaction sharing

    Returns:
        CompletionResult. ``already_completed`` is True (and nothing changed)
        when the event was completed before.

    Raises:
        EventNotFound: If event doesn't exist
        InvalidEventDuration: If the event's duration is not positive
        StaleDepletionPlan: If a lot changed while the completion was applied
        DatabaseError: If database operation fails
    """
    if session is not None:
        return _complete_event_impl(event_id, session)

    try:
        with session_scope() as session:
            return _complete_event_impl(event_id, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to complete event {event_id}", e)
