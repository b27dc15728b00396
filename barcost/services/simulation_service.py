"""
Event cost simulator.

Answers "what would this event cost and what should we charge?" for a set of
drinks, guest counts, a duration and staff, without touching stock. A
simulation can then be saved as a planned event, keeping the computed
breakdown as a snapshot on the event.

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barcost.models import Event
from barcost.utils.config import get_config
from barcost.utils.datetime_utils import duration_hours
from barcost.utils.validators import validate_staff_data

from .costing.cost_aggregation import SimulationResult, simulate_costs
from .database import session_scope
from .drink_service import ingredient_lookup, load_drinks
from .dto_utils import cost_to_string
from .event_service import _create_event_impl, build_staff, validate_event_fields
from .exceptions import DatabaseError, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def _simulate_impl(
    drink_ids: List[int],
    num_adults,
    num_children,
    duration_hours,
    staff: Optional[List[Dict]],
    profit_margin_percent,
    session: Session,
) -> SimulationResult:
    if profit_margin_percent is None:
        profit_margin_percent = get_config().default_profit_margin

    result = simulate_costs(
        load_drinks(drink_ids, session),
        ingredient_lookup(session),
        num_adults,
        num_children,
        duration_hours,
        build_staff(staff),
        profit_margin_percent,
    )

    log_operation(
        logger,
        operation="simulate_event_costs",
        outcome="success",
        drink_count=len(result.projection.drinks),
        final_price=cost_to_string(result.breakdown.final_price),
    )
    return result


def simulate_event_costs(
    drink_ids: List[int],
    num_adults,
    num_children,
    duration_hours,
    staff: Optional[List[Dict]] = None,
    profit_margin_percent=None,
    session: Session = None,
) -> SimulationResult:
    """
    Project consumption and price an event without saving anything.

    Args:
        drink_ids: Drinks offered
        num_adults: Adult guests
        num_children: Child guests
        duration_hours: Event length in hours (<= 0 gives zero ingredient cost)
        staff: Optional list of {"role", "cost"} dicts
        profit_margin_percent: Markup on ingredient cost (defaults to the
                               configured default margin)
        session: Optional session for transaction sharing

    Returns:
        SimulationResult; ``breakdown.to_dict()`` gives display strings

    Raises:
        ValidationError: If a staff entry is invalid
        DrinkNotFound: If a drink ID does not exist
        DatabaseError: If database operation fails

    Example:
        >>> result = simulate_event_costs([mojito.id], 40, 10, 4,
        ...                               staff=[{"role": "Bartender", "cost": 50}],
        ...                               profit_margin_percent=20)
        >>> result.breakdown.final_price
    """
    is_valid, errors = validate_staff_data(staff or [])
    if not is_valid:
        raise ValidationError(errors)

    args = (drink_ids, num_adults, num_children, duration_hours, staff, profit_margin_percent)
    if session is not None:
        return _simulate_impl(*args, session)

    try:
        with session_scope() as session:
            return _simulate_impl(*args, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to simulate event costs", e)


def _save_simulation_impl(
    name: str,
    start_time: datetime,
    end_time: datetime,
    drink_ids: List[int],
    num_adults: int,
    num_children: int,
    staff: Optional[List[Dict]],
    profit_margin_percent,
    notes: Optional[str],
    session: Session,
) -> Event:
    result = _simulate_impl(
        drink_ids,
        num_adults,
        num_children,
        duration_hours(start_time, end_time),
        staff,
        profit_margin_percent,
        session,
    )

    event = _create_event_impl(
        name, start_time, end_time, drink_ids, num_adults, num_children, staff, notes, session
    )
    event.set_simulated_costs(result.breakdown)
    session.flush()

    log_operation(
        logger,
        operation="save_simulation_as_event",
        outcome="success",
        event_id=event.id,
        final_price=cost_to_string(result.breakdown.final_price),
    )
    return event


def save_simulation_as_event(
    name: str,
    start_time: datetime,
    end_time: datetime,
    drink_ids: List[int],
    num_adults: int,
    num_children: int,
    staff: Optional[List[Dict]] = None,
    profit_margin_percent=None,
    notes: Optional[str] = None,
    session: Session = None,
) -> Event:
    """
    Save a simulation as a planned event.

    The duration is taken from start and end time. The event keeps the staff
    and a snapshot of the simulated breakdown (``event.simulated_costs``).

    Raises:
        ValidationError: If name is empty, end is not after start, no drink is
                         selected or there are no guests
        DrinkNotFound: If a drink ID does not exist
        DatabaseError: If database operation fails
    """
    errors = validate_event_fields(
        name, start_time, end_time, drink_ids, num_adults, num_children, staff
    )
    if not errors and num_adults + num_children <= 0:
        errors.append("At least one guest is required")
    if errors:
        raise ValidationError(errors)

    args = (
        name,
        start_time,
        end_time,
        drink_ids,
        num_adults,
        num_children,
        staff,
        profit_margin_percent,
        notes,
    )
    if session is not None:
        return _save_simulation_impl(*args, session)

    try:
        with session_scope() as session:
            return _save_simulation_impl(*args, session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to save simulation", e)
