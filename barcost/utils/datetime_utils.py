"""Datetime utilities for timezone-aware UTC timestamps and event durations.

Usage:
    from barcost.utils.datetime_utils import utc_now, duration_hours

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)

    # Event length in hours as a Decimal
    hours = duration_hours(event.start_time, event.end_time)
"""

from datetime import datetime, timezone
from decimal import Decimal

from .constants import HOURS_PER_SECOND_DIVISOR


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def duration_hours(start_time: datetime, end_time: datetime) -> Decimal:
    """Return the length of the interval in hours.

    The result is negative or zero when end_time is not after start_time;
    callers decide whether that is an error.

    Args:
        start_time: Interval start
        end_time: Interval end

    Returns:
        Duration in hours as a Decimal

    Example:
        >>> duration_hours(datetime(2025, 1, 1, 18), datetime(2025, 1, 1, 22))
        Decimal('4.0')
    """
    seconds = Decimal(str((end_time - start_time).total_seconds()))
    return seconds / HOURS_PER_SECOND_DIVISOR
