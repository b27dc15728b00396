"""Structured logging for service operations.

Every service logs through a ``bar_costing.services.<module>`` logger and
reports each operation as ``"<operation>: <outcome>"``. Entity ids and
quantities go into ``extra`` so handlers can filter on them:

    logger = get_service_logger(__name__)
    log_operation(logger, "complete_event", "success", event_id=12, lots_touched=4)
    log_operation(
        logger, "complete_event", "shortfall", level=logging.WARNING,
        event_id=12, shortfalls={"3": "250"},
    )
"""

import logging
from typing import Any

SERVICE_LOGGER_PREFIX = "bar_costing.services"


def get_service_logger(name: str) -> logging.Logger:
    """Logger for a service module; pass ``__name__``.

    Only the last dotted component is kept, so
    ``barcost.services.event_service`` logs as
    ``bar_costing.services.event_service``.
    """
    return logging.getLogger(f"{SERVICE_LOGGER_PREFIX}.{name.rsplit('.', 1)[-1]}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Emit one record for a service operation.

    Args:
        logger: Service logger
        operation: e.g. "complete_event", "adjust_stock"
        outcome: e.g. "success", "shortfall", "rejected", "already_completed"
        level: Log level (default INFO)
        **context: Fields attached to the record via ``extra``
    """
    logger.log(level, f"{operation}: {outcome}", extra=dict(context, operation=operation, outcome=outcome))
