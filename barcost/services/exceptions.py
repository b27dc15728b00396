"""Service layer exception classes for Bar Costing.

This module defines all custom exceptions used by the service layer and the
costing engine to provide consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── IngredientNotFound
    ├── DrinkNotFound
    ├── EventNotFound
    ├── PurchaseLotNotFound
    ├── IngredientInUse
    ├── DrinkInUse
    ├── InsufficientStock
    ├── InvalidEventDuration
    ├── StaleDepletionPlan
    └── DatabaseError

Shortfalls during event completion are not exceptions; they are reported in
the completion result.
"""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    Args:
        message: Human readable description
        correlation_id: Optional identifier tying the error to a request or job
        **context: Extra fields describing the failure (entity ids, quantities)
    """

    http_status_code = 500

    def __init__(self, message: str = "", correlation_id: Optional[str] = None, **context: Any):
        self.message = message
        self.correlation_id = correlation_id
        self.context = context
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logs and API responses."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "correlation_id": self.correlation_id,
            "http_status_code": self.http_status_code,
            "context": self.context,
        }


class ValidationError(ServiceError):
    """Raised when data validation fails.

    Args:
        errors: List of validation messages
    """

    http_status_code = 400

    def __init__(self, errors: list, **context: Any):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}", **context)


class IngredientNotFound(ServiceError):
    """Raised when an ingredient cannot be found by ID.

    Example:
        >>> raise IngredientNotFound(12)
        IngredientNotFound: Ingredient with ID 12 not found
    """

    http_status_code = 404

    def __init__(self, ingredient_id: int):
        self.ingredient_id = ingredient_id
        super().__init__(
            f"Ingredient with ID {ingredient_id} not found", ingredient_id=ingredient_id
        )


class DrinkNotFound(ServiceError):
    """Raised when a drink cannot be found by ID."""

    http_status_code = 404

    def __init__(self, drink_id: int):
        self.drink_id = drink_id
        super().__init__(f"Drink with ID {drink_id} not found", drink_id=drink_id)


class EventNotFound(ServiceError):
    """Raised when an event cannot be found by ID."""

    http_status_code = 404

    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__(f"Event with ID {event_id} not found", event_id=event_id)


class PurchaseLotNotFound(ServiceError):
    """Raised when a purchase lot cannot be found by ID."""

    http_status_code = 404

    def __init__(self, lot_id: int):
        self.lot_id = lot_id
        super().__init__(f"Purchase lot with ID {lot_id} not found", lot_id=lot_id)


class IngredientInUse(ServiceError):
    """Raised when attempting to delete an ingredient referenced by drink recipes.

    Args:
        ingredient_id: The ingredient being deleted
        drink_count: Number of drinks whose recipe uses it
    """

    http_status_code = 409

    def __init__(self, ingredient_id: int, drink_count: int):
        self.ingredient_id = ingredient_id
        self.drink_count = drink_count
        super().__init__(
            f"Cannot delete ingredient {ingredient_id}: used in {drink_count} drink(s)",
            ingredient_id=ingredient_id,
            drink_count=drink_count,
        )


class DrinkInUse(ServiceError):
    """Raised when attempting to delete a drink selected for events."""

    http_status_code = 409

    def __init__(self, drink_id: int, event_count: int):
        self.drink_id = drink_id
        self.event_count = event_count
        super().__init__(
            f"Cannot delete drink {drink_id}: selected for {event_count} event(s)",
            drink_id=drink_id,
            event_count=event_count,
        )


class InsufficientStock(ServiceError):
    """Raised when a manual adjustment asks for more than the ingredient has in stock."""

    http_status_code = 422

    def __init__(self, ingredient_name: str, required, available):
        self.ingredient_name = ingredient_name
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient stock for {ingredient_name}: "
            f"required {required}, available {available}",
            ingredient_name=ingredient_name,
            required=str(required),
            available=str(available),
        )


class InvalidEventDuration(ServiceError):
    """Raised when completing an event whose end time is not after its start time."""

    http_status_code = 422

    def __init__(self, event_id, duration_hours):
        self.event_id = event_id
        self.duration_hours = duration_hours
        super().__init__(
            f"Event {event_id} cannot be completed: duration must be positive "
            f"(got {duration_hours} hours)",
            event_id=event_id,
            duration_hours=str(duration_hours),
        )


class StaleDepletionPlan(ServiceError):
    """Raised when a depletion plan no longer matches the lots it was computed from."""

    http_status_code = 409

    def __init__(self, lot_id, expected, actual):
        self.lot_id = lot_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Lot {lot_id} changed since the depletion was planned: "
            f"expected {expected} remaining, found {actual}",
            lot_id=lot_id,
        )


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    http_status_code = 500

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
