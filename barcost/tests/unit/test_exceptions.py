"""Unit tests for the service exception hierarchy.

Validates that all exceptions inherit from ServiceError and carry an
http_status_code and structured context.
"""

import inspect

import pytest

from barcost.services import exceptions as exc_module
from barcost.services.exceptions import (
    DatabaseError,
    DrinkInUse,
    IngredientInUse,
    IngredientNotFound,
    InsufficientStock,
    InvalidEventDuration,
    ServiceError,
    StaleDepletionPlan,
    ValidationError,
)


def get_all_exception_classes():
    """Discover all exception classes in the exceptions module."""
    return [
        (name, obj)
        for name, obj in inspect.getmembers(exc_module, inspect.isclass)
        if issubclass(obj, Exception) and obj.__module__ == exc_module.__name__
    ]


class TestExceptionHierarchy:
    """Verify all exceptions inherit from ServiceError."""

    @pytest.fixture
    def all_exceptions(self):
        return get_all_exception_classes()

    def test_all_domain_exceptions_inherit_from_service_error(self, all_exceptions):
        failures = [
            f"{name} does not inherit from ServiceError"
            for name, exc_class in all_exceptions
            if not issubclass(exc_class, ServiceError)
        ]
        assert not failures, "\n".join(failures)

    def test_http_status_codes_are_valid(self, all_exceptions):
        valid_codes = [400, 404, 409, 422, 500]
        failures = [
            f"{name} has invalid http_status_code: {exc_class.http_status_code}"
            for name, exc_class in all_exceptions
            if exc_class.http_status_code not in valid_codes
        ]
        assert not failures, "\n".join(failures)


class TestServiceErrorBase:
    """Test ServiceError base class functionality."""

    def test_correlation_id_and_context(self):
        error = ServiceError("test", correlation_id="abc-123", event_id=7)
        assert error.correlation_id == "abc-123"
        assert error.context["event_id"] == 7

    def test_to_dict(self):
        d = ServiceError("test message", correlation_id="abc").to_dict()
        assert d["type"] == "ServiceError"
        assert d["message"] == "test message"
        assert d["correlation_id"] == "abc"
        assert d["http_status_code"] == 500

    def test_str_representation(self):
        assert str(ServiceError("error occurred")) == "error occurred"


class TestSpecificExceptions:
    """Test specific exception classes."""

    def test_validation_error(self):
        error = ValidationError(["Name required", "Unit invalid"])
        assert "Name required" in str(error)
        assert "Unit invalid" in str(error)
        assert error.http_status_code == 400
        assert len(error.errors) == 2

    def test_validation_error_accepts_single_message(self):
        assert ValidationError("Name required").errors == ["Name required"]

    def test_ingredient_not_found(self):
        error = IngredientNotFound(12)
        assert error.http_status_code == 404
        assert error.context == {"ingredient_id": 12}

    def test_in_use_errors_are_conflicts(self):
        assert IngredientInUse(1, 3).http_status_code == 409
        assert DrinkInUse(1, 2).event_count == 2

    def test_insufficient_stock(self):
        error = InsufficientStock("White Rum", required=6000, available=5000)
        assert error.ingredient_name == "White Rum"
        assert error.required == 6000
        assert error.available == 5000
        assert error.http_status_code == 422
        assert error.to_dict()["context"]["available"] == "5000"

    def test_invalid_event_duration(self):
        error = InvalidEventDuration(3, 0)
        assert "Event 3" in str(error)
        assert error.http_status_code == 422

    def test_stale_depletion_plan(self):
        error = StaleDepletionPlan(5, expected=10, actual=4)
        assert error.lot_id == 5
        assert error.http_status_code == 409

    def test_database_error_keeps_original(self):
        original = RuntimeError("disk full")
        error = DatabaseError("Failed to create ingredient", original)
        assert error.original_error is original
        assert str(error) == "Database error: Failed to create ingredient"
