"""
Input validation functions for the Bar Costing application.

This module provides validation functions for user inputs including:
- Numeric validation (positive, non-negative)
- String validation (length, required fields)
- Unit validation
- Ingredient, drink and staff payloads

Each validator returns a (is_valid, error_message) tuple; the payload
validators return (is_valid, list_of_errors) so services can raise a single
ValidationError listing every problem.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from .constants import (
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_POSITIVE,
    ERROR_INVALID_UNIT,
    ERROR_REQUIRED_FIELD,
    INGREDIENT_UNITS,
    MAX_NAME_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_ROLE_LENGTH,
)


def _parse(value) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    parsed = value if isinstance(value, Decimal) else Decimal(str(value))
    if not parsed.is_finite():
        raise ValueError("NaN and infinity are not quantities")
    return parsed


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length(
    value: str, max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """Validate that a string doesn't exceed maximum length."""
    if value and len(value) > max_length:
        return False, f"{field_name}: Must be {max_length} characters or less"
    return True, ""


def validate_positive_number(value, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a positive number (> 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        if _parse(value) <= 0:
            return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
        return True, ""
    except (InvalidOperation, ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"


def validate_non_negative_number(value, field_name: str = "Field") -> Tuple[bool, str]:
    """Validate that a value is a non-negative number (>= 0)."""
    try:
        if _parse(value) < 0:
            return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
        return True, ""
    except (InvalidOperation, ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"


def validate_number(value, field_name: str = "Field") -> Tuple[bool, str]:
    """Validate that a value parses as a number (any sign)."""
    try:
        _parse(value)
        return True, ""
    except (InvalidOperation, ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"


def validate_unit(unit: str, field_name: str = "Unit") -> Tuple[bool, str]:
    """
    Validate that a unit is one of the ingredient units.

    Args:
        unit: The unit string to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not unit:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"

    if str(unit).lower() not in INGREDIENT_UNITS:
        return False, f"{field_name}: {ERROR_INVALID_UNIT}"

    return True, ""


def _validate_name(name, errors: list, field_name: str = "Name") -> None:
    is_valid, error = validate_required_string(name, field_name)
    if not is_valid:
        errors.append(error)
        return
    is_valid, error = validate_string_length(name, MAX_NAME_LENGTH, field_name)
    if not is_valid:
        errors.append(error)


def validate_ingredient_data(data: dict, partial: bool = False) -> Tuple[bool, list]:
    """
    Validate all fields for an ingredient.

    Args:
        data: Dictionary containing ingredient fields
        partial: If True, only validate the fields present (updates)

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not partial or "name" in data:
        _validate_name(data.get("name"), errors)

    if not partial or "unit" in data:
        is_valid, error = validate_unit(data.get("unit"))
        if not is_valid:
            errors.append(error)

    if data.get("low_stock_threshold") is not None:
        is_valid, error = validate_non_negative_number(
            data.get("low_stock_threshold"), "Low stock threshold"
        )
        if not is_valid:
            errors.append(error)

    return len(errors) == 0, errors


def validate_drink_data(data: dict, partial: bool = False) -> Tuple[bool, list]:
    """
    Validate all fields for a drink and its recipe.

    Recipe lines are dicts with ``ingredient_id`` and ``quantity`` (> 0).
    Consumption rates must be >= 0.

    Args:
        data: Dictionary containing drink fields
        partial: If True, only validate the fields present (updates)

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not partial or "name" in data:
        _validate_name(data.get("name"), errors)

    for field, label in (
        ("adults_per_person_per_hour", "Adult consumption rate"),
        ("children_per_person_per_hour", "Children consumption rate"),
    ):
        if data.get(field) is not None:
            is_valid, error = validate_non_negative_number(data.get(field), label)
            if not is_valid:
                errors.append(error)

    if data.get("notes"):
        is_valid, error = validate_string_length(data.get("notes"), MAX_NOTES_LENGTH, "Notes")
        if not is_valid:
            errors.append(error)

    recipe = data.get("recipe")
    if recipe is not None:
        seen = set()
        for index, line in enumerate(recipe, start=1):
            if line.get("ingredient_id") is None:
                errors.append(f"Recipe line {index}: ingredient is required")
            elif line["ingredient_id"] in seen:
                errors.append(f"Recipe line {index}: ingredient listed more than once")
            else:
                seen.add(line["ingredient_id"])
            is_valid, error = validate_positive_number(
                line.get("quantity"), f"Recipe line {index} quantity"
            )
            if not is_valid:
                errors.append(error)

    return len(errors) == 0, errors


def validate_staff_data(staff: list) -> Tuple[bool, list]:
    """
    Validate staff entries (dicts with ``role`` and ``cost``).

    Costs only need to be numeric; they are flat amounts passed through to
    the cost breakdown unchanged.
    """
    errors = []
    for index, member in enumerate(staff or [], start=1):
        role = member.get("role")
        is_valid, error = validate_required_string(role, f"Staff {index} role")
        if not is_valid:
            errors.append(error)
        else:
            is_valid, error = validate_string_length(role, MAX_ROLE_LENGTH, f"Staff {index} role")
            if not is_valid:
                errors.append(error)
        is_valid, error = validate_number(member.get("cost"), f"Staff {index} cost")
        if not is_valid:
            errors.append(error)
    return len(errors) == 0, errors


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string value by stripping whitespace and converting empty strings to None.

    Args:
        value: The string value to sanitize

    Returns:
        Sanitized string or None
    """
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
