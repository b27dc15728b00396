"""
Constants and enumerations for the Bar Costing application.

This module defines all system-wide constants including:
- Database file name
- Ingredient units (fixed per ingredient, never converted)
- Validation limits and error messages
- Simulator defaults
"""

from decimal import Decimal
from typing import Dict, List

# ============================================================================
# Database
# ============================================================================

DATABASE_FILENAME = "bar_costing.db"

# ============================================================================
# Units
# ============================================================================

# An ingredient's unit applies to its recipe quantities, lot quantities and
# usage alike. The engine never converts between units.
INGREDIENT_UNITS: List[str] = [
    "ml",  # Milliliter
    "l",  # Liter
    "g",  # Gram
    "kg",  # Kilogram
    "un",  # Unit (bottles, lemons, cans)
]

UNIT_TYPE_MAP: Dict[str, str] = {
    "ml": "volume",
    "l": "volume",
    "g": "weight",
    "kg": "weight",
    "un": "count",
}

# ============================================================================
# Numeric handling
# ============================================================================

ZERO = Decimal("0")
HOURS_PER_SECOND_DIVISOR = Decimal("3600")

# Lots with less than this remaining are considered empty in listings
NEGLIGIBLE_QUANTITY = Decimal("0.0001")

# ============================================================================
# Validation
# ============================================================================

MAX_NAME_LENGTH = 200
MAX_ROLE_LENGTH = 100
MAX_NOTES_LENGTH = 2000

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Must be a valid number"
ERROR_INVALID_POSITIVE = "Value must be greater than zero"
ERROR_INVALID_NON_NEGATIVE = "Value must be zero or greater"
ERROR_INVALID_UNIT = "Invalid unit type"
ERROR_NAME_TOO_LONG = f"Name must be {MAX_NAME_LENGTH} characters or less"

# ============================================================================
# Simulator defaults
# ============================================================================

DEFAULT_SIM_ADULTS = 40
DEFAULT_SIM_CHILDREN = 10
DEFAULT_SIM_DURATION_HOURS = 4
DEFAULT_PROFIT_MARGIN_PERCENT = 100

# Guest counts pre-filled on a new event
DEFAULT_EVENT_ADULTS = 10
DEFAULT_EVENT_CHILDREN = 0
